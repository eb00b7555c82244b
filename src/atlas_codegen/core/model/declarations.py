# src/atlas_codegen/core/model/declarations.py
"""
Declarações de database, schema e target do Atlas Codegen.

O grafo de declarações é um DAG de identificadores estáveis:

    database name  →  SchemaKey(database, schema)  →  target names

Nenhuma declaração guarda referência de objeto para outra; toda
navegação acontece por lookup em tabelas mantidas pelo
`DeclarationRegistry`. Isso evita ciclos de posse entre database,
schema e registry de targets do gerador.

Componentes:
    - SchemaKey           → identidade (database, schema)
    - DatabaseDeclaration → settings no nível do database
    - SchemaDeclaration   → schema lógico + overrides de migração + ClaimSet
    - NamedTarget         → target de geração registrado pelo gerador
    - TargetFallbacks     → valores já configurados no target (nível 3)
    - ClaimSet            → conjunto observável de nomes de targets
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional, Tuple

from .migration import MigrationSettings, is_absent


ClaimObserver = Callable[[Tuple[str, ...]], None]


@dataclass(frozen=True, order=True)
class SchemaKey:
    database: str
    schema: str

    def describe(self) -> str:
        return f"schema '{self.schema}' in database '{self.database}'"

    def __str__(self) -> str:
        return f"{self.database}.{self.schema}"


@dataclass(frozen=True)
class DatabaseDeclaration:
    """Settings no nível do database (driver e imagem de container)."""

    name: str
    driver: Optional[str] = None
    container_image: Optional[str] = None

    def merged_with(self, other: "DatabaseDeclaration") -> "DatabaseDeclaration":
        return replace(
            self,
            driver=self.driver if is_absent(other.driver) else other.driver,
            container_image=(
                self.container_image if is_absent(other.container_image) else other.container_image
            ),
        )


class ClaimSet:
    """
    Conjunto observável e ordenado de nomes de targets reivindicados.

    Toda mutação (`set`, `add`, `remove`, `clear`) é aplicada primeiro e
    depois notifica, de forma síncrona, cada observer com um snapshot
    imutável. Se um observer levanta, a mutação é desfeita e a exceção
    propaga. Um observer inscrito depois que o conjunto já foi
    configurado é notificado imediatamente com o snapshot atual.

    Invariantes:
        - Nomes são únicos, na ordem da primeira declaração
        - Entradas `None` são descartadas
    """

    def __init__(self, names: Optional[Iterable[Optional[str]]] = None):
        self._names: List[str] = []
        self._observers: List[ClaimObserver] = []
        self._configured = False
        if names is not None:
            self._names = _dedupe(names)
            self._configured = True

    @property
    def configured(self) -> bool:
        return self._configured

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._names)

    def subscribe(self, observer: ClaimObserver) -> None:
        self._observers.append(observer)
        if self._configured:
            observer(self.snapshot())

    def set(self, names: Iterable[Optional[str]]) -> None:
        self._apply(_dedupe(names))

    def add(self, *names: Optional[str]) -> None:
        self._apply(_dedupe(list(self._names) + list(names)))

    def remove(self, name: str) -> None:
        self._apply([n for n in self._names if n != name])

    def clear(self) -> None:
        self._apply([])

    def _apply(self, names: List[str]) -> None:
        previous = (self._names, self._configured)
        self._names = names
        self._configured = True
        snap = self.snapshot()
        try:
            for observer in list(self._observers):
                observer(snap)
        except Exception:
            # observer rejeitou o snapshot: o conjunto volta ao estado anterior
            self._names, self._configured = previous
            raise

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self):
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ClaimSet({list(self._names)!r})"


@dataclass
class SchemaDeclaration:
    """
    Schema lógico dentro de um database lógico.

    Mutado apenas por re-declaração, que faz merge (nunca substitui).
    Recriado a cada run.
    """

    database_name: str
    schema_name: str
    driver_override: Optional[str] = None
    migration: MigrationSettings = field(default_factory=MigrationSettings)
    claims: ClaimSet = field(default_factory=ClaimSet)

    @property
    def key(self) -> SchemaKey:
        return SchemaKey(self.database_name, self.schema_name)

    def merge(
        self,
        *,
        driver_override: Optional[str] = None,
        migration: Optional[MigrationSettings] = None,
    ) -> None:
        if not is_absent(driver_override):
            self.driver_override = driver_override
        self.migration = self.migration.merged_with(migration)


@dataclass(frozen=True)
class TargetFallbacks:
    """Valores já presentes no target de geração (nível 3 da precedência)."""

    driver: Optional[str] = None
    input_schema: Optional[str] = None
    excludes: Optional[str] = None


@dataclass(frozen=True)
class NamedTarget:
    """Configuração de geração registrada externamente, identificada por nome único."""

    name: str
    driver: Optional[str] = None
    input_schema: Optional[str] = None
    excludes: Optional[str] = None

    def fallbacks(self) -> TargetFallbacks:
        return TargetFallbacks(driver=self.driver, input_schema=self.input_schema, excludes=self.excludes)


def _dedupe(names: Iterable[Optional[str]]) -> List[str]:
    out: List[str] = []
    for name in names:
        if name is None or name in out:
            continue
        out.append(name)
    return out
