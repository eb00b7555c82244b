# src/atlas_codegen/core/bindings/reconciler.py
"""
BindingReconciler — reconciliação dinâmica entre schemas e targets.

Mantém a relação mutável (schema → conjunto de nomes de targets) e a
traduz em registro/desregistro de unidades de trabalho.

Máquina de estados por par (schema, target):

    UNCLAIMED → CLAIMED → ACTIVE → ORPHANED → REMOVED

Transições:
    - claim: nome já reivindicado por *outro* schema → DuplicateTargetClaimError;
      pelo mesmo schema → no-op; caso contrário → CLAIMED
    - CLAIMED → ACTIVE quando schema e target registrado existem; o callback
      `on_register` é invocado exatamente uma vez (conjunto de pares registrados)
    - nome removido do claim set → ORPHANED: `on_deregister` (desabilita a
      unidade, não apaga) apenas para pares ACTIVE; depois REMOVED

Decisões arquiteturais:
    - Único escritor das tabelas de binding
    - Claims processados na ordem de declaração
    - Conflitos estruturais são fatais e detectados antes de qualquer mutação

Limites explícitos:
    - Não cria unidades de trabalho (delegado aos callbacks)
    - Não resolve configuração efetiva
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from atlas_codegen.core.exceptions import (
    DuplicateTargetClaimError,
    EmptyClaimSetError,
    InvalidTargetNameError,
    MissingDeclarationsError,
    UnresolvedTargetError,
    UnusedTargetWarning,
)
from atlas_codegen.core.model.declarations import SchemaDeclaration, SchemaKey
from atlas_codegen.core.run_context import RunContext

from .registry import DeclarationRegistry


SCOPE = "bindings"

BindingCallback = Callable[[SchemaKey, str], None]
Pair = Tuple[SchemaKey, str]


class BindingState(str, Enum):
    UNCLAIMED = "unclaimed"
    CLAIMED = "claimed"
    ACTIVE = "active"
    ORPHANED = "orphaned"
    REMOVED = "removed"


class BindingReconciler:
    def __init__(
        self,
        ctx: RunContext,
        registry: DeclarationRegistry,
        *,
        on_register: BindingCallback,
        on_deregister: BindingCallback,
    ):
        self.ctx = ctx
        self.registry = registry
        self._on_register = on_register
        self._on_deregister = on_deregister

        self._owners: Dict[str, SchemaKey] = {}
        self._tracked: Dict[SchemaKey, List[str]] = {}
        self._registered: Set[Pair] = set()
        self._states: Dict[Pair, BindingState] = {}

    # ------------------------------------------------------------------
    # Eventos de declaração
    # ------------------------------------------------------------------
    def track_schema(self, declaration: SchemaDeclaration) -> None:
        """Passa a observar o claim set de um schema recém-declarado."""
        key = declaration.key
        if key in self._tracked:
            return
        self._tracked[key] = []
        declaration.claims.subscribe(lambda names: self.on_claims_changed(key, names))

    def on_claims_changed(self, key: SchemaKey, names: Tuple[str, ...]) -> None:
        tracked = self._tracked.setdefault(key, [])
        updated = list(dict.fromkeys(names))

        for name in updated:
            if name is None or not str(name).strip():
                raise InvalidTargetNameError(
                    message=f"Blank target name claimed by {key.describe()}",
                    details={"database": key.database, "schema": key.schema},
                )
            owner = self._owners.get(name)
            if owner is not None and owner != key:
                raise DuplicateTargetClaimError(
                    message=(
                        f"Target '{name}' is referenced by multiple schemas: "
                        f"{owner.describe()} and {key.describe()}"
                    ),
                    details={
                        "target": name,
                        "claimed_by": str(owner),
                        "conflicting": str(key),
                    },
                    hint="Cada target de geração pode ser reivindicado por apenas um schema.",
                )

        for name in [n for n in tracked if n not in updated]:
            self._orphan(key, name)
            tracked.remove(name)

        for name in updated:
            if name in tracked:
                continue
            self._owners[name] = key
            tracked.append(name)
            self._states[(key, name)] = BindingState.CLAIMED
            self.ctx.log(scope=SCOPE, level="DEBUG", message=f"'{name}' claimed by {key.describe()}")
            try:
                self._try_activate(key, name)
            except Exception:
                self._owners.pop(name, None)
                tracked.remove(name)
                self._states.pop((key, name), None)
                raise

    def on_target_registered(self, name: str) -> None:
        owner = self._owners.get(name)
        if owner is not None:
            self._try_activate(owner, name)

    # ------------------------------------------------------------------
    # Transições
    # ------------------------------------------------------------------
    def _try_activate(self, key: SchemaKey, name: str) -> None:
        pair = (key, name)
        if pair in self._registered:
            return
        if self.registry.schema(key) is None or self.registry.target(name) is None:
            return
        # callback que levanta deixa o par em CLAIMED
        self._on_register(key, name)
        self._registered.add(pair)
        self._states[pair] = BindingState.ACTIVE
        self.ctx.log(scope=SCOPE, level="INFO", message=f"binding {key} → '{name}' active")

    def _orphan(self, key: SchemaKey, name: str) -> None:
        pair = (key, name)
        self._states[pair] = BindingState.ORPHANED
        self._owners.pop(name, None)
        if pair in self._registered:
            self._registered.discard(pair)
            self._on_deregister(key, name)
        self._states[pair] = BindingState.REMOVED
        self.ctx.log(scope=SCOPE, level="INFO", message=f"binding {key} → '{name}' removed")

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    def state(self, key: SchemaKey, name: str) -> BindingState:
        return self._states.get((key, name), BindingState.UNCLAIMED)

    def claims_of(self, key: SchemaKey) -> Tuple[str, ...]:
        return tuple(self._tracked.get(key, ()))

    def owner_of(self, name: str) -> Optional[SchemaKey]:
        return self._owners.get(name)

    def is_registered(self, key: SchemaKey, name: str) -> bool:
        return (key, name) in self._registered

    # ------------------------------------------------------------------
    # Validação de fim de run
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Validação de fim de run.

        Ordem:
            1. nenhum database declarado → MissingDeclarationsError
            2. schema sem claims → EmptyClaimSetError
            3. target reivindicado nunca registrado → UnresolvedTargetError
            4. target registrado nunca reivindicado → UnusedTargetWarning
        """
        if not self.registry.databases:
            raise MissingDeclarationsError(
                message="At least one database must be declared before validation",
                hint="Declare um database e seus schemas antes de executar.",
            )

        for schema in self.registry.schemas:
            if not self._tracked.get(schema.key):
                raise EmptyClaimSetError(
                    message=f"{_cap(schema.key.describe())} does not reference any generation targets",
                    details={"database": schema.database_name, "schema": schema.schema_name},
                    hint="Reivindique ao menos um target para o schema.",
                )

        for key, names in self._tracked.items():
            for name in names:
                if self.registry.target(name) is None:
                    raise UnresolvedTargetError(
                        message=f"{_cap(key.describe())} references missing generation target '{name}'",
                        details={"database": key.database, "schema": key.schema, "target": name},
                        hint="Registre o target no gerador ou remova-o do claim set.",
                    )

        for target in self.registry.targets:
            if target.name not in self._owners:
                self.ctx.warn(
                    UnusedTargetWarning(
                        message=f"Generation target '{target.name}' is not claimed by any schema",
                        details={"target": target.name},
                    )
                )


def _cap(text: str) -> str:
    return text[:1].upper() + text[1:]
