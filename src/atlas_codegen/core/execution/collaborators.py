# src/atlas_codegen/core/execution/collaborators.py
"""
Contratos dos colaboradores externos consumidos pelo Atlas Codegen.

O core não sobe databases, não executa migrações e não invoca o
gerador de código: ele apenas monta a configuração efetiva e chama
estes colaboradores dentro dos escopos de uma unidade de trabalho.

    - ClassLoading          → escopo de classpath + verificação de driver
    - ContainerProvisioner  → ciclo de vida do database temporário
    - MigrationRunner       → execução das migrações
    - CodeGenerator         → invocação do gerador

Conformidade por duck typing (@runtime_checkable): não há herança
obrigatória, apenas a forma dos métodos.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class ContainerHandle(Protocol):
    """Database temporário em execução. `close()` libera a instância."""

    jdbc_url: str
    username: str
    password: str
    driver_class: str

    def close(self) -> None:
        ...


@runtime_checkable
class ClassLoading(Protocol):
    def acquire(self) -> Any:
        """Abre o escopo de classpath da unidade e retorna o loader."""
        ...

    def is_class_loadable(self, name: str, loader: Any) -> bool:
        ...

    def release(self, loader: Any) -> None:
        ...


@runtime_checkable
class ContainerProvisioner(Protocol):
    def start_container(self, driver_class: str, image_override: Optional[str]) -> ContainerHandle:
        ...


@runtime_checkable
class MigrationRunner(Protocol):
    def run_migrations(
        self,
        jdbc_url: str,
        username: str,
        password: str,
        effective_settings: Dict[str, Any],
    ) -> None:
        ...


@runtime_checkable
class CodeGenerator(Protocol):
    def generate(
        self,
        target_name: str,
        jdbc_url: str,
        username: str,
        password: str,
        schema: str,
        exclude_pattern: Optional[str],
    ) -> None:
        ...


@dataclass(frozen=True)
class Collaborators:
    class_loading: ClassLoading
    provisioner: ContainerProvisioner
    migrations: MigrationRunner
    generator: CodeGenerator
