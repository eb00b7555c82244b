# src/atlas_codegen/core/execution/__init__.py
"""
Execução das unidades de trabalho (migrate / generate).

O core apenas orquestra: escopos de classpath, containers, migrações e
geração pertencem aos colaboradores externos definidos em `collaborators`.
"""

from .collaborators import (
    ClassLoading,
    CodeGenerator,
    Collaborators,
    ContainerHandle,
    ContainerProvisioner,
    MigrationRunner,
)
from .executor import Executor, RunResult, UnitResult, UnitStatus
from .naming import capitalize_first_letter, generate_unit_name, migrate_unit_name
from .provisioning import FLAVORS, DatabaseFlavor, determine_container_image, flavor_for_driver
from .work_unit import WorkUnitRunner

__all__ = [
    "ClassLoading",
    "CodeGenerator",
    "Collaborators",
    "ContainerHandle",
    "ContainerProvisioner",
    "DatabaseFlavor",
    "Executor",
    "FLAVORS",
    "MigrationRunner",
    "RunResult",
    "UnitResult",
    "UnitStatus",
    "WorkUnitRunner",
    "capitalize_first_letter",
    "determine_container_image",
    "flavor_for_driver",
    "generate_unit_name",
    "migrate_unit_name",
]
