# src/atlas_codegen/core/model/__init__.py
"""
Modelo de dados do Atlas Codegen.

Declarações (database, schema, target), settings de migração, claim sets
observáveis e os tipos derivados consumidos na execução.
"""

from .context import EffectiveContext, LocationKind, ResolvedLocation, WorkUnit, WorkUnitKind
from .declarations import (
    ClaimSet,
    DatabaseDeclaration,
    NamedTarget,
    SchemaDeclaration,
    SchemaKey,
    TargetFallbacks,
)
from .migration import DefaultMigrationSettings, MigrationSettings

__all__ = [
    "ClaimSet",
    "DatabaseDeclaration",
    "DefaultMigrationSettings",
    "EffectiveContext",
    "LocationKind",
    "MigrationSettings",
    "NamedTarget",
    "ResolvedLocation",
    "SchemaDeclaration",
    "SchemaKey",
    "TargetFallbacks",
    "WorkUnit",
    "WorkUnitKind",
]
