# src/atlas_codegen/core/bindings/registry.py
"""
Registro de declarações de uma run.

Este módulo define o `DeclarationRegistry`, as tabelas de lookup que
sustentam o grafo de declarações:

    databases: nome           → DatabaseDeclaration
    schemas:   SchemaKey      → SchemaDeclaration
    targets:   nome do target → NamedTarget

Decisões arquiteturais:
    - Referências entre declarações são identificadores estáveis
      (nome do database, SchemaKey, nome do target), nunca objetos
    - Re-declarar um database ou schema faz merge no existente e
      registra um evento WARNING; nada é substituído
    - A ordem de declaração é preservada (dicts ordenados)

Invariantes:
    - Cada SchemaKey aparece no máximo uma vez
    - Cada nome de target aparece no máximo uma vez

Limites explícitos:
    - Não reconcilia bindings (BindingReconciler)
    - Não resolve configuração efetiva
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from atlas_codegen.core.model.declarations import (
    DatabaseDeclaration,
    NamedTarget,
    SchemaDeclaration,
    SchemaKey,
)
from atlas_codegen.core.model.migration import MigrationSettings
from atlas_codegen.core.run_context import RunContext


SCOPE = "declarations"

MERGE_HINT = "merge configuration blocks where possible"


class DeclarationRegistry:
    def __init__(self, ctx: RunContext):
        self.ctx = ctx
        self._databases: Dict[str, DatabaseDeclaration] = {}
        self._schemas: Dict[SchemaKey, SchemaDeclaration] = {}
        self._targets: Dict[str, NamedTarget] = {}

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------
    def declare_database(self, declaration: DatabaseDeclaration) -> DatabaseDeclaration:
        existing = self._databases.get(declaration.name)
        if existing is None:
            self._databases[declaration.name] = declaration
            self.ctx.log(scope=SCOPE, level="DEBUG", message=f"database '{declaration.name}' declared")
            return declaration

        self.ctx.log(
            scope=SCOPE,
            level="WARNING",
            message=f"Database '{declaration.name}' was configured multiple times; {MERGE_HINT}.",
            database=declaration.name,
        )
        merged = existing.merged_with(declaration)
        self._databases[declaration.name] = merged
        return merged

    def database(self, name: str) -> Optional[DatabaseDeclaration]:
        return self._databases.get(name)

    @property
    def databases(self) -> Tuple[DatabaseDeclaration, ...]:
        return tuple(self._databases.values())

    # ------------------------------------------------------------------
    # Schemas
    # ------------------------------------------------------------------
    def declare_schema(
        self,
        database_name: str,
        schema_name: str,
        *,
        driver_override: Optional[str] = None,
        migration: Optional[MigrationSettings] = None,
    ) -> Tuple[SchemaDeclaration, bool]:
        """
        Declara (ou re-declara) um schema.

        Returns:
            (declaração, created): `created` é False quando houve merge.
        """
        if database_name not in self._databases:
            self.declare_database(DatabaseDeclaration(name=database_name))

        key = SchemaKey(database_name, schema_name)
        existing = self._schemas.get(key)
        if existing is not None:
            self.ctx.log(
                scope=SCOPE,
                level="WARNING",
                message=(
                    f"Schema '{schema_name}' in database '{database_name}' was configured "
                    f"multiple times; {MERGE_HINT}."
                ),
                database=database_name,
                schema=schema_name,
            )
            existing.merge(driver_override=driver_override, migration=migration)
            return existing, False

        declaration = SchemaDeclaration(
            database_name=database_name,
            schema_name=schema_name,
            driver_override=driver_override,
            migration=migration or MigrationSettings(),
        )
        self._schemas[key] = declaration
        self.ctx.log(scope=SCOPE, level="DEBUG", message=f"{key.describe()} declared")
        return declaration, True

    def schema(self, key: SchemaKey) -> Optional[SchemaDeclaration]:
        return self._schemas.get(key)

    @property
    def schemas(self) -> Tuple[SchemaDeclaration, ...]:
        return tuple(self._schemas.values())

    def schemas_of(self, database_name: str) -> Iterable[SchemaDeclaration]:
        return [s for s in self._schemas.values() if s.database_name == database_name]

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------
    def register_target(self, target: NamedTarget) -> NamedTarget:
        if target.name in self._targets:
            self.ctx.log(
                scope=SCOPE,
                level="DEBUG",
                message=f"target '{target.name}' re-registered; fallbacks replaced",
            )
        self._targets[target.name] = target
        return target

    def target(self, name: str) -> Optional[NamedTarget]:
        return self._targets.get(name)

    @property
    def targets(self) -> Tuple[NamedTarget, ...]:
        return tuple(self._targets.values())
