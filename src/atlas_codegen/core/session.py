# src/atlas_codegen/core/session.py
"""
CodegenSession — fachada de uma run do Atlas Codegen.

Uma sessão representa exatamente uma passagem de configuração:
declarações chegam de forma incremental, o BindingReconciler mantém o
estado derivado e, a cada binding completo (schema + target registrado),
um par de unidades de trabalho é registrado no grafo:

    generate<Target>DatabaseClasses   (migrate + generate)
    migrate<Target>DatabaseSchema     (apenas migrate)

Operações expostas à camada de declaração:
    - declare_database / declare_schema
    - claim_targets (substitui o claim set) / add_claims (merge)
    - register_target
    - resolve_effective_context / compute_fingerprint / cache_key
    - resolve_locations
    - validate / work_units / execute / close

Princípios:
    - Execução single-thread e síncrona; nenhuma operação suspende
    - Unidades de trabalho são imutáveis; desregistro troca a unidade
      por uma cópia desabilitada
    - O RunContext é criado por sessão e encerrado em `close()`
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from atlas_codegen.core.bindings import BindingReconciler, DeclarationRegistry
from atlas_codegen.core.config import Settings, compute_cache_key, compute_config_hash, load_config
from atlas_codegen.core.exceptions import DuplicateWorkUnitError, UnresolvedTargetError
from atlas_codegen.core.execution import (
    Collaborators,
    Executor,
    RunResult,
    WorkUnitRunner,
    generate_unit_name,
    migrate_unit_name,
)
from atlas_codegen.core.model import (
    DatabaseDeclaration,
    DefaultMigrationSettings,
    EffectiveContext,
    MigrationSettings,
    NamedTarget,
    ResolvedLocation,
    SchemaDeclaration,
    SchemaKey,
    TargetFallbacks,
    WorkUnit,
    WorkUnitKind,
)
from atlas_codegen.core.resolution import (
    ConfigurationResolver,
    LocationResolver,
    compute_fingerprint,
    fingerprint_container_image,
)
from atlas_codegen.core.run_context import RunContext


SCOPE = "session"

SchemaRef = Union[SchemaKey, SchemaDeclaration, Tuple[str, str]]


class CodegenSession:
    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        ctx: Optional[RunContext] = None,
        collaborators: Optional[Collaborators] = None,
    ):
        self.settings = settings or Settings.from_config()
        self.ctx = ctx or RunContext.new(config=self.settings.raw)
        self.collaborators = collaborators

        self.ctx.log(
            scope=SCOPE,
            level="INFO",
            message="run settings resolved",
            config_hash=compute_config_hash(self.settings.raw),
        )

        self.registry = DeclarationRegistry(self.ctx)
        self.resolver = ConfigurationResolver(
            self.ctx,
            defaults=DefaultMigrationSettings(fallback_location=self.settings.fallback_location),
        )
        self.locations = LocationResolver(
            self.ctx,
            base_dir=self.settings.base_dir,
            resource_roots=self.settings.resource_roots,
            runtime_classpath=self.settings.runtime_classpath,
        )
        self.reconciler = BindingReconciler(
            self.ctx,
            self.registry,
            on_register=self._register_units,
            on_deregister=self._disable_units,
        )
        self._units: Dict[str, WorkUnit] = {}

    @classmethod
    def from_files(
        cls,
        *,
        defaults_path: str,
        local_path: Optional[str] = None,
        base_dir: Optional[Path] = None,
        collaborators: Optional[Collaborators] = None,
    ) -> "CodegenSession":
        config = load_config(defaults_path=defaults_path, local_path=local_path)
        return cls(settings=Settings.from_config(config, base_dir=base_dir), collaborators=collaborators)

    # ------------------------------------------------------------------
    # Declarações
    # ------------------------------------------------------------------
    def declare_database(
        self, name: str, *, driver: Optional[str] = None, container_image: Optional[str] = None
    ) -> DatabaseDeclaration:
        return self.registry.declare_database(
            DatabaseDeclaration(name=name, driver=driver, container_image=container_image)
        )

    def declare_schema(
        self,
        database_name: str,
        schema_name: str,
        overrides: Optional[Union[MigrationSettings, Mapping[str, Any]]] = None,
        *,
        driver_override: Optional[str] = None,
        claims: Optional[Iterable[str]] = None,
    ) -> SchemaDeclaration:
        if overrides is not None and not isinstance(overrides, MigrationSettings):
            overrides = MigrationSettings.from_mapping(overrides)
        declaration, created = self.registry.declare_schema(
            database_name,
            schema_name,
            driver_override=driver_override,
            migration=overrides,
        )
        if created:
            self.reconciler.track_schema(declaration)
        else:
            # targets já ativos veem os overrides mesclados na próxima resolução
            self.ctx.log(scope=SCOPE, level="DEBUG", message=f"{declaration.key.describe()} merged")
        if claims is not None:
            declaration.claims.add(*claims)
        return declaration

    def claim_targets(self, schema: SchemaRef, names: Iterable[str]) -> None:
        """Substitui o claim set do schema e dispara a reconciliação."""
        self._schema(schema).claims.set(names)

    def add_claims(self, schema: SchemaRef, *names: str) -> None:
        self._schema(schema).claims.add(*names)

    def register_target(
        self,
        target: Union[NamedTarget, str],
        *,
        driver: Optional[str] = None,
        input_schema: Optional[str] = None,
        excludes: Optional[str] = None,
    ) -> NamedTarget:
        if isinstance(target, str):
            target = NamedTarget(name=target, driver=driver, input_schema=input_schema, excludes=excludes)
        registered = self.registry.register_target(target)
        self.reconciler.on_target_registered(registered.name)
        return registered

    # ------------------------------------------------------------------
    # Resolução
    # ------------------------------------------------------------------
    def resolve_effective_context(
        self,
        schema: SchemaRef,
        target_fallbacks: Optional[TargetFallbacks] = None,
        *,
        target_name: Optional[str] = None,
        driver_override: Optional[str] = None,
    ) -> EffectiveContext:
        declaration = self._schema(schema)
        if target_fallbacks is None and target_name is not None:
            target = self.registry.target(target_name)
            if target is None:
                raise UnresolvedTargetError(
                    message=f"{declaration.key.describe()} references missing generation target '{target_name}'",
                    details={
                        "database": declaration.database_name,
                        "schema": declaration.schema_name,
                        "target": target_name,
                    },
                )
            target_fallbacks = target.fallbacks()
        fallbacks = target_fallbacks or TargetFallbacks()
        database = self.registry.database(declaration.database_name)

        driver = self.resolver.resolve_driver(
            declaration, fallbacks, database=database, override=driver_override
        )
        schema_name = self.resolver.resolve_schema(declaration, fallbacks)
        snapshot = self.resolver.build_migration_settings(
            declaration,
            resolved_schema=schema_name,
            fallback_location=self.settings.fallback_location,
        )

        return EffectiveContext(
            database_name=declaration.database_name,
            declared_schema=declaration.schema_name,
            target_name=target_name or "",
            driver_class_name=driver,
            schema_name=schema_name,
            migration_locations=tuple(self.locations.resolve_all(snapshot["locations"])),
            settings_snapshot=snapshot,
            driver_override=driver_override or declaration.driver_override,
            container_image=fingerprint_container_image(
                self.ctx,
                driver,
                override=database.container_image if database is not None else None,
                images=self.settings.container_images,
            ),
            exclude_pattern=self.resolver.exclusion_pattern(declaration, fallbacks),
        )

    def compute_fingerprint(self, context: EffectiveContext) -> str:
        return compute_fingerprint(context)

    def cache_key(self, context: EffectiveContext) -> str:
        return compute_cache_key(compute_fingerprint(context), context.migration_locations)

    def resolve_locations(
        self, tokens: Iterable[str], base_dir: Optional[Path] = None
    ) -> List[ResolvedLocation]:
        return self.locations.resolve_all(tokens, base_dir)

    # ------------------------------------------------------------------
    # Grafo de trabalho
    # ------------------------------------------------------------------
    def work_units(self) -> Tuple[WorkUnit, ...]:
        return tuple(self._units.values())

    def work_unit(self, name: str) -> Optional[WorkUnit]:
        return self._units.get(name)

    def _register_units(self, key: SchemaKey, target_name: str) -> None:
        planned = (
            (WorkUnitKind.GENERATE, generate_unit_name(target_name)),
            (WorkUnitKind.MIGRATE, migrate_unit_name(target_name)),
        )
        for _, name in planned:
            existing = self._units.get(name)
            # unidade desabilitada (binding retirado) pode ser substituída
            if existing is None or not existing.enabled:
                continue
            if (existing.schema_key, existing.target_name) != (key, target_name):
                raise DuplicateWorkUnitError(
                    message=(
                        f"Work unit '{name}' for target '{target_name}' ({key.describe()}) "
                        f"collides with target '{existing.target_name}' ({existing.schema_key.describe()})"
                    ),
                    details={
                        "unit": name,
                        "target": target_name,
                        "conflicting_target": existing.target_name,
                    },
                    hint="Nomes de target que diferem apenas em maiúsculas/minúsculas geram a mesma unidade.",
                )
        for kind, name in planned:
            self._units[name] = WorkUnit(name=name, kind=kind, schema_key=key, target_name=target_name)
            self.ctx.log(scope=SCOPE, level="INFO", message=f"work unit '{name}' registered", schema=str(key))

    def _disable_units(self, key: SchemaKey, target_name: str) -> None:
        for name in (generate_unit_name(target_name), migrate_unit_name(target_name)):
            unit = self._units.get(name)
            if unit is None or (unit.schema_key, unit.target_name) != (key, target_name):
                continue
            if unit.enabled:
                self._units[name] = unit.disabled()
                self.ctx.log(scope=SCOPE, level="INFO", message=f"work unit '{name}' disabled", schema=str(key))

    # ------------------------------------------------------------------
    # Validação / execução / ciclo de vida
    # ------------------------------------------------------------------
    def validate(self) -> None:
        self.reconciler.validate()

    def execute(
        self,
        collaborators: Optional[Collaborators] = None,
        *,
        only: Optional[Iterable[str]] = None,
    ) -> RunResult:
        """
        Valida a run e executa as unidades habilitadas.

        Args:
            collaborators: colaboradores externos (default: os da sessão).
            only: nomes de unidades a executar (default: todas).
        """
        collaborators = collaborators or self.collaborators
        if collaborators is None:
            raise ValueError("CodegenSession.execute requires collaborators")

        self.validate()

        units = list(self._units.values())
        if only is not None:
            wanted = set(only)
            units = [u for u in units if u.name in wanted]

        executor = Executor(
            ctx=self.ctx,
            units=units,
            runner=WorkUnitRunner(self.ctx, collaborators),
            context_for=lambda unit: self.resolve_effective_context(
                unit.schema_key, target_name=unit.target_name
            ),
            fail_fast=self.settings.fail_fast,
        )
        return executor.run()

    def close(self) -> None:
        self.ctx.close()

    def _schema(self, ref: SchemaRef) -> SchemaDeclaration:
        if isinstance(ref, SchemaDeclaration):
            return ref
        key = ref if isinstance(ref, SchemaKey) else SchemaKey(*ref)
        declaration = self.registry.schema(key)
        if declaration is None:
            raise KeyError(f"{key.describe()} has not been declared")
        return declaration
