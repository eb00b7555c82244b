# src/atlas_codegen/core/resolution/precedence.py
"""
ConfigurationResolver — resolução multi-fonte com precedência fixa.

Para cada propriedade escalar, lista ou mapa, o valor efetivo é o
primeiro valor não ausente encontrado na cadeia:

    (1) override explícito por invocação (ex.: driver forçado pelo binding)
    (2) override no escopo do schema (MigrationSettings)
    (3) fallback já presente no target de geração (TargetFallbacks)
    (4) default do sistema (DefaultMigrationSettings), quando existir

String em branco e coleção vazia contam como ausência em qualquer nível:
não encerram a busca.

O schema é a exceção: as fontes da ferramenta de migração e do gerador
precisam *concordar* (comparação case-insensitive) em vez de empilhar.
Quando concordam, o valor da ferramenta de migração vence, preservando
sua grafia original.

Invariantes:
    - Nenhuma configuração parcialmente resolvida é retornada
    - Todo erro nomeia database, schema e os valores conflitantes

Limites explícitos:
    - Não resolve locations (LocationResolver)
    - Não serializa fingerprint (FingerprintBuilder)
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence

from atlas_codegen.core.exceptions import (
    MigrationPrefixWarning,
    MissingDriverError,
    MissingSchemaError,
    SchemaMismatchError,
)
from atlas_codegen.core.model.declarations import (
    DatabaseDeclaration,
    SchemaDeclaration,
    TargetFallbacks,
)
from atlas_codegen.core.model.migration import DefaultMigrationSettings
from atlas_codegen.core.run_context import RunContext

from .values import (
    camel_to_dotted_lower,
    first_non_blank,
    first_present,
    is_absent,
    normalize_schema,
    snake_to_camel,
)


SCOPE = "resolution"

# Campos tratados explicitamente por build_migration_settings
_STRUCTURAL_FIELDS = {"default_schema", "schemas", "locations", "driver", "sql_migration_prefix"}

# Propriedades repassadas via mapa `configuration` (flyway.<camel> + flyway.<dotted>)
_PASS_THROUGH_FIELDS = (
    "undo_sql_migration_prefix",
    "oracle_sqlplus",
    "oracle_sqlplus_warn",
    "oracle_wallet_location",
    "license_key",
    "config_file_encoding",
)
_JOINED_PASS_THROUGH_FIELDS = ("config_files", "cherry_pick")


def resolve_schema_values(
    *,
    migration_default_schema: Optional[str],
    migration_schemas: Optional[Sequence[Optional[str]]],
    generator_schema: Optional[str],
    declared_schema: Optional[str],
    context: str,
) -> str:
    """
    Reconcilia o schema da ferramenta de migração com o schema do gerador.

    Política:
        - Normaliza os valores (trim, uma camada de aspas, branco → ausente)
        - Valor de migração = default schema, senão primeiro item não vazio da lista
        - Ambos presentes: compara case-insensitive; diverge → SchemaMismatchError;
          caso contrário retorna o valor de migração com a grafia original
        - Apenas um presente: retorna-o
        - Nenhum: usa o schema declarado; na falta dele → MissingSchemaError
    """
    from_list = None
    for candidate in migration_schemas or ():
        from_list = normalize_schema(candidate)
        if from_list is not None:
            break

    migration_value = first_present(normalize_schema(migration_default_schema), from_list)
    generator_value = normalize_schema(generator_schema)

    if migration_value is not None and generator_value is not None:
        if migration_value.lower() != generator_value.lower():
            raise SchemaMismatchError(
                message=(
                    f"Migration default schema '{migration_value}' does not match "
                    f"generator input schema '{generator_value}' for {context}"
                ),
                details={
                    "migration_schema": migration_value,
                    "generator_schema": generator_value,
                    "context": context,
                },
                hint="Declare o mesmo schema na ferramenta de migração e no target de geração.",
            )
        return migration_value

    if migration_value is not None:
        return migration_value
    if generator_value is not None:
        return generator_value

    declared = normalize_schema(declared_schema)
    if declared is not None:
        return declared

    raise MissingSchemaError(
        message=(
            "Database schema must be declared via migration 'default_schema' "
            f"or generator 'input_schema' for {context}"
        ),
        details={"context": context},
        hint="Defina `default_schema` nos settings de migração do schema ou `input_schema` no target.",
    )


class ConfigurationResolver:
    """Resolve driver, schema e settings de migração de um par (schema, target)."""

    def __init__(
        self,
        ctx: RunContext,
        *,
        defaults: Optional[DefaultMigrationSettings] = None,
    ):
        self.ctx = ctx
        self.defaults = defaults or DefaultMigrationSettings()

    # ------------------------------------------------------------------
    # Precedência genérica
    # ------------------------------------------------------------------
    def resolve_value(
        self,
        name: str,
        *,
        override: Any = None,
        schema_value: Any = None,
        fallback: Any = None,
        default: Any = None,
    ) -> Any:
        """Primeiro valor não ausente na ordem override → schema → fallback → default."""
        tiers = (
            ("override", override),
            ("schema", schema_value),
            ("fallback", fallback),
            ("default", default),
        )
        for tier, value in tiers:
            if not is_absent(value):
                self.ctx.log(
                    scope=SCOPE,
                    level="DEBUG",
                    message=f"resolved '{name}' from {tier}",
                    property=name,
                    tier=tier,
                )
                return value
        return None

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------
    def resolve_driver(
        self,
        schema: SchemaDeclaration,
        fallbacks: Optional[TargetFallbacks] = None,
        *,
        database: Optional[DatabaseDeclaration] = None,
        override: Optional[str] = None,
    ) -> str:
        fallbacks = fallbacks or TargetFallbacks()
        driver = self.resolve_value(
            "driver",
            override=first_present(override, schema.driver_override),
            schema_value=first_present(
                database.driver if database is not None else None,
                schema.migration.driver,
            ),
            fallback=fallbacks.driver,
        )
        if driver is None:
            raise MissingDriverError(
                message=(
                    f"Database driver class must be declared for {schema.key.describe()}. "
                    "Set a driver override on the binding, set 'driver' on the database "
                    "declaration, set 'driver' in the schema migration settings, or provide "
                    "a JDBC driver on the generation target."
                ),
                details={
                    "database": schema.database_name,
                    "schema": schema.schema_name,
                    "checked": [
                        "binding.driver_override",
                        "database.driver",
                        "schema.migration.driver",
                        "target.driver",
                    ],
                },
                hint="Declare o driver em um dos níveis listados em `checked`.",
            )
        return str(driver).strip()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def resolve_schema(
        self, schema: SchemaDeclaration, fallbacks: Optional[TargetFallbacks] = None
    ) -> str:
        fallbacks = fallbacks or TargetFallbacks()
        resolved = resolve_schema_values(
            migration_default_schema=schema.migration.default_schema,
            migration_schemas=schema.migration.schemas,
            generator_schema=fallbacks.input_schema,
            declared_schema=schema.schema_name,
            context=schema.key.describe(),
        )
        self.ctx.log(
            scope=SCOPE,
            level="DEBUG",
            message=f"resolved schema '{resolved}' for {schema.key.describe()}",
            database=schema.database_name,
            schema=schema.schema_name,
        )
        return resolved

    # ------------------------------------------------------------------
    # Settings efetivos de migração
    # ------------------------------------------------------------------
    def resolve_locations(self, schema: SchemaDeclaration, fallback_location: Optional[str] = None) -> List[str]:
        locations = self.resolve_value(
            "locations",
            schema_value=list(schema.migration.locations or ()),
            default=[fallback_location or self.defaults.fallback_location],
        )
        return list(locations)

    def resolve_history_table(self, schema: SchemaDeclaration) -> str:
        table = first_present(schema.migration.table, self.defaults.table)
        return str(table).strip() or self.defaults.table

    def resolve_versioned_prefix(self, schema: SchemaDeclaration) -> Optional[str]:
        """Override de prefixo versionado, ou None quando ausente ou ignorado."""
        prefix = schema.migration.sql_migration_prefix
        if is_absent(prefix):
            return None

        if prefix == self.defaults.versioned_prefix:
            self.ctx.warn(
                MigrationPrefixWarning(
                    message=(
                        f"Skipping sql_migration_prefix override '{prefix}' for "
                        f"{schema.key.describe()}: value matches the default prefix"
                    ),
                    details={"database": schema.database_name, "schema": schema.schema_name, "prefix": prefix},
                )
            )
            return None

        repeatable = first_non_blank(
            [schema.migration.repeatable_sql_migration_prefix, self.defaults.repeatable_prefix]
        )
        if prefix == repeatable:
            self.ctx.warn(
                MigrationPrefixWarning(
                    message=(
                        f"Skipping sql_migration_prefix override '{prefix}' for "
                        f"{schema.key.describe()}: value matches the repeatable prefix '{repeatable}'"
                    ),
                    details={
                        "database": schema.database_name,
                        "schema": schema.schema_name,
                        "prefix": prefix,
                        "repeatable_prefix": repeatable,
                    },
                )
            )
            return None

        return prefix

    def build_migration_settings(
        self,
        schema: SchemaDeclaration,
        *,
        resolved_schema: Optional[str] = None,
        fallback_location: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Monta os settings efetivos entregues a `run_migrations`.

        Ordem das chaves:
            default_schema, schemas, locations, sql_migration_prefix (quando aceito),
            demais settings presentes (ordem de declaração), configuration.
        """
        migration = schema.migration
        settings: Dict[str, Any] = {}

        default_schema = first_present(
            normalize_schema(migration.default_schema), normalize_schema(resolved_schema)
        )
        if default_schema is not None:
            settings["default_schema"] = default_schema

        if migration.schemas:
            settings["schemas"] = list(migration.schemas)
        elif default_schema is not None:
            settings["schemas"] = [default_schema]

        settings["locations"] = self.resolve_locations(schema, fallback_location)

        prefix = self.resolve_versioned_prefix(schema)
        if prefix is not None:
            settings["sql_migration_prefix"] = prefix

        passthrough = set(_PASS_THROUGH_FIELDS) | set(_JOINED_PASS_THROUGH_FIELDS) | {"plugin_configuration"}
        for name, value in migration.present().items():
            if name in _STRUCTURAL_FIELDS or name in passthrough or is_absent(value):
                continue
            settings[name] = list(value) if isinstance(value, tuple) else value

        configuration = self._pass_through_properties(schema)
        if configuration:
            settings["configuration"] = configuration

        return settings

    def _pass_through_properties(self, schema: SchemaDeclaration) -> Dict[str, str]:
        migration = schema.migration
        properties: Dict[str, str] = {}

        def put(name: str, value: Any) -> None:
            if isinstance(value, bool):
                value = "true" if value else "false"
            if is_absent(value):
                return
            camel = snake_to_camel(name)
            properties[f"flyway.{camel}"] = str(value)
            properties[f"flyway.{camel_to_dotted_lower(camel)}"] = str(value)

        for name in _PASS_THROUGH_FIELDS:
            put(name, getattr(migration, name))
        for name in _JOINED_PASS_THROUGH_FIELDS:
            values = getattr(migration, name)
            if values:
                put(name, ",".join(values))
        for key, value in (migration.plugin_configuration or {}).items():
            properties.setdefault(key, value)

        return properties

    # ------------------------------------------------------------------
    # Exclusões do gerador
    # ------------------------------------------------------------------
    def exclusion_pattern(
        self, schema: SchemaDeclaration, fallbacks: Optional[TargetFallbacks] = None
    ) -> str:
        """Excludes do target (quando não vazios) + padrão que exclui a tabela de histórico."""
        fallbacks = fallbacks or TargetFallbacks()
        parts: List[str] = []
        if not is_absent(fallbacks.excludes):
            parts.append(str(fallbacks.excludes))
        table = re.escape(self.resolve_history_table(schema))
        parts.append(rf"(?i)(?:^|.*\.){table}$")
        return "|".join(parts)
