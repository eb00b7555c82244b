# src/atlas_codegen/core/model/migration.py
"""
Settings da ferramenta de migração (MigrationSettings).

Um `MigrationSettings` é um conjunto aberto de settings, quase todos
opcionais, declarado no escopo de um schema. Ele participa da cadeia de
precedência do ConfigurationResolver como o nível "schema-scoped override".

Decisões arquiteturais:
    - Todo campo é independentemente opcional
    - Ausência (`None`, string em branco, coleção vazia) significa
      "herdar do próximo nível de precedência", nunca "usar o valor zero"
    - Listas e mapas descartam entradas `None` na construção
    - Re-declarações fazem merge (`merged_with`), nunca substituição

Invariantes:
    - Instâncias são imutáveis (frozen)
    - `merged_with` não muta nenhum dos operandos

Limites explícitos:
    - Não resolve precedência (responsabilidade do ConfigurationResolver)
    - Não valida conteúdo de scripts de migração
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


DEFAULT_VERSIONED_PREFIX = "V"
DEFAULT_REPEATABLE_PREFIX = "R"
DEFAULT_HISTORY_TABLE = "flyway_schema_history"
DEFAULT_FALLBACK_LOCATION = "classpath:db/migration"


@dataclass(frozen=True)
class DefaultMigrationSettings:
    """Defaults embutidos da ferramenta de migração (nível 4 da precedência)."""

    versioned_prefix: str = DEFAULT_VERSIONED_PREFIX
    repeatable_prefix: str = DEFAULT_REPEATABLE_PREFIX
    table: str = DEFAULT_HISTORY_TABLE
    fallback_location: str = DEFAULT_FALLBACK_LOCATION


_LIST_FIELDS = (
    "schemas",
    "locations",
    "callback_locations",
    "resolvers",
    "sql_migration_suffixes",
    "cherry_pick",
    "loggers",
    "callbacks",
    "ignore_migration_patterns",
    "error_overrides",
    "config_files",
)

_MAP_FIELDS = (
    "placeholders",
    "jdbc_properties",
    "plugin_configuration",
)


def is_absent(value: Any) -> bool:
    """`None`, string em branco ou coleção vazia: o nível não declarou o valor."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def _clean_list(values: Optional[Sequence[Any]]) -> Optional[Tuple[str, ...]]:
    if values is None:
        return None
    if isinstance(values, str):
        values = [values]
    return tuple(str(v) for v in values if v is not None)


def _clean_map(values: Optional[Mapping[str, Any]]) -> Optional[Dict[str, str]]:
    if values is None:
        return None
    return {str(k): str(v) for k, v in values.items() if k is not None and v is not None}


@dataclass(frozen=True)
class MigrationSettings:
    """Overrides da ferramenta de migração declarados no escopo de um schema."""

    # Identidade de schema
    default_schema: Optional[str] = None
    schemas: Optional[Tuple[str, ...]] = None
    create_schemas: Optional[bool] = None

    # Locations e resolução de migrações
    locations: Optional[Tuple[str, ...]] = None
    callback_locations: Optional[Tuple[str, ...]] = None
    fail_on_missing_locations: Optional[bool] = None
    resolvers: Optional[Tuple[str, ...]] = None
    skip_default_resolvers: Optional[bool] = None
    sql_migration_suffixes: Optional[Tuple[str, ...]] = None
    sql_migration_prefix: Optional[str] = None
    undo_sql_migration_prefix: Optional[str] = None
    repeatable_sql_migration_prefix: Optional[str] = None
    sql_migration_separator: Optional[str] = None
    cherry_pick: Optional[Tuple[str, ...]] = None
    ignore_migration_patterns: Optional[Tuple[str, ...]] = None
    validate_migration_naming: Optional[bool] = None

    # Placeholders
    placeholders: Optional[Dict[str, str]] = None
    placeholder_replacement: Optional[bool] = None
    placeholder_prefix: Optional[str] = None
    placeholder_suffix: Optional[str] = None
    placeholder_separator: Optional[str] = None
    script_placeholder_prefix: Optional[str] = None
    script_placeholder_suffix: Optional[str] = None

    # Conexão
    driver: Optional[str] = None
    jdbc_properties: Optional[Dict[str, str]] = None
    connect_retries: Optional[int] = None
    connect_retries_interval: Optional[int] = None
    init_sql: Optional[str] = None
    kerberos_config_file: Optional[str] = None

    # Tabela de histórico / baseline
    table: Optional[str] = None
    tablespace: Optional[str] = None
    baseline_version: Optional[str] = None
    baseline_description: Optional[str] = None
    baseline_on_migrate: Optional[bool] = None
    installed_by: Optional[str] = None

    # Comportamento de migração
    encoding: Optional[str] = None
    detect_encoding: Optional[bool] = None
    lock_retry_count: Optional[int] = None
    target: Optional[str] = None
    out_of_order: Optional[bool] = None
    skip_executing_migrations: Optional[bool] = None
    validate_on_migrate: Optional[bool] = None
    clean_on_validation_error: Optional[bool] = None
    clean_disabled: Optional[bool] = None
    mixed: Optional[bool] = None
    group: Optional[bool] = None
    stream: Optional[bool] = None
    batch: Optional[bool] = None
    callbacks: Optional[Tuple[str, ...]] = None
    skip_default_callbacks: Optional[bool] = None
    error_overrides: Optional[Tuple[str, ...]] = None

    # Diagnóstico
    loggers: Optional[Tuple[str, ...]] = None
    output_query_results: Optional[bool] = None
    dry_run_output: Optional[str] = None

    # Pass-through / edições comerciais
    oracle_sqlplus: Optional[bool] = None
    oracle_sqlplus_warn: Optional[bool] = None
    oracle_wallet_location: Optional[str] = None
    license_key: Optional[str] = None
    config_files: Optional[Tuple[str, ...]] = None
    config_file_encoding: Optional[str] = None
    working_directory: Optional[str] = None
    plugin_configuration: Optional[Dict[str, str]] = field(default=None)

    def __post_init__(self) -> None:
        for name in _LIST_FIELDS:
            object.__setattr__(self, name, _clean_list(getattr(self, name)))
        for name in _MAP_FIELDS:
            object.__setattr__(self, name, _clean_map(getattr(self, name)))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "MigrationSettings":
        """Constrói a partir de um dict (ex.: bloco de YAML). Chaves desconhecidas são rejeitadas."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown migration settings: {', '.join(unknown)}")
        return cls(**data)

    def present(self) -> Dict[str, Any]:
        """Campos presentes (não ausentes), na ordem de declaração."""
        return {f.name: getattr(self, f.name) for f in fields(self) if not is_absent(getattr(self, f.name))}

    def merged_with(self, other: Optional["MigrationSettings"]) -> "MigrationSettings":
        """Campos presentes em `other` vencem; ausentes herdam de `self`."""
        if other is None:
            return self
        return replace(self, **other.present())
