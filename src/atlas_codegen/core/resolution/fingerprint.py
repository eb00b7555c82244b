# src/atlas_codegen/core/resolution/fingerprint.py
"""
FingerprintBuilder — serialização determinística da configuração efetiva.

Formato:

    key=value|key=value|...

    - ordem das chaves de topo é imposta pelo builder (nunca herdada de um dict)
    - listas → `[a,b]` (ordem preservada)
    - mapas  → `{k:v,k:v}` (chaves ordenadas)
    - booleanos → `true` / `false`
    - strings: barra invertida e delimitadores `|=,:[]{}` recebem barra invertida
    - valores ausentes (None, branco, coleção vazia) não geram chave

Conteúdo (compute_fingerprint):
    1. identidade declarada: database_name, schema_name, driver_override
    2. valores resolvidos: driver, container_image, resolved_schema
    3. settings efetivos de migração, na ordem canônica de MigrationSettings
    4. mapa `configuration` de propriedades repassadas

Settings que não afetam o código gerado (diagnóstico e credenciais)
ficam fora do fingerprint para evitar invalidação espúria de cache.

Invariantes:
    - Mesmo conteúdo ⇒ mesma string, entre processos
    - Qualquer mudança em campo incluído ⇒ string diferente
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import PurePath
from typing import Any, Dict, List, Mapping, Optional, Sequence

from atlas_codegen.core.exceptions import ContainerImageWarning, UnsupportedDriverError
from atlas_codegen.core.execution.provisioning import determine_container_image
from atlas_codegen.core.model.context import EffectiveContext
from atlas_codegen.core.model.migration import MigrationSettings
from atlas_codegen.core.run_context import RunContext

from .values import is_absent


EXCLUDED_FIELDS = frozenset(
    {
        "loggers",
        "output_query_results",
        "dry_run_output",
        "connect_retries",
        "connect_retries_interval",
        "lock_retry_count",
        "license_key",
        "kerberos_config_file",
    }
)

EXCLUDED_PROPERTIES = frozenset({"flyway.licenseKey", "flyway.license.key"})

MIGRATION_FIELD_ORDER: Sequence[str] = tuple(f.name for f in fields(MigrationSettings))

_DELIMITERS = frozenset("\\|=,:[]{}")


class FingerprintBuilder:
    """Snapshot ordenado chave → valor, serializado de forma estável."""

    def __init__(self) -> None:
        self._entries: List[tuple] = []
        self._keys: set = set()

    def put(self, key: str, value: Any) -> "FingerprintBuilder":
        if is_absent(value):
            return self
        if key in self._keys:
            raise ValueError(f"Duplicate fingerprint key: {key}")
        self._keys.add(key)
        self._entries.append((key, value))
        return self

    def put_string(self, key: str, value: Optional[str]) -> "FingerprintBuilder":
        return self.put(key, value)

    def put_int(self, key: str, value: Optional[int]) -> "FingerprintBuilder":
        return self.put(key, value)

    def put_bool(self, key: str, value: Optional[bool]) -> "FingerprintBuilder":
        return self.put(key, value)

    def put_list(self, key: str, values: Optional[Sequence[Any]]) -> "FingerprintBuilder":
        return self.put(key, list(values) if values is not None else None)

    def put_map(self, key: str, values: Optional[Mapping[str, Any]]) -> "FingerprintBuilder":
        return self.put(key, dict(values) if values is not None else None)

    def keys(self) -> List[str]:
        return [k for k, _ in self._entries]

    def build(self) -> str:
        return "|".join(f"{key}={serialize_value(value)}" for key, value in self._entries)


def serialize_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        parts = [
            f"{serialize_value(k)}:{serialize_value(value[k])}"
            for k in sorted(value, key=str)
        ]
        return "{" + ",".join(parts) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(serialize_value(v) for v in value) + "]"
    if isinstance(value, PurePath):
        return _escape(value.as_posix())
    if isinstance(value, str):
        return _escape(value)
    return str(value)


def _escape(text: str) -> str:
    return "".join("\\" + c if c in _DELIMITERS else c for c in text)


def compute_fingerprint(context: EffectiveContext) -> str:
    """Fingerprint opaco de um EffectiveContext."""
    builder = FingerprintBuilder()
    builder.put_string("database_name", context.database_name)
    builder.put_string("schema_name", context.declared_schema)
    builder.put_string("driver_override", context.driver_override)
    builder.put_string("driver", context.driver_class_name)
    builder.put_string("container_image", context.container_image)
    builder.put_string("resolved_schema", context.schema_name)

    settings: Dict[str, Any] = dict(context.settings_snapshot or {})
    configuration = settings.pop("configuration", None)

    for name in MIGRATION_FIELD_ORDER:
        if name in EXCLUDED_FIELDS or name not in settings:
            continue
        builder.put(name, settings.pop(name))

    # chaves fora do modelo: ordem alfabética
    for name in sorted(settings):
        if name in EXCLUDED_FIELDS:
            continue
        builder.put(name, settings[name])

    if configuration:
        builder.put_map(
            "configuration",
            {k: v for k, v in configuration.items() if k not in EXCLUDED_PROPERTIES},
        )

    return builder.build()


def fingerprint_container_image(
    ctx: RunContext,
    driver: Optional[str],
    *,
    override: Optional[str] = None,
    images: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Imagem de container para o fingerprint; ausente (com warning) quando indeterminável."""
    if is_absent(driver):
        return None
    try:
        return determine_container_image(driver, override=override, images=images).strip() or None
    except UnsupportedDriverError as e:
        ctx.warn(
            ContainerImageWarning(
                message=(
                    f"Unable to determine container image for driver '{driver}' "
                    f"while computing fingerprint: {e.message}"
                ),
                details={"driver": driver},
            )
        )
        return None
