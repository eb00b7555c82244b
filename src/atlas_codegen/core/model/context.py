# src/atlas_codegen/core/model/context.py
"""
Tipos derivados, somente leitura, usados na execução.

    - ResolvedLocation → path concreto (diretório, arquivo ou archive)
                         que contribui recursos de migração
    - EffectiveContext → visão resolvida e livre de contradições de um
                         par (schema, target)
    - WorkUnit         → unidade de trabalho (migrate ou generate)

Todos são imutáveis. Qualquer mudança de configuração produz um novo
EffectiveContext; work units desabilitados são substituídos por uma
cópia (`disabled()`), nunca mutados.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .declarations import SchemaKey


class LocationKind(str, Enum):
    """Origem de um ResolvedLocation."""

    RESOURCE_ROOT = "resource_root"
    CLASSPATH_DIRECTORY = "classpath_directory"
    ARCHIVE = "archive"
    FILESYSTEM = "filesystem"


@dataclass(frozen=True)
class ResolvedLocation:
    path: Path
    kind: LocationKind
    token: str

    def __fspath__(self) -> str:
        return str(self.path)

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class EffectiveContext:
    """
    Configuração efetiva de um par (schema, target).

    Campos:
        - database_name / declared_schema: identidade declarada
        - driver_override: override por invocação (quando houver)
        - driver_class_name: driver resolvido
        - schema_name: schema resolvido (valor da ferramenta de migração vence)
        - container_image: imagem resolvida, ausente quando indeterminável
        - migration_locations: locations concretas
        - settings_snapshot: settings efetivos entregues a `run_migrations`
        - exclude_pattern: padrão de exclusão entregue a `generate`
    """

    database_name: str
    declared_schema: str
    target_name: str
    driver_class_name: str
    schema_name: str
    migration_locations: Tuple[ResolvedLocation, ...] = ()
    settings_snapshot: Dict[str, Any] = field(default_factory=dict)
    driver_override: Optional[str] = None
    container_image: Optional[str] = None
    exclude_pattern: Optional[str] = None

    @property
    def schema_key(self) -> SchemaKey:
        return SchemaKey(self.database_name, self.declared_schema)


class WorkUnitKind(str, Enum):
    GENERATE = "generate"
    MIGRATE = "migrate"


@dataclass(frozen=True)
class WorkUnit:
    """Par (schema, target) entregue uma vez ao grafo de trabalho."""

    name: str
    kind: WorkUnitKind
    schema_key: SchemaKey
    target_name: str
    enabled: bool = True

    def disabled(self) -> "WorkUnit":
        return replace(self, enabled=False)
