# src/atlas_codegen/core/config/settings.py
"""
Settings tipados da run do Atlas Codegen.

Este módulo converte a configuração efetiva (dict produzido pelo loader)
em um objeto imutável consumido pela sessão, pelo LocationResolver e
pelo executor.

Árvore suportada (v1):

    project:
      base_dir: "."
      resource_roots: []
      runtime_classpath: []
    engine:
      fail_fast: true
    migration:
      fallback_location: "classpath:db/migration"
    containers:
      images:
        postgresql: "postgres:17-alpine"
        mysql: "mysql:8.4"

Chaves ausentes herdam os defaults embutidos (`BUILTIN_DEFAULTS`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidConfigRootTypeError
from .merge import deep_merge


BUILTIN_DEFAULTS: Dict[str, Any] = {
    "project": {
        "base_dir": ".",
        "resource_roots": [],
        "runtime_classpath": [],
    },
    "engine": {
        "fail_fast": True,
    },
    "migration": {
        "fallback_location": "classpath:db/migration",
    },
    "containers": {
        "images": {
            "postgresql": "postgres:17-alpine",
            "mysql": "mysql:8.4",
        },
    },
}


@dataclass(frozen=True)
class Settings:
    """Visão tipada e somente leitura dos settings efetivos da run."""

    base_dir: Path
    resource_roots: Tuple[Path, ...] = ()
    runtime_classpath: Tuple[Path, ...] = ()
    fail_fast: bool = True
    fallback_location: str = "classpath:db/migration"
    container_images: Dict[str, str] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_config(
        cls, config: Optional[Dict[str, Any]] = None, *, base_dir: Optional[Path] = None
    ) -> "Settings":
        """
        Constrói Settings a partir da configuração efetiva.

        Caminhos relativos de `resource_roots` e `runtime_classpath` são
        resolvidos contra `base_dir`. O argumento `base_dir` (quando
        informado) tem precedência sobre `project.base_dir`.
        """
        if config is not None and not isinstance(config, dict):
            raise InvalidConfigRootTypeError(
                f"Config root deve ser dict, recebido: {type(config).__name__}"
            )
        effective = deep_merge(BUILTIN_DEFAULTS, config or {})

        project = effective["project"]
        root = Path(base_dir) if base_dir is not None else Path(project["base_dir"] or ".")
        root = root.expanduser().absolute()

        return cls(
            base_dir=root,
            resource_roots=tuple(_under(root, p) for p in project.get("resource_roots") or []),
            runtime_classpath=tuple(_under(root, p) for p in project.get("runtime_classpath") or []),
            fail_fast=bool(effective["engine"].get("fail_fast", True)),
            fallback_location=str(effective["migration"]["fallback_location"]),
            container_images={
                k: str(v) for k, v in (effective["containers"].get("images") or {}).items() if v
            },
            raw=effective,
        )


def _under(root: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else root / path
