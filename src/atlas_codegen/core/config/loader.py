# src/atlas_codegen/core/config/loader.py
"""
Loader dos settings de run do Atlas Codegen.

Camadas, da menor para a maior prioridade:

    BUILTIN_DEFAULTS (settings.py) < defaults (obrigatório) < local (opcional)

Este módulo carrega as duas camadas em arquivo e devolve o merge delas;
os defaults embutidos são aplicados por `Settings.from_config`.

Validação por documento, antes do merge:
    - raiz deve ser um mapa
    - seções de topo devem ser conhecidas (`project`, `engine`,
      `migration`, `containers`)
    - cada seção deve ser um mapa ou vazia (vazia herda)

Limites explícitos:
    - Não valida chaves dentro das seções
    - Não interpreta declarações de database/schema/target
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigSectionError,
    UnknownConfigSectionError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge
from .settings import BUILTIN_DEFAULTS


_READERS: Dict[str, Callable[[TextIO], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def read_settings_file(path: Path) -> Dict[str, Any]:
    """
    Lê e valida um arquivo de settings. Arquivo vazio → `{}`.

    Raises:
        UnsupportedConfigFormatError: extensão fora de `.yaml`/`.yml`/`.json`.
        InvalidConfigRootTypeError: raiz não é um mapa.
        UnknownConfigSectionError: seção de topo desconhecida.
        InvalidConfigSectionError: seção conhecida que não é um mapa.
    """
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: '{path.suffix}' ({path})", source=str(path)
        )

    with path.open("r", encoding="utf-8") as f:
        data = reader(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__} ({path})",
            source=str(path),
        )

    _check_sections(data, path)
    return data


def _check_sections(data: Dict[str, Any], path: Path) -> None:
    unknown = sorted(str(k) for k in data if k not in BUILTIN_DEFAULTS)
    if unknown:
        raise UnknownConfigSectionError(
            f"Seções desconhecidas em {path}: {', '.join(unknown)} "
            f"(válidas: {', '.join(BUILTIN_DEFAULTS)})",
            source=str(path),
            key=unknown[0],
        )
    for section, value in data.items():
        if value is not None and not isinstance(value, dict):
            raise InvalidConfigSectionError(
                f"Seção '{section}' em {path} deve ser um mapa, recebido: {type(value).__name__}",
                source=str(path),
                key=str(section),
            )


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega os settings de run (defaults + local).

    O arquivo de defaults é obrigatório; o local é ignorado quando ausente
    e, quando presente, tem prioridade.

    Raises:
        DefaultsNotFoundError: arquivo de defaults inexistente.
        ConfigError: qualquer falha de leitura/validação/merge.
    """
    defaults_file = Path(defaults_path)
    if not defaults_file.exists():
        raise DefaultsNotFoundError(
            f"Arquivo de defaults não encontrado: {defaults_file}", source=str(defaults_file)
        )
    config = read_settings_file(defaults_file)

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            config = deep_merge(config, read_settings_file(local_file))

    return config
