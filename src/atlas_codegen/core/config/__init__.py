# src/atlas_codegen/core/config/__init__.py
"""
Camada de settings de run do Atlas Codegen.

Responsabilidades do pacote:
    - Carregamento de arquivos de settings (defaults + overrides locais)
    - Resolução dos settings finais via deep-merge com semântica de herança
    - Visão tipada dos settings (`Settings`)
    - Hash canônico dos settings e chave de cache por unidade de trabalho

Limites explícitos:
    - Não interpreta declarações de schemas ou targets
    - Não resolve driver, schema ou locations de migração
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigSectionError,
    UnknownConfigSectionError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_cache_key, compute_config_hash
from .loader import load_config, read_settings_file
from .merge import deep_merge
from .settings import BUILTIN_DEFAULTS, Settings

__all__ = [
    "BUILTIN_DEFAULTS",
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "InvalidConfigSectionError",
    "Settings",
    "UnknownConfigSectionError",
    "UnsupportedConfigFormatError",
    "compute_cache_key",
    "compute_config_hash",
    "deep_merge",
    "load_config",
    "read_settings_file",
]
