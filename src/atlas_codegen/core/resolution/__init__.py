# src/atlas_codegen/core/resolution/__init__.py
"""
Resolução da configuração efetiva.

    - precedence  → ConfigurationResolver (driver, schema, settings de migração)
    - locations   → LocationResolver (tokens classpath/filesystem → paths)
    - fingerprint → FingerprintBuilder (serialização determinística)
"""

from .fingerprint import FingerprintBuilder, compute_fingerprint, fingerprint_container_image
from .locations import LocationResolver
from .precedence import ConfigurationResolver, resolve_schema_values

__all__ = [
    "ConfigurationResolver",
    "FingerprintBuilder",
    "LocationResolver",
    "compute_fingerprint",
    "fingerprint_container_image",
    "resolve_schema_values",
]
