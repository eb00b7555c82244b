# src/atlas_codegen/core/resolution/values.py
"""
Helpers de valor compartilhados pelos resolvedores.

Regra central: string em branco e coleção vazia contam como ausência
em qualquer nível de precedência.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from atlas_codegen.core.model.migration import is_absent


_QUOTES = ('"', "'")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def first_present(*candidates: Any) -> Any:
    """Primeiro candidato não ausente, ou None."""
    for value in candidates:
        if not is_absent(value):
            return value
    return None


def first_non_blank(values: Optional[Iterable[Optional[str]]]) -> Optional[str]:
    for value in values or ():
        if not is_absent(value):
            return value
    return None


def normalize_schema(value: Optional[str]) -> Optional[str]:
    """Trim, remove uma camada de aspas correspondentes, branco → None."""
    if value is None:
        return None
    text = value.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        text = text[1:-1].strip()
    return text or None


def trim_leading_separators(path: str) -> str:
    return path.lstrip("/\\")


def camel_to_dotted_lower(name: str) -> str:
    """`undoSqlMigrationPrefix` → `undo.sql.migration.prefix`."""
    return _CAMEL_BOUNDARY.sub(".", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)
