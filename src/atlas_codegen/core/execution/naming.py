# src/atlas_codegen/core/execution/naming.py
"""Nomes canônicos das unidades de trabalho derivados do nome do target."""

from __future__ import annotations

from atlas_codegen.core.exceptions import InvalidTargetNameError


MAIN_TARGET = "main"


def capitalize_first_letter(value: str) -> str:
    """Primeira letra maiúscula, restante minúsculo (`myTarget` → `Mytarget`)."""
    if not value:
        return value
    return value[0].upper() + value[1:].lower()


def _checked(target_name: str) -> str:
    if target_name is None or not target_name.strip():
        raise InvalidTargetNameError(
            message="Target name must not be blank",
            details={"target": target_name},
            hint="Registre o target de geração com um nome não vazio.",
        )
    return target_name.strip()


def generate_unit_name(target_name: str) -> str:
    return f"generate{capitalize_first_letter(_checked(target_name))}DatabaseClasses"


def migrate_unit_name(target_name: str) -> str:
    # o target `main` não contribui parte de nome
    name = _checked(target_name)
    part = "" if name.lower() == MAIN_TARGET else capitalize_first_letter(name)
    return f"migrate{part}DatabaseSchema"
