# src/atlas_codegen/core/bindings/__init__.py
"""
Bindings entre schemas lógicos e targets de geração.

    - registry   → tabelas de lookup das declarações
    - reconciler → máquina de estados claim → active → removed
"""

from .reconciler import BindingReconciler, BindingState
from .registry import DeclarationRegistry

__all__ = ["BindingReconciler", "BindingState", "DeclarationRegistry"]
