# src/atlas_codegen/core/__init__.py
"""
Core do Atlas Codegen.

Componentes principais:
    - config     → settings de run, deep-merge e hashing
    - model      → declarações e tipos imutáveis derivados
    - resolution → ConfigurationResolver, LocationResolver, FingerprintBuilder
    - bindings   → DeclarationRegistry e BindingReconciler
    - execution  → WorkUnitRunner e Executor sobre colaboradores externos

Princípios fundamentais:
    - Nenhuma decisão silenciosa: precedência e conflitos são explícitos
    - Um RunContext por run; não existe logger global
    - Nenhuma configuração parcialmente resolvida chega à execução
"""
