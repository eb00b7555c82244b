# src/atlas_codegen/__init__.py
"""
Atlas Codegen — coordenação de geração de código a partir de migrações.

Este pacote raiz define o namespace público do Atlas Codegen: um core que
resolve uma configuração de build correta, mínima e reprodutível a partir
de fontes parcialmente sobrepostas, expande as locations de scripts de
migração, calcula um fingerprint determinístico para cache incremental e
mantém o grafo de unidades de trabalho (schema → target de geração).

Arquitetura em alto nível:
    - core.config     → settings de run (merge, hashing, chave de cache)
    - core.model      → declarações, settings de migração, tipos derivados
    - core.resolution → precedência, locations e fingerprint
    - core.bindings   → registry de declarações e reconciliação de bindings
    - core.execution  → colaboradores externos, runner e executor
    - core.session    → fachada de uma run

Limites explícitos:
    - Não sobe databases, não executa migrações e não gera código:
      esses efeitos pertencem aos colaboradores externos
    - Não faz parsing de SQL nem valida conteúdo de scripts
"""

from .core.session import CodegenSession

__all__ = ["CodegenSession"]
