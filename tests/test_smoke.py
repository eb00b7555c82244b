# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do Atlas Codegen.

Garantem apenas que:
- o pacote pode ser importado sem falhas estruturais
- a fachada pública está exposta no pacote raiz

Limites explícitos:
    - Não testar lógica de resolução, bindings ou execução
    - Não acumular asserts funcionais
"""


def test_smoke():
    import atlas_codegen

    assert hasattr(atlas_codegen, "CodegenSession")
