# src/atlas_codegen/core/config/errors.py
"""
Exceções da camada de settings de run do Atlas Codegen.

Falhas estruturais de arquivos de configuração (defaults + local) e do
merge entre eles. Erros de resolução de driver/schema/locations não vivem
aqui: ver `atlas_codegen.core.exceptions`.

Invariantes:
    - Todas herdam de `ConfigError`
    - Toda falha é fatal e identifica o arquivo ou a chave de origem
"""

from typing import Optional


class ConfigError(Exception):
    """
    Exceção base para erros de settings de run.

    Attributes:
        source: arquivo de origem, quando conhecido.
        key: caminho pontuado da chave envolvida, quando conhecido.
    """

    def __init__(self, message: str, *, source: Optional[str] = None, key: Optional[str] = None):
        super().__init__(message)
        self.source = source
        self.key = key


class DefaultsNotFoundError(ConfigError):
    """Arquivo de defaults ausente (o arquivo local é opcional)."""


class UnsupportedConfigFormatError(ConfigError):
    """Extensão não suportada. Suportados: `.yaml`, `.yml`, `.json`."""


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz do arquivo não é um mapa chave-valor (`dict`)."""


class UnknownConfigSectionError(ConfigError):
    """
    Seção de topo desconhecida.

    Seções válidas: `project`, `engine`, `migration`, `containers`.
    Uma seção com erro de digitação seria silenciosamente ignorada e o
    valor embutido usado no lugar.
    """


class InvalidConfigSectionError(ConfigError):
    """Seção conhecida cujo conteúdo não é um mapa (`engine: true`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"project": {"resource_roots": []}}
        - override: {"project": {"resource_roots": "src"}}

    Nenhum merge parcial é produzido.
    """
