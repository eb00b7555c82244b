"""
Atlas Codegen — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do Atlas Codegen e os warnings
recuperáveis registrados no RunContext.

Objetivo:
- Permitir que resolvedores, reconciliador e executor levantem exceções
  semânticas tipadas (e não ValueError/RuntimeError genéricos)
- Garantir que toda falha visível ao usuário nomeie database, schema,
  target e valores conflitantes
- Facilitar o mapeamento determinístico para CodegenErrorPayload

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Warnings não são exceções: são registrados via `RunContext.warn(...)`
  e a execução continua.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import errors
from .errors import CodegenErrorPayload


@dataclass(eq=False)
class CodegenException(Exception):
    """Base class para exceções internas do Atlas Codegen.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - A mensagem deve permitir corrigir a declaração sem ler o código
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    code = "CODEGEN_ERROR"

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_payload(self) -> CodegenErrorPayload:
        return CodegenErrorPayload(
            type=self.code,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Resolução de configuração
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class MissingDriverError(CodegenException):
    """Nenhum driver resolvível em qualquer nível de precedência."""

    code = errors.MISSING_DRIVER


@dataclass(eq=False)
class MissingSchemaError(CodegenException):
    """Nenhum schema resolvível a partir das fontes declaradas."""

    code = errors.MISSING_SCHEMA


@dataclass(eq=False)
class SchemaMismatchError(CodegenException):
    """Schema da ferramenta de migração e do gerador divergem."""

    code = errors.SCHEMA_MISMATCH


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class DuplicateTargetClaimError(CodegenException):
    """Um target nomeado foi reivindicado por mais de um schema."""

    code = errors.DUPLICATE_TARGET_CLAIM


@dataclass(eq=False)
class EmptyClaimSetError(CodegenException):
    """Um schema não reivindica nenhum target no momento da validação."""

    code = errors.EMPTY_CLAIM_SET


@dataclass(eq=False)
class UnresolvedTargetError(CodegenException):
    """Um target reivindicado nunca apareceu do lado do gerador."""

    code = errors.UNRESOLVED_TARGET


@dataclass(eq=False)
class MissingDeclarationsError(CodegenException):
    """Validação executada sem nenhum database declarado."""

    code = errors.MISSING_DECLARATIONS


@dataclass(eq=False)
class InvalidTargetNameError(CodegenException):
    """Nome de target vazio ou em branco."""

    code = errors.INVALID_TARGET_NAME


# ---------------------------------------------------------------------------
# Execução / Provisionamento
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class UnsupportedDriverError(CodegenException):
    """Driver não reconhecido por nenhum colaborador de provisionamento."""

    code = errors.UNSUPPORTED_DRIVER


@dataclass(eq=False)
class DuplicateWorkUnitError(CodegenException):
    """Dois bindings distintos derivam o mesmo nome de unidade de trabalho."""

    code = errors.DUPLICATE_WORK_UNIT


@dataclass(eq=False)
class DriverUnavailableError(CodegenException):
    """Driver não carregável no escopo de classpath da unidade de trabalho."""

    code = errors.DRIVER_UNAVAILABLE


@dataclass(eq=False)
class WorkUnitExecutionError(CodegenException):
    """Falha de um colaborador externo (migração ou geração), encapsulada."""

    code = errors.WORK_UNIT_EXECUTION_ERROR


# ---------------------------------------------------------------------------
# Warnings recuperáveis
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CodegenWarning:
    """Condição recuperável: registrada no RunContext, a execução continua."""

    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    code = "CODEGEN_WARNING"
    scope = "codegen"


@dataclass(frozen=True)
class ArchiveInspectionWarning(CodegenWarning):
    """Arquivo .jar/.zip não pôde ser aberto; tratado como não contendo a location."""

    code = errors.ARCHIVE_INSPECTION
    scope = "locations"


@dataclass(frozen=True)
class UnusedTargetWarning(CodegenWarning):
    """Target registrado no gerador mas nunca reivindicado por um schema."""

    code = errors.UNUSED_TARGET
    scope = "bindings"


@dataclass(frozen=True)
class ContainerImageWarning(CodegenWarning):
    """Imagem de container não determinável durante o fingerprinting."""

    code = errors.CONTAINER_IMAGE
    scope = "fingerprint"


@dataclass(frozen=True)
class MigrationPrefixWarning(CodegenWarning):
    """Override de prefixo de migração versionada ignorado."""

    code = errors.MIGRATION_PREFIX
    scope = "migration"
