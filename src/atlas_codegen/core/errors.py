"""
Atlas Codegen — Catálogo de erros e payload serializável (v1)

Toda falha que chega ao resultado de uma run é representada por um
`CodegenErrorPayload`: um código estável, uma mensagem que nomeia
database/schema/target e os valores conflitantes, dados estruturados e
uma dica de onde corrigir a declaração.

Fluxo:
    exceção tipada (exceptions.py) ──to_payload()──┐
    exceção de colaborador externo ─payload_for()──┴→ CodegenErrorPayload

Regras:
- Nenhum stack trace cru entra em um payload
- Códigos são constantes deste módulo; exceções e warnings referenciam
  essas constantes, nunca literais próprios
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CodegenErrorPayload:
    """
    Payload de erro de uma unidade de trabalho ou da run.

    Campos:
    - type: código estável (ver catálogo abaixo)
    - message: mensagem curta e acionável
    - details: database, schema, target, valores conflitantes, unidade...
    - hint: onde corrigir a declaração
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo
# ---------------------------------------------------------------------------

# Resolução de configuração
MISSING_DRIVER = "MISSING_DRIVER"
MISSING_SCHEMA = "MISSING_SCHEMA"
SCHEMA_MISMATCH = "SCHEMA_MISMATCH"

# Declarações e bindings
MISSING_DECLARATIONS = "MISSING_DECLARATIONS"
INVALID_TARGET_NAME = "INVALID_TARGET_NAME"
DUPLICATE_TARGET_CLAIM = "DUPLICATE_TARGET_CLAIM"
EMPTY_CLAIM_SET = "EMPTY_CLAIM_SET"
UNRESOLVED_TARGET = "UNRESOLVED_TARGET"

# Provisionamento / execução
UNSUPPORTED_DRIVER = "UNSUPPORTED_DRIVER"
DRIVER_UNAVAILABLE = "DRIVER_UNAVAILABLE"
DUPLICATE_WORK_UNIT = "DUPLICATE_WORK_UNIT"
WORK_UNIT_EXECUTION_ERROR = "WORK_UNIT_EXECUTION_ERROR"

# Warnings recuperáveis (nunca viram payload de falha)
ARCHIVE_INSPECTION = "ARCHIVE_INSPECTION"
UNUSED_TARGET = "UNUSED_TARGET"
CONTAINER_IMAGE = "CONTAINER_IMAGE"
MIGRATION_PREFIX = "MIGRATION_PREFIX"


def work_unit_execution_error(
    *,
    unit: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
) -> CodegenErrorPayload:
    """Payload para uma exceção não tipada escapando de uma unidade de trabalho."""
    return CodegenErrorPayload(
        type=WORK_UNIT_EXECUTION_ERROR,
        message=f"Unexpected failure while executing work unit '{unit}': {exc_type}: {exc_message}",
        details={
            "unit": unit,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint="Verifique a saída da ferramenta de migração/geração. Nenhum fallback é aplicado.",
    )


def payload_for(exc: Exception, *, unit: Optional[str] = None) -> CodegenErrorPayload:
    """
    Converte qualquer exceção no payload canônico.

    Exceções do Atlas Codegen usam o próprio `to_payload()`; as demais
    viram WORK_UNIT_EXECUTION_ERROR com tipo e mensagem da exceção.
    """
    to_payload = getattr(exc, "to_payload", None)
    if callable(to_payload):
        payload = to_payload()
        if unit is not None and "unit" not in payload.details:
            payload = CodegenErrorPayload(
                type=payload.type,
                message=payload.message,
                details={**payload.details, "unit": unit},
                hint=payload.hint,
            )
        return payload
    return work_unit_execution_error(
        unit=unit,
        exc_type=exc.__class__.__name__,
        exc_message=str(exc),
    )
