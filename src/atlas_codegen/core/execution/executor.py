# src/atlas_codegen/core/execution/executor.py
"""
Executor das unidades de trabalho do Atlas Codegen.

Regras:
- Unidades são executadas na ordem de registro.
- Unidades desabilitadas (binding órfão) são puladas com status SKIPPED.
- Erros de resolução ao montar o EffectiveContext abortam a run inteira
  (nenhuma configuração parcial chega à execução).
- Falhas de execução são convertidas em CodegenErrorPayload (serializável,
  sem stack trace cru) e registradas no resultado da unidade.
- `fail_fast` interrompe após a primeira unidade com falha.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

from atlas_codegen.core.errors import payload_for
from atlas_codegen.core.model.context import EffectiveContext, WorkUnit
from atlas_codegen.core.run_context import RunContext

from .work_unit import WorkUnitRunner


SCOPE = "execution"


class UnitStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class UnitResult:
    unit: str
    status: UnitStatus
    summary: str
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma execução, indexado pelo nome da unidade."""

    units: Dict[str, UnitResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(r.status != UnitStatus.FAILED for r in self.units.values())


class Executor:
    def __init__(
        self,
        *,
        ctx: RunContext,
        units: Sequence[WorkUnit],
        runner: WorkUnitRunner,
        context_for: Callable[[WorkUnit], EffectiveContext],
        fail_fast: Optional[bool] = None,
    ):
        self.ctx = ctx
        self.units = list(units)
        self.runner = runner
        self.context_for = context_for
        self.fail_fast = fail_fast

    def _fail_fast(self) -> bool:
        if self.fail_fast is not None:
            return bool(self.fail_fast)
        engine_cfg = (self.ctx.config or {}).get("engine", {}) or {}
        return bool(engine_cfg.get("fail_fast", True))

    def run(self) -> RunResult:
        results: Dict[str, UnitResult] = {}
        for unit in self.units:
            if not unit.enabled:
                results[unit.name] = UnitResult(
                    unit=unit.name,
                    status=UnitStatus.SKIPPED,
                    summary="disabled: binding withdrawn",
                )
                continue

            context = self.context_for(unit)

            try:
                self.runner.run(unit, context)
            except Exception as e:
                error = payload_for(e, unit=unit.name)
                self.ctx.log(
                    scope=SCOPE,
                    level="ERROR",
                    message=error.message,
                    unit=unit.name,
                    error=error.to_dict(),
                )
                results[unit.name] = UnitResult(
                    unit=unit.name,
                    status=UnitStatus.FAILED,
                    summary=error.message,
                    payload={"error": error.to_dict()},
                )
                if self._fail_fast():
                    break
                continue

            results[unit.name] = UnitResult(
                unit=unit.name,
                status=UnitStatus.SUCCESS,
                summary="completed",
                payload={"schema": context.schema_name, "driver": context.driver_class_name},
            )

        return RunResult(units=results)
