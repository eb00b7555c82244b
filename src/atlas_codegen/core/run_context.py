# src/atlas_codegen/core/run_context.py
"""
RunContext — Contexto canônico de uma run do Atlas Codegen.

Este módulo define o **RunContext**, o objeto explícito passado a resolvedores,
reconciliador e executor durante uma única passagem de configuração.

O RunContext é o **único meio permitido** de:
- registro de logs estruturados da run (não existe logger global)
- coleta de warnings recuperáveis (archive ilegível, target não utilizado, ...)
- acesso à configuração efetiva da run

Princípios fundamentais:
- Isolamento por execução (cada run possui seu próprio contexto)
- O contexto é encerrado ao fim da run (`close`) e não é reutilizado
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .exceptions import CodegenWarning


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class RunContext:
    """
    Contexto de execução de uma run do Atlas Codegen.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva (defaults + local deep-merge)
    - warnings: warnings recuperáveis agrupados por escopo
    - events: log estruturado de eventos
    """

    run_id: str
    created_at: str
    config: Dict[str, Any] = field(default_factory=dict)

    warnings: Dict[str, List[str]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    _closed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def new(cls, config: Optional[Dict[str, Any]] = None) -> "RunContext":
        return cls(
            run_id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc).isoformat(),
            config=dict(config or {}),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, scope: str, level: str, message: str, **extra: Any) -> None:
        self._ensure_open()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        event = {
            "run_id": self.run_id,
            "scope": scope,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, scope: str, message: str) -> None:
        self._ensure_open()
        if scope not in self.warnings:
            self.warnings[scope] = []
        self.warnings[scope].append(message)

    def warn(self, warning: CodegenWarning) -> None:
        """Registra um warning tipado como warning de escopo e evento WARNING."""
        self.add_warning(scope=warning.scope, message=warning.message)
        self.log(
            scope=warning.scope,
            level="WARNING",
            message=warning.message,
            code=warning.code,
            details=dict(warning.details),
        )

    def events_for(self, scope: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["scope"] == scope]

    # -----------------------------
    # Ciclo de vida
    # -----------------------------
    def close(self) -> None:
        """Encerra o contexto ao fim da run. Chamadas repetidas são no-op."""
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"RunContext {self.run_id} is closed")
