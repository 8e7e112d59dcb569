# src/pipeline_canvas/core/engine/context.py
"""
Contexto de uma passada de compilação.

O `CompileContext` é a estrutura canônica usada pelo `CanvasCompiler`
para registrar eventos estruturados e warnings não fatais de uma
compilação (resolução, layout ou geração do descritor).

Princípios fundamentais:
    - Isolamento por passada (cada compilação possui seu próprio contexto)
    - Eventos estruturados, nunca texto livre impresso
    - Ausência de estado global compartilhado

Invariantes:
    - Eventos sempre incluem `compile_id`, `phase`, `level` e `timestamp`
    - Warnings são agrupados por fase
    - A ordem dos eventos reflete a ordem de chamada

Limites explícitos:
    - Não executa fases de compilação
    - Não persiste eventos (ver `traceability.manifest`)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class CompileContext:
    """
    Contexto mutável de uma compilação.

    Campos:
        - compile_id: identificador único da passada
        - created_at: instante de criação (UTC)
        - meta: metadados livres do chamador (ex.: nome do pipeline)
        - events: log estruturado, em ordem de chamada
        - warnings: fase → mensagens de lacunas de domínio
    """

    compile_id: str
    created_at: datetime
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def new(cls, *, compile_id: Optional[str] = None, **meta: Any) -> "CompileContext":
        return cls(
            compile_id=compile_id or uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            meta=dict(meta),
        )

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, phase: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "compile_id": self.compile_id,
            "phase": phase,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, phase: str, message: str) -> None:
        if phase not in self.warnings:
            self.warnings[phase] = []
        self.warnings[phase].append(message)

    def events_for(self, phase: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["phase"] == phase]
