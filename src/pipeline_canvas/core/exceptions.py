"""
Pipeline Canvas: Canonical Exceptions (v1)

Exceções tipadas levantadas quando a entrada viola o contrato básico de
forma do grafo. Indicam bug no colaborador upstream (canvas, persistência),
nunca um estado legítimo de domínio.

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Cada exceção se converte no payload canônico via `to_payload()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import errors


@dataclass(frozen=True)
class CanvasException(Exception):
    """Base class para exceções internas do compilador."""

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_payload(self) -> errors.CompilerErrorPayload:
        return errors.CompilerErrorPayload(
            type=self.error_type,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )

    @property
    def error_type(self) -> str:
        return errors.COMPILER_UNEXPECTED_ERROR

    @classmethod
    def from_payload(cls, payload: errors.CompilerErrorPayload) -> "CanvasException":
        return cls(message=payload.message, details=dict(payload.details), hint=payload.hint)


# ---------------------------------------------------------------------------
# Forma do grafo
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnknownVertexReference(CanvasException):
    """Aresta cuja origem ou destino não existe entre os vértices."""

    @property
    def error_type(self) -> str:
        return errors.GRAPH_UNKNOWN_VERTEX


@dataclass(frozen=True)
class DuplicateVertexId(CanvasException):
    """Dois vértices com o mesmo id."""

    @property
    def error_type(self) -> str:
        return errors.GRAPH_DUPLICATE_VERTEX


@dataclass(frozen=True)
class DuplicateEdgeId(CanvasException):
    """Duas arestas com o mesmo id."""

    @property
    def error_type(self) -> str:
        return errors.GRAPH_DUPLICATE_EDGE


@dataclass(frozen=True)
class MalformedGraph(CanvasException):
    """Id vazio ou não-string, ou nó do canvas que não é um mapa."""

    @property
    def error_type(self) -> str:
        return errors.GRAPH_MALFORMED


# ---------------------------------------------------------------------------
# Configuração de estágios
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvalidStageConfig(CanvasException):
    """Entrada de configuração de estágios fora dos formatos aceitos."""

    @property
    def error_type(self) -> str:
        return errors.STAGE_CONFIG_INVALID


# ---------------------------------------------------------------------------
# Descritor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DescriptorParseError(CanvasException):
    """Descritor serializado que viola o formato esperado pelo executor."""

    @property
    def error_type(self) -> str:
        return errors.DESCRIPTOR_INVALID

    @property
    def field(self) -> Optional[str]:
        return self.details.get("field")
