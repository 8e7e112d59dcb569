"""
Pipeline Canvas: Canonical Error Structures (v1)

Este módulo define o payload canônico de erro do compilador. Erros de
forma do grafo (entradas malformadas vindas do colaborador upstream) são
artefatos de domínio: devem ser explícitos, serializáveis e acionáveis.

Lacunas de domínio (grafo sem ambientes, estágio sem dono, estágio sem
configuração, ferramenta não inferível) NÃO são erros e não aparecem
neste catálogo: são modeladas como saídas degradadas porém válidas.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompilerErrorPayload:
    """
    Payload canônico de erro do Pipeline Canvas.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao colaborador upstream
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Forma do grafo
GRAPH_UNKNOWN_VERTEX = "GRAPH_UNKNOWN_VERTEX"
GRAPH_DUPLICATE_VERTEX = "GRAPH_DUPLICATE_VERTEX"
GRAPH_DUPLICATE_EDGE = "GRAPH_DUPLICATE_EDGE"
GRAPH_MALFORMED = "GRAPH_MALFORMED"

# Configuração de estágios
STAGE_CONFIG_INVALID = "STAGE_CONFIG_INVALID"

# Descritor
DESCRIPTOR_INVALID = "DESCRIPTOR_INVALID"

# Compilação
COMPILER_UNEXPECTED_ERROR = "COMPILER_UNEXPECTED_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def graph_unknown_vertex(
    *,
    edge_id: str,
    missing_vertex_ids: List[str],
    hint: str = "Remova a aresta ou inclua os vértices referenciados no snapshot do grafo antes de compilar.",
) -> CompilerErrorPayload:
    return CompilerErrorPayload(
        type=GRAPH_UNKNOWN_VERTEX,
        message="Aresta referencia vértice inexistente",
        details={
            "edge_id": edge_id,
            "missing_vertex_ids": missing_vertex_ids,
        },
        hint=hint,
    )


def graph_duplicate_vertex(
    *,
    vertex_id: str,
    hint: str = "Garanta que cada vértice do canvas possua um id único.",
) -> CompilerErrorPayload:
    return CompilerErrorPayload(
        type=GRAPH_DUPLICATE_VERTEX,
        message="Id de vértice duplicado no grafo",
        details={"vertex_id": vertex_id},
        hint=hint,
    )


def graph_duplicate_edge(
    *,
    edge_id: str,
    hint: str = "Garanta que cada aresta do canvas possua um id único.",
) -> CompilerErrorPayload:
    return CompilerErrorPayload(
        type=GRAPH_DUPLICATE_EDGE,
        message="Id de aresta duplicado no grafo",
        details={"edge_id": edge_id},
        hint=hint,
    )


def graph_malformed(
    *,
    reason: str,
    element: Optional[str] = None,
    hint: str = "Revise o snapshot do grafo enviado ao compilador: ids devem ser strings não vazias.",
) -> CompilerErrorPayload:
    return CompilerErrorPayload(
        type=GRAPH_MALFORMED,
        message="Grafo malformado",
        details={"reason": reason, "element": element},
        hint=hint,
    )


def stage_config_invalid(
    *,
    key: Optional[str],
    reason: str,
    hint: str = "Use chaves StageKey com StageConfig, registros `{\"env__stage\": {...}}` ou o formato da tela de configuração.",
) -> CompilerErrorPayload:
    return CompilerErrorPayload(
        type=STAGE_CONFIG_INVALID,
        message="Configuração de estágios inválida",
        details={"key": key, "reason": reason},
        hint=hint,
    )


def descriptor_invalid(
    *,
    field: Optional[str],
    reason: str,
    hint: str = "Recompile o pipeline a partir do canvas; o descritor não deve ser editado manualmente.",
) -> CompilerErrorPayload:
    return CompilerErrorPayload(
        type=DESCRIPTOR_INVALID,
        message="Descritor de pipeline inválido",
        details={"field": field, "reason": reason},
        hint=hint,
    )


def compiler_unexpected_error(
    *,
    phase: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique os eventos da compilação para diagnosticar a falha. Nenhum fallback é aplicado.",
) -> CompilerErrorPayload:
    return CompilerErrorPayload(
        type=COMPILER_UNEXPECTED_ERROR,
        message="Falha inesperada durante a compilação do pipeline",
        details={
            "phase": phase,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )
