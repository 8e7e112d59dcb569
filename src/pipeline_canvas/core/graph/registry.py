# src/pipeline_canvas/core/graph/registry.py
"""
Validação estrutural do grafo de pipeline.

Este módulo garante o contrato básico de forma antes de qualquer
classificação, resolução de posse ou compilação:

    - cada vértice possui um id string não vazio e único
    - cada aresta possui um id string não vazio e único
    - origem e destino de toda aresta existem entre os vértices

Decisões arquiteturais:
    - Violações indicam bug no colaborador upstream e falham cedo
    - Nenhum grafo parcial é produzido: a primeira violação interrompe
    - A ordem de declaração dos vértices é preservada no índice

Limites explícitos:
    - Não classifica vértices
    - Não detecta ciclos (ciclos são legítimos; o resolver os tolera)
    - Não valida tipos declarados (tipos desconhecidos viram `other`)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from pipeline_canvas.core import errors
from pipeline_canvas.core.exceptions import (
    DuplicateEdgeId,
    DuplicateVertexId,
    MalformedGraph,
    UnknownVertexReference,
)


def _require_id(value: Any, element: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MalformedGraph.from_payload(
            errors.graph_malformed(reason="id must be a non-empty string", element=element)
        )
    return value


def index_vertices(vertices: Iterable[Any]) -> Dict[str, Any]:
    """
    Indexa vértices por id, preservando a ordem de declaração.

    Raises:
        MalformedGraph: Se algum id for vazio ou não-string.
        DuplicateVertexId: Se dois vértices compartilharem o mesmo id.
    """
    by_id: Dict[str, Any] = {}
    for position, vertex in enumerate(vertices):
        vid = _require_id(getattr(vertex, "id", None), f"vertices[{position}]")
        if vid in by_id:
            raise DuplicateVertexId.from_payload(errors.graph_duplicate_vertex(vertex_id=vid))
        by_id[vid] = vertex
    return by_id


def validate_shape(vertices: Iterable[Any], edges: Iterable[Any]) -> Dict[str, Any]:
    """
    Valida o contrato de forma de um snapshot `{vertices, edges}`.

    Args:
        vertices: Vértices do grafo (objetos com atributo `id`).
        edges: Arestas do grafo (objetos com `id`, `source_id`, `target_id`).

    Returns:
        Dict[str, Any]: Índice id → vértice, na ordem de declaração.

    Raises:
        MalformedGraph: Id vazio ou não-string em vértice ou aresta.
        DuplicateVertexId: Id de vértice repetido.
        DuplicateEdgeId: Id de aresta repetido.
        UnknownVertexReference: Aresta cuja origem ou destino não existe.
    """
    by_id = index_vertices(vertices)

    seen_edges = set()
    for position, edge in enumerate(edges):
        where = f"edges[{position}]"
        eid = _require_id(getattr(edge, "id", None), where)
        if eid in seen_edges:
            raise DuplicateEdgeId.from_payload(errors.graph_duplicate_edge(edge_id=eid))
        seen_edges.add(eid)

        source = _require_id(getattr(edge, "source_id", None), f"{where}.source")
        target = _require_id(getattr(edge, "target_id", None), f"{where}.target")

        missing: List[str] = [vid for vid in dict.fromkeys((source, target)) if vid not in by_id]
        if missing:
            raise UnknownVertexReference.from_payload(
                errors.graph_unknown_vertex(edge_id=eid, missing_vertex_ids=missing)
            )

    return by_id
