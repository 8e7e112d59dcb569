# src/pipeline_canvas/core/layout/flow.py
"""
Arestas de fluxo entre ambientes consecutivos.

Para a sequência ordenada de EnvironmentGroups, gera uma aresta
`env-flow-{a}-{b}` entre cada par consecutivo. Ids já presentes no
grafo são ignorados, o que torna a operação idempotente.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List

from pipeline_canvas.core.graph.ordering import StageGroup
from pipeline_canvas.core.graph.types import Edge


def flow_edge_id(source_id: str, target_id: str) -> str:
    return f"env-flow-{source_id}-{target_id}"


def synthesize_flow_edges(
    ordered_groups: Iterable[StageGroup],
    existing_edge_ids: AbstractSet[str] = frozenset(),
) -> List[Edge]:
    """
    Args:
        ordered_groups: Grupos na ordem de implantação. O bucket
            "General" é ignorado.
        existing_edge_ids: Ids de arestas já presentes no grafo.

    Returns:
        List[Edge]: Novas arestas; vazia com menos de dois ambientes.
    """
    environments = [g for g in ordered_groups if not g.is_general]
    edges: List[Edge] = []
    for current, following in zip(environments, environments[1:]):
        edge_id = flow_edge_id(current.id, following.id)
        if edge_id in existing_edge_ids:
            continue
        edges.append(Edge(id=edge_id, source_id=current.id, target_id=following.id))
    return edges
