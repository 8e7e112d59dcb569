# src/pipeline_canvas/core/layout/layout.py
"""
Layout Engine: coordenadas de canvas para a estrutura ordenada.

Algoritmo:
    - EnvironmentGroups são posicionados da esquerda para a direita a
      partir de `(start_x, start_y)`, com passo `group_width + group_gutter`
    - estágios de cada grupo são empilhados verticalmente, em posições
      relativas ao grupo, e recebem `parent_group_id`
    - a altura do grupo depende do número de filhos (mínimo de uma linha)
    - entre filhos consecutivos de um mesmo grupo é sintetizada uma
      aresta visual `child-flow-{anterior}-{atual}`
    - órfãos (estágios em "General" sem pai explícito) ocupam uma grade
      após o último grupo, sem sobrepor seus limites

Invariantes:
    - Função pura: a mesma entrada produz as mesmas coordenadas
    - Vértices não posicionados (anotações, `other`) passam inalterados
    - Sem EnvironmentGroups, os vértices de entrada retornam inalterados

Limites explícitos:
    - Arestas `child-flow` são auxílio visual, não dependências
    - Não sintetiza arestas entre ambientes (ver `flow`)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from pipeline_canvas.core.config.settings import LayoutConstants
from pipeline_canvas.core.graph.ordering import OrderedPipeline
from pipeline_canvas.core.graph.types import Edge, PipelineGraph, Position, Size, Vertex


@dataclass(frozen=True)
class LayoutResult:
    vertices: Tuple[Vertex, ...]
    child_edges: Tuple[Edge, ...] = ()


def child_edge_id(previous_id: str, current_id: str) -> str:
    return f"child-flow-{previous_id}-{current_id}"


def compute_layout(
    graph: PipelineGraph,
    ordered: OrderedPipeline,
    constants: Optional[LayoutConstants] = None,
) -> LayoutResult:
    """
    Calcula posições de grupos, filhos e órfãos.

    Args:
        graph: Snapshot do grafo (define a ordem de saída dos vértices).
        ordered: Estrutura ordenada produzida por `order_deployment`.
        constants: Constantes geométricas; defaults quando omitidas.

    Returns:
        LayoutResult: Vértices posicionados (mesma ordem de `graph`) e as
        arestas visuais entre filhos consecutivos.
    """
    constants = constants or LayoutConstants()
    environment_groups = ordered.environment_groups
    if not environment_groups:
        return LayoutResult(vertices=tuple(graph.vertices), child_edges=())

    placed: Dict[str, Vertex] = {}
    child_edges: List[Edge] = []
    cursor_x = constants.start_x

    for group in environment_groups:
        placed[group.id] = replace(
            group.group,
            position=Position(x=cursor_x, y=constants.start_y),
            size=Size(width=constants.group_width, height=constants.group_height(len(group.stages))),
        )
        for index, stage in enumerate(group.stages):
            placed[stage.id] = replace(
                stage,
                parent_group_id=group.id,
                position=Position(
                    x=constants.child_left_padding,
                    y=constants.child_top_offset + index * constants.row_pitch,
                ),
            )
            if index > 0:
                previous = group.stages[index - 1]
                child_edges.append(
                    Edge(id=child_edge_id(previous.id, stage.id), source_id=previous.id, target_id=stage.id)
                )
        cursor_x += constants.group_pitch

    general = ordered.general
    orphans = [s for s in general.stages if not s.parent_group_id] if general else []
    for index, orphan in enumerate(orphans):
        placed[orphan.id] = replace(
            orphan,
            position=Position(
                x=cursor_x + index * constants.orphan_column_pitch,
                y=constants.start_y + (index % constants.orphan_rows) * constants.orphan_row_pitch,
            ),
        )

    vertices = tuple(placed.get(v.id, v) for v in graph.vertices)
    return LayoutResult(vertices=vertices, child_edges=tuple(child_edges))
