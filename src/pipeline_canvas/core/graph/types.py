# src/pipeline_canvas/core/graph/types.py
"""
Tipos canônicos do grafo de pipeline.

Este módulo define as estruturas imutáveis trocadas entre os
componentes do compilador:

    - Position / Size → geometria 2-D no canvas
    - Vertex          → nó do grafo (ambiente, estágio ou anotação)
    - Edge            → aresta dirigida, sem peso
    - PipelineGraph   → snapshot validado `{vertices, edges}`

Princípios fundamentais:
    - `category` e `tool` de um Vertex são sempre derivados do tipo
      declarado; nunca são aceitos como entrada
    - Um PipelineGraph só existe se respeitar o contrato de forma
      (ver `registry.validate_shape`)
    - Nenhuma estrutura é mutada in-place: alterações produzem novas
      instâncias via `dataclasses.replace`

Limites explícitos:
    - Não resolve posse nem ordem
    - Não contém lógica de layout
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pipeline_canvas.core import errors
from pipeline_canvas.core.exceptions import MalformedGraph

from .classifier import Category, classify, display_label
from .registry import validate_shape


@dataclass(frozen=True)
class Position:
    x: float = 0
    y: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class Vertex:
    """
    Vértice do grafo de pipeline.

    Campos de entrada:
        - id: identificador único no grafo
        - declared_type: tipo declarado no canvas (ex.: `build_jenkins`)
        - label: rótulo de exibição; vazio → rótulo do catálogo ou o tipo
        - parent_group_id: grupo de ambiente explícito, quando conhecido
        - position: posição no canvas (relativa ao grupo, se houver pai)
        - status: status de execução exibido no canvas
        - tool_hint: tag explícita de ferramenta herdada de dados antigos
        - size: dimensões do grupo, definidas apenas pelo Layout Engine

    Campos derivados (não aceitos no construtor):
        - category: categoria resultante de `classify(declared_type)`
        - tool: ferramenta resultante de `classify(declared_type)`
    """

    id: str
    declared_type: str
    label: str = ""
    parent_group_id: Optional[str] = None
    position: Position = field(default_factory=Position)
    status: Optional[str] = None
    tool_hint: Optional[str] = None
    size: Optional[Size] = None
    category: Category = field(init=False)
    tool: str = field(init=False)

    def __post_init__(self) -> None:
        classification = classify(self.declared_type)
        object.__setattr__(self, "category", classification.category)
        object.__setattr__(self, "tool", classification.tool)
        if not self.label:
            declared = self.declared_type if isinstance(self.declared_type, str) else ""
            object.__setattr__(self, "label", display_label(declared))

    def to_canvas_node(self) -> Dict[str, Any]:
        """Representação no formato de nó armazenado pelo canvas."""
        node: Dict[str, Any] = {
            "id": self.id,
            "type": "environmentGroup" if self.category == Category.ENVIRONMENT else "pipeline",
            "position": self.position.to_dict(),
            "data": {
                "label": self.label,
                "nodeType": self.declared_type,
                "category": self.category.value,
            },
        }
        if self.parent_group_id:
            node["parentId"] = self.parent_group_id
        if self.status is not None:
            node["data"]["status"] = self.status
        if self.tool_hint:
            node["data"]["tool"] = self.tool_hint
        if self.size is not None:
            node["style"] = self.size.to_dict()
        return node


@dataclass(frozen=True)
class Edge:
    id: str
    source_id: str
    target_id: str

    def to_canvas_edge(self) -> Dict[str, str]:
        return {"id": self.id, "source": self.source_id, "target": self.target_id}


def _node_declared_type(node: Mapping[str, Any]) -> str:
    data = node.get("data") or {}
    for candidate in (data.get("nodeType"), node.get("type"), data.get("type")):
        if isinstance(candidate, str) and candidate:
            return candidate
    return ""


def _node_position(node: Mapping[str, Any]) -> Position:
    raw = node.get("position") or {}
    if not isinstance(raw, Mapping):
        return Position()
    return Position(x=raw.get("x", 0) or 0, y=raw.get("y", 0) or 0)


def _node_size(node: Mapping[str, Any]) -> Optional[Size]:
    style = node.get("style")
    if not isinstance(style, Mapping):
        return None
    width, height = style.get("width"), style.get("height")
    if isinstance(width, (int, float)) and isinstance(height, (int, float)):
        return Size(width=width, height=height)
    return None


def _vertex_from_canvas(node: Any, position: int) -> Vertex:
    if not isinstance(node, Mapping):
        raise MalformedGraph.from_payload(
            errors.graph_malformed(reason="canvas node must be a mapping", element=f"nodes[{position}]")
        )
    data = node.get("data") or {}
    declared_type = _node_declared_type(node)
    return Vertex(
        id=node.get("id"),
        declared_type=declared_type,
        label=display_label(declared_type, fallback=data.get("label") or ""),
        parent_group_id=node.get("parentId") or node.get("parentNode") or None,
        position=_node_position(node),
        status=data.get("status"),
        tool_hint=data.get("tool") or None,
        size=_node_size(node),
    )


def _edge_from_canvas(edge: Any, position: int) -> Edge:
    if not isinstance(edge, Mapping):
        raise MalformedGraph.from_payload(
            errors.graph_malformed(reason="canvas edge must be a mapping", element=f"edges[{position}]")
        )
    return Edge(id=edge.get("id"), source_id=edge.get("source"), target_id=edge.get("target"))


@dataclass(frozen=True)
class PipelineGraph:
    """
    Snapshot validado de um grafo de pipeline.

    A validação de forma ocorre na construção: um PipelineGraph inválido
    nunca chega ao resolver, ao layout ou ao compilador.

    Raises (na construção):
        MalformedGraph, DuplicateVertexId, DuplicateEdgeId,
        UnknownVertexReference
    """

    vertices: Tuple[Vertex, ...] = ()
    edges: Tuple[Edge, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", tuple(self.vertices))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "_by_id", validate_shape(self.vertices, self.edges))

    def get(self, vertex_id: str) -> Optional[Vertex]:
        return self._by_id.get(vertex_id)  # type: ignore[attr-defined]

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self._by_id  # type: ignore[attr-defined]

    @property
    def edge_ids(self) -> frozenset:
        return frozenset(e.id for e in self.edges)

    def with_vertices(self, vertices: Iterable[Vertex]) -> "PipelineGraph":
        return PipelineGraph(vertices=tuple(vertices), edges=self.edges)

    @classmethod
    def from_canvas(cls, nodes: Iterable[Any], edges: Iterable[Any] = ()) -> "PipelineGraph":
        """
        Constrói o grafo a partir dos nós/arestas armazenados pelo canvas.

        O tipo declarado de um nó é resolvido como `data.nodeType`, depois
        `type`, depois `data.type`; o pai, como `parentId` (ou o legado
        `parentNode`); o rótulo, como o rótulo do catálogo para o tipo,
        depois `data.label`, depois o próprio tipo.
        """
        vertices = [_vertex_from_canvas(node, i) for i, node in enumerate(nodes or [])]
        graph_edges = [_edge_from_canvas(edge, i) for i, edge in enumerate(edges or [])]
        return cls(vertices=tuple(vertices), edges=tuple(graph_edges))

    def to_canvas(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "nodes": [v.to_canvas_node() for v in self.vertices],
            "edges": [e.to_canvas_edge() for e in self.edges],
        }
