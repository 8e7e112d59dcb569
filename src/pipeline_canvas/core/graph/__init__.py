"""
Camada de grafo do Pipeline Canvas.

Componentes:
    - classifier → categoria e ferramenta derivadas do tipo declarado
    - registry   → contrato de forma (ids únicos, arestas válidas)
    - types      → Vertex, Edge, PipelineGraph
    - ownership  → a qual ambiente cada estágio pertence
    - ordering   → ordem de implantação e de categorias

Limites explícitos:
    - Não calcula layout
    - Não compila descritores
"""

from .classifier import Category, classify
from .ordering import GENERAL_GROUP_ID, OrderedPipeline, StageGroup, order_deployment
from .ownership import Ownership, resolve_ownership
from .types import Edge, PipelineGraph, Position, Size, Vertex

__all__ = [
    "Category",
    "classify",
    "Edge",
    "PipelineGraph",
    "Position",
    "Size",
    "Vertex",
    "Ownership",
    "resolve_ownership",
    "GENERAL_GROUP_ID",
    "OrderedPipeline",
    "StageGroup",
    "order_deployment",
]
