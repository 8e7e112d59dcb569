"""
Layout do canvas: posições de grupos e estágios e arestas sintéticas.

    - layout → coordenadas e arestas `child-flow` dentro de cada grupo
    - flow   → arestas `env-flow` entre ambientes consecutivos
"""

from .flow import synthesize_flow_edges
from .layout import LayoutResult, compute_layout

__all__ = ["LayoutResult", "compute_layout", "synthesize_flow_edges"]
