# src/pipeline_canvas/core/graph/ownership.py
"""
Resolução de posse: a qual EnvironmentGroup cada estágio pertence.

Estratégias, aplicadas em ordem de precedência:

    1. Ambiente único: se o grafo possui exatamente um EnvironmentGroup,
       todos os estágios pertencem a ele, independentemente de arestas
       ou pais declarados.
    2. Pai explícito: um estágio cujo `parent_group_id` referencia um
       EnvironmentGroup conhecido é atribuído diretamente.
    3. Caminhada reversa: somente quando nenhum vértice do grafo declara
       pai, cada estágio percorre as arestas no sentido inverso até o
       primeiro EnvironmentGroup encontrado.

Estágios sem dono resolvido vão para o bucket sintético "General".

Invariantes:
    - Todo estágio aparece exatamente uma vez (em um grupo ou em General)
    - Ciclos sempre terminam: cada caminhada é limitada pelo número de
      vértices via conjunto de visitados próprio
    - A ordem de entrada dos estágios é preservada dentro de cada bucket

Limites explícitos:
    - Não ordena grupos nem estágios (ver `ordering`)
    - Não levanta exceção para lacunas de domínio
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set

from .classifier import partition_vertices
from .types import PipelineGraph, Vertex


@dataclass(frozen=True)
class Ownership:
    """
    Resultado da resolução de posse.

    Campos:
        - environments: EnvironmentGroups na ordem de declaração
        - groups: id do ambiente → estágios atribuídos (ordem de entrada)
        - general: estágios sem dono resolvido
    """

    environments: List[Vertex] = field(default_factory=list)
    groups: Dict[str, List[Vertex]] = field(default_factory=dict)
    general: List[Vertex] = field(default_factory=list)

    def owner_of(self, stage_id: str) -> Optional[str]:
        for env_id, stages in self.groups.items():
            if any(s.id == stage_id for s in stages):
                return env_id
        return None


def _reverse_adjacency(graph: PipelineGraph) -> Dict[str, List[str]]:
    reverse: Dict[str, List[str]] = {}
    for edge in graph.edges:
        reverse.setdefault(edge.target_id, []).append(edge.source_id)
    return reverse


def find_owner_environment(
    stage_id: str,
    reverse: Mapping[str, List[str]],
    environment_ids: Set[str],
) -> Optional[str]:
    """
    Caminha a montante a partir de `stage_id` e retorna o primeiro ambiente.

    Percurso em profundidade com pilha explícita, visitando as origens
    de cada vértice na ordem de declaração das arestas. O conjunto de
    visitados é local à chamada.

    Returns:
        Optional[str]: id do EnvironmentGroup encontrado, ou None quando a
        caminhada se esgota (vértice desconectado ou ciclo já explorado).
    """
    visited: Set[str] = {stage_id}
    stack: List[str] = list(reversed(reverse.get(stage_id, [])))
    while stack:
        current = stack.pop()
        if current in environment_ids:
            return current
        if current in visited:
            continue
        visited.add(current)
        stack.extend(reversed(reverse.get(current, [])))
    return None


def resolve_ownership(graph: PipelineGraph) -> Ownership:
    """
    Atribui cada estágio do grafo a um EnvironmentGroup ou a "General".

    Args:
        graph: Snapshot validado do grafo.

    Returns:
        Ownership: Partição completa dos estágios.
    """
    environments, stages, _ = partition_vertices(graph.vertices)
    groups: Dict[str, List[Vertex]] = {env.id: [] for env in environments}
    general: List[Vertex] = []

    if len(environments) == 1:
        groups[environments[0].id].extend(stages)
        return Ownership(environments=environments, groups=groups, general=general)

    walk_enabled = not any(v.parent_group_id for v in graph.vertices)
    reverse = _reverse_adjacency(graph) if walk_enabled else {}
    environment_ids = set(groups)

    for stage in stages:
        owner: Optional[str] = None
        if stage.parent_group_id in groups:
            owner = stage.parent_group_id
        elif walk_enabled:
            owner = find_owner_environment(stage.id, reverse, environment_ids)

        if owner is None:
            general.append(stage)
        else:
            groups[owner].append(stage)

    return Ownership(environments=environments, groups=groups, general=general)
