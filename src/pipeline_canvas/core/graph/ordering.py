# src/pipeline_canvas/core/graph/ordering.py
"""
Ordenação determinística de ambientes e estágios.

Este módulo transforma o resultado da resolução de posse em uma
estrutura ordenada, pronta para layout e compilação:

    - EnvironmentGroups são ordenados pela lista de prioridade de
      implantação (`env_dev → env_qa → env_staging → env_uat → env_prod`)
    - estágios dentro de cada grupo são ordenados pela lista de
      prioridade de categorias (`plan → code → build → test → approval →
      deploy → release`)
    - o bucket "General", quando não vazio, precede todos os grupos

Decisões arquiteturais:
    - Ordenação estável: empates preservam a ordem de entrada
    - Itens fora da lista de prioridade ficam ao final (estável)
    - As listas de prioridade vêm de `CompilerSettings`

Invariantes:
    - A mesma entrada produz sempre a mesma ordem
    - Nenhum estágio é criado ou descartado

Limites explícitos:
    - Não resolve posse
    - Não calcula coordenadas
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from pipeline_canvas.core.config.settings import CompilerSettings, default_settings

from .ownership import Ownership
from .types import Vertex


GENERAL_GROUP_ID = "__general"
GENERAL_GROUP_LABEL = "General"

T = TypeVar("T")


@dataclass(frozen=True)
class StageGroup:
    """
    Grupo ordenado de estágios.

    `group` é o vértice do EnvironmentGroup, ou None para o bucket
    sintético "General".
    """

    id: str
    label: str
    stages: Tuple[Vertex, ...]
    group: Optional[Vertex] = None

    @property
    def is_general(self) -> bool:
        return self.group is None


@dataclass(frozen=True)
class OrderedPipeline:
    groups: Tuple[StageGroup, ...] = ()

    @property
    def environment_groups(self) -> Tuple[StageGroup, ...]:
        return tuple(g for g in self.groups if not g.is_general)

    @property
    def general(self) -> Optional[StageGroup]:
        for g in self.groups:
            if g.is_general:
                return g
        return None

    def stage_pairs(self) -> List[Tuple[str, str]]:
        """Pares `(group_id, stage_id)` na ordem de execução."""
        return [(g.id, s.id) for g in self.groups for s in g.stages]


def sort_by_priority(items: Iterable[T], key: Callable[[T], str], priority: Sequence[str]) -> List[T]:
    """Ordenação estável por posição em `priority`; desconhecidos ao final."""
    rank = {value: i for i, value in enumerate(priority)}
    unranked = len(priority)
    return sorted(items, key=lambda item: rank.get(key(item), unranked))


def order_deployment(ownership: Ownership, settings: Optional[CompilerSettings] = None) -> OrderedPipeline:
    """
    Ordena grupos e estágios resolvidos.

    Args:
        ownership: Resultado de `resolve_ownership`.
        settings: Configuração com as listas de prioridade; usa os
            defaults empacotados quando omitida.

    Returns:
        OrderedPipeline: General (se não vazio) seguido dos ambientes.
    """
    settings = settings or default_settings()

    def order_stages(stages: Iterable[Vertex]) -> Tuple[Vertex, ...]:
        return tuple(sort_by_priority(stages, lambda s: s.category.value, settings.category_order))

    groups: List[StageGroup] = []
    if ownership.general:
        groups.append(
            StageGroup(
                id=GENERAL_GROUP_ID,
                label=GENERAL_GROUP_LABEL,
                stages=order_stages(ownership.general),
            )
        )

    for env in sort_by_priority(ownership.environments, lambda v: v.declared_type, settings.deployment_order):
        groups.append(
            StageGroup(
                id=env.id,
                label=env.label,
                stages=order_stages(ownership.groups.get(env.id, [])),
                group=env,
            )
        )

    return OrderedPipeline(groups=tuple(groups))
