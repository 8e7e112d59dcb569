# tests/core/layout/test_flow_edges.py
"""
Testes das arestas de fluxo entre ambientes.

Invariantes:
    - uma aresta por par consecutivo, id `env-flow-{a}-{b}`
    - ids existentes não são reemitidos (idempotência)
    - menos de dois ambientes → nenhuma aresta
"""

from pipeline_canvas.core.graph.ordering import order_deployment
from pipeline_canvas.core.graph.ownership import resolve_ownership
from pipeline_canvas.core.graph.types import PipelineGraph
from pipeline_canvas.core.layout.flow import synthesize_flow_edges


def _groups(graph, settings):
    return order_deployment(resolve_ownership(graph), settings).groups


def test_three_environments_yield_two_edges_then_none(make_vertex, compiler_settings):
    graph = PipelineGraph(
        vertices=(
            make_vertex("prod", "env_prod"),
            make_vertex("dev", "env_dev"),
            make_vertex("qa", "env_qa"),
        )
    )
    groups = _groups(graph, compiler_settings)

    first = synthesize_flow_edges(groups, frozenset())

    assert [(e.id, e.source_id, e.target_id) for e in first] == [
        ("env-flow-dev-qa", "dev", "qa"),
        ("env-flow-qa-prod", "qa", "prod"),
    ]

    second = synthesize_flow_edges(groups, {e.id for e in first})
    assert second == []


def test_partial_existing_ids_only_fill_the_gap(make_vertex, compiler_settings):
    graph = PipelineGraph(
        vertices=(make_vertex("dev", "env_dev"), make_vertex("qa", "env_qa"), make_vertex("prod", "env_prod"))
    )

    edges = synthesize_flow_edges(_groups(graph, compiler_settings), {"env-flow-dev-qa"})

    assert [e.id for e in edges] == ["env-flow-qa-prod"]


def test_fewer_than_two_environments(make_vertex, compiler_settings):
    single = PipelineGraph(vertices=(make_vertex("dev", "env_dev"), make_vertex("a", "code_github")))
    assert synthesize_flow_edges(_groups(single, compiler_settings)) == []
    assert synthesize_flow_edges(()) == []


def test_general_bucket_is_not_linked(make_vertex, compiler_settings):
    graph = PipelineGraph(
        vertices=(
            make_vertex("dev", "env_dev"),
            make_vertex("qa", "env_qa"),
            make_vertex("loose", "plan_jira"),
        )
    )

    edges = synthesize_flow_edges(_groups(graph, compiler_settings))

    assert [e.id for e in edges] == ["env-flow-dev-qa"]
