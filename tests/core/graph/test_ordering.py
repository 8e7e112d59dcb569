# tests/core/graph/test_ordering.py
"""
Testes da ordenação determinística de ambientes e estágios.

Invariantes validados:
    - ambientes seguem a lista de prioridade de implantação
    - estágios seguem a lista de prioridade de categorias
    - itens fora das listas ficam ao final, preservando a ordem de entrada
    - o bucket "General" (não vazio) precede todos os grupos
"""

from dataclasses import replace

from pipeline_canvas.core.graph.ordering import GENERAL_GROUP_ID, order_deployment, sort_by_priority
from pipeline_canvas.core.graph.ownership import resolve_ownership
from pipeline_canvas.core.graph.types import PipelineGraph


def _stage_ids(group):
    return [s.id for s in group.stages]


def test_code_before_build_inside_group(dev_qa_graph, compiler_settings):
    ordered = order_deployment(resolve_ownership(dev_qa_graph), compiler_settings)

    assert [g.id for g in ordered.groups] == ["dev", "qa"]
    assert _stage_ids(ordered.groups[0]) == ["code", "build"]
    assert _stage_ids(ordered.groups[1]) == ["deploy"]
    assert ordered.general is None


def test_environments_follow_deployment_priority(make_vertex, compiler_settings):
    graph = PipelineGraph(
        vertices=(
            make_vertex("p", "env_prod"),
            make_vertex("x", "env_sandbox"),
            make_vertex("d", "env_dev"),
            make_vertex("y", "env_perf"),
            make_vertex("s", "env_staging"),
        )
    )

    ordered = order_deployment(resolve_ownership(graph), compiler_settings)

    assert [g.id for g in ordered.groups] == ["d", "s", "p", "x", "y"]


def test_general_precedes_groups(make_vertex, compiler_settings):
    graph = PipelineGraph(
        vertices=(
            make_vertex("dev", "env_dev"),
            make_vertex("qa", "env_qa"),
            make_vertex("b", "build_jenkins"),
            make_vertex("a", "plan_jira"),
        )
    )

    ordered = order_deployment(resolve_ownership(graph), compiler_settings)

    assert [g.id for g in ordered.groups] == [GENERAL_GROUP_ID, "dev", "qa"]
    assert ordered.groups[0].label == "General"
    assert ordered.groups[0].is_general
    assert _stage_ids(ordered.groups[0]) == ["a", "b"]
    assert [g.id for g in ordered.environment_groups] == ["dev", "qa"]


def test_full_category_order(make_vertex, compiler_settings):
    graph = PipelineGraph(
        vertices=(
            make_vertex("prod", "env_prod"),
            make_vertex("r", "release_argocd"),
            make_vertex("d", "deploy_helm"),
            make_vertex("ap", "approval_manual"),
            make_vertex("t", "test_jest"),
            make_vertex("b", "build_jenkins"),
            make_vertex("c", "code_gitlab"),
            make_vertex("p", "plan_trello"),
        )
    )

    ordered = order_deployment(resolve_ownership(graph), compiler_settings)

    assert _stage_ids(ordered.groups[0]) == ["p", "c", "b", "t", "ap", "d", "r"]


def test_priorities_come_from_settings(dev_qa_graph, compiler_settings):
    reversed_settings = replace(compiler_settings, deployment_order=("env_qa", "env_dev"))

    ordered = order_deployment(resolve_ownership(dev_qa_graph), reversed_settings)

    assert [g.id for g in ordered.groups] == ["qa", "dev"]


def test_unranked_environments_keep_input_order_after_ranked(make_vertex, compiler_settings):
    graph = PipelineGraph(
        vertices=(
            make_vertex("perf", "env_perf"),
            make_vertex("qa", "env_qa"),
            make_vertex("dr", "env_disaster_recovery"),
            make_vertex("t1", "test_jest", parent_group_id="perf"),
            make_vertex("t2", "test_jest", parent_group_id="qa"),
            make_vertex("t3", "deploy_helm", parent_group_id="dr"),
        )
    )

    ordered = order_deployment(resolve_ownership(graph), compiler_settings)

    assert [g.id for g in ordered.groups] == ["qa", "perf", "dr"]
    assert [_stage_ids(g) for g in ordered.groups] == [["t2"], ["t1"], ["t3"]]


def test_sort_by_priority_is_stable_for_unranked():
    items = ["z", "b", "y", "a", "x"]
    assert sort_by_priority(items, lambda s: s, ["a", "b"]) == ["a", "b", "z", "y", "x"]


def test_stage_pairs_follow_execution_order(dev_qa_graph, compiler_settings):
    ordered = order_deployment(resolve_ownership(dev_qa_graph), compiler_settings)

    assert ordered.stage_pairs() == [("dev", "code"), ("dev", "build"), ("qa", "deploy")]
