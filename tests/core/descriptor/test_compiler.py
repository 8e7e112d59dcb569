# tests/core/descriptor/test_compiler.py
"""
Testes do compilador de descritores.

Os testes asseguram que:
- apenas estágios configurados são emitidos
- o bloco `tool` carrega somente os campos do tipo inferido
- estágio sem ferramenta inferível emite `tool: null`
- aprovadores são anexados sem transformação
- artefatos são agrupados por pacote
- todo ambiente gera um nó; "General" só quando tem estágios configurados
- a compilação é determinística para o mesmo instante
"""

from datetime import datetime, timedelta, timezone

import pytest

from pipeline_canvas.core.descriptor.compiler import compile_descriptor
from pipeline_canvas.core.descriptor.stage_config import StageConfigState
from pipeline_canvas.core.descriptor.types import (
    DeploymentTool,
    SelectedArtifact,
    SourceControlTool,
    StageConfig,
    StageKey,
    TicketTool,
)
from pipeline_canvas.core.graph.ordering import order_deployment
from pipeline_canvas.core.graph.ownership import resolve_ownership
from pipeline_canvas.core.graph.types import PipelineGraph


@pytest.fixture
def canvas_ordered(stored_canvas, compiler_settings):
    graph = PipelineGraph.from_canvas(stored_canvas["nodes"], stored_canvas["edges"])
    return order_deployment(resolve_ownership(graph), compiler_settings)


def _compile(ordered, state, settings, now, **kwargs):
    kwargs.setdefault("pipeline_name", "payments")
    return compile_descriptor(ordered, state, settings=settings, now=now, **kwargs)


def test_jira_key_reaches_ticket_inputs(canvas_ordered, compiler_settings, fixed_now):
    state = StageConfigState.from_stages_state({"jiraNumbers": {"env1__jiraPlan": "PROJ-123"}}, canvas_ordered)

    descriptor = _compile(canvas_ordered, state, compiler_settings, fixed_now)
    stage = descriptor.nodes[0].stages[0]

    assert stage.name == "JIRA"
    assert isinstance(stage.tool, TicketTool)
    assert stage.tool.to_dict() == {"type": "JIRA", "inputs": {"jiraKey": "PROJ-123"}}


def test_only_configured_stages_are_emitted(canvas_ordered, compiler_settings, fixed_now):
    state = StageConfigState({StageKey("env1", "repo"): StageConfig(repository_url="https://git/x.git")})

    descriptor = _compile(canvas_ordered, state, compiler_settings, fixed_now)

    assert [n.name for n in descriptor.nodes] == ["Development", "Production"]
    assert [s.name for s in descriptor.nodes[0].stages] == ["GitHub"]
    assert descriptor.nodes[1].stages == ()


def test_source_control_block_defaults_branch(canvas_ordered, compiler_settings, fixed_now):
    state = StageConfigState(
        {StageKey("env1", "repo"): StageConfig(connector_id="conn-1", repository_url="https://git/x.git")}
    )

    tool = _compile(canvas_ordered, state, compiler_settings, fixed_now).nodes[0].stages[0].tool

    assert isinstance(tool, SourceControlTool)
    assert tool.to_dict() == {
        "type": "GitHub",
        "connectorId": "conn-1",
        "connector": {"repoUrl": "https://git/x.git", "branch": "main"},
    }


def test_source_control_without_repository_url_has_no_connector(canvas_ordered, compiler_settings, fixed_now):
    state = StageConfigState({StageKey("env1", "repo"): StageConfig(branch="dev")})

    tool = _compile(canvas_ordered, state, compiler_settings, fixed_now).nodes[0].stages[0].tool

    assert tool.to_dict() == {"type": "GitHub"}


def test_deployment_block_with_environment_and_artifacts(canvas_ordered, compiler_settings, fixed_now):
    state = StageConfigState({StageKey("env2", "cpi"): StageConfig(environment_name="prod-tenant")})
    artifacts = [
        {"packageId": "pkgA", "artifactId": "IFLOW_1", "artifactType": "Integration Flow"},
        SelectedArtifact(package_id="pkgA", artifact_id="VM_1", artifact_type="Value Mapping"),
    ]

    descriptor = _compile(canvas_ordered, state, compiler_settings, fixed_now, selected_artifacts=artifacts)
    tool = descriptor.nodes[1].stages[0].tool

    assert isinstance(tool, DeploymentTool)
    assert tool.to_dict() == {
        "type": "SAP_CPI",
        "environment": {"name": "prod-tenant"},
        "artifacts": [
            {"name": "IFLOW_1", "type": "IntegrationFlow", "packageId": "pkgA"},
            {"name": "VM_1", "type": "ValueMapping", "packageId": "pkgA"},
        ],
    }


def test_tool_null_when_not_inferable(make_vertex, compiler_settings, fixed_now):
    graph = PipelineGraph(vertices=(make_vertex("qa", "env_qa"), make_vertex("t", "test_cypress")))
    ordered = order_deployment(resolve_ownership(graph), compiler_settings)
    state = StageConfigState({StageKey("qa", "t"): StageConfig(approver_emails=("a@x.com", "b@x.com"))})

    stage = _compile(ordered, state, compiler_settings, fixed_now).nodes[0].stages[0]

    assert stage.tool is None
    assert stage.to_dict() == {"name": "Cypress", "tool": None, "approvers": ["a@x.com", "b@x.com"]}


def test_generic_block_for_other_tools(make_vertex, compiler_settings, fixed_now):
    graph = PipelineGraph(vertices=(make_vertex("qa", "env_qa"), make_vertex("b", "build_jenkins")))
    ordered = order_deployment(resolve_ownership(graph), compiler_settings)
    state = StageConfigState({StageKey("qa", "b"): StageConfig(connector_id="jenkins-1")})

    tool = _compile(ordered, state, compiler_settings, fixed_now).nodes[0].stages[0].tool

    assert tool.to_dict() == {"type": "Jenkins", "connectorId": "jenkins-1"}


def test_artifacts_grouped_by_package(canvas_ordered, compiler_settings, fixed_now):
    artifacts = [
        {"packageId": "pkgA", "packageName": "Orders", "artifactId": "a1", "artifactName": "A1", "artifactType": "Integration Flow"},
        {"packageId": "pkgB", "artifactId": "b1"},
        {"packageId": "pkgA", "artifactId": "a2", "artifactVersion": "1.0.3"},
    ]

    descriptor = _compile(canvas_ordered, StageConfigState(), compiler_settings, fixed_now, selected_artifacts=artifacts)
    packages = [p.to_dict() for p in descriptor.selected_artifacts]

    assert [p["package"] for p in packages] == [
        {"id": "pkgA", "name": "Orders", "version": "latest"},
        {"id": "pkgB", "name": "pkgB", "version": "latest"},
    ]
    assert packages[0]["artifacts"] == [
        {"id": "a1", "name": "A1", "version": "Active", "type": "Integration Flow"},
        {"id": "a2", "name": "", "version": "1.0.3", "type": ""},
    ]


def test_general_node_only_when_configured(make_vertex, compiler_settings, fixed_now):
    graph = PipelineGraph(
        vertices=(
            make_vertex("dev", "env_dev"),
            make_vertex("qa", "env_qa"),
            make_vertex("loose", "plan_jira"),
        )
    )
    ordered = order_deployment(resolve_ownership(graph), compiler_settings)

    without = _compile(ordered, StageConfigState(), compiler_settings, fixed_now)
    assert [n.name for n in without.nodes] == ["Development", "QA"]

    state = StageConfigState.from_stages_state({"jiraNumbers": {"loose": "GEN-1"}}, ordered)
    with_general = _compile(ordered, state, compiler_settings, fixed_now)
    assert [n.name for n in with_general.nodes] == ["General", "Development", "QA"]


def test_build_version_and_generated_at_from_now(canvas_ordered, compiler_settings, fixed_now):
    descriptor = _compile(canvas_ordered, StageConfigState(), compiler_settings, fixed_now)

    assert descriptor.build_version == "20260102.030405"
    assert descriptor.generated_at == "2026-01-02T03:04:05+00:00"


def test_naive_and_offset_now_are_normalized_to_utc(canvas_ordered, compiler_settings):
    offset = datetime(2026, 1, 2, 6, 4, 5, tzinfo=timezone(timedelta(hours=3)))

    descriptor = _compile(canvas_ordered, StageConfigState(), compiler_settings, offset)

    assert descriptor.generated_at == "2026-01-02T03:04:05+00:00"


def test_compilation_is_deterministic(canvas_ordered, compiler_settings, fixed_now):
    state = StageConfigState.from_stages_state(
        {"jiraNumbers": {"env1__jiraPlan": "PROJ-1"}, "connectorRepositoryUrls": {"env1__repo": "https://g/r.git"}},
        canvas_ordered,
    )

    a = _compile(canvas_ordered, state, compiler_settings, fixed_now, workstream="ws-1")
    b = _compile(canvas_ordered, state, compiler_settings, fixed_now, workstream="ws-1")

    assert a == b
    assert a.to_dict() == b.to_dict()


def test_to_dict_field_order(canvas_ordered, compiler_settings, fixed_now):
    descriptor = _compile(
        canvas_ordered,
        StageConfigState(),
        compiler_settings,
        fixed_now,
        workstream="ws-1",
        selected_artifacts=[{"packageId": "p", "artifactId": "a"}],
    )

    assert list(descriptor.to_dict()) == [
        "pipelineName",
        "buildVersion",
        "selectedArtifacts",
        "nodes",
        "workstream",
        "generatedAt",
    ]
    assert list(_compile(canvas_ordered, StageConfigState(), compiler_settings, fixed_now).to_dict()) == [
        "pipelineName",
        "buildVersion",
        "nodes",
        "generatedAt",
    ]


def test_kubernetes_deploy_stage_compiles_without_tool(dev_qa_graph, compiler_settings, fixed_now):
    ordered = order_deployment(resolve_ownership(dev_qa_graph), compiler_settings)
    state = StageConfigState({StageKey("qa", "deploy"): StageConfig(environment_name="prod-cluster")})

    stage = _compile(ordered, state, compiler_settings, fixed_now).nodes[1].stages[0]

    assert stage.name == "Kubernetes"
    assert stage.tool is None
