# tests/core/descriptor/test_serializer.py
"""
Testes da serialização YAML do descritor.

Asseguram que o texto preserva nomes e ordem de campo e que o executor
consegue lê-lo de volta.
"""

import yaml

from pipeline_canvas.core.descriptor.parser import parse_descriptor
from pipeline_canvas.core.descriptor.serializer import serialize_descriptor
from pipeline_canvas.core.descriptor.types import (
    ArtifactPackage,
    NodeEntry,
    PackagedArtifact,
    PipelineDescriptor,
    SourceControlTool,
    StageEntry,
    TicketTool,
)


def _descriptor(**overrides):
    fields = dict(
        pipeline_name="payments",
        build_version="20260102.030405",
        nodes=(
            NodeEntry(
                name="Development",
                stages=(
                    StageEntry(name="JIRA", tool=TicketTool(type="JIRA", jira_key="PROJ-123")),
                    StageEntry(
                        name="GitHub",
                        tool=SourceControlTool(type="GitHub", repo_url="https://git/x.git", branch="main"),
                        approvers=("a@x.com",),
                    ),
                ),
            ),
            NodeEntry(name="Production"),
        ),
        generated_at="2026-01-02T03:04:05+00:00",
    )
    fields.update(overrides)
    return PipelineDescriptor(**fields)


def test_top_level_key_order_is_preserved():
    text = serialize_descriptor(_descriptor(workstream="ws-1"))

    top_level = [line.split(":", 1)[0] for line in text.splitlines() if line and not line[0].isspace() and not line.startswith("-")]
    assert top_level == ["pipelineName", "buildVersion", "nodes", "workstream", "generatedAt"]


def test_nested_stage_shape():
    loaded = yaml.safe_load(serialize_descriptor(_descriptor()))

    assert loaded["nodes"][0]["stages"][0] == {"name": "JIRA", "tool": {"type": "JIRA", "inputs": {"jiraKey": "PROJ-123"}}}
    assert loaded["nodes"][0]["stages"][1]["approvers"] == ["a@x.com"]
    assert loaded["nodes"][1] == {"name": "Production", "stages": []}


def test_build_version_stays_a_string():
    loaded = yaml.safe_load(serialize_descriptor(_descriptor()))

    assert loaded["buildVersion"] == "20260102.030405"


def test_selected_artifacts_before_nodes():
    package = ArtifactPackage(
        id="pkgA",
        name="Orders",
        version="latest",
        artifacts=(PackagedArtifact(id="a1", name="A1", version="Active", type="Integration Flow"),),
    )
    text = serialize_descriptor(_descriptor(selected_artifacts=(package,)))

    assert text.index("selectedArtifacts:") < text.index("nodes:")
    assert "version: latest" in text


def test_null_tool_is_emitted():
    text = serialize_descriptor(_descriptor(nodes=(NodeEntry(name="QA", stages=(StageEntry(name="Cypress"),)),)))

    assert "tool: null" in text


def test_serialized_text_parses_back():
    parsed = parse_descriptor(serialize_descriptor(_descriptor()))

    assert parsed.pipeline_name == "payments"
    assert [n.name for n in parsed.nodes] == ["Development", "Production"]
    assert parsed.nodes[0].stages[1].tool.connector == {"repoUrl": "https://git/x.git", "branch": "main"}
