# tests/core/descriptor/test_parser.py
"""
Testes do leitor de descritores (lado do executor).

Os testes asseguram que:
- violações de estrutura levantam DescriptorParseError com o caminho do campo
- nós sem estágios são aceitos
- a lista linear de estágios usa ids `node_{i}_stage_{j}`
- a configuração de controle de código é a do primeiro estágio GitHub/GitLab
"""

import pytest

from pipeline_canvas.core import errors
from pipeline_canvas.core.descriptor.parser import (
    find_source_control_config,
    flatten_stages,
    parse_descriptor,
)
from pipeline_canvas.core.exceptions import DescriptorParseError


VALID = """
pipelineName: payments
buildVersion: "20260102.030405"
nodes:
  - name: Development
    stages:
      - name: JIRA
        tool:
          type: JIRA
          inputs:
            jiraKey: PROJ-1
      - name: GitLab
        tool:
          type: GitLab
          connectorId: gl-1
          connector:
            repoUrl: https://gitlab/x.git
            branch: main
  - name: Production
    stages:
      - name: Cloud Foundry
        tool:
          type: SAP_CPI
          environment:
            name: prod
          artifacts:
            - name: IFLOW_1
              type: IntegrationFlow
              packageId: pkgA
      - name: Cypress
        tool: null
        approvers:
          - a@x.com
  - name: UAT
    stages: []
generatedAt: "2026-01-02T03:04:05+00:00"
"""


def _base():
    return {
        "pipelineName": "p",
        "buildVersion": "1",
        "nodes": [{"name": "Dev", "stages": [{"name": "S", "tool": {"type": "JIRA"}}]}],
    }


def test_parse_valid_descriptor():
    parsed = parse_descriptor(VALID)

    assert parsed.pipeline_name == "payments"
    assert parsed.build_version == "20260102.030405"
    assert [n.name for n in parsed.nodes] == ["Development", "Production", "UAT"]
    assert parsed.nodes[2].stages == ()
    assert parsed.nodes[1].stages[0].tool.artifacts == (
        {"name": "IFLOW_1", "type": "IntegrationFlow", "packageId": "pkgA"},
    )
    assert parsed.nodes[1].stages[1].tool is None
    assert parsed.nodes[1].stages[1].approvers == ("a@x.com",)
    assert parsed.generated_at == "2026-01-02T03:04:05+00:00"


def test_flatten_stages_ids_in_execution_order():
    flat = flatten_stages(parse_descriptor(VALID))

    assert [s.stage_id for s in flat] == [
        "node_0_stage_0",
        "node_0_stage_1",
        "node_1_stage_0",
        "node_1_stage_1",
    ]
    assert flat[2].node_name == "Production"
    assert flat[2].stage_name == "Cloud Foundry"


def test_find_source_control_config_returns_first_connector():
    assert find_source_control_config(parse_descriptor(VALID)) == {
        "repoUrl": "https://gitlab/x.git",
        "branch": "main",
    }


def test_find_source_control_config_none_without_source_stage():
    assert find_source_control_config(parse_descriptor(_base())) is None


def test_numeric_build_version_is_accepted():
    raw = _base()
    raw["buildVersion"] = 42

    assert parse_descriptor(raw).build_version == "42"


@pytest.mark.parametrize(
    "mutate, field",
    [
        (lambda d: d.pop("pipelineName"), "pipelineName"),
        (lambda d: d.update(buildVersion=""), "buildVersion"),
        (lambda d: d.update(nodes=[]), "nodes"),
        (lambda d: d["nodes"][0].pop("stages"), "nodes[0].stages"),
        (lambda d: d["nodes"][0].update(name=" "), "nodes[0].name"),
        (lambda d: d["nodes"][0]["stages"][0].pop("name"), "nodes[0].stages[0].name"),
        (lambda d: d["nodes"][0]["stages"][0].update(tool="JIRA"), "nodes[0].stages[0].tool"),
        (lambda d: d["nodes"][0]["stages"][0]["tool"].pop("type"), "nodes[0].stages[0].tool.type"),
        (
            lambda d: d["nodes"][0]["stages"][0]["tool"].update(artifacts=[{"name": "x"}]),
            "nodes[0].stages[0].tool.artifacts[0].type",
        ),
        (lambda d: d["nodes"][0]["stages"][0].update(approvers="a@x.com"), "nodes[0].stages[0].approvers"),
    ],
)
def test_violations_report_field_path(mutate, field):
    raw = _base()
    mutate(raw)

    with pytest.raises(DescriptorParseError) as exc:
        parse_descriptor(raw)

    assert exc.value.field == field
    assert exc.value.error_type == errors.DESCRIPTOR_INVALID


def test_invalid_yaml_has_no_field():
    with pytest.raises(DescriptorParseError) as exc:
        parse_descriptor("nodes: [unclosed")

    assert exc.value.field is None


def test_non_mapping_root_is_rejected():
    with pytest.raises(DescriptorParseError) as exc:
        parse_descriptor("- just\n- a list\n")

    assert exc.value.field is None
    assert exc.value.to_payload().details["reason"] == "descriptor root must be a mapping"
