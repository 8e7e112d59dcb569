# src/pipeline_canvas/core/descriptor/parser.py
"""
Leitura e validação de um descritor serializado.

Lado consumidor do contrato: o executor recebe o texto YAML, valida a
estrutura mínima e percorre os estágios em ordem de execução.

Regras de validação:
    - `pipelineName` e `buildVersion` são strings não vazias
    - `nodes` é uma lista não vazia
    - cada nó tem `name` não vazio e uma lista `stages` (pode ser vazia:
      um ambiente sem estágios configurados é legítimo)
    - cada estágio tem `name` não vazio e `tool` nulo ou um mapa com
      `type` não vazio
    - artefatos embutidos em `tool` têm `name` e `type` não vazios

Violações levantam `DescriptorParseError` com o caminho do campo
(ex.: `nodes[0].stages[1].tool.type`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from pipeline_canvas.core import errors
from pipeline_canvas.core.exceptions import DescriptorParseError


SOURCE_CONTROL_TYPES = ("GitHub", "GitLab")


@dataclass(frozen=True)
class ParsedTool:
    type: str
    connector_id: Optional[str] = None
    connector: Optional[Dict[str, Any]] = None
    environment: Optional[Dict[str, Any]] = None
    inputs: Optional[Dict[str, Any]] = None
    artifacts: Tuple[Dict[str, str], ...] = ()


@dataclass(frozen=True)
class ParsedStage:
    name: str
    tool: Optional[ParsedTool] = None
    approvers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedNode:
    name: str
    stages: Tuple[ParsedStage, ...] = ()


@dataclass(frozen=True)
class ParsedPipeline:
    pipeline_name: str
    build_version: str
    nodes: Tuple[ParsedNode, ...]
    workstream: Optional[str] = None
    generated_at: Optional[str] = None
    selected_artifacts: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FlatStage:
    stage_id: str
    node_index: int
    node_name: str
    stage_index: int
    stage_name: str
    tool: Optional[ParsedTool]


def _fail(path: Optional[str], reason: str) -> DescriptorParseError:
    return DescriptorParseError.from_payload(errors.descriptor_invalid(field=path, reason=reason))


def _require_string(value: Any, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _fail(path, f"{path} must be a non-empty string")
    return value.strip()


def _optional_mapping(value: Any, path: str) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise _fail(path, f"{path} must be a mapping")
    return dict(value)


def _parse_tool(raw: Any, path: str) -> Optional[ParsedTool]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise _fail(path, f"{path} must be a mapping or null")

    artifacts: List[Dict[str, str]] = []
    raw_artifacts = raw.get("artifacts")
    if raw_artifacts is not None:
        if not isinstance(raw_artifacts, list):
            raise _fail(f"{path}.artifacts", f"{path}.artifacts must be a list")
        for i, art in enumerate(raw_artifacts):
            where = f"{path}.artifacts[{i}]"
            if not isinstance(art, Mapping):
                raise _fail(where, f"{where} must be a mapping")
            entry = {
                "name": _require_string(art.get("name"), f"{where}.name"),
                "type": _require_string(art.get("type"), f"{where}.type"),
            }
            if art.get("packageId"):
                entry["packageId"] = str(art["packageId"])
            artifacts.append(entry)

    connector_id = raw.get("connectorId")
    return ParsedTool(
        type=_require_string(raw.get("type"), f"{path}.type"),
        connector_id=str(connector_id) if connector_id else None,
        connector=_optional_mapping(raw.get("connector"), f"{path}.connector"),
        environment=_optional_mapping(raw.get("environment"), f"{path}.environment"),
        inputs=_optional_mapping(raw.get("inputs"), f"{path}.inputs"),
        artifacts=tuple(artifacts),
    )


def _parse_stage(raw: Any, path: str) -> ParsedStage:
    if not isinstance(raw, Mapping):
        raise _fail(path, f"{path} must be a mapping")
    approvers = raw.get("approvers") or []
    if not isinstance(approvers, list):
        raise _fail(f"{path}.approvers", f"{path}.approvers must be a list")
    return ParsedStage(
        name=_require_string(raw.get("name"), f"{path}.name"),
        tool=_parse_tool(raw.get("tool"), f"{path}.tool"),
        approvers=tuple(str(a) for a in approvers),
    )


def _parse_node(raw: Any, path: str) -> ParsedNode:
    if not isinstance(raw, Mapping):
        raise _fail(path, f"{path} must be a mapping")
    name = _require_string(raw.get("name"), f"{path}.name")
    stages = raw.get("stages")
    if not isinstance(stages, list):
        raise _fail(f"{path}.stages", f"{path}.stages must be a list")
    return ParsedNode(
        name=name,
        stages=tuple(_parse_stage(s, f"{path}.stages[{j}]") for j, s in enumerate(stages)),
    )


def parse_descriptor(raw: Union[str, Mapping[str, Any]]) -> ParsedPipeline:
    """
    Valida um descritor (texto YAML ou dicionário já desserializado).

    Raises:
        DescriptorParseError: Primeira violação encontrada; `field` indica
            o caminho do campo (None quando o documento todo é inválido).
    """
    if isinstance(raw, str):
        try:
            raw = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise _fail(None, f"invalid YAML: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise _fail(None, "descriptor root must be a mapping")

    pipeline_name = _require_string(raw.get("pipelineName"), "pipelineName")
    build_version = _require_string(
        str(raw["buildVersion"]) if isinstance(raw.get("buildVersion"), (int, float)) else raw.get("buildVersion"),
        "buildVersion",
    )

    nodes = raw.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        raise _fail("nodes", "nodes must be a non-empty list")

    selected = raw.get("selectedArtifacts") or []
    if not isinstance(selected, list):
        raise _fail("selectedArtifacts", "selectedArtifacts must be a list")

    workstream = raw.get("workstream")
    generated_at = raw.get("generatedAt")
    return ParsedPipeline(
        pipeline_name=pipeline_name,
        build_version=build_version,
        nodes=tuple(_parse_node(n, f"nodes[{i}]") for i, n in enumerate(nodes)),
        workstream=str(workstream) if workstream else None,
        generated_at=str(generated_at) if generated_at else None,
        selected_artifacts=tuple(dict(p) for p in selected if isinstance(p, Mapping)),
    )


def flatten_stages(pipeline: ParsedPipeline) -> List[FlatStage]:
    """Lista linear de estágios em ordem de execução (`node_{i}_stage_{j}`)."""
    out: List[FlatStage] = []
    for i, node in enumerate(pipeline.nodes):
        for j, stage in enumerate(node.stages):
            out.append(
                FlatStage(
                    stage_id=f"node_{i}_stage_{j}",
                    node_index=i,
                    node_name=node.name,
                    stage_index=j,
                    stage_name=stage.name,
                    tool=stage.tool,
                )
            )
    return out


def find_source_control_config(pipeline: ParsedPipeline) -> Optional[Dict[str, Any]]:
    """Primeiro bloco `connector` de um estágio GitHub/GitLab, se houver."""
    for node in pipeline.nodes:
        for stage in node.stages:
            tool = stage.tool
            if tool is not None and tool.type in SOURCE_CONTROL_TYPES and tool.connector:
                return dict(tool.connector)
    return None
