# src/pipeline_canvas/core/descriptor/types.py
"""
Tipos do descritor de pipeline.

Este módulo define as estruturas de entrada e saída do compilador de
descritores:

    Entrada
        - StageKey          → chave composta `(environment_group_id, stage_id)`
        - StageConfig       → configuração de um estágio
        - SelectedArtifact  → artefato selecionado para implantação

    Saída
        - TicketTool / SourceControlTool / DeploymentTool / GenericTool
          → bloco `tool` como união etiquetada por `kind`
        - StageEntry, NodeEntry, ArtifactPackage, PipelineDescriptor

Decisões arquiteturais:
    - StageKey é uma tupla nomeada: igualdade estrutural, sem risco de
      colisão por separadores dentro dos ids
    - Cada variante de `tool` serializa apenas os campos do seu tipo
    - `to_dict()` preserva exatamente a ordem e os nomes de campo
      consumidos pelo executor externo

Limites explícitos:
    - Não infere ferramentas
    - Não serializa texto (ver `serializer`)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union


class StageKey(NamedTuple):
    environment_group_id: str
    stage_id: str

    def legacy_keys(self) -> Tuple[str, str, str]:
        """Chaves textuais aceitas na fronteira de entrada, em ordem de precedência."""
        return (
            f"{self.environment_group_id}__{self.stage_id}",
            f"{self.environment_group_id}::{self.stage_id}",
            self.stage_id,
        )


@dataclass(frozen=True)
class StageConfig:
    connector_id: Optional[str] = None
    environment_name: Optional[str] = None
    repository_url: Optional[str] = None
    branch: Optional[str] = None
    approver_emails: Tuple[str, ...] = ()
    jira_number: Optional[str] = None


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class SelectedArtifact:
    """Artefato escolhido para implantação (ex.: um Integration Flow do SAP CPI)."""

    package_id: str
    package_name: Optional[str] = None
    package_version: Optional[str] = None
    artifact_id: Optional[str] = None
    artifact_name: Optional[str] = None
    artifact_version: Optional[str] = None
    artifact_type: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SelectedArtifact":
        return cls(
            package_id=_opt_str(raw.get("packageId")) or "unknown",
            package_name=_opt_str(raw.get("packageName")),
            package_version=_opt_str(raw.get("packageVersion")),
            artifact_id=_opt_str(raw.get("artifactId")),
            artifact_name=_opt_str(raw.get("artifactName") or raw.get("name")),
            artifact_version=_opt_str(raw.get("artifactVersion")),
            artifact_type=_opt_str(raw.get("artifactType") or raw.get("type")),
        )


# ---------------------------------------------------------------------------
# Bloco `tool` (união etiquetada)
# ---------------------------------------------------------------------------

class ToolKind(str, Enum):
    TICKET = "ticket"
    SOURCE = "source"
    DEPLOYMENT = "deployment"
    GENERIC = "generic"


def _tool_head(tool_type: str, connector_id: Optional[str]) -> Dict[str, Any]:
    head: Dict[str, Any] = {"type": tool_type}
    if connector_id:
        head["connectorId"] = connector_id
    return head


@dataclass(frozen=True)
class TicketTool:
    type: str
    connector_id: Optional[str] = None
    jira_key: Optional[str] = None

    kind: ClassVar[ToolKind] = ToolKind.TICKET

    def to_dict(self) -> Dict[str, Any]:
        out = _tool_head(self.type, self.connector_id)
        if self.jira_key:
            out["inputs"] = {"jiraKey": self.jira_key}
        return out


@dataclass(frozen=True)
class SourceControlTool:
    type: str
    connector_id: Optional[str] = None
    repo_url: Optional[str] = None
    branch: Optional[str] = None

    kind: ClassVar[ToolKind] = ToolKind.SOURCE

    def to_dict(self) -> Dict[str, Any]:
        out = _tool_head(self.type, self.connector_id)
        if self.repo_url:
            out["connector"] = {"repoUrl": self.repo_url, "branch": self.branch}
        return out


@dataclass(frozen=True)
class DeploymentArtifact:
    name: str
    type: str
    package_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "type": self.type}
        if self.package_id:
            out["packageId"] = self.package_id
        return out


@dataclass(frozen=True)
class DeploymentTool:
    type: str
    connector_id: Optional[str] = None
    environment_name: Optional[str] = None
    artifacts: Tuple[DeploymentArtifact, ...] = ()

    kind: ClassVar[ToolKind] = ToolKind.DEPLOYMENT

    def to_dict(self) -> Dict[str, Any]:
        out = _tool_head(self.type, self.connector_id)
        if self.environment_name:
            out["environment"] = {"name": self.environment_name}
        if self.artifacts:
            out["artifacts"] = [a.to_dict() for a in self.artifacts]
        return out


@dataclass(frozen=True)
class GenericTool:
    type: str
    connector_id: Optional[str] = None

    kind: ClassVar[ToolKind] = ToolKind.GENERIC

    def to_dict(self) -> Dict[str, Any]:
        return _tool_head(self.type, self.connector_id)


ToolBlock = Union[TicketTool, SourceControlTool, DeploymentTool, GenericTool]


# ---------------------------------------------------------------------------
# Descritor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StageEntry:
    name: str
    tool: Optional[ToolBlock] = None
    approvers: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "tool": self.tool.to_dict() if self.tool is not None else None,
        }
        if self.approvers:
            out["approvers"] = list(self.approvers)
        return out


@dataclass(frozen=True)
class NodeEntry:
    name: str
    stages: Tuple[StageEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "stages": [s.to_dict() for s in self.stages]}


@dataclass(frozen=True)
class PackagedArtifact:
    id: str
    name: str
    version: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "version": self.version, "type": self.type}


@dataclass(frozen=True)
class ArtifactPackage:
    id: str
    name: str
    version: str
    artifacts: Tuple[PackagedArtifact, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "package": {"id": self.id, "name": self.name, "version": self.version},
            "artifacts": [a.to_dict() for a in self.artifacts],
        }


@dataclass(frozen=True)
class PipelineDescriptor:
    """
    Descritor declarativo consumido pelo executor externo.

    A ordem dos campos em `to_dict()` é parte do contrato:
    `pipelineName, buildVersion, selectedArtifacts?, nodes, workstream?,
    generatedAt`.
    """

    pipeline_name: str
    build_version: str
    nodes: Tuple[NodeEntry, ...]
    generated_at: str
    selected_artifacts: Tuple[ArtifactPackage, ...] = ()
    workstream: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "pipelineName": self.pipeline_name,
            "buildVersion": self.build_version,
        }
        if self.selected_artifacts:
            out["selectedArtifacts"] = [p.to_dict() for p in self.selected_artifacts]
        out["nodes"] = [n.to_dict() for n in self.nodes]
        if self.workstream:
            out["workstream"] = self.workstream
        out["generatedAt"] = self.generated_at
        return out

    def stage_entries(self) -> List[StageEntry]:
        return [s for n in self.nodes for s in n.stages]
