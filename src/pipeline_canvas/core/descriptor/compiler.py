# src/pipeline_canvas/core/descriptor/compiler.py
"""
Compilador do descritor de pipeline.

Converte a estrutura ordenada (ambientes e estágios) e o estado de
configuração dos estágios em um `PipelineDescriptor`.

Regras:
    - `buildVersion` é derivado do instante da compilação, no formato
      configurado em `CompilerSettings.build_version_format`
    - apenas estágios com entrada no StageConfigState são emitidos
    - todo EnvironmentGroup gera um nó (possivelmente sem estágios); o
      bucket "General" gera um nó somente se tiver estágios configurados
    - estágio configurado sem ferramenta inferível emite `tool: null`
    - aprovadores são anexados sem transformação
    - artefatos selecionados são agrupados por pacote, na ordem de
      primeira ocorrência

Invariantes:
    - Mesma entrada e mesmo `now` produzem o mesmo descritor
    - O compilador nunca rejeita uma compilação por configuração
      incompleta

Limites explícitos:
    - Não resolve credenciais (o descritor carrega apenas `connectorId`)
    - Não serializa texto (ver `serializer`)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pipeline_canvas.core.config.settings import CompilerSettings, default_settings
from pipeline_canvas.core.graph.ordering import OrderedPipeline
from pipeline_canvas.core.graph.types import Vertex

from .inference import infer_tool_type, normalize_artifact_type, tool_kind
from .types import (
    ArtifactPackage,
    DeploymentArtifact,
    DeploymentTool,
    GenericTool,
    NodeEntry,
    PackagedArtifact,
    PipelineDescriptor,
    SelectedArtifact,
    SourceControlTool,
    StageConfig,
    StageEntry,
    StageKey,
    TicketTool,
    ToolBlock,
    ToolKind,
)


ArtifactInput = Union[SelectedArtifact, Mapping[str, Any]]


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def normalize_artifacts(selected: Iterable[ArtifactInput]) -> Tuple[SelectedArtifact, ...]:
    return tuple(a if isinstance(a, SelectedArtifact) else SelectedArtifact.from_dict(a) for a in selected or ())


def group_artifacts_by_package(
    artifacts: Sequence[SelectedArtifact],
    settings: CompilerSettings,
) -> Tuple[ArtifactPackage, ...]:
    """Agrupa artefatos por `package_id`; nome e versão vêm do primeiro do grupo."""
    by_package: Dict[str, List[SelectedArtifact]] = {}
    for artifact in artifacts:
        by_package.setdefault(artifact.package_id, []).append(artifact)

    packages: List[ArtifactPackage] = []
    for package_id, members in by_package.items():
        head = members[0]
        packages.append(
            ArtifactPackage(
                id=package_id,
                name=head.package_name or package_id,
                version=head.package_version or settings.default_package_version,
                artifacts=tuple(
                    PackagedArtifact(
                        id=a.artifact_id or "",
                        name=a.artifact_name or "",
                        version=a.artifact_version or settings.default_artifact_version,
                        type=a.artifact_type or "",
                    )
                    for a in members
                ),
            )
        )
    return tuple(packages)


def deployment_artifacts(artifacts: Sequence[SelectedArtifact]) -> Tuple[DeploymentArtifact, ...]:
    out: List[DeploymentArtifact] = []
    for artifact in artifacts:
        name = artifact.artifact_id or artifact.artifact_name
        if not name:
            continue
        out.append(
            DeploymentArtifact(
                name=name,
                type=normalize_artifact_type(artifact.artifact_type),
                package_id=artifact.package_id if artifact.package_id != "unknown" else None,
            )
        )
    return tuple(out)


def build_tool_block(
    stage: Vertex,
    config: StageConfig,
    *,
    artifacts: Tuple[DeploymentArtifact, ...],
    settings: CompilerSettings,
) -> Optional[ToolBlock]:
    """Monta o bloco `tool` do estágio conforme o tipo inferido; None se não inferível."""
    tool_type = infer_tool_type(stage.tool_hint, stage.label, stage.declared_type, stage.category)
    if tool_type is None:
        return None

    kind = tool_kind(tool_type)
    if kind == ToolKind.TICKET:
        return TicketTool(type=tool_type, connector_id=config.connector_id, jira_key=config.jira_number)
    if kind == ToolKind.SOURCE:
        return SourceControlTool(
            type=tool_type,
            connector_id=config.connector_id,
            repo_url=config.repository_url,
            branch=(config.branch or settings.default_branch) if config.repository_url else None,
        )
    if kind == ToolKind.DEPLOYMENT:
        return DeploymentTool(
            type=tool_type,
            connector_id=config.connector_id,
            environment_name=config.environment_name,
            artifacts=artifacts,
        )
    return GenericTool(type=tool_type, connector_id=config.connector_id)


def compile_descriptor(
    ordered: OrderedPipeline,
    stage_config: Mapping[StageKey, StageConfig],
    *,
    pipeline_name: str,
    workstream: Optional[str] = None,
    selected_artifacts: Iterable[ArtifactInput] = (),
    settings: Optional[CompilerSettings] = None,
    now: Optional[datetime] = None,
) -> PipelineDescriptor:
    """
    Compila a estrutura ordenada em um PipelineDescriptor.

    Args:
        ordered: Resultado de `order_deployment`.
        stage_config: Mapeamento `StageKey → StageConfig` (tipicamente um
            StageConfigState).
        pipeline_name: Nome do pipeline.
        workstream: Identificador opcional de workstream.
        selected_artifacts: Artefatos selecionados para implantação
            (SelectedArtifact ou dicionários no formato da tela).
        settings: Configuração do compilador; defaults quando omitida.
        now: Instante da compilação; relógio UTC quando omitido.

    Returns:
        PipelineDescriptor
    """
    settings = settings or default_settings()
    compiled_at = _utc(now)
    artifacts = normalize_artifacts(selected_artifacts)
    deploy_artifacts = deployment_artifacts(artifacts)

    nodes: List[NodeEntry] = []
    for group in ordered.groups:
        entries: List[StageEntry] = []
        for stage in group.stages:
            config = stage_config.get(StageKey(group.id, stage.id))
            if config is None:
                continue
            entries.append(
                StageEntry(
                    name=stage.label or stage.declared_type,
                    tool=build_tool_block(stage, config, artifacts=deploy_artifacts, settings=settings),
                    approvers=tuple(config.approver_emails),
                )
            )
        if group.is_general and not entries:
            continue
        nodes.append(NodeEntry(name=group.label or group.id, stages=tuple(entries)))

    return PipelineDescriptor(
        pipeline_name=pipeline_name,
        build_version=compiled_at.strftime(settings.build_version_format),
        nodes=tuple(nodes),
        generated_at=compiled_at.isoformat(),
        selected_artifacts=group_artifacts_by_package(artifacts, settings),
        workstream=workstream or None,
    )
