# src/pipeline_canvas/core/engine/engine.py
"""
Orquestração do compilador de canvas.

O `CanvasCompiler` encadeia os componentes do núcleo:

    grafo → posse → ordenação → {layout + arestas de fluxo}
                              → {descritor → YAML}

Cada chamada recebe (ou cria) um `CompileContext` e registra eventos
estruturados por fase (`load`, `resolve`, `layout`, `compile`,
`serialize`). Lacunas de domínio viram warnings, nunca exceções:

    - estágio sem ambiente dono (vai para "General")
    - estágio sem configuração (omitido do descritor)
    - estágio configurado sem ferramenta inferível (`tool: null`)

Falhas:
    - Violações do contrato de forma propagam a `CanvasException` tipada
      original, após registrar o evento `compile_failed` com o payload
      canônico
    - Exceções inesperadas são registradas como
      COMPILER_UNEXPECTED_ERROR e propagadas sem fallback
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, Any, Callable, Iterable, Mapping, Optional, Tuple, TypeVar, Union

from pipeline_canvas.core import errors
from pipeline_canvas.core.config.hashing import canonical_hash
from pipeline_canvas.core.config.settings import CompilerSettings, default_settings
from pipeline_canvas.core.descriptor.compiler import compile_descriptor
from pipeline_canvas.core.descriptor.inference import infer_tool_type
from pipeline_canvas.core.descriptor.serializer import serialize_descriptor
from pipeline_canvas.core.descriptor.stage_config import STAGES_STATE_FIELDS, StageConfigState
from pipeline_canvas.core.descriptor.types import PipelineDescriptor, SelectedArtifact, StageConfig, StageKey
from pipeline_canvas.core.exceptions import CanvasException, InvalidStageConfig
from pipeline_canvas.core.graph.ordering import OrderedPipeline, order_deployment
from pipeline_canvas.core.graph.ownership import Ownership, resolve_ownership
from pipeline_canvas.core.graph.types import Edge, PipelineGraph, Vertex
from pipeline_canvas.core.layout.flow import synthesize_flow_edges
from pipeline_canvas.core.layout.layout import compute_layout
from pipeline_canvas.core.traceability.manifest import (
    CompileManifest,
    create_manifest,
    record_context,
    set_outputs,
)

from .context import CompileContext


T = TypeVar("T")

GraphInput = Union[PipelineGraph, Mapping[str, Any]]


@dataclass(frozen=True)
class CanvasLayout:
    """Vértices posicionados e arestas sintéticas (filhos e ambientes)."""

    vertices: Tuple[Vertex, ...]
    child_edges: Tuple[Edge, ...] = ()
    flow_edges: Tuple[Edge, ...] = ()

    @property
    def synthetic_edges(self) -> Tuple[Edge, ...]:
        return self.child_edges + self.flow_edges


@dataclass(frozen=True)
class CompileResult:
    descriptor: PipelineDescriptor
    text: str
    context: CompileContext
    manifest: CompileManifest


class CanvasCompiler:
    """Compilador canônico do Pipeline Canvas (resolução + layout + descritor)."""

    def __init__(self, settings: Optional[CompilerSettings] = None):
        self.settings: CompilerSettings = settings or default_settings()

    # ------------------------------------------------------------------
    # Guardrails: exceção -> evento compile_failed -> re-raise
    # ------------------------------------------------------------------

    def _run_phase(self, ctx: CompileContext, phase: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except CanvasException as exc:
            ctx.log(phase=phase, level="error", message="compile_failed", error=exc.to_payload().to_dict())
            raise
        except Exception as exc:
            payload = errors.compiler_unexpected_error(
                phase=phase,
                exc_type=exc.__class__.__name__,
                exc_message=str(exc),
            )
            ctx.log(phase=phase, level="error", message="compile_failed", error=payload.to_dict())
            raise

    def _load(self, graph: GraphInput, ctx: CompileContext) -> PipelineGraph:
        if isinstance(graph, PipelineGraph):
            return graph

        def build() -> PipelineGraph:
            return PipelineGraph.from_canvas(graph.get("nodes") or [], graph.get("edges") or [])

        loaded = self._run_phase(ctx, "load", build)
        ctx.log(
            phase="load",
            level="info",
            message="graph_loaded",
            vertices=len(loaded.vertices),
            edges=len(loaded.edges),
        )
        return loaded

    # ------------------------------------------------------------------
    # Resolução
    # ------------------------------------------------------------------

    def resolve(self, graph: GraphInput, *, ctx: Optional[CompileContext] = None) -> OrderedPipeline:
        """Resolve posse e ordem de ambientes e estágios."""
        ctx = ctx or CompileContext.new()
        graph = self._load(graph, ctx)

        def run() -> Tuple[Ownership, OrderedPipeline]:
            ownership = resolve_ownership(graph)
            return ownership, order_deployment(ownership, self.settings)

        ownership, ordered = self._run_phase(ctx, "resolve", run)

        if ownership.environments:
            for stage in ownership.general:
                ctx.add_warning(
                    phase="resolve",
                    message=f"Stage '{stage.id}' has no owning environment; assigned to General",
                )
        ctx.log(
            phase="resolve",
            level="info",
            message="ownership_resolved",
            environments=len(ownership.environments),
            general=len(ownership.general),
            groups=[g.id for g in ordered.groups],
        )
        return ordered

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def layout(
        self,
        graph: GraphInput,
        *,
        existing_edge_ids: Optional[AbstractSet[str]] = None,
        ctx: Optional[CompileContext] = None,
    ) -> CanvasLayout:
        """
        Calcula o layout do canvas e as arestas de fluxo entre ambientes.

        `existing_edge_ids` assume os ids das arestas do próprio grafo
        quando omitido.
        """
        ctx = ctx or CompileContext.new()
        graph = self._load(graph, ctx)
        ordered = self.resolve(graph, ctx=ctx)
        known = graph.edge_ids if existing_edge_ids is None else existing_edge_ids

        def run() -> CanvasLayout:
            result = compute_layout(graph, ordered, self.settings.layout)
            flow = synthesize_flow_edges(ordered.groups, known)
            return CanvasLayout(vertices=result.vertices, child_edges=result.child_edges, flow_edges=tuple(flow))

        layout = self._run_phase(ctx, "layout", run)
        if not ordered.environment_groups:
            ctx.log(phase="layout", level="info", message="layout_skipped", reason="no environment groups")
        else:
            ctx.log(
                phase="layout",
                level="info",
                message="layout_computed",
                child_edges=len(layout.child_edges),
                flow_edges=len(layout.flow_edges),
            )
        return layout

    # ------------------------------------------------------------------
    # Compilação do descritor
    # ------------------------------------------------------------------

    def _stage_state(self, stage_config: Any, ordered: OrderedPipeline) -> Mapping[StageKey, StageConfig]:
        if stage_config is None:
            return StageConfigState()
        if isinstance(stage_config, StageConfigState):
            return stage_config
        if not isinstance(stage_config, Mapping):
            raise InvalidStageConfig.from_payload(
                errors.stage_config_invalid(key=None, reason=f"expected a mapping, got {type(stage_config).__name__}")
            )
        if any(name in stage_config for name, _ in STAGES_STATE_FIELDS):
            return StageConfigState.from_stages_state(stage_config, ordered)
        if stage_config and all(isinstance(key, str) for key in stage_config):
            return StageConfigState.from_records(stage_config, ordered)
        return StageConfigState(stage_config)

    def _warn_gaps(self, ctx: CompileContext, ordered: OrderedPipeline, state: Mapping[StageKey, StageConfig]) -> None:
        for group in ordered.groups:
            for stage in group.stages:
                if StageKey(group.id, stage.id) not in state:
                    ctx.add_warning(
                        phase="compile",
                        message=f"Stage '{stage.id}' in '{group.id}' has no configuration; omitted",
                    )
                elif infer_tool_type(stage.tool_hint, stage.label, stage.declared_type, stage.category) is None:
                    ctx.add_warning(
                        phase="compile",
                        message=f"Stage '{stage.id}' in '{group.id}' has no inferable tool; compiled with tool: null",
                    )

    def compile(
        self,
        graph: GraphInput,
        stage_config: Any = None,
        *,
        pipeline_name: str,
        workstream: Optional[str] = None,
        selected_artifacts: Iterable[Union[SelectedArtifact, Mapping[str, Any]]] = (),
        now: Optional[datetime] = None,
        ctx: Optional[CompileContext] = None,
    ) -> CompileResult:
        """
        Compila o grafo e a configuração dos estágios em um descritor YAML.

        Args:
            graph: PipelineGraph ou canvas armazenado (`{"nodes", "edges"}`).
            stage_config: StageConfigState, mapeamento `StageKey → StageConfig`,
                registros por chave textual (`{"env1__s1": {"jiraNumber": ...}}`)
                ou o formato legado da tela de configuração.
            pipeline_name: Nome do pipeline.
            workstream: Identificador opcional de workstream.
            selected_artifacts: Artefatos selecionados para implantação.
            now: Instante da compilação (relógio UTC quando omitido).
            ctx: Contexto de compilação; criado quando omitido.

        Returns:
            CompileResult: Descritor, texto YAML, contexto e Manifest.

        Raises:
            CanvasException: Violação do contrato de forma do grafo ou
                configuração de estágios em formato não reconhecido.
        """
        ctx = ctx or CompileContext.new(pipeline_name=pipeline_name)
        graph = self._load(graph, ctx)
        ordered = self.resolve(graph, ctx=ctx)
        state = self._run_phase(ctx, "compile", lambda: self._stage_state(stage_config, ordered))
        self._warn_gaps(ctx, ordered, state)

        descriptor = self._run_phase(
            ctx,
            "compile",
            lambda: compile_descriptor(
                ordered,
                state,
                pipeline_name=pipeline_name,
                workstream=workstream,
                selected_artifacts=selected_artifacts,
                settings=self.settings,
                now=now,
            ),
        )
        stages = descriptor.stage_entries()
        ctx.log(
            phase="compile",
            level="info",
            message="descriptor_compiled",
            nodes=len(descriptor.nodes),
            stages=len(stages),
            null_tools=sum(1 for s in stages if s.tool is None),
        )

        text = self._run_phase(ctx, "serialize", lambda: serialize_descriptor(descriptor))
        ctx.log(phase="serialize", level="info", message="descriptor_serialized", bytes=len(text.encode("utf-8")))

        manifest = create_manifest(
            compile_id=ctx.compile_id,
            started_at=ctx.created_at,
            compiler_version=self.settings.compiler_version,
            config_hash=self.settings.config_hash,
            graph_hash=canonical_hash(graph.to_canvas()),
        )
        record_context(manifest, ctx)
        set_outputs(
            manifest,
            pipeline_name=descriptor.pipeline_name,
            build_version=descriptor.build_version,
            nodes=[n.name for n in descriptor.nodes],
            stage_count=len(stages),
            descriptor_hash=canonical_hash(text),
        )
        return CompileResult(descriptor=descriptor, text=text, context=ctx, manifest=manifest)
