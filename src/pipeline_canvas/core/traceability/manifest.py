# src/pipeline_canvas/core/traceability/manifest.py
"""
Manifest de compilação: registro rastreável de uma passada do compilador.

O Manifest consolida, em uma estrutura serializável em JSON:

    - compile: identidade da passada (compile_id, started_at, versão)
    - inputs: hashes canônicos da configuração e do grafo
    - outputs: resumo do resultado (nós, estágios, hash do descritor)
    - warnings: lacunas de domínio agrupadas por fase
    - events: Event Log ordenado

Decisões arquiteturais:
    - Nenhum evento é emitido implicitamente
    - Timestamps são normalizados para UTC e gravados em ISO 8601
    - Persistência em JSON com chaves ordenadas (determinística)

Invariantes:
    - O Manifest inicia com `events`, `warnings` e `outputs` vazios
    - Eventos nunca são reordenados
    - `to_dict()` / `from_dict()` formam um round-trip sem perdas

Limites explícitos:
    - Não executa compilação
    - Não interpreta eventos (ver `report.compile_report`)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Timestamps sem timezone são assumidos como UTC; os demais são convertidos."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


@dataclass
class CompileManifest:
    """
    Manifest v1 de uma compilação.

    Estrutura mínima orientada a rastreabilidade: o suficiente para
    responder "o que foi compilado, com qual configuração, e quais
    lacunas foram encontradas".
    """

    compile: Dict[str, Any]
    inputs: Dict[str, Any]
    outputs: Dict[str, Any] = field(default_factory=dict)
    warnings: Dict[str, List[str]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compile": dict(self.compile),
            "inputs": dict(self.inputs),
            "outputs": dict(self.outputs),
            "warnings": {k: list(v) for k, v in self.warnings.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompileManifest":
        return cls(
            compile=dict(data.get("compile", {})),
            inputs=dict(data.get("inputs", {})),
            outputs=dict(data.get("outputs", {}) or {}),
            warnings={k: list(v) for k, v in (data.get("warnings", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    compile_id: str,
    started_at: datetime,
    compiler_version: str,
    config_hash: Optional[str],
    graph_hash: str,
) -> CompileManifest:
    """
    Cria o Manifest inicial de uma compilação.

    Esta função não emite eventos: o Event Log inicia vazio e só é
    preenchido por chamadas explícitas a `add_event`.

    Args:
        compile_id: Identificador da passada (ver `CompileContext`).
        started_at: Início da passada.
        compiler_version: Versão do compilador (configuração).
        config_hash: Hash canônico da configuração resolvida.
        graph_hash: Hash canônico do snapshot do grafo.

    Returns:
        CompileManifest
    """
    return CompileManifest(
        compile={
            "compile_id": compile_id,
            "started_at": _iso(started_at),
            "compiler_version": compiler_version,
        },
        inputs={
            "config_hash": config_hash,
            "graph_hash": graph_hash,
        },
    )


def add_event(
    manifest: Union[CompileManifest, Dict[str, Any]],
    *,
    event_type: str,
    ts: datetime,
    phase: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Adiciona um evento ao Event Log, preservando a ordem de chamada.

    Aceita tanto um `CompileManifest` quanto sua forma em dicionário; no
    segundo caso o dicionário é atualizado in-place.
    """
    m = manifest if isinstance(manifest, CompileManifest) else CompileManifest.from_dict(manifest)

    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if phase is not None:
        ev["phase"] = phase
    if payload is not None:
        ev["payload"] = payload

    m.events.append(ev)

    if not isinstance(manifest, CompileManifest):
        manifest.clear()
        manifest.update(m.to_dict())


def record_context(manifest: CompileManifest, ctx: Any) -> None:
    """
    Copia eventos e warnings de um `CompileContext` para o Manifest.

    Cada evento do contexto vira um evento do Manifest com
    `event_type = message`; nível e campos extras vão para `payload`.
    """
    for event in ctx.events:
        extra = {
            k: v
            for k, v in event.items()
            if k not in ("compile_id", "phase", "message", "timestamp")
        }
        add_event(
            manifest,
            event_type=event["message"],
            ts=datetime.fromisoformat(event["timestamp"]),
            phase=event.get("phase"),
            payload=extra,
        )
    for phase, messages in ctx.warnings.items():
        manifest.warnings.setdefault(phase, []).extend(messages)


def set_outputs(manifest: CompileManifest, **outputs: Any) -> None:
    manifest.outputs.update(outputs)


def save_manifest(manifest: Union[CompileManifest, Dict[str, Any]], path: Path) -> None:
    """
    Persiste o Manifest em JSON (chaves ordenadas, indentado).

    Raises:
        OSError: Falha ao criar diretórios ou escrever o arquivo.
        TypeError: Conteúdo não serializável em JSON.
    """
    data = manifest.to_dict() if isinstance(manifest, CompileManifest) else manifest
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")


def load_manifest(path: Path) -> CompileManifest:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return CompileManifest.from_dict(data)
