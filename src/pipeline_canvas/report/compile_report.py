"""
src/pipeline_canvas/report/compile_report.py

Canonical `compile_report.md` generator (v1) for Pipeline Canvas.

Rules:
- The report is derived EXCLUSIVELY from a CompileManifest (or its dict form).
- It does not recompute, infer or read anything outside the Manifest.
- Same Manifest => same report (stable ordering everywhere).

Required structure:
# Compile Report

## Summary
## Pipeline Structure
## Warnings
## Event Log
## Traceability
## Compile Metadata
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from pipeline_canvas.core.traceability.manifest import CompileManifest


REQUIRED_SECTIONS: List[str] = [
    "# Compile Report",
    "## Summary",
    "## Pipeline Structure",
    "## Warnings",
    "## Event Log",
    "## Traceability",
    "## Compile Metadata",
]


def _sorted_items(d: Any) -> List[Tuple[str, Any]]:
    if not isinstance(d, dict):
        return []
    return sorted(d.items(), key=lambda kv: kv[0])


def _as_pretty_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, indent=2)


def _require_manifest(manifest: Union[CompileManifest, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(manifest, CompileManifest):
        manifest = manifest.to_dict()
    if not isinstance(manifest, dict) or not manifest:
        raise ValueError("Manifest is required to generate the compile report")
    return manifest


def _section(manifest: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = manifest.get(name)
    return value if isinstance(value, dict) else {}


def generate_compile_report(manifest: Union[CompileManifest, Dict[str, Any]]) -> str:
    """Render the full compile report from a CompileManifest."""
    manifest = _require_manifest(manifest)

    compile_info = _section(manifest, "compile")
    inputs = _section(manifest, "inputs")
    outputs = _section(manifest, "outputs")
    warnings = _section(manifest, "warnings")
    events = manifest.get("events") if isinstance(manifest.get("events"), list) else []

    lines: List[str] = []

    lines.append("# Compile Report\n")

    lines.append("## Summary")
    lines.append(f"- **Compile ID**: `{compile_info.get('compile_id', '<unknown>')}`")
    lines.append(f"- **Started At (UTC)**: `{compile_info.get('started_at', '<unknown>')}`")
    lines.append(f"- **Compiler Version**: `{compile_info.get('compiler_version', '<unknown>')}`")
    lines.append(f"- **Pipeline**: `{outputs.get('pipeline_name', '<unknown>')}`")
    lines.append(f"- **Build Version**: `{outputs.get('build_version', '<unknown>')}`")
    lines.append("")

    lines.append("## Pipeline Structure")
    nodes = outputs.get("nodes")
    if isinstance(nodes, list) and nodes:
        for index, name in enumerate(nodes):
            lines.append(f"{index + 1}. {name}")
        lines.append(f"\nStages compiled: `{outputs.get('stage_count', 0)}`")
    else:
        lines.append("No nodes recorded in the Manifest.")
    lines.append("")

    lines.append("## Warnings")
    if warnings:
        for phase, messages in _sorted_items(warnings):
            lines.append(f"### {phase}")
            for message in messages or []:
                lines.append(f"- {message}")
    else:
        lines.append("No warnings recorded.")
    lines.append("")

    lines.append("## Event Log")
    if events:
        lines.append("| # | Timestamp | Phase | Event | Level |")
        lines.append("|---|-----------|-------|-------|-------|")
        for index, event in enumerate(events):
            if not isinstance(event, dict):
                continue
            payload = event.get("payload") if isinstance(event.get("payload"), dict) else {}
            lines.append(
                f"| {index + 1} | {event.get('timestamp', '')} | {event.get('phase', '')} "
                f"| {event.get('event_type', '')} | {payload.get('level', '')} |"
            )
        failures = [
            e for e in events
            if isinstance(e, dict) and e.get("event_type") == "compile_failed"
        ]
        for failure in failures:
            lines.append("\n### compile_failed")
            lines.append("```json")
            lines.append(_as_pretty_json(failure.get("payload", {})))
            lines.append("```")
    else:
        lines.append("No events recorded.")
    lines.append("")

    lines.append("## Traceability")
    lines.append("- Source of truth: `CompileManifest` only.")
    lines.append(f"- Config hash: `{inputs.get('config_hash')}`")
    lines.append(f"- Graph hash: `{inputs.get('graph_hash')}`")
    lines.append(f"- Descriptor hash: `{outputs.get('descriptor_hash')}`")
    lines.append(f"- Events recorded: `{len(events)}`\n")

    lines.append("## Compile Metadata")
    lines.append("### compile")
    lines.append("```json")
    lines.append(_as_pretty_json(compile_info))
    lines.append("```")
    lines.append("### inputs")
    lines.append("```json")
    lines.append(_as_pretty_json(inputs))
    lines.append("```")

    content = "\n".join(lines)

    for sec in REQUIRED_SECTIONS:
        if sec not in content:
            raise RuntimeError(f"Report generation failed: missing required section: {sec}")

    return content


def write_compile_report(manifest: Union[CompileManifest, Dict[str, Any]], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_compile_report(manifest), encoding="utf-8")
    return path
