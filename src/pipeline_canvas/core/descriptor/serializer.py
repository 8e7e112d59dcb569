# src/pipeline_canvas/core/descriptor/serializer.py
"""
Serialização textual (YAML) do PipelineDescriptor.

O texto gerado é o único contrato com o executor externo: nomes de
campo, aninhamento e ordem são preservados exatamente como em
`PipelineDescriptor.to_dict()`.
"""

from __future__ import annotations

import yaml

from .types import PipelineDescriptor


def serialize_descriptor(descriptor: PipelineDescriptor) -> str:
    """Renderiza o descritor em YAML (estilo bloco, ordem de inserção)."""
    return yaml.safe_dump(
        descriptor.to_dict(),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
