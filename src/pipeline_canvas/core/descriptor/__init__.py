"""
Descritor de pipeline: compilação, serialização e leitura.

    - stage_config → StageConfigState (entrada da tela de configuração)
    - inference    → tipo de ferramenta inferido por estágio
    - compiler     → estrutura ordenada + configuração → PipelineDescriptor
    - serializer   → PipelineDescriptor → YAML
    - parser       → YAML → estrutura validada, em ordem de execução
"""

from .compiler import compile_descriptor
from .parser import find_source_control_config, flatten_stages, parse_descriptor
from .serializer import serialize_descriptor
from .stage_config import StageConfigState
from .types import PipelineDescriptor, SelectedArtifact, StageConfig, StageKey

__all__ = [
    "compile_descriptor",
    "find_source_control_config",
    "flatten_stages",
    "parse_descriptor",
    "serialize_descriptor",
    "StageConfigState",
    "PipelineDescriptor",
    "SelectedArtifact",
    "StageConfig",
    "StageKey",
]
