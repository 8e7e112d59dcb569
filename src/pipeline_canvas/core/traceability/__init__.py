"""
Rastreabilidade das compilações: Manifest v1.

API pública exposta:
    - CompileManifest → estrutura canônica do Manifest
    - create_manifest → criação explícita do Manifest
    - add_event       → registro explícito de eventos no Event Log
    - record_context  → cópia dos eventos/warnings de um CompileContext
    - set_outputs     → resumo do resultado da compilação
    - save_manifest   → persistência em JSON
    - load_manifest   → restauração determinística
"""

from .manifest import (
    CompileManifest,
    add_event,
    create_manifest,
    load_manifest,
    record_context,
    save_manifest,
    set_outputs,
)

__all__ = [
    "CompileManifest",
    "create_manifest",
    "add_event",
    "record_context",
    "set_outputs",
    "save_manifest",
    "load_manifest",
]
