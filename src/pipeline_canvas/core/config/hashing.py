# src/pipeline_canvas/core/config/hashing.py
"""
Hashing canônico de estruturas do compilador.

Gera a identidade estrutural da configuração efetiva e dos snapshots de
entrada (grafo, configuração de estágios) registrados no Manifest de
compilação. Duas compilações com o mesmo hash de entradas devem produzir
descritores idênticos, a menos dos campos de timestamp.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256 em hexadecimal (64 caracteres)
"""

import hashlib
import json
from typing import Any, Dict


def canonical_hash(value: Any) -> str:
    """
    Hash SHA-256 da serialização JSON canônica de `value`.

    `default=str` cobre escalares não serializáveis (ex.: datetimes).
    """
    canonical_json = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash determinístico da configuração efetiva do compilador.

    Args:
        config (Dict[str, Any]): Configuração resolvida.

    Returns:
        str: Hash SHA-256 hexadecimal.

    Raises:
        TypeError: Se `config` não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )
    return canonical_hash(config)
