# src/pipeline_canvas/core/config/loader.py
"""
Loader canônico de configuração do Pipeline Canvas.

A configuração efetiva do compilador é resolvida a partir de:
    - um arquivo de defaults (obrigatório; por padrão o
      `compiler.defaults.yaml` empacotado junto a este módulo)
    - um arquivo local de overrides (opcional)

Princípios fundamentais:
    - Configuração é declarativa e explícita
    - Erros estruturais são falhas fatais
    - A mesma entrada sempre produz a mesma configuração final

Invariantes:
    - O arquivo de defaults é obrigatório
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não converte a configuração em settings tipados (ver `settings.py`)
    - Não interage com o grafo nem com o compilador
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

DEFAULTS_FILENAME = "compiler.defaults.yaml"


def default_defaults_path() -> Path:
    """Caminho do arquivo de defaults distribuído com o pacote."""
    return Path(__file__).resolve().parent / DEFAULTS_FILENAME


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo de configuração e valida sua estrutura mínima.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva do compilador.

    Política de resolução:
        - Sem `defaults_path`, usa o arquivo de defaults empacotado
        - O arquivo local é opcional; se o caminho não existir, é ignorado
        - Quando presente, o local tem prioridade via `deep_merge`

    Args:
        defaults_path (Optional[str]): Caminho do arquivo de defaults.
        local_path (Optional[str]): Caminho opcional de overrides locais.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se houver conflito de tipos no merge.
    """
    defaults_file = Path(defaults_path) if defaults_path is not None else default_defaults_path()
    effective = _load_file(defaults_file)

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective
