# src/pipeline_canvas/core/config/settings.py
"""
Settings tipados do compilador.

Este módulo converte a configuração resolvida (dict) em estruturas
imutáveis consumidas pelos componentes do core:

    - LayoutConstants  → passos, offsets e margens do Layout Engine
    - CompilerSettings → constantes de layout, listas de prioridade,
                         defaults do descritor e hash da configuração

As constantes de layout são valores nomeados, carregados de configuração
e passados explicitamente ao Layout Engine.

Invariantes:
    - Settings são imutáveis (frozen)
    - A conversão é total ou falha com `InvalidSettingsError`
    - `config_hash` identifica a configuração de origem
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidSettingsError
from .hashing import compute_config_hash
from .loader import load_config


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = config.get(name)
    if not isinstance(value, dict):
        raise InvalidSettingsError(f"Seção obrigatória ausente ou inválida: '{name}'")
    return value


def _number(section: Dict[str, Any], key: str, where: str) -> float:
    value = section.get(key)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidSettingsError(f"'{where}.{key}' deve ser numérico, recebido: {value!r}")
    return value


def _string_list(section: Dict[str, Any], key: str, where: str) -> Tuple[str, ...]:
    value = section.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidSettingsError(f"'{where}.{key}' deve ser uma lista de strings")
    return tuple(value)


def _string(section: Dict[str, Any], key: str, where: str) -> str:
    value = section.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidSettingsError(f"'{where}.{key}' deve ser uma string não vazia")
    return value


@dataclass(frozen=True)
class LayoutConstants:
    """
    Constantes geométricas do Layout Engine.

    Campos:
        - start_x / start_y: origem do primeiro grupo de ambiente
        - group_width / group_gutter: largura do grupo e espaço entre grupos
          (o passo horizontal é a soma dos dois)
        - group_bottom_margin: margem inferior somada à altura do grupo
        - child_top_offset / child_left_padding: origem dos filhos, relativa
          ao grupo
        - child_row_height / child_row_gap: altura da linha e espaço vertical
        - orphan_column_pitch / orphan_row_pitch / orphan_rows: grade dos
          vértices órfãos posicionados após o último grupo
    """

    start_x: float = 100
    start_y: float = 100
    group_width: float = 220
    group_gutter: float = 80
    group_bottom_margin: float = 20
    child_top_offset: float = 50
    child_left_padding: float = 40
    child_row_height: float = 55
    child_row_gap: float = 20
    orphan_column_pitch: float = 180
    orphan_row_pitch: float = 80
    orphan_rows: int = 2

    @property
    def group_pitch(self) -> float:
        return self.group_width + self.group_gutter

    @property
    def row_pitch(self) -> float:
        return self.child_row_height + self.child_row_gap

    def group_height(self, child_count: int) -> float:
        """Altura de um grupo com `child_count` filhos (mínimo de uma linha)."""
        rows = max(child_count, 1)
        return self.child_top_offset + rows * self.row_pitch + self.group_bottom_margin

    @classmethod
    def from_dict(cls, section: Dict[str, Any]) -> "LayoutConstants":
        values = {}
        for name in cls.__dataclass_fields__:
            values[name] = _number(section, name, "layout")
        values["orphan_rows"] = int(values["orphan_rows"])
        if values["orphan_rows"] < 1:
            raise InvalidSettingsError("'layout.orphan_rows' deve ser >= 1")
        return cls(**values)


@dataclass(frozen=True)
class CompilerSettings:
    """
    Configuração efetiva e imutável de uma instância do compilador.

    Uma mesma instância pode ser compartilhada por várias passadas de
    compilação: nenhum componente a modifica.
    """

    layout: LayoutConstants
    deployment_order: Tuple[str, ...]
    category_order: Tuple[str, ...]
    default_branch: str = "main"
    default_package_version: str = "latest"
    default_artifact_version: str = "Active"
    build_version_format: str = "%Y%m%d.%H%M%S"
    compiler_version: str = "0.1.0"
    config_hash: Optional[str] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CompilerSettings":
        """
        Converte a configuração resolvida em settings tipados.

        Raises:
            InvalidSettingsError: Se alguma seção obrigatória estiver
                ausente ou com tipo inválido.
        """
        if not isinstance(config, dict):
            raise InvalidSettingsError(
                f"Configuração deve ser dict, recebido: {type(config).__name__}"
            )

        layout = LayoutConstants.from_dict(_section(config, "layout"))
        ordering = _section(config, "ordering")
        descriptor = _section(config, "descriptor")
        compiler = config.get("compiler") or {}

        return cls(
            layout=layout,
            deployment_order=_string_list(ordering, "deployment", "ordering"),
            category_order=_string_list(ordering, "categories", "ordering"),
            default_branch=_string(descriptor, "default_branch", "descriptor"),
            default_package_version=_string(descriptor, "default_package_version", "descriptor"),
            default_artifact_version=_string(descriptor, "default_artifact_version", "descriptor"),
            build_version_format=_string(descriptor, "build_version_format", "descriptor"),
            compiler_version=str(compiler.get("version", "0.1.0")),
            config_hash=compute_config_hash(config),
        )


def load_settings(
    *,
    local_path: Optional[str] = None,
    defaults_path: Optional[str] = None,
) -> CompilerSettings:
    """Carrega defaults (+ override local opcional) e devolve `CompilerSettings`."""
    config = load_config(defaults_path=defaults_path, local_path=local_path)
    return CompilerSettings.from_config(config)


@lru_cache(maxsize=1)
def default_settings() -> CompilerSettings:
    """Settings resolvidos apenas a partir dos defaults empacotados."""
    return load_settings()
