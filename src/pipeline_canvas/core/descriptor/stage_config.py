# src/pipeline_canvas/core/descriptor/stage_config.py
"""
Estado de configuração dos estágios (StageConfigState).

O estado é um mapeamento imutável `StageKey → StageConfig`, mantido fora
do compilador (tela de configuração) e apenas lido por ele.

A tela de configuração persiste o estado em um formato legado, com um
mapa por campo e chaves textuais:

    {
        "selectedConnectors":      {"env1__stage1": "conn-42", ...},
        "selectedEnvironments":    {...},
        "connectorRepositoryUrls": {...},
        "selectedBranches":        {...},
        "selectedApprovers":       {"env1__stage1": ["a@x.com"], ...},
        "jiraNumbers":             {...},
    }

`from_stages_state` converte esse formato em chaves compostas. O formato
por registro, uma configuração por chave textual, é lido por
`from_records`:

    {"env1__stage1": {"connectorId": "conn-42", "jiraNumber": "PROJ-1", ...}}

Nos dois casos, para cada par conhecido `(grupo, estágio)` são resolvidas
as chaves `"{g}__{s}"`, `"{g}::{s}"` e `"{s}"`, nessa ordem. Chaves que não
correspondem a nenhum par conhecido são ignoradas.

Raises:
    InvalidStageConfig: chave que não é um par de strings, valor que não é
    StageConfig, ou registro que não é um mapa.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from pipeline_canvas.core import errors
from pipeline_canvas.core.exceptions import InvalidStageConfig
from pipeline_canvas.core.graph.ordering import OrderedPipeline

from .types import StageConfig, StageKey


# campo legado → atributo de StageConfig
STAGES_STATE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("selectedConnectors", "connector_id"),
    ("selectedEnvironments", "environment_name"),
    ("connectorRepositoryUrls", "repository_url"),
    ("selectedBranches", "branch"),
    ("selectedApprovers", "approver_emails"),
    ("jiraNumbers", "jira_number"),
)

# campo do registro → atributo de StageConfig
RECORD_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("connectorId", "connector_id"),
    ("environmentName", "environment_name"),
    ("repositoryUrl", "repository_url"),
    ("branch", "branch"),
    ("approverEmails", "approver_emails"),
    ("jiraNumber", "jira_number"),
)


def _approvers(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    out = []
    for item in value:
        if isinstance(item, Mapping):
            item = item.get("email")
        if item:
            out.append(str(item))
    return tuple(out)


def _scalar(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _invalid(key: Any, reason: str) -> InvalidStageConfig:
    return InvalidStageConfig.from_payload(errors.stage_config_invalid(key=repr(key), reason=reason))


def _is_pair(key: Any) -> bool:
    return isinstance(key, tuple) and len(key) == 2 and all(isinstance(part, str) for part in key)


def _stage_config(values: Mapping[str, Any]) -> StageConfig:
    return StageConfig(
        connector_id=_scalar(values.get("connector_id")),
        environment_name=_scalar(values.get("environment_name")),
        repository_url=_scalar(values.get("repository_url")),
        branch=_scalar(values.get("branch")),
        approver_emails=_approvers(values.get("approver_emails")),
        jira_number=_scalar(values.get("jira_number")),
    )


class StageConfigState(Mapping[StageKey, StageConfig]):
    """Mapeamento imutável `StageKey → StageConfig`."""

    def __init__(self, entries: Optional[Mapping[StageKey, StageConfig]] = None):
        self._entries: Dict[StageKey, StageConfig] = {}
        for key, value in (entries or {}).items():
            if not _is_pair(key):
                raise _invalid(key, "stage key must be a (environment_group_id, stage_id) pair of strings")
            if not isinstance(value, StageConfig):
                raise _invalid(key, f"value must be a StageConfig, got {type(value).__name__}")
            self._entries[StageKey(*key)] = value

    def __getitem__(self, key: Tuple[str, str]) -> StageConfig:
        if not _is_pair(key):
            raise KeyError(key)
        return self._entries[StageKey(*key)]

    def __iter__(self) -> Iterator[StageKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StageConfigState({self._entries!r})"

    @classmethod
    def from_stages_state(
        cls,
        raw: Optional[Mapping[str, Any]],
        ordered: OrderedPipeline,
    ) -> "StageConfigState":
        """
        Converte o formato legado da tela de configuração.

        Args:
            raw: Dicionário com os mapas por campo (ausentes são tratados
                como vazios).
            ordered: Estrutura ordenada que define os pares conhecidos.

        Returns:
            StageConfigState: Uma entrada por par presente em ao menos um
            dos mapas.
        """
        raw = raw or {}
        maps = [(attr, raw.get(name) or {}) for name, attr in STAGES_STATE_FIELDS]

        entries: Dict[StageKey, StageConfig] = {}
        for group_id, stage_id in ordered.stage_pairs():
            key = StageKey(group_id, stage_id)
            candidates = key.legacy_keys()
            present = False
            values: Dict[str, Any] = {}
            for attr, field_map in maps:
                for candidate in candidates:
                    if candidate not in field_map:
                        continue
                    present = True
                    if field_map[candidate]:
                        values[attr] = field_map[candidate]
                        break
            if not present:
                continue
            entries[key] = _stage_config(values)
        return cls(entries)

    @classmethod
    def from_records(
        cls,
        raw: Optional[Mapping[str, Any]],
        ordered: OrderedPipeline,
    ) -> "StageConfigState":
        """
        Converte registros indexados por chave textual.

        Cada valor é um mapa com os campos `connectorId`, `environmentName`,
        `repositoryUrl`, `branch`, `approverEmails` e `jiraNumber` (todos
        opcionais), um StageConfig pronto, ou None (estágio configurado
        sem campos). Para cada par conhecido vale a primeira chave presente
        em `StageKey.legacy_keys()`.

        Raises:
            InvalidStageConfig: Registro que não é um mapa.
        """
        raw = raw or {}

        entries: Dict[StageKey, StageConfig] = {}
        for group_id, stage_id in ordered.stage_pairs():
            key = StageKey(group_id, stage_id)
            candidate = next((c for c in key.legacy_keys() if c in raw), None)
            if candidate is None:
                continue
            record = raw[candidate]
            if isinstance(record, StageConfig):
                entries[key] = record
                continue
            if record is None:
                record = {}
            if not isinstance(record, Mapping):
                raise _invalid(candidate, f"record must be a mapping, got {type(record).__name__}")
            entries[key] = _stage_config({attr: record.get(name) for name, attr in RECORD_FIELDS})
        return cls(entries)
