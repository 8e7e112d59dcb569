# src/pipeline_canvas/core/descriptor/inference.py
"""
Inferência heurística do tipo de ferramenta de um estágio.

A inferência segue, em ordem:

    1. `tool_hint` explícito (dados legados do canvas), normalizado por
       palavra-chave; sem correspondência, o próprio hint é o tipo
    2. palavras-chave no nome do estágio (rótulo, ou o tipo declarado)
    3. categoria do estágio (`plan`, `code`); `deploy` só é inferido por
       palavra-chave no nome

Sem correspondência, o tipo é None e o estágio compila com `tool: null`.

Limites explícitos:
    - A heurística não é autoritativa: um rótulo renomeado pode mudar o
      resultado
    - Não acessa credenciais nem conectores
"""

from __future__ import annotations

from typing import Optional

from pipeline_canvas.core.graph.classifier import Category

from .types import ToolKind


JIRA = "JIRA"
GITHUB = "GitHub"
GITLAB = "GitLab"
SAP_CPI = "SAP_CPI"
CLOUD_FOUNDRY = "CloudFoundry"
JENKINS = "Jenkins"

CATEGORY_FALLBACK = {
    Category.PLAN: JIRA,
    Category.CODE: GITHUB,
}

TOOL_KINDS = {
    JIRA: ToolKind.TICKET,
    GITHUB: ToolKind.SOURCE,
    GITLAB: ToolKind.SOURCE,
    SAP_CPI: ToolKind.DEPLOYMENT,
    CLOUD_FOUNDRY: ToolKind.DEPLOYMENT,
}


def _from_hint(hint: str) -> str:
    upper = hint.upper()
    if "JIRA" in upper:
        return JIRA
    if "GITHUB" in upper:
        return GITHUB
    if "GITLAB" in upper:
        return GITLAB
    if "SAP" in upper or "CPI" in upper:
        return SAP_CPI
    if "CLOUD" in upper and "FOUNDRY" in upper:
        return CLOUD_FOUNDRY
    if "JENKINS" in upper:
        return JENKINS
    return hint


def _from_name(name: str) -> Optional[str]:
    upper = name.upper()
    if "JIRA" in upper or "PLAN" in upper:
        return JIRA
    if "GITHUB" in upper or "CODE" in upper:
        return GITHUB
    if "GITLAB" in upper:
        return GITLAB
    if any(k in upper for k in ("DEPLOY", "SAP", "CPI", "CLOUD FOUNDRY")):
        return SAP_CPI
    if "JENKINS" in upper:
        return JENKINS
    return None


def infer_tool_type(
    tool_hint: Optional[str],
    label: Optional[str],
    declared_type: Optional[str],
    category: Optional[Category] = None,
) -> Optional[str]:
    """
    Infere o tipo de ferramenta (`JIRA`, `GitHub`, `SAP_CPI`, ...).

    Exemplos:
        >>> infer_tool_type(None, "JIRA", "plan_jira", Category.PLAN)
        'JIRA'
        >>> infer_tool_type("cloud_foundry", "", "deploy_cloud_foundry")
        'CloudFoundry'
        >>> infer_tool_type(None, "Cypress", "test_cypress", Category.TEST) is None
        True
    """
    if tool_hint:
        return _from_hint(tool_hint)

    inferred = _from_name(label or declared_type or "")
    if inferred is not None:
        return inferred

    return CATEGORY_FALLBACK.get(category) if category is not None else None


def tool_kind(tool_type: str) -> ToolKind:
    return TOOL_KINDS.get(tool_type, ToolKind.GENERIC)


# Artifact type names as shown by the integration suite → executor names.
ARTIFACT_TYPES = {
    "Integration Flow": "IntegrationFlow",
    "Value Mapping": "ValueMapping",
    "Message Mapping": "MessageMapping",
    "Script Collection": "ScriptCollection",
    "IntegrationDesigntimeArtifacts": "IntegrationFlow",
    "ValueMappingDesigntimeArtifacts": "ValueMapping",
    "MessageMappingDesigntimeArtifacts": "MessageMapping",
    "ScriptCollectionDesigntimeArtifacts": "ScriptCollection",
}


def normalize_artifact_type(artifact_type: Optional[str]) -> str:
    if not artifact_type:
        return ""
    return ARTIFACT_TYPES.get(artifact_type, artifact_type)
