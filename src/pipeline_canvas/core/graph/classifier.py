# src/pipeline_canvas/core/graph/classifier.py
"""
Classificador de vértices do grafo de pipeline.

Deriva, a partir do tipo declarado de um vértice (ex.: `code_github`,
`env_prod`, `note`), a sua categoria e o identificador da ferramenta.
Categoria e ferramenta nunca são entrada autoritativa: são sempre
recalculadas a partir do tipo declarado.

Regras:
    - a categoria é decidida por um conjunto fixo de prefixos reconhecidos
      (`plan_`, `code_`, `build_`, `test_`, `deploy_`, `release_`,
      `approval_`, `env_`)
    - a ferramenta é o restante do tipo após o primeiro segmento
      (`deploy_cloud_foundry` → `cloud_foundry`)
    - os tipos literais `note` e `comment` são anotações
    - qualquer outra entrada é `other`

Invariantes:
    - `classify` é pura e total: nunca levanta exceção
    - vértices `annotation` e `other` são excluídos de todas as etapas
      posteriores

Limites explícitos:
    - Não resolve posse nem ordem
    - Não valida a forma do grafo
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Tuple


class Category(str, Enum):
    """
    Categorias de vértice do canvas.

    Os valores são strings para facilitar serialização e comparação com
    as listas de prioridade vindas da configuração.
    """

    PLAN = "plan"
    CODE = "code"
    BUILD = "build"
    TEST = "test"
    DEPLOY = "deploy"
    RELEASE = "release"
    APPROVAL = "approval"
    ENVIRONMENT = "environment"
    ANNOTATION = "annotation"
    OTHER = "other"


PREFIX_CATEGORIES: Tuple[Tuple[str, Category], ...] = (
    ("plan_", Category.PLAN),
    ("code_", Category.CODE),
    ("build_", Category.BUILD),
    ("test_", Category.TEST),
    ("deploy_", Category.DEPLOY),
    ("release_", Category.RELEASE),
    ("approval_", Category.APPROVAL),
    ("env_", Category.ENVIRONMENT),
)

ANNOTATION_TYPES = frozenset({"note", "comment"})

STAGE_CATEGORIES = frozenset({
    Category.PLAN,
    Category.CODE,
    Category.BUILD,
    Category.TEST,
    Category.DEPLOY,
    Category.RELEASE,
    Category.APPROVAL,
})

# Display labels for the node palette of the canvas.
NODE_LABELS: Dict[str, str] = {
    "plan_jira": "JIRA",
    "plan_azure_devops": "Azure DevOps",
    "plan_trello": "Trello",
    "plan_asana": "Asana",
    "code_github": "GitHub",
    "code_gitlab": "GitLab",
    "code_azure_repos": "Azure Repos",
    "code_bitbucket": "Bitbucket",
    "code_sonarqube": "SonarQube",
    "build_jenkins": "Jenkins",
    "build_github_actions": "GitHub Actions",
    "build_circleci": "CircleCI",
    "build_aws_codebuild": "AWS CodeBuild",
    "build_google_cloud_build": "Google Cloud Build",
    "build_azure_pipelines": "Azure Pipelines",
    "test_cypress": "Cypress",
    "test_selenium": "Selenium",
    "test_jest": "Jest",
    "test_tricentis": "Tricentis",
    "release_argocd": "Argo CD",
    "release_servicenow": "ServiceNow",
    "release_azure_devops": "Azure DevOps Release",
    "deploy_kubernetes": "Kubernetes",
    "deploy_helm": "Helm",
    "deploy_terraform": "Terraform",
    "deploy_ansible": "Ansible",
    "deploy_docker": "Docker",
    "deploy_aws_codepipeline": "AWS CodePipeline",
    "deploy_cloud_foundry": "Cloud Foundry",
    "approval_manual": "Manual Approval",
    "approval_slack": "Slack Approval",
    "approval_teams": "Teams Approval",
    "env_dev": "Development",
    "env_qa": "QA",
    "env_staging": "Staging",
    "env_uat": "UAT",
    "env_prod": "Production",
    "note": "Sticky Note",
    "comment": "Comment",
}


class Classification(NamedTuple):
    category: Category
    tool: str


def classify(declared_type: Any) -> Classification:
    """
    Classifica um tipo declarado em `(category, tool)`.

    Entradas não-string, vazias ou com prefixo desconhecido resultam em
    `(Category.OTHER, "")`. A função nunca levanta exceção.

    Exemplos:
        >>> classify("code_github")
        Classification(category=<Category.CODE: 'code'>, tool='github')
        >>> classify("note").category
        <Category.ANNOTATION: 'annotation'>
    """
    if not isinstance(declared_type, str) or not declared_type:
        return Classification(Category.OTHER, "")

    if declared_type in ANNOTATION_TYPES:
        return Classification(Category.ANNOTATION, "")

    for prefix, category in PREFIX_CATEGORIES:
        if declared_type.startswith(prefix):
            return Classification(category, declared_type.split("_", 1)[1])

    return Classification(Category.OTHER, "")


def display_label(declared_type: str, fallback: str = "") -> str:
    """Rótulo do catálogo; senão `fallback`; senão o próprio tipo."""
    return NODE_LABELS.get(declared_type) or fallback or declared_type


def is_environment(vertex: Any) -> bool:
    return getattr(vertex, "category", None) == Category.ENVIRONMENT


def is_stage(vertex: Any) -> bool:
    return getattr(vertex, "category", None) in STAGE_CATEGORIES


def partition_vertices(vertices: Iterable[Any]) -> Tuple[List[Any], List[Any], List[Any]]:
    """
    Separa vértices classificados em `(environments, stages, discarded)`.

    `discarded` reúne anotações e vértices `other`; eles não participam
    de posse, ordenação ou compilação. A ordem de entrada é preservada
    dentro de cada lista.
    """
    environments: List[Any] = []
    stages: List[Any] = []
    discarded: List[Any] = []
    for vertex in vertices:
        if is_environment(vertex):
            environments.append(vertex)
        elif is_stage(vertex):
            stages.append(vertex)
        else:
            discarded.append(vertex)
    return environments, stages, discarded
