# tests/conftest.py
"""
Fixtures compartilhados para testes do Pipeline Canvas.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas (YAML de defaults)
- settings resolvidos a partir dos defaults empacotados
- grafos de pipeline canônicos usados em vários módulos de teste
- um instante fixo de compilação

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Grafos são construídos a partir de Vertex/Edge, sem I/O
    - Imports do core são realizados de forma lazy, para que falhas de
      import apareçam no teste que as causa

Invariantes:
    - Nenhuma fixture realiza I/O
    - Dados retornados são determinísticos e isolados

Limites explícitos:
    - Não substituir testes de integração do compilador
    - Não conter lógica de domínio
"""

from datetime import datetime, timezone

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de defaults semelhante ao `compiler.defaults.yaml` empacotado.

    Fornecido como string para que cada teste decida onde gravá-lo
    (via `tmp_path`).
    """
    return """
compiler:
  version: "0.1.0"
layout:
  start_x: 100
  start_y: 100
  group_width: 220
  group_gutter: 80
  group_bottom_margin: 20
  child_top_offset: 50
  child_left_padding: 40
  child_row_height: 55
  child_row_gap: 20
  orphan_column_pitch: 180
  orphan_row_pitch: 80
  orphan_rows: 2
ordering:
  deployment: [env_dev, env_qa, env_staging, env_uat, env_prod]
  categories: [plan, code, build, test, approval, deploy, release]
descriptor:
  default_branch: main
  default_package_version: latest
  default_artifact_version: Active
  build_version_format: "%Y%m%d.%H%M%S"
""".lstrip()


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """Override local: altera a largura do grupo e a branch padrão."""
    return """
layout:
  group_width: 300
descriptor:
  default_branch: develop
""".lstrip()


@pytest.fixture
def compiler_settings():
    from pipeline_canvas.core.config.settings import default_settings

    return default_settings()


# =====================================================
# Graph fixtures
# =====================================================

@pytest.fixture
def make_vertex():
    """Fábrica de Vertex com defaults mínimos."""
    from pipeline_canvas.core.graph.types import Vertex

    def _make(vertex_id: str, declared_type: str, **kwargs):
        return Vertex(id=vertex_id, declared_type=declared_type, **kwargs)

    return _make


@pytest.fixture
def dev_qa_graph(make_vertex):
    """
    Dois ambientes com estágios de pais explícitos:

        env_dev ← code_github, build_jenkins
        env_qa  ← deploy_kubernetes

    Os estágios são declarados fora de ordem de categoria
    (build antes de code) de propósito.
    """
    from pipeline_canvas.core.graph.types import PipelineGraph

    return PipelineGraph(
        vertices=(
            make_vertex("dev", "env_dev"),
            make_vertex("qa", "env_qa"),
            make_vertex("build", "build_jenkins", parent_group_id="dev"),
            make_vertex("code", "code_github", parent_group_id="dev"),
            make_vertex("deploy", "deploy_kubernetes", parent_group_id="qa"),
        ),
        edges=(),
    )


@pytest.fixture
def stored_canvas() -> dict:
    """Canvas armazenado (formato de nós/arestas do editor visual)."""
    return {
        "nodes": [
            {"id": "env1", "type": "environmentGroup", "data": {"nodeType": "env_dev", "label": "Dev"}},
            {"id": "env2", "type": "environmentGroup", "data": {"nodeType": "env_prod"}},
            {"id": "jiraPlan", "type": "pipeline", "parentId": "env1", "data": {"nodeType": "plan_jira"}},
            {"id": "repo", "type": "pipeline", "parentId": "env1", "data": {"nodeType": "code_github"}},
            {"id": "cpi", "type": "pipeline", "parentId": "env2", "data": {"nodeType": "deploy_cloud_foundry"}},
            {"id": "sticky", "type": "note", "data": {"label": "remember"}},
        ],
        "edges": [
            {"id": "e1", "source": "jiraPlan", "target": "repo"},
        ],
    }


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
