# src/pipeline_canvas/__init__.py
"""
Pipeline Canvas: compilador de pipelines CI/CD desenhados em canvas.

Este pacote raiz define o namespace público do Pipeline Canvas, o
componente que transforma um grafo visual de estágios (plan, code,
build, test, deploy, release, approval) agrupados sob ambientes de
implantação (dev/qa/staging/uat/prod) em um descritor declarativo de
pipeline consumido por um motor de execução externo.

Princípios centrais:
    - O compilador é uma função pura de grafo + configuração de estágios
    - A ordenação de ambientes e estágios é determinística
    - Lacunas estruturais degradam para saídas válidas, nunca para exceções
    - Entradas malformadas falham cedo, com erro tipado e descritivo

Arquitetura em alto nível:
    - core.graph        → classificação, validação, posse e ordenação
    - core.layout       → layout do canvas e arestas de fluxo entre ambientes
    - core.descriptor   → compilação, serialização e parsing do descritor
    - core.engine       → orquestração e contexto de compilação
    - core.config       → carregamento, merge e hashing de configuração
    - core.traceability → Manifest de compilação e Event Log

Limites explícitos:
    - Não resolve credenciais nem conectores
    - Não executa pipelines
    - Não renderiza o canvas
"""

from .core.engine.engine import CanvasCompiler
from .core.graph.types import Edge, PipelineGraph, Vertex

__all__ = ["CanvasCompiler", "PipelineGraph", "Vertex", "Edge"]
