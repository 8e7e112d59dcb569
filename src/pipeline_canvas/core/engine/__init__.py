"""
Engine do Pipeline Canvas.

Componentes principais:
    - context → CompileContext (eventos estruturados e warnings por fase)
    - engine  → CanvasCompiler (resolução, layout e compilação do descritor)

Princípios fundamentais:
    - Cada compilação recebe um snapshot e produz valores novos
    - Nenhuma decisão silenciosa: lacunas viram warnings registrados
    - Falhas de forma são propagadas após registro do evento
"""

from .context import CompileContext
from .engine import CanvasCompiler, CanvasLayout, CompileResult

__all__ = ["CanvasCompiler", "CanvasLayout", "CompileContext", "CompileResult"]
