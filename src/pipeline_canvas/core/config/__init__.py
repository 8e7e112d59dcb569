# src/pipeline_canvas/core/config/__init__.py
"""
Camada de configuração do Pipeline Canvas.

Este pacote resolve a configuração efetiva do compilador: constantes de
layout do canvas, listas de prioridade de implantação e de categoria,
e defaults do descritor (branch, versões de pacote e de artefato).

A configuração é:
    - declarativa (YAML ou JSON)
    - determinística
    - identificável por hash canônico

Responsabilidades do pacote:
    - Carregar o arquivo de defaults empacotado e um override local opcional
    - Resolver a configuração final via deep-merge estritamente tipado
    - Converter o dicionário resolvido em `CompilerSettings` imutável

Limites explícitos:
    - Não compila grafos
    - Não conhece credenciais ou conectores
"""
from .settings import CompilerSettings, LayoutConstants, load_settings

__all__ = ["CompilerSettings", "LayoutConstants", "load_settings"]
