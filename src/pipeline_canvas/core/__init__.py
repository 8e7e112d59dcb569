# src/pipeline_canvas/core/__init__.py
"""
Core do Pipeline Canvas.

Este pacote reúne a implementação canônica do compilador de grafos de
pipeline, independente de UI, persistência ou motor de execução.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada
    - livre de I/O (exceto o loader de configuração)
    - orientado a contratos explícitos

Componentes principais:
    - graph        → classificação de vértices, validação de forma,
                     resolução de posse e ordenação de implantação
    - layout       → posicionamento 2-D e arestas sintéticas
    - descriptor   → compilação, serialização e parsing do descritor
    - engine       → orquestração de uma passada de compilação
    - config       → resolução de configuração (merge, hashing, settings)
    - traceability → Manifest e Event Log de compilação

Princípios fundamentais:
    - Cada passada recebe um snapshot e produz valores novos
    - Nenhum estado mutável é compartilhado entre compilações
    - Degradação explícita em vez de exceções para lacunas de domínio
"""
