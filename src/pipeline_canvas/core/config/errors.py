# src/pipeline_canvas/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Pipeline Canvas.

Todas as falhas de carregamento, merge ou conversão da configuração do
compilador são expressas por esta hierarquia. São violações estruturais
e, portanto, fatais: nenhuma configuração parcial é produzida.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa erro de grafo ou de compilação
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração do compilador.

    Permite captura genérica de qualquer falha de configuração, separada
    das falhas de forma do grafo (`core.exceptions`).
    """


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de defaults não existe no caminho informado.

    O arquivo de defaults é obrigatório: sem ele não há constantes de
    layout nem listas de prioridade válidas.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada pelo loader.

    Formatos aceitos: YAML (.yaml, .yml) e JSON (.json). O formato não é
    inferido pelo conteúdo.
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos para a mesma chave durante o deep-merge.

    Exemplo de conflito:
        - base:     {"layout": {"group_width": 220}}
        - override: {"layout": "wide"}

    Nenhuma coerção é tentada.
    """


class InvalidSettingsError(ConfigError):
    """
    A configuração resolvida não pode ser convertida em `CompilerSettings`.

    Levantada quando uma seção obrigatória está ausente ou quando um valor
    tem tipo incompatível (ex.: largura de grupo não numérica, lista de
    prioridade que não é lista de strings).
    """
