from __future__ import annotations


class ReportError(Exception):
    """Erro base do motor de relatórios."""


class InvalidInputError(ReportError, ValueError):
    """
    Entrada inválida vinda do chamador (data mal formatada, código vazio,
    linha de CSV corrompida). Nunca é um estado interno do núcleo.
    """


class ConfigError(ReportError, ValueError):
    pass
