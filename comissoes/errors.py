# comissoes/errors.py
"""
Erros do motor de comissões.

O motor é total sobre entradas numéricas bem formadas: tudo aqui representa
falha de validação do lado de quem chama.
"""


class CommissionError(Exception):
    """Base para os erros do domínio de comissões."""


class InvalidInputError(CommissionError, ValueError):
    """Valor monetário negativo, alíquota fora de [0, 1), parcelas não inteiras etc."""


class MissingParticipantError(CommissionError):
    """Participante marcado, mas sem identidade escolhida.

    Validação de tela. O rateio nunca lança este erro: trata o participante
    como não selecionado.
    """


class SaleNotFoundError(CommissionError, LookupError):
    pass
