from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

from comissoes.errors import InvalidInputError

CENTAVOS = Decimal("0.01")
QUATRO_CASAS = Decimal("0.0001")
ZERO = Decimal("0")
CEM = Decimal("100")


def safe_decimal(value: Any) -> Decimal:
    """Converte qualquer entrada (banco, JSON, tela) para Decimal seguro.

    None vira zero. Float passa por str() para não herdar o erro binário.
    Strings aceitam tanto "1234.56" quanto "1.234,56".
    """
    if value is None:
        return Decimal("0.00")
    if isinstance(value, bool):
        raise InvalidInputError(f"Valor booleano não é numérico: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (float, int)):
        return Decimal(str(value))
    if isinstance(value, str):
        cleaned = value.strip().replace("R$", "").strip()
        if "," in cleaned:
            cleaned = cleaned.replace(".", "").replace(",", ".")
        try:
            return Decimal(cleaned)
        except InvalidOperation:
            raise InvalidInputError(f"Valor não numérico: {value!r}")
    raise InvalidInputError(f"Tipo não suportado para valor numérico: {type(value).__name__}")


def require_finite(value: Decimal, campo: str) -> Decimal:
    if not value.is_finite():
        raise InvalidInputError(f"{campo} precisa ser finito (recebido {value}).")
    return value


def require_non_negative(value: Any, campo: str) -> Decimal:
    valor = require_finite(safe_decimal(value), campo)
    if valor < 0:
        raise InvalidInputError(f"{campo} não pode ser negativo (recebido {valor}).")
    return valor


def require_rate(value: Any, campo: str) -> Decimal:
    """Alíquota como fração em [0, 1)."""
    taxa = require_finite(safe_decimal(value), campo)
    if taxa < 0 or taxa >= 1:
        raise InvalidInputError(f"{campo} deve estar em [0, 1) (recebido {taxa}).")
    return taxa


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def quantize_percent(value: Decimal) -> Decimal:
    return value.quantize(QUATRO_CASAS, rounding=ROUND_HALF_UP)


def formatar_valor(valor: Any, com_simbolo: bool = True) -> str:
    """Formata valor monetário no padrão brasileiro (R$ 1.234,56)."""
    valor = quantize_money(safe_decimal(valor))
    sinal = "-" if valor < 0 else ""
    texto = f"{abs(valor):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    prefixo = "R$ " if com_simbolo else ""
    return f"{sinal}{prefixo}{texto}"


def formatar_percentual(fracao: Any) -> str:
    """0.1234 -> '12,34%'."""
    valor = quantize_money(safe_decimal(fracao) * CEM)
    return f"{valor:.2f}%".replace(".", ",")
