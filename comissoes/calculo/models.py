# comissoes/calculo/models.py

# Molde dos dados de entrada do cálculo. O pydantic garante que cada venda
# chega ao motor com valores não negativos, alíquotas em [0, 1) e número de
# parcelas inteiro; qualquer desvio vira InvalidInputError antes do cálculo.

from decimal import Decimal
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from comissoes.calculo.tabelas import PaymentMethod
from comissoes.errors import InvalidInputError
from comissoes.logging_config import log
from comissoes.shared.utils import safe_decimal


class SaleFinancials(BaseModel):
    model_config = ConfigDict(frozen=True)

    invoiced_value: Decimal = Field(ge=0)
    table_value: Decimal = Field(ge=0)
    table_icms_rate: Decimal = Field(ge=0, lt=1)
    destination_icms_rate: Decimal = Field(ge=0, lt=1)
    commission_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    payment_method: PaymentMethod = PaymentMethod.CASH
    down_payment: Decimal = Field(default=Decimal("0"), ge=0)
    installment_count: int = Field(default=0, ge=0)
    installment_amount: Decimal = Field(default=Decimal("0"), ge=0)

    @field_validator(
        "invoiced_value",
        "table_value",
        "table_icms_rate",
        "destination_icms_rate",
        "commission_percent",
        "down_payment",
        "installment_amount",
        mode="before",
    )
    @classmethod
    def coerce_decimal(cls, v: Any):
        """Aceita float, int e texto no padrão brasileiro."""
        valor = safe_decimal(v)
        if not valor.is_finite():
            raise ValueError("valor precisa ser finito")
        return valor

    @field_validator("payment_method", mode="before")
    @classmethod
    def coerce_payment_method(cls, v: Any):
        return PaymentMethod.parse(v)


def build_financials(data: Mapping[str, Any]) -> SaleFinancials:
    """
    Valida os dados brutos de uma venda. Um ValidationError do pydantic é
    logado e relançado como InvalidInputError para quem chamou.
    """
    try:
        return SaleFinancials.model_validate(dict(data))
    except ValidationError as e:
        log.error(f"Dados financeiros da venda inválidos: {e}")
        raise InvalidInputError(_resumir_erros(e)) from e


def _resumir_erros(e: ValidationError) -> str:
    partes = []
    for erro in e.errors():
        campo = ".".join(str(p) for p in erro.get("loc", ())) or "venda"
        partes.append(f"{campo}: {erro.get('msg')}")
    return "; ".join(partes)
