# comissoes/calculo/valor_presente.py

"""
Valor Presente (VP) de uma venda parcelada.

VP = entrada + soma das parcelas descontadas mês a mês:
    VP = entrada + Σ parcela / (1 + i)^n,  n = 1..qtd_parcelas

A entrada não é descontada. Venda à vista usa o valor faturado direto.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List

from comissoes.calculo.models import SaleFinancials
from comissoes.calculo.tabelas import PaymentMethod, monthly_interest_rate
from comissoes.errors import InvalidInputError
from comissoes.logging_config import log
from comissoes.shared.utils import ZERO, quantize_money, require_non_negative


@dataclass(frozen=True)
class PresentValueResult:
    present_value: Decimal
    embedded_interest: Decimal
    nominal_total: Decimal
    monthly_rate: Decimal = ZERO


@dataclass(frozen=True)
class PaymentSchedule:
    """Entrada e parcelas deduzidas das parcelas gravadas de uma venda."""

    payment_method: PaymentMethod
    down_payment: Decimal
    installment_count: int
    installment_amount: Decimal


def calc_present_value(
    down_payment: Any,
    installment_amount: Any,
    installment_count: int,
    monthly_rate: Any,
) -> PresentValueResult:
    entrada = require_non_negative(down_payment, "Entrada")
    parcela = require_non_negative(installment_amount, "Valor da parcela")
    taxa = require_non_negative(monthly_rate, "Taxa mensal")
    if isinstance(installment_count, bool) or not isinstance(installment_count, int):
        raise InvalidInputError(
            f"Quantidade de parcelas precisa ser inteira (recebido {installment_count!r})."
        )
    if installment_count < 0:
        raise InvalidInputError("Quantidade de parcelas não pode ser negativa.")

    fator = Decimal("1") + taxa
    soma_descontada = sum(
        (parcela / (fator ** n) for n in range(1, installment_count + 1)), ZERO
    )

    valor_presente = quantize_money(entrada + soma_descontada)
    nominal = quantize_money(entrada + parcela * installment_count)
    juros = nominal - valor_presente

    log.debug(
        f"[VP] Entrada {entrada}, {installment_count}x {parcela} a {taxa}/mês -> VP {valor_presente} (juros {juros})"
    )
    return PresentValueResult(
        present_value=valor_presente,
        embedded_interest=juros,
        nominal_total=nominal,
        monthly_rate=taxa,
    )


def present_value_for_sale(financials: SaleFinancials) -> PresentValueResult:
    """VP de uma venda conforme a forma de pagamento."""
    if financials.payment_method is PaymentMethod.CASH:
        valor = quantize_money(financials.invoiced_value)
        return PresentValueResult(
            present_value=valor, embedded_interest=Decimal("0.00"), nominal_total=valor
        )

    return calc_present_value(
        down_payment=financials.down_payment,
        installment_amount=financials.installment_amount,
        installment_count=financials.installment_count,
        monthly_rate=monthly_interest_rate(financials.payment_method),
    )


def derive_payment_schedule(
    invoiced_value: Any, installment_values: Iterable[Any]
) -> PaymentSchedule:
    """
    Monta entrada/parcelas a partir das parcelas gravadas (boletos).

    Entrada = total da NF - soma das parcelas; valor da parcela = média.
    Sem parcelas, a venda é tratada como à vista.
    """
    total = require_non_negative(invoiced_value, "Valor faturado")
    valores: List[Decimal] = [
        require_non_negative(v, "Valor da parcela") for v in installment_values
    ]

    if not valores:
        return PaymentSchedule(
            payment_method=PaymentMethod.CASH,
            down_payment=quantize_money(total),
            installment_count=0,
            installment_amount=Decimal("0.00"),
        )

    soma = sum(valores, ZERO)
    entrada = total - soma
    if entrada < 0:
        log.warning(
            f"[VP] Soma das parcelas ({soma}) maior que o valor faturado ({total}); entrada zerada."
        )
        entrada = ZERO

    return PaymentSchedule(
        payment_method=PaymentMethod.INSTALLMENTS_BOLETO,
        down_payment=quantize_money(entrada),
        installment_count=len(valores),
        installment_amount=quantize_money(soma / len(valores)),
    )
