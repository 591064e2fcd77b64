# comissoes/calculo/calculadora.py

"""
Calculadora de comissão da venda (orquestrador).

Fluxo: VP -> valor tabela ajustado pelo ICMS -> over bruto -> cascata de
deduções -> comissão do pedido -> comissão total e percentual final.

O percentual final é sempre sobre o VALOR FATURADO da NF, não sobre o VP.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from comissoes.calculo.deducoes import calc_cascading_deductions
from comissoes.calculo.models import SaleFinancials, build_financials
from comissoes.calculo.valor_presente import PresentValueResult, present_value_for_sale
from comissoes.errors import InvalidInputError
from comissoes.logging_config import log
from comissoes.shared.utils import (
    CEM,
    ZERO,
    quantize_money,
    quantize_percent,
    require_finite,
    require_non_negative,
    require_rate,
    safe_decimal,
)


class OverPriceSource(str, Enum):
    COMPUTED = "computed"
    OVERRIDDEN = "overridden"


@dataclass(frozen=True)
class CommissionResult:
    adjusted_table_value: Decimal
    over_price_gross: Decimal
    deduction_icms: Decimal
    deduction_pis_cofins: Decimal
    deduction_ir_csll: Decimal
    over_price_net: Decimal
    base_commission: Decimal
    total_commission: Decimal
    effective_commission_percent: Decimal
    over_price_source: OverPriceSource
    table_value: Decimal
    commission_percent: Decimal

    @property
    def is_overridden(self) -> bool:
        return self.over_price_source is OverPriceSource.OVERRIDDEN

    @property
    def company_commission(self) -> Decimal:
        """Comissão total da empresa (pedido + over líquido), base do rateio por comissão."""
        return self.total_commission

    def to_dict(self) -> Dict[str, Any]:
        dados = asdict(self)
        dados["over_price_source"] = self.over_price_source.value
        return dados


@dataclass(frozen=True)
class SaleCalculation:
    """Resultado completo de um recálculo: entradas, VP e comissão."""

    financials: SaleFinancials
    present_value: PresentValueResult
    commission: CommissionResult

    def to_dict(self) -> Dict[str, Any]:
        dados = self.commission.to_dict()
        dados["present_value"] = self.present_value.present_value
        dados["embedded_interest"] = self.present_value.embedded_interest
        dados["nominal_total"] = self.present_value.nominal_total
        dados["invoiced_value"] = self.financials.invoiced_value
        dados["payment_method"] = self.financials.payment_method.value
        return dados


def calc_adjusted_table_value(
    table_value: Any, table_icms_rate: Any, destination_icms_rate: Any
) -> Decimal:
    """
    Reexpressa o valor tabela (que embute o ICMS da origem) no ICMS do destino:
        ajustado = tabela * (1 - icms_origem) / (1 - icms_destino)
    """
    tabela = require_non_negative(table_value, "Valor tabela")
    origem = require_rate(table_icms_rate, "ICMS da tabela")
    destino = require_finite(safe_decimal(destination_icms_rate), "ICMS de destino")
    if destino == 1:
        raise InvalidInputError("ICMS de destino igual a 100% torna o ajuste indefinido.")
    destino = require_rate(destino, "ICMS de destino")

    return quantize_money(tabela * (1 - origem) / (1 - destino))


def calc_commission(
    invoiced_value: Any,
    present_value: Any,
    table_value: Any,
    commission_percent: Any,
    table_icms_rate: Any,
    destination_icms_rate: Any,
    manual_over_price: Optional[Any] = None,
) -> CommissionResult:
    faturado = require_non_negative(invoiced_value, "Valor faturado")
    vp = require_non_negative(present_value, "Valor presente")
    tabela = require_non_negative(table_value, "Valor tabela")
    percentual = require_non_negative(commission_percent, "Percentual de comissão")
    if percentual > CEM:
        raise InvalidInputError(f"Percentual de comissão acima de 100 (recebido {percentual}).")
    destino = safe_decimal(destination_icms_rate)

    # Passo 1: tabela ajustada pelo diferencial de ICMS
    tabela_ajustada = calc_adjusted_table_value(tabela, table_icms_rate, destino)

    # Passo 2: over bruto (calculado ou informado pelo aprovador)
    if manual_over_price is None:
        origem_over = OverPriceSource.COMPUTED
        over_bruto = quantize_money(vp - tabela_ajustada)
    else:
        origem_over = OverPriceSource.OVERRIDDEN
        over_bruto = quantize_money(
            require_finite(safe_decimal(manual_over_price), "Over price manual")
        )

    # Passo 3: cascata sobre o over, no ICMS do destino
    cascata = calc_cascading_deductions(over_bruto, destino)

    # Passo 4: comissão do pedido sobre o valor tabela ORIGINAL
    comissao_pedido = quantize_money(tabela * percentual / CEM)

    # Passo 5: total sem travar over negativo em zero
    comissao_total = comissao_pedido + cascata.net_amount
    if faturado > 0:
        percentual_final = quantize_percent(comissao_total / faturado * CEM)
    else:
        percentual_final = quantize_percent(ZERO)

    log.debug(
        f"[Comissão] Tabela {tabela} -> ajustada {tabela_ajustada} | VP {vp} | Over {over_bruto} ({origem_over.value}) "
        f"-> líquido {cascata.net_amount} | Pedido {comissao_pedido} | Total {comissao_total} ({percentual_final}%)"
    )

    return CommissionResult(
        adjusted_table_value=tabela_ajustada,
        over_price_gross=over_bruto,
        deduction_icms=cascata.deduction_icms,
        deduction_pis_cofins=cascata.deduction_pis_cofins,
        deduction_ir_csll=cascata.deduction_ir_csll,
        over_price_net=cascata.net_amount,
        base_commission=comissao_pedido,
        total_commission=comissao_total,
        effective_commission_percent=percentual_final,
        over_price_source=origem_over,
        table_value=quantize_money(tabela),
        commission_percent=percentual,
    )


def recompute(
    financials: Union[SaleFinancials, Mapping[str, Any]],
    manual_over_price: Optional[Any] = None,
) -> SaleCalculation:
    """
    Ponto de entrada único do cálculo, chamado a cada alteração na tela de
    revisão. Puro: mesmas entradas, mesmo resultado.
    """
    if not isinstance(financials, SaleFinancials):
        financials = build_financials(financials)

    vp = present_value_for_sale(financials)
    comissao = calc_commission(
        invoiced_value=financials.invoiced_value,
        present_value=vp.present_value,
        table_value=financials.table_value,
        commission_percent=financials.commission_percent,
        table_icms_rate=financials.table_icms_rate,
        destination_icms_rate=financials.destination_icms_rate,
        manual_over_price=manual_over_price,
    )
    return SaleCalculation(financials=financials, present_value=vp, commission=comissao)
