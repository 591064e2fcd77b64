# comissoes/calculo/deducoes.py

"""
Deduções em cascata sobre o over price bruto.

Cada tributo incide sobre o que sobrou do anterior, não sobre o bruto:
    1. ICMS       = over * icms_destino
    2. PIS/COFINS = (over - ICMS) * 9,25%
    3. IR/CSLL    = (over - ICMS - PIS/COFINS) * 34%
Over zero ou negativo não é tributado: deduções zeradas e líquido = bruto.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from comissoes.calculo.tabelas import IR_CSLL_RATE, PIS_COFINS_RATE
from comissoes.logging_config import log
from comissoes.shared.utils import quantize_money, require_finite, require_rate, safe_decimal


@dataclass(frozen=True)
class CascadeDeductions:
    net_amount: Decimal
    deduction_icms: Decimal
    deduction_pis_cofins: Decimal
    deduction_ir_csll: Decimal

    @property
    def total_deductions(self) -> Decimal:
        return self.deduction_icms + self.deduction_pis_cofins + self.deduction_ir_csll


def calc_cascading_deductions(gross_amount: Any, icms_rate: Any) -> CascadeDeductions:
    bruto = quantize_money(require_finite(safe_decimal(gross_amount), "Over price bruto"))
    icms = require_rate(icms_rate, "Alíquota de ICMS")

    if bruto <= 0:
        zero = Decimal("0.00")
        log.debug(f"[Cascata] Over {bruto} não positivo, sem deduções.")
        return CascadeDeductions(
            net_amount=bruto,
            deduction_icms=zero,
            deduction_pis_cofins=zero,
            deduction_ir_csll=zero,
        )

    deducao_icms = quantize_money(bruto * icms)
    apos_icms = bruto - deducao_icms

    deducao_pis_cofins = quantize_money(apos_icms * PIS_COFINS_RATE)
    apos_pis_cofins = apos_icms - deducao_pis_cofins

    deducao_ir_csll = quantize_money(apos_pis_cofins * IR_CSLL_RATE)
    liquido = apos_pis_cofins - deducao_ir_csll

    log.debug(
        f"[Cascata] Bruto {bruto} | ICMS {deducao_icms} | PIS/COFINS {deducao_pis_cofins} | IR/CSLL {deducao_ir_csll} | Líquido {liquido}"
    )
    return CascadeDeductions(
        net_amount=liquido,
        deduction_icms=deducao_icms,
        deduction_pis_cofins=deducao_pis_cofins,
        deduction_ir_csll=deducao_ir_csll,
    )
