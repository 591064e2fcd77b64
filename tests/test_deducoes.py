# tests/test_deducoes.py

from decimal import Decimal

import pytest

from comissoes.calculo.deducoes import calc_cascading_deductions
from comissoes.errors import InvalidInputError


def test_cascata_sobre_o_residuo():
    # Arrange: over de 21.019,26 com ICMS de destino 7%
    # Act
    cascata = calc_cascading_deductions(Decimal("21019.26"), Decimal("0.07"))
    # Assert: cada tributo incide sobre o que sobrou do anterior
    assert cascata.deduction_icms == Decimal("1471.35")
    assert cascata.deduction_pis_cofins == Decimal("1808.18")
    assert cascata.deduction_ir_csll == Decimal("6031.51")
    assert cascata.net_amount == Decimal("11708.22")


def test_cascata_nao_e_soma_simples():
    cascata = calc_cascading_deductions(1000, "0.12")
    soma_simples = Decimal("1000") * (Decimal("0.12") + Decimal("0.0925") + Decimal("0.34"))
    assert cascata.total_deductions < soma_simples


def test_arredondamento_meio_para_cima():
    # 8439,75 * 34% = 2869,515 -> 2869,52
    cascata = calc_cascading_deductions(10000, "0.07")
    assert cascata.deduction_icms == Decimal("700.00")
    assert cascata.deduction_pis_cofins == Decimal("860.25")
    assert cascata.deduction_ir_csll == Decimal("2869.52")
    assert cascata.net_amount == Decimal("5570.23")


@pytest.mark.parametrize("bruto", ["100", "21019.26", "999999.99", "0.37"])
@pytest.mark.parametrize("icms", ["0", "0.04", "0.07", "0.12"])
def test_deducoes_nunca_passam_do_bruto(bruto, icms):
    cascata = calc_cascading_deductions(bruto, icms)
    bruto = Decimal(bruto)
    assert cascata.total_deductions < bruto
    assert cascata.net_amount == bruto - cascata.deduction_icms - cascata.deduction_pis_cofins - cascata.deduction_ir_csll


@pytest.mark.parametrize("bruto", ["-5161.29", "0", "-0.50"])
def test_over_nao_positivo_nao_e_tributado(bruto):
    cascata = calc_cascading_deductions(bruto, "0.12")
    assert cascata.deduction_icms == 0
    assert cascata.deduction_pis_cofins == 0
    assert cascata.deduction_ir_csll == 0
    assert cascata.net_amount == Decimal(bruto)


def test_aliquota_fora_do_intervalo():
    with pytest.raises(InvalidInputError):
        calc_cascading_deductions(100, "1")
    with pytest.raises(InvalidInputError):
        calc_cascading_deductions(100, "-0.01")
