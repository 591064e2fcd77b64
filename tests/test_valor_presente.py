# tests/test_valor_presente.py

from decimal import Decimal

import pytest

from comissoes.calculo.models import build_financials
from comissoes.calculo.tabelas import PaymentMethod
from comissoes.calculo.valor_presente import (
    calc_present_value,
    derive_payment_schedule,
    present_value_for_sale,
)
from comissoes.errors import InvalidInputError


def test_taxa_zero_soma_nominal_exata():
    # Arrange / Act
    resultado = calc_present_value(1000, "250.50", 4, 0)
    # Assert
    assert resultado.present_value == Decimal("2002.00")
    assert resultado.embedded_interest == Decimal("0.00")


def test_sem_parcelas_vp_e_a_entrada():
    resultado = calc_present_value(5000, 300, 0, "0.022")
    assert resultado.present_value == Decimal("5000.00")
    assert resultado.embedded_interest == Decimal("0.00")


def test_uma_parcela_no_cartao():
    # 1035 / 1,035 = 1000
    resultado = calc_present_value(0, 1035, 1, "0.035")
    assert resultado.present_value == Decimal("1000.00")
    assert resultado.embedded_interest == Decimal("35.00")


def test_vp_cai_quando_a_taxa_sobe():
    taxas = ["0.01", "0.022", "0.035", "0.05"]
    valores = [calc_present_value(2000, 1000, 12, t).present_value for t in taxas]
    assert all(a > b for a, b in zip(valores, valores[1:]))


def test_juros_embutidos_positivos_com_taxa():
    resultado = calc_present_value(20000, 30000, 3, "0.022")
    assert resultado.embedded_interest > 0
    assert resultado.nominal_total == Decimal("110000.00")


def test_cenario_boleto_tres_parcelas():
    """Entrada de 20 mil + 3 boletos de 30 mil a 2,2% ao mês."""
    resultado = calc_present_value(20000, 30000, 3, "0.022")
    assert resultado.present_value == Decimal("106180.55")
    assert resultado.embedded_interest == Decimal("3819.45")


@pytest.mark.parametrize(
    "entrada, parcela, qtd, taxa",
    [
        (-1, 100, 1, "0.022"),
        (0, -100, 1, "0.022"),
        (0, 100, -1, "0.022"),
        (0, 100, 2.5, "0.022"),
        (0, 100, 1, "-0.01"),
        ("NaN", 100, 1, "0.022"),
        (0, "Infinity", 1, "0.022"),
    ],
)
def test_entradas_invalidas(entrada, parcela, qtd, taxa):
    with pytest.raises(InvalidInputError):
        calc_present_value(entrada, parcela, qtd, taxa)


def test_venda_a_vista_usa_valor_faturado():
    financials = build_financials(
        {
            "invoiced_value": 100000,
            "table_value": 90000,
            "table_icms_rate": "0.12",
            "destination_icms_rate": "0.12",
            "payment_method": "cash",
            # Ignorados à vista
            "down_payment": 10,
            "installment_count": 5,
            "installment_amount": 10,
        }
    )
    resultado = present_value_for_sale(financials)
    assert resultado.present_value == Decimal("100000.00")
    assert resultado.embedded_interest == Decimal("0.00")


def test_cronograma_a_partir_das_parcelas_gravadas():
    cronograma = derive_payment_schedule(110000, [30000, 30000, "30000.00"])
    assert cronograma.payment_method is PaymentMethod.INSTALLMENTS_BOLETO
    assert cronograma.down_payment == Decimal("20000.00")
    assert cronograma.installment_count == 3
    assert cronograma.installment_amount == Decimal("30000.00")


def test_cronograma_sem_parcelas_e_a_vista():
    cronograma = derive_payment_schedule("1.500,00", [])
    assert cronograma.payment_method is PaymentMethod.CASH
    assert cronograma.down_payment == Decimal("1500.00")
    assert cronograma.installment_count == 0


def test_cronograma_parcelas_maiores_que_nf_zera_entrada():
    cronograma = derive_payment_schedule(1000, [600, 600])
    assert cronograma.down_payment == Decimal("0.00")
    assert cronograma.installment_amount == Decimal("600.00")
