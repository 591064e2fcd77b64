# tests/test_relatorio.py

import pandas as pd
import pytest

from comissoes.vendas.relatorio import build_commission_report, calc_report_totals


def criar_vendas() -> list:
    return [
        {
            "id": "a-vista",
            "nfe_number": "1001",
            "client_name": "Cliente A",
            "status": "pendente",
            "total_value": 100000,
            "table_value": 100000,
            "percentual_comissao": 5,
            "percentual_icms": 12,
            "emitente_uf": "SP",
        },
        {
            "id": "boleto",
            "nfe_number": "1002",
            "client_name": "Cliente B",
            "status": "aprovado",
            "total_value": 110000,
            "table_value": 90000,
            "percentual_comissao": 5,
            "uf_destiny": "BA",
            "emitente_uf": "SP",
            "installments": [{"value": 30000}, {"value": 30000}, {"value": 30000}],
        },
        {
            "id": "quebrada",
            "nfe_number": "1003",
            "client_name": "Cliente C",
            "total_value": 5000,
            "table_value": -5,
        },
    ]


def test_relatorio_uma_linha_por_venda():
    df = build_commission_report(criar_vendas())

    assert len(df) == 3
    linha = df.set_index("sale_id").loc["boleto"]
    assert linha["over_price_net"] == pytest.approx(11708.22)
    assert linha["total_commission"] == pytest.approx(16208.22)
    assert linha["over_price_source"] == "computed"


def test_venda_invalida_fica_marcada_sem_derrubar_o_lote():
    df = build_commission_report(criar_vendas())
    linha = df.set_index("sale_id").loc["quebrada"]
    assert pd.isna(linha["total_commission"])
    assert "Dados inválidos" in linha["observacoes"]


def test_totais_do_dashboard():
    totais = calc_report_totals(build_commission_report(criar_vendas()))

    assert totais["qtd_vendas"] == 2
    assert totais["inconsistencias"] == 1
    assert totais["total_vendas"] == pytest.approx(210000.0)
    assert totais["total_comissoes"] == pytest.approx(21208.22)
    assert totais["total_over_liquido"] == pytest.approx(11708.22)


def test_relatorio_vazio():
    df = build_commission_report([])
    assert df.empty
    totais = calc_report_totals(df)
    assert totais["qtd_vendas"] == 0
    assert totais["total_comissoes"] == 0.0
