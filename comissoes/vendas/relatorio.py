# comissoes/vendas/relatorio.py
"""
Relatório em lote: recalcula várias vendas independentes e monta um
DataFrame (uma linha por venda) para dashboards e exportação.
"""

from typing import Any, Dict, Iterable, Mapping

import numpy as np
import pandas as pd

from comissoes.calculo.calculadora import recompute
from comissoes.errors import InvalidInputError
from comissoes.logging_config import log
from comissoes.vendas.service import financials_from_sale

COLUNAS_VALORES = [
    "invoiced_value",
    "present_value",
    "embedded_interest",
    "over_price_gross",
    "over_price_net",
    "deduction_icms",
    "deduction_pis_cofins",
    "deduction_ir_csll",
    "base_commission",
    "total_commission",
    "effective_commission_percent",
]

COLUNAS_RELATORIO = ["sale_id", "nfe_number", "client_name", "status"] + COLUNAS_VALORES + [
    "over_price_source",
    "observacoes",
]


def _linha_venda(venda: Mapping[str, Any]) -> Dict[str, Any]:
    linha = {
        "sale_id": venda.get("id"),
        "nfe_number": venda.get("nfe_number"),
        "client_name": venda.get("client_name"),
        "status": venda.get("status"),
        "over_price_source": None,
        "observacoes": "",
    }
    try:
        financials = financials_from_sale(venda, venda.get("installments") or [])
        calculo = recompute(financials)
    except InvalidInputError as e:
        # Venda com dados inválidos não derruba o lote: fica marcada
        log.error(f"[Relatório] Venda {venda.get('id', 'N/A')} ignorada: {e}")
        linha.update({col: np.nan for col in COLUNAS_VALORES})
        linha["observacoes"] = f"Dados inválidos: {e}"
        return linha

    dados = calculo.to_dict()
    for col in COLUNAS_VALORES:
        linha[col] = float(dados[col])
    linha["over_price_source"] = dados["over_price_source"]
    return linha


def build_commission_report(vendas: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    log.info("Iniciando recálculo em lote das vendas...")
    linhas = [_linha_venda(v) for v in vendas]
    if not linhas:
        log.warning("Nenhuma venda recebida para o relatório.")
        return pd.DataFrame(columns=COLUNAS_RELATORIO)

    df = pd.DataFrame(linhas, columns=COLUNAS_RELATORIO)
    log.success(f"Relatório montado com {len(df)} venda(s).")
    return df


def calc_report_totals(df: pd.DataFrame) -> dict:
    """
    Totais para o dashboard, arredondados para 2 casas.
    Vendas marcadas como inválidas ficam fora das somas.
    """
    df_validas = df.dropna(subset=["total_commission"]) if not df.empty else df

    if df_validas.empty:
        return {
            "total_vendas": 0.00,
            "total_valor_presente": 0.00,
            "total_over_bruto": 0.00,
            "total_over_liquido": 0.00,
            "total_comissoes": 0.00,
            "qtd_vendas": 0,
            "inconsistencias": len(df),
        }

    return {
        "total_vendas": round(float(df_validas["invoiced_value"].sum()), 2),
        "total_valor_presente": round(float(df_validas["present_value"].sum()), 2),
        "total_over_bruto": round(float(df_validas["over_price_gross"].sum()), 2),
        "total_over_liquido": round(float(df_validas["over_price_net"].sum()), 2),
        "total_comissoes": round(float(df_validas["total_commission"].sum()), 2),
        "qtd_vendas": len(df_validas),
        "inconsistencias": len(df) - len(df_validas),
    }
