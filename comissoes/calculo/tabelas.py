# comissoes/calculo/tabelas.py

"""
Tabelas fixas do cálculo: ICMS interestadual por UF e juros mensais por forma
de pagamento. Somente leitura, podem ser consultadas por qualquer número de
cálculos ao mesmo tempo.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from comissoes.shared.utils import safe_decimal, CEM

# --- DEDUÇÕES FIXAS SOBRE O OVER ---
PIS_COFINS_RATE = Decimal("0.0925")  # 9,25%
IR_CSLL_RATE = Decimal("0.34")  # 34%

# --- JUROS MENSAIS PARA VALOR PRESENTE ---
TAXA_BOLETO = Decimal("0.022")  # 2,2% ao mês
TAXA_CARTAO = Decimal("0.035")  # 3,5% ao mês

# --- ICMS INTERESTADUAL ---
ICMS_12 = Decimal("0.12")
ICMS_7 = Decimal("0.07")
ICMS_PADRAO = Decimal("0.04")  # Importados e qualquer UF fora das tabelas

# Sul/Sudeste (exceto ES)
UFS_ICMS_12 = frozenset({"MG", "PR", "RJ", "RS", "SC", "SP"})

# Norte/Nordeste/Centro-Oeste e ES
UFS_ICMS_7 = frozenset(
    {
        "AC", "AL", "AM", "AP", "BA", "CE", "DF", "ES", "GO", "MA", "MT",
        "MS", "PA", "PB", "PE", "PI", "RN", "RO", "RR", "SE", "TO",
    }
)


class PaymentMethod(str, Enum):
    CASH = "cash"
    INSTALLMENTS_BOLETO = "installments_boleto"
    INSTALLMENTS_CARD = "installments_card"

    @classmethod
    def parse(cls, value: Any) -> "PaymentMethod":
        """Aceita o valor do enum ou os apelidos gravados no banco.

        Qualquer coisa desconhecida é tratada como à vista.
        """
        if isinstance(value, cls):
            return value
        texto = str(value or "").strip().lower()
        for membro in cls:
            if texto == membro.value:
                return membro
        return _PAYMENT_ALIASES.get(texto, cls.CASH)


_PAYMENT_ALIASES = {
    "a_vista": PaymentMethod.CASH,
    "avista": PaymentMethod.CASH,
    "parcelado_boleto": PaymentMethod.INSTALLMENTS_BOLETO,
    "boleto": PaymentMethod.INSTALLMENTS_BOLETO,
    "parcelado_cartao": PaymentMethod.INSTALLMENTS_CARD,
    "cartao": PaymentMethod.INSTALLMENTS_CARD,
}


def icms_rate_for_state(uf: Any) -> Decimal:
    """Alíquota de ICMS (fração) para a UF de destino. Nunca falha."""
    codigo = str(uf or "").strip().upper()
    if codigo in UFS_ICMS_12:
        return ICMS_12
    if codigo in UFS_ICMS_7:
        return ICMS_7
    return ICMS_PADRAO


def format_icms_rate(uf: Any) -> str:
    return f"{(icms_rate_for_state(uf) * CEM):.0f}%"


def monthly_interest_rate(payment_method: Any) -> Decimal:
    metodo = PaymentMethod.parse(payment_method)
    if metodo is PaymentMethod.INSTALLMENTS_BOLETO:
        return TAXA_BOLETO
    if metodo is PaymentMethod.INSTALLMENTS_CARD:
        return TAXA_CARTAO
    return Decimal("0")


def normalize_icms_rate(value: Any) -> Decimal:
    # O banco guarda percentual_icms ora como 12, ora como 0.12.
    # Fração nunca chega a 1, então 1 em diante é percentual inteiro.
    taxa = safe_decimal(value)
    if taxa >= 1:
        return taxa / CEM
    return taxa
