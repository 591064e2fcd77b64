# comissoes/calculo/parcelas.py

"""
Datas de vencimento das parcelas, considerando dias úteis e feriados
nacionais. Cada parcela vence 30 dias corridos após a anterior; se cair em
fim de semana ou feriado, passa para o próximo dia útil.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, FrozenSet, List

from comissoes.shared.utils import quantize_money, safe_decimal

INTERVALO_PARCELAS_DIAS = 30

# Feriados nacionais - adicionar mais anos conforme necessário
FERIADOS_NACIONAIS: Dict[int, FrozenSet[date]] = {
    2025: frozenset(
        {
            date(2025, 1, 1),  # Confraternização Universal
            date(2025, 3, 3),  # Carnaval
            date(2025, 3, 4),  # Carnaval
            date(2025, 4, 18),  # Sexta-feira Santa
            date(2025, 4, 21),  # Tiradentes
            date(2025, 5, 1),  # Dia do Trabalho
            date(2025, 6, 19),  # Corpus Christi
            date(2025, 9, 7),  # Independência
            date(2025, 10, 12),  # Nossa Senhora Aparecida
            date(2025, 11, 2),  # Finados
            date(2025, 11, 15),  # Proclamação da República
            date(2025, 12, 25),  # Natal
        }
    ),
    2026: frozenset(
        {
            date(2026, 1, 1),
            date(2026, 2, 16),
            date(2026, 2, 17),
            date(2026, 4, 3),
            date(2026, 4, 21),
            date(2026, 5, 1),
            date(2026, 6, 4),
            date(2026, 9, 7),
            date(2026, 10, 12),
            date(2026, 11, 2),
            date(2026, 11, 15),
            date(2026, 12, 25),
        }
    ),
    2027: frozenset(
        {
            date(2027, 1, 1),
            date(2027, 2, 8),
            date(2027, 2, 9),
            date(2027, 3, 26),
            date(2027, 4, 21),
            date(2027, 5, 1),
            date(2027, 5, 27),
            date(2027, 9, 7),
            date(2027, 10, 12),
            date(2027, 11, 2),
            date(2027, 11, 15),
            date(2027, 12, 25),
        }
    ),
}


@dataclass(frozen=True)
class GeneratedInstallment:
    installment_number: int
    value: Decimal
    due_date: date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "installment_number": self.installment_number,
            "value": self.value,
            "due_date": self.due_date.isoformat(),
        }


def is_business_day(dia: date) -> bool:
    # sábado = 5, domingo = 6
    if dia.weekday() >= 5:
        return False
    return dia not in FERIADOS_NACIONAIS.get(dia.year, frozenset())


def next_business_day(dia: date) -> date:
    while not is_business_day(dia):
        dia += timedelta(days=1)
    return dia


def add_days_and_adjust(inicio: date, dias: int) -> date:
    return next_business_day(inicio + timedelta(days=dias))


def generate_installment_dates(
    base_date: date, installment_count: int, installment_amount: Any
) -> List[GeneratedInstallment]:
    valor = quantize_money(safe_decimal(installment_amount))
    if installment_count <= 0 or valor <= 0:
        return []

    parcelas = []
    atual = base_date
    for numero in range(1, installment_count + 1):
        # Conta a partir do vencimento anterior já ajustado
        atual = add_days_and_adjust(atual, INTERVALO_PARCELAS_DIAS)
        parcelas.append(
            GeneratedInstallment(installment_number=numero, value=valor, due_date=atual)
        )
    return parcelas
