# comissoes/calculo/atribuicao.py
"""
Rateio da comissão entre vendedor interno e representante.

Cada participante é opcional e independente. Para quem foi selecionado e tem
identidade escolhida:
    comissão = base * percentual/100 + max(0, over_líquido) * over_share/100

A base vem da parametrização da organização: valor tabela ou comissão total
da empresa (pedido + over líquido). Over líquido negativo nunca é repassado aos participantes, mesmo
que a comissão total da empresa o carregue.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from comissoes.calculo.calculadora import CommissionResult
from comissoes.config import settings
from comissoes.errors import MissingParticipantError
from comissoes.logging_config import log
from comissoes.shared.utils import (
    CEM,
    ZERO,
    formatar_valor,
    quantize_money,
    require_non_negative,
)


class CommissionBasis(str, Enum):
    TABLE_VALUE = "table_value"
    COMMISSION_VALUE = "commission_value"

    @classmethod
    def parse(cls, value: Any) -> "CommissionBasis":
        if isinstance(value, cls):
            return value
        texto = str(value or "").strip().lower()
        if texto in ("commission_value", "comissao_empresa"):
            return cls.COMMISSION_VALUE
        return cls.TABLE_VALUE


class ParticipantRole(str, Enum):
    INTERNAL_SELLER = "internal_seller"
    REPRESENTATIVE = "representative"


@dataclass(frozen=True)
class OrganizationCommissionConfig:
    commission_basis: CommissionBasis = CommissionBasis.TABLE_VALUE
    over_share_percent: Decimal = Decimal("10")

    def __post_init__(self):
        object.__setattr__(self, "commission_basis", CommissionBasis.parse(self.commission_basis))
        object.__setattr__(
            self,
            "over_share_percent",
            require_non_negative(self.over_share_percent, "Percentual do over"),
        )

    @classmethod
    def from_settings(
        cls,
        commission_basis: Optional[Any] = None,
        over_share_percent: Optional[Any] = None,
    ) -> "OrganizationCommissionConfig":
        """Preenche o que a organização não informou com os padrões do .env."""
        return cls(
            commission_basis=commission_basis or settings.DEFAULT_COMMISSION_BASIS,
            over_share_percent=(
                over_share_percent
                if over_share_percent is not None
                else settings.DEFAULT_OVER_SHARE_PERCENT
            ),
        )


@dataclass(frozen=True)
class ParticipantAssignment:
    selected: bool = False
    identity_id: Optional[str] = None
    percent_of_basis: Decimal = Decimal("0")

    @property
    def is_payable(self) -> bool:
        return bool(self.selected and self.identity_id)

    def ensure_identity(self, role: "ParticipantRole") -> None:
        """Validação da tela de aprovação; o rateio em si nunca chama isto."""
        if self.selected and not self.identity_id:
            raise MissingParticipantError(
                f"{role.value} marcado para comissão, mas nenhum participante foi escolhido."
            )


@dataclass(frozen=True)
class ParticipantPayout:
    role: ParticipantRole
    identity_id: str
    percent_of_basis: Decimal
    basis_portion: Decimal
    over_share: Decimal
    payout: Decimal


@dataclass(frozen=True)
class AssignmentSplit:
    basis: CommissionBasis
    basis_amount: Decimal
    over_share_percent: Decimal
    over_share_disregarded: bool
    payouts: List[ParticipantPayout] = field(default_factory=list)

    @property
    def total_assigned(self) -> Decimal:
        return sum((p.payout for p in self.payouts), Decimal("0.00"))

    @property
    def has_participants(self) -> bool:
        return bool(self.payouts)

    def payout_for(self, role: ParticipantRole) -> Optional[ParticipantPayout]:
        for p in self.payouts:
            if p.role is role:
                return p
        return None

    def over_share_label(self) -> str:
        """Texto mostrado na revisão para a parte do over de cada participante."""
        if self.over_share_disregarded:
            return f"{formatar_valor(0)} (desconsiderado)"
        if not self.payouts:
            return formatar_valor(0)
        return formatar_valor(self.payouts[0].over_share)


def calc_basis_amount(result: CommissionResult, basis: CommissionBasis) -> Decimal:
    if basis is CommissionBasis.COMMISSION_VALUE:
        return result.company_commission
    return result.table_value


def split_commission(
    result: CommissionResult,
    config: OrganizationCommissionConfig,
    internal_seller: Optional[ParticipantAssignment] = None,
    representative: Optional[ParticipantAssignment] = None,
) -> AssignmentSplit:
    base = calc_basis_amount(result, config.commission_basis)
    over_positivo = max(ZERO, result.over_price_net)
    parte_over = quantize_money(over_positivo * config.over_share_percent / CEM)

    payouts = []
    participantes = (
        (ParticipantRole.INTERNAL_SELLER, internal_seller),
        (ParticipantRole.REPRESENTATIVE, representative),
    )
    for papel, participante in participantes:
        if participante is None or not participante.selected:
            continue
        if not participante.identity_id:
            # Marcado na tela sem ninguém escolhido: conta como não selecionado
            log.warning(f"[Rateio] {papel.value} marcado sem identidade; ignorado.")
            continue

        percentual = require_non_negative(
            participante.percent_of_basis, f"Percentual do {papel.value}"
        )
        parte_base = quantize_money(base * percentual / CEM)
        payouts.append(
            ParticipantPayout(
                role=papel,
                identity_id=str(participante.identity_id),
                percent_of_basis=percentual,
                basis_portion=parte_base,
                over_share=parte_over,
                payout=parte_base + parte_over,
            )
        )

    split = AssignmentSplit(
        basis=config.commission_basis,
        basis_amount=base,
        over_share_percent=config.over_share_percent,
        over_share_disregarded=result.over_price_net < 0,
        payouts=payouts,
    )
    log.debug(
        f"[Rateio] Base {config.commission_basis.value} {base} | over {result.over_price_net} "
        f"| {len(payouts)} participante(s) | total atribuído {split.total_assigned}"
    )
    return split


def commission_to_persist(result: CommissionResult, split: Optional[AssignmentSplit]) -> Decimal:
    """Valor gravado como commission_calculated na aprovação."""
    if split is not None and split.has_participants:
        return split.total_assigned
    return result.total_commission


def split_to_dict(split: AssignmentSplit) -> Dict[str, Any]:
    return {
        "basis": split.basis.value,
        "basis_amount": split.basis_amount,
        "over_share_percent": split.over_share_percent,
        "over_share_disregarded": split.over_share_disregarded,
        "over_share_label": split.over_share_label(),
        "total_assigned": split.total_assigned,
        "payouts": [
            {
                "role": p.role.value,
                "identity_id": p.identity_id,
                "percent_of_basis": p.percent_of_basis,
                "basis_portion": p.basis_portion,
                "over_share": p.over_share,
                "payout": p.payout,
            }
            for p in split.payouts
        ],
    }
