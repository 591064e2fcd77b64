# comissoes/vendas/service.py
"""
Fluxo de revisão e aprovação do cálculo de uma venda.
Gerencia: leitura da venda -> recálculo -> rateio -> retrato gravado.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from comissoes.calculo.atribuicao import (
    AssignmentSplit,
    OrganizationCommissionConfig,
    ParticipantAssignment,
    ParticipantRole,
    commission_to_persist,
    split_commission,
)
from comissoes.calculo.calculadora import SaleCalculation, recompute
from comissoes.calculo.models import SaleFinancials, build_financials
from comissoes.calculo.tabelas import (
    PaymentMethod,
    icms_rate_for_state,
    normalize_icms_rate,
)
from comissoes.calculo.valor_presente import derive_payment_schedule
from comissoes.errors import CommissionError, SaleNotFoundError
from comissoes.logging_config import log
from comissoes.shared.utils import CEM, formatar_percentual, formatar_valor, safe_decimal
from comissoes.vendas.repository import SaleRepository

UF_ORIGEM_PADRAO = "SP"


class SaleStatus(str, Enum):
    APROVADO = "aprovado"
    PAGO = "pago"


STATUS_APROVADOS = {SaleStatus.APROVADO.value, SaleStatus.PAGO.value}


@dataclass(frozen=True)
class ApprovalSnapshot:
    """Retrato do cálculo no momento da aprovação."""

    sale_id: str
    calculation: SaleCalculation
    split: Optional[AssignmentSplit]
    commission_calculated: Decimal
    approved_at: datetime
    status: SaleStatus = SaleStatus.APROVADO
    edited: bool = False

    def to_record(self) -> Dict[str, Any]:
        comissao = self.calculation.commission
        vp = self.calculation.present_value
        financials = self.calculation.financials

        vendedor = self.split.payout_for(ParticipantRole.INTERNAL_SELLER) if self.split else None
        representante = self.split.payout_for(ParticipantRole.REPRESENTATIVE) if self.split else None

        return {
            "over_price": comissao.over_price_gross,
            "over_price_liquido": comissao.over_price_net,
            "deducao_icms": comissao.deduction_icms,
            "deducao_pis_cofins": comissao.deduction_pis_cofins,
            "deducao_ir_csll": comissao.deduction_ir_csll,
            "comissao_pedido": comissao.base_commission,
            "comissao_total": comissao.total_commission,
            "percentual_comissao_final": comissao.effective_commission_percent,
            "valor_presente": vp.present_value,
            "juros_embutidos": vp.embedded_interest,
            "commission_calculated": self.commission_calculated,
            "percentual_comissao": financials.commission_percent,
            # Gravado como percentual inteiro, igual ao restante do banco
            "percentual_icms": financials.destination_icms_rate * CEM,
            "internal_seller_id": vendedor.identity_id if vendedor else None,
            "internal_seller_percent": vendedor.percent_of_basis if vendedor else Decimal("0"),
            "representative_id": representante.identity_id if representante else None,
            "representative_percent": representante.percent_of_basis if representante else Decimal("0"),
            "comissao_internal_seller": vendedor.payout if vendedor else Decimal("0.00"),
            "comissao_representative": representante.payout if representante else Decimal("0.00"),
            "over_price_source": comissao.over_price_source.value,
            "status": self.status.value,
            "edited": self.edited,
            "approved_at": self.approved_at.isoformat(),
        }


def _metodo_gravado(payment_method: Any) -> Optional[PaymentMethod]:
    # O banco guarda textos livres como "parcelado_cartao 10x" ou "Boleto 3x"
    texto = str(payment_method or "").lower()
    if "cart" in texto or texto == PaymentMethod.INSTALLMENTS_CARD.value:
        return PaymentMethod.INSTALLMENTS_CARD
    if "boleto" in texto:
        return PaymentMethod.INSTALLMENTS_BOLETO
    return None


def _validar_participantes(
    internal_seller: Optional[ParticipantAssignment],
    representative: Optional[ParticipantAssignment],
) -> None:
    # Aprovar com participante marcado e sem identidade é erro de tela
    if internal_seller is not None:
        internal_seller.ensure_identity(ParticipantRole.INTERNAL_SELLER)
    if representative is not None:
        representative.ensure_identity(ParticipantRole.REPRESENTATIVE)


def financials_from_sale(
    sale: Mapping[str, Any],
    installments: List[Mapping[str, Any]],
    overrides: Optional[Mapping[str, Any]] = None,
) -> SaleFinancials:
    """
    Converte a linha gravada da venda (+ parcelas) nos dados do cálculo.
    Percentuais de ICMS gravados como inteiro (12) viram fração (0.12).
    """
    total = sale.get("total_value")
    cronograma = derive_payment_schedule(total, [i.get("value") for i in installments])

    metodo = cronograma.payment_method
    if cronograma.installment_count > 0 and _metodo_gravado(sale.get("payment_method")):
        metodo = _metodo_gravado(sale.get("payment_method"))

    entrada = cronograma.down_payment
    if cronograma.installment_count > 0 and sale.get("valor_entrada") is not None:
        entrada = safe_decimal(sale.get("valor_entrada"))

    if sale.get("percentual_icms") is not None:
        icms_destino = normalize_icms_rate(sale.get("percentual_icms"))
    else:
        icms_destino = icms_rate_for_state(sale.get("uf_destiny"))

    dados = {
        "invoiced_value": total,
        "table_value": sale.get("table_value"),
        "table_icms_rate": icms_rate_for_state(sale.get("emitente_uf") or UF_ORIGEM_PADRAO),
        "destination_icms_rate": icms_destino,
        "commission_percent": sale.get("percentual_comissao") or 0,
        "payment_method": metodo,
        "down_payment": entrada,
        "installment_count": cronograma.installment_count,
        "installment_amount": cronograma.installment_amount,
    }
    if overrides:
        dados.update(overrides)
    return build_financials(dados)


class ApprovalService:
    def __init__(self, repository: SaleRepository):
        self.repository = repository

    def _carregar(self, sale_id: str):
        venda = self.repository.fetch_sale(sale_id)
        if not venda:
            raise SaleNotFoundError(f"Venda '{sale_id}' não encontrada.")
        parcelas = self.repository.fetch_installments(sale_id) or []
        return venda, parcelas

    def _recalcular(self, sale_id, venda, parcelas, overrides, manual_over_price) -> SaleCalculation:
        financials = financials_from_sale(venda, parcelas, overrides)
        log.debug(
            f"[Revisão] Venda {sale_id}: {financials.payment_method.value}, "
            f"ICMS destino {formatar_percentual(financials.destination_icms_rate)}"
        )
        return recompute(financials, manual_over_price=manual_over_price)

    def review(
        self,
        sale_id: str,
        overrides: Optional[Mapping[str, Any]] = None,
        manual_over_price: Optional[Any] = None,
    ) -> SaleCalculation:
        """Recalcula sem gravar nada. Chamado a cada alteração na revisão."""
        venda, parcelas = self._carregar(sale_id)
        return self._recalcular(sale_id, venda, parcelas, overrides, manual_over_price)

    def approve(
        self,
        sale_id: str,
        config: OrganizationCommissionConfig,
        internal_seller: Optional[ParticipantAssignment] = None,
        representative: Optional[ParticipantAssignment] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        manual_over_price: Optional[Any] = None,
    ) -> ApprovalSnapshot:
        log.info(f"[Aprovação] Iniciando aprovação da venda {sale_id}...")
        _validar_participantes(internal_seller, representative)
        venda, parcelas = self._carregar(sale_id)
        calculo = self._recalcular(sale_id, venda, parcelas, overrides, manual_over_price)
        snapshot = _montar_snapshot(
            sale_id, calculo, config, internal_seller, representative, SaleStatus.APROVADO, edited=False
        )
        self.repository.save_snapshot(sale_id, snapshot.to_record())
        log.success(
            f"[Aprovação] Venda {sale_id} aprovada. Comissão gravada: {formatar_valor(snapshot.commission_calculated)}"
        )
        return snapshot

    def edit(
        self,
        sale_id: str,
        config: OrganizationCommissionConfig,
        internal_seller: Optional[ParticipantAssignment] = None,
        representative: Optional[ParticipantAssignment] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        manual_over_price: Optional[Any] = None,
    ) -> ApprovalSnapshot:
        """Modo edição: refaz o cálculo de uma venda já aprovada e sobrescreve o retrato."""
        venda, parcelas = self._carregar(sale_id)
        status = str(venda.get("status") or "").lower()
        if status not in STATUS_APROVADOS:
            raise CommissionError(
                f"Venda '{sale_id}' ainda não foi aprovada; use a aprovação em vez da edição."
            )

        log.info(f"[Edição] Recalculando venda aprovada {sale_id}...")
        _validar_participantes(internal_seller, representative)
        calculo = self._recalcular(sale_id, venda, parcelas, overrides, manual_over_price)
        # Venda já paga continua paga depois da edição
        snapshot = _montar_snapshot(
            sale_id, calculo, config, internal_seller, representative, SaleStatus(status), edited=True
        )
        self.repository.save_snapshot(sale_id, snapshot.to_record())
        log.success(f"[Edição] Retrato da venda {sale_id} sobrescrito.")
        return snapshot


def _montar_snapshot(
    sale_id, calculo, config, internal_seller, representative, status, edited
) -> ApprovalSnapshot:
    split = split_commission(
        calculo.commission,
        config,
        internal_seller=internal_seller,
        representative=representative,
    )
    return ApprovalSnapshot(
        sale_id=sale_id,
        calculation=calculo,
        split=split,
        commission_calculated=commission_to_persist(calculo.commission, split),
        approved_at=datetime.now(timezone.utc),
        status=status,
        edited=edited,
    )
