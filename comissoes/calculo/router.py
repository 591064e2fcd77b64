# comissoes/calculo/router.py

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from comissoes.calculo.atribuicao import (
    OrganizationCommissionConfig,
    ParticipantAssignment,
    commission_to_persist,
    split_commission,
    split_to_dict,
)
from comissoes.calculo.calculadora import recompute
from comissoes.calculo.parcelas import generate_installment_dates
from comissoes.calculo.tabelas import format_icms_rate, icms_rate_for_state
from comissoes.errors import InvalidInputError
from comissoes.logging_config import log

router = APIRouter(prefix="/api/v1/comissao", tags=["Comissão - Cálculo"])

# --- MODELOS ---

Numero = Union[str, float, int]


class CalculoRequest(BaseModel):
    venda: Dict[str, Any]
    manual_over_price: Optional[Numero] = None


class ParticipanteRequest(BaseModel):
    selected: bool = False
    identity_id: Optional[str] = None
    percent_of_basis: Numero = 0


class AtribuicaoRequest(CalculoRequest):
    commission_basis: Optional[str] = None
    over_share_percent: Optional[Numero] = None
    internal_seller: Optional[ParticipanteRequest] = None
    representative: Optional[ParticipanteRequest] = None


class ParcelasRequest(BaseModel):
    base_date: date
    installment_count: int
    installment_amount: Numero


def _serializar(valor: Any) -> Any:
    # Dinheiro vai como texto para não perder centavos no JSON
    if isinstance(valor, Decimal):
        return str(valor)
    if isinstance(valor, dict):
        return {k: _serializar(v) for k, v in valor.items()}
    if isinstance(valor, list):
        return [_serializar(v) for v in valor]
    return valor


def _participante(dados: Optional[ParticipanteRequest]) -> Optional[ParticipantAssignment]:
    if dados is None:
        return None
    return ParticipantAssignment(
        selected=dados.selected,
        identity_id=dados.identity_id,
        percent_of_basis=dados.percent_of_basis,
    )


# --- ENDPOINTS ---


@router.get("/icms/{uf}")
async def get_icms_rate(uf: str):
    return {
        "uf": uf.upper(),
        "rate": str(icms_rate_for_state(uf)),
        "formatted": format_icms_rate(uf),
    }


@router.post("/calcular")
async def calcular(request: CalculoRequest):
    try:
        calculo = recompute(request.venda, manual_over_price=request.manual_over_price)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _serializar(calculo.to_dict())


@router.post("/atribuir")
async def atribuir(request: AtribuicaoRequest):
    """
    1. Recalcula a venda (com over manual, se houver).
    2. Monta a parametrização da organização (ou padrões do .env).
    3. Rateia entre vendedor interno e representante.
    """
    try:
        calculo = recompute(request.venda, manual_over_price=request.manual_over_price)
        config = OrganizationCommissionConfig.from_settings(
            commission_basis=request.commission_basis,
            over_share_percent=request.over_share_percent,
        )
        split = split_commission(
            calculo.commission,
            config,
            internal_seller=_participante(request.internal_seller),
            representative=_participante(request.representative),
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    log.info(
        f"[Router] Rateio calculado: {len(split.payouts)} participante(s), total {split.total_assigned}"
    )
    return _serializar(
        {
            "calculo": calculo.to_dict(),
            "atribuicao": split_to_dict(split),
            "commission_calculated": commission_to_persist(calculo.commission, split),
        }
    )


@router.post("/parcelas")
async def gerar_parcelas(request: ParcelasRequest) -> List[Dict[str, Any]]:
    try:
        parcelas = generate_installment_dates(
            request.base_date, request.installment_count, request.installment_amount
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _serializar([p.to_dict() for p in parcelas])
