# tests/test_atribuicao.py

from decimal import Decimal

from comissoes.calculo.atribuicao import (
    CommissionBasis,
    OrganizationCommissionConfig,
    ParticipantAssignment,
    ParticipantRole,
    commission_to_persist,
    split_commission,
)
from comissoes.calculo.calculadora import CommissionResult, OverPriceSource, calc_commission


def criar_resultado(over_liquido: str, tabela: str = "90000", percentual: str = "5") -> CommissionResult:
    tabela = Decimal(tabela)
    comissao_pedido = tabela * Decimal(percentual) / 100
    over = Decimal(over_liquido)
    return CommissionResult(
        adjusted_table_value=tabela,
        over_price_gross=over,
        deduction_icms=Decimal("0"),
        deduction_pis_cofins=Decimal("0"),
        deduction_ir_csll=Decimal("0"),
        over_price_net=over,
        base_commission=comissao_pedido,
        total_commission=comissao_pedido + over,
        effective_commission_percent=Decimal("0"),
        over_price_source=OverPriceSource.COMPUTED,
        table_value=tabela,
        commission_percent=Decimal(percentual),
    )


def vendedor(percentual, identidade="vendedor-1", selecionado=True):
    return ParticipantAssignment(selected=selecionado, identity_id=identidade, percent_of_basis=Decimal(percentual))


def representante(percentual, identidade="rep-1", selecionado=True):
    return ParticipantAssignment(selected=selecionado, identity_id=identidade, percent_of_basis=Decimal(percentual))


def test_rateio_dois_participantes_base_tabela():
    # Arrange
    resultado = criar_resultado("11756.60")
    config = OrganizationCommissionConfig(CommissionBasis.TABLE_VALUE, Decimal("10"))
    # Act
    split = split_commission(resultado, config, vendedor("5"), representante("3"))
    # Assert
    assert split.basis_amount == Decimal("90000")
    assert split.payout_for(ParticipantRole.INTERNAL_SELLER).payout == Decimal("5675.66")
    assert split.payout_for(ParticipantRole.REPRESENTATIVE).payout == Decimal("3875.66")
    assert split.total_assigned == Decimal("9551.32")
    assert commission_to_persist(resultado, split) == Decimal("9551.32")


def test_rateio_base_comissao_da_empresa():
    resultado = criar_resultado("1000")
    config = OrganizationCommissionConfig("comissao_empresa", 10)

    split = split_commission(resultado, config, internal_seller=vendedor("10"))

    # Base = comissão total = 4.500 + 1.000 = 5.500; 10% disso = 550 + 10% do over (100)
    assert split.basis is CommissionBasis.COMMISSION_VALUE
    assert split.basis_amount == Decimal("5500")
    assert split.total_assigned == Decimal("650.00")


def test_base_comissao_usa_comissao_total_do_calculo():
    # Arrange
    resultado = calc_commission(
        invoiced_value="106180.55",
        present_value="106180.55",
        table_value=90000,
        commission_percent=5,
        table_icms_rate="0.12",
        destination_icms_rate="0.07",
    )
    config = OrganizationCommissionConfig("commission_value", 10)

    # Act
    split = split_commission(resultado, config, internal_seller=vendedor("10"))

    # Assert: 16.208,22 * 10% = 1.620,82 + 1.170,82 do over
    assert resultado.total_commission == Decimal("16208.22")
    assert split.basis_amount == resultado.total_commission
    assert split.total_assigned == Decimal("2791.64")


def test_over_negativo_nao_e_repassado():
    resultado = criar_resultado("-5161.29")
    config = OrganizationCommissionConfig()

    split = split_commission(resultado, config, vendedor("5"), representante("3"))

    assert split.over_share_disregarded
    assert split.payout_for(ParticipantRole.INTERNAL_SELLER).over_share == 0
    assert split.payout_for(ParticipantRole.INTERNAL_SELLER).payout == Decimal("4500.00")
    assert split.payout_for(ParticipantRole.REPRESENTATIVE).payout == Decimal("2700.00")
    assert split.over_share_label() == "R$ 0,00 (desconsiderado)"


def test_participante_nao_selecionado_nao_recebe():
    resultado = criar_resultado("1000")
    split = split_commission(
        resultado,
        OrganizationCommissionConfig(),
        internal_seller=vendedor("5", selecionado=False),
        representative=representante("3"),
    )
    assert split.payout_for(ParticipantRole.INTERNAL_SELLER) is None
    assert split.payout_for(ParticipantRole.REPRESENTATIVE).payout == Decimal("2800.00")


def test_selecionado_sem_identidade_conta_como_nao_selecionado():
    resultado = criar_resultado("1000")
    split = split_commission(
        resultado,
        OrganizationCommissionConfig(),
        internal_seller=vendedor("5", identidade=None),
    )
    assert not split.has_participants
    assert split.total_assigned == 0
    # Sem participantes, grava a comissão total da empresa
    assert commission_to_persist(resultado, split) == resultado.total_commission


def test_sem_rateio_persiste_comissao_total():
    resultado = criar_resultado("250")
    assert commission_to_persist(resultado, None) == Decimal("4750")


def test_config_padrao_vem_do_settings():
    config = OrganizationCommissionConfig.from_settings()
    assert config.commission_basis is CommissionBasis.TABLE_VALUE
    assert config.over_share_percent == Decimal("10")


def test_config_informada_pela_organizacao_prevalece():
    config = OrganizationCommissionConfig.from_settings("commission_value", 0)
    assert config.commission_basis is CommissionBasis.COMMISSION_VALUE
    assert config.over_share_percent == 0


def test_over_share_configuravel():
    resultado = criar_resultado("2000")
    config = OrganizationCommissionConfig(CommissionBasis.TABLE_VALUE, Decimal("25"))
    split = split_commission(resultado, config, vendedor("0"))
    assert split.total_assigned == Decimal("500.00")
    assert split.over_share_label() == "R$ 500,00"
