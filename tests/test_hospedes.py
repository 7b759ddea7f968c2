"""
Check-in, checkout (conciliação), pulseira exclusiva e liberação de quarto
"""
from decimal import Decimal

import pytest

from models.caixa import LancamentoCaixa
from models.enums import MetodoPagamento, StatusPedido, StatusQuarto, TipoLancamento
from models.hospede import Hospede, Pagamento
from models.pedido import Pedido
from models.produto import Produto
from services import ItemPedido
from utils.erros import BusinessError, ConflictError, NotFoundError, ValidationError


class TestCheckin:

    def test_day_use_exige_documento(self, db, servicos):
        with pytest.raises(ValidationError, match="Documento"):
            servicos.hospedes.realizar_checkin(db, tipo="DAY_USE", nome="Sem Doc")

    def test_hospede_exige_quarto(self, db, servicos):
        with pytest.raises(ValidationError, match="Quarto"):
            servicos.hospedes.realizar_checkin(db, tipo="HOSPEDE", nome="Sem Quarto")

    def test_ocupa_quarto_livre(self, db, servicos, quartos):
        hospede = servicos.hospedes.realizar_checkin(db, tipo="HOSPEDE", nome="João", quarto_id=quartos["101"].id)

        assert hospede.quarto == "101"
        assert quartos["101"].status == StatusQuarto.OCUPADO

    def test_quarto_pelo_numero_legado(self, db, servicos, quartos):
        hospede = servicos.hospedes.realizar_checkin(db, tipo="HOSPEDE", nome="João", quarto="102")
        assert hospede.quarto_id == quartos["102"].id

    def test_quarto_em_manutencao_recusa(self, db, servicos, quartos):
        with pytest.raises(BusinessError, match="não está disponível"):
            servicos.hospedes.realizar_checkin(db, tipo="HOSPEDE", nome="João", quarto_id=quartos["201"].id)

    def test_quarto_inexistente(self, db, servicos, quartos):
        with pytest.raises(NotFoundError):
            servicos.hospedes.realizar_checkin(db, tipo="HOSPEDE", nome="João", quarto="999")

    def test_entrada_nao_paga_vira_divida_e_pedido_entregue(self, db, servicos):
        hospede = servicos.hospedes.realizar_checkin(
            db, tipo="DAY_USE", nome="Ana", documento="1", valor_entrada=Decimal("80")
        )

        assert hospede.divida_atual == Decimal("80.00")
        pedido = db.query(Pedido).filter(Pedido.hospede_id == hospede.id).one()
        assert pedido.status == StatusPedido.ENTREGUE
        produto = db.get(Produto, pedido.produto_id)
        assert produto.nome == "Day Use"
        assert produto.servico is True
        assert produto.visivel_cardapio is False

    def test_entrada_paga_gera_pagamento_e_divida_zero(self, db, servicos):
        hospede = servicos.hospedes.realizar_checkin(
            db,
            tipo="DAY_USE",
            nome="Ana",
            documento="1",
            valor_entrada=Decimal("80"),
            pago_na_entrada=True,
            metodo_pagamento=MetodoPagamento.PIX,
        )

        assert hospede.divida_atual == Decimal("0.00")
        assert db.query(Pagamento).filter(Pagamento.hospede_id == hospede.id).count() == 1

    def test_pago_na_entrada_sem_metodo(self, db, servicos):
        with pytest.raises(ValidationError, match="Método de pagamento"):
            servicos.hospedes.realizar_checkin(
                db, tipo="DAY_USE", nome="Ana", documento="1", valor_entrada=Decimal("80"), pago_na_entrada=True
            )

    def test_dinheiro_sem_caixa_aberto_nao_derruba_checkin(self, db, servicos, usuarios):
        hospede = servicos.hospedes.realizar_checkin(
            db,
            tipo="DAY_USE",
            nome="Ana",
            documento="1",
            valor_entrada=Decimal("50"),
            pago_na_entrada=True,
            metodo_pagamento=MetodoPagamento.DINHEIRO,
            usuario_id=usuarios["garcom"].id,
        )

        assert hospede.ativo is True
        assert db.query(LancamentoCaixa).count() == 0

    @pytest.mark.parametrize("campo", ["valor_entrada", "limite_gasto"])
    def test_valor_malformado_nao_vira_zero(self, db, servicos, campo):
        with pytest.raises(ValidationError, match="inválido"):
            servicos.hospedes.realizar_checkin(db, tipo="DAY_USE", nome="Ana", documento="1", **{campo: "80,00"})

        assert db.query(Hospede).count() == 0
        assert db.query(Pedido).count() == 0


class TestPulseira:

    def test_pulseira_em_uso_por_ativo(self, db, servicos, checkin_day_use):
        checkin_day_use(nome="Primeira", uid="NFC-X")

        with pytest.raises(ConflictError, match="NFC-X"):
            checkin_day_use(nome="Segunda", uid="NFC-X")

    def test_pulseira_reutilizada_apos_checkout(self, db, servicos, checkin_day_use):
        primeira = checkin_day_use(nome="Primeira", uid="NFC-X", entrada=Decimal("10"))
        servicos.hospedes.realizar_checkout(db, primeira.id, MetodoPagamento.PIX)

        segunda = checkin_day_use(nome="Segunda", uid="NFC-X")

        assert primeira.uid_pulseira is None
        assert segunda.uid_pulseira == "NFC-X"
        assert servicos.hospedes.buscar_por_pulseira(db, "NFC-X").id == segunda.id

    def test_buscar_por_pulseira_ignora_inativos(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(uid="NFC-Y")
        servicos.hospedes.desativar_hospede(db, hospede.id)

        with pytest.raises(NotFoundError):
            servicos.hospedes.buscar_por_pulseira(db, "NFC-Y")


class TestCheckout:

    def test_checkout_sem_divergencia(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(entrada=Decimal("50"))

        resultado = servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.CARTAO)

        assert resultado["hospede"].ativo is False
        assert resultado["hospede"].divida_atual == Decimal("0.00")
        assert resultado["hospede"].data_checkout is not None
        pagamento = db.query(Pagamento).filter(Pagamento.hospede_id == hospede.id).one()
        assert pagamento.valor == Decimal("50.00")

    def test_divergencia_recusa_e_forcar_aceita(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(entrada=Decimal("50"))

        with pytest.raises(BusinessError) as exc:
            servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.PIX, valor_pagamento=Decimal("40"))

        assert exc.value.mensagem == (
            "Valor pago (R$ 40.00) não corresponde à dívida atual (R$ 50.00). Diferença: R$ 10.00"
        )
        db.expire_all()
        assert hospede.ativo is True
        assert db.query(Pagamento).filter(Pagamento.hospede_id == hospede.id).count() == 0

        resultado = servicos.hospedes.realizar_checkout(
            db, hospede.id, MetodoPagamento.PIX, valor_pagamento=Decimal("40"), forcar=True
        )
        assert resultado["hospede"].ativo is False

    def test_tolerancia_de_um_centavo(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(entrada=Decimal("50"))

        resultado = servicos.hospedes.realizar_checkout(
            db, hospede.id, MetodoPagamento.PIX, valor_pagamento=Decimal("49.99")
        )
        assert resultado["hospede"].ativo is False

    def test_pagamento_da_entrada_ja_abatido_da_divida(self, db, servicos, produtos):
        hospede = servicos.hospedes.realizar_checkin(
            db,
            tipo="DAY_USE",
            nome="Ana",
            documento="1",
            valor_entrada=Decimal("80"),
            pago_na_entrada=True,
            metodo_pagamento=MetodoPagamento.PIX,
        )
        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 2)])

        resultado = servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.PIX)

        assert resultado["hospede"].ativo is False
        total = sum(
            (p.valor for p in db.query(Pagamento).filter(Pagamento.hospede_id == hospede.id)), Decimal("0")
        )
        assert total == Decimal("110.00")

    def test_conciliacao_contra_divida_em_aberto(self, db, servicos, produtos):
        hospede = servicos.hospedes.realizar_checkin(
            db,
            tipo="DAY_USE",
            nome="Ana",
            documento="1",
            valor_entrada=Decimal("80"),
            pago_na_entrada=True,
            metodo_pagamento=MetodoPagamento.PIX,
        )
        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 2)])

        with pytest.raises(BusinessError) as exc:
            servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.PIX, valor_pagamento=Decimal("20"))

        assert exc.value.mensagem == (
            "Valor pago (R$ 20.00) não corresponde à dívida atual (R$ 30.00). Diferença: R$ 10.00"
        )

        resultado = servicos.hospedes.realizar_checkout(
            db, hospede.id, MetodoPagamento.PIX, valor_pagamento=Decimal("30")
        )
        assert resultado["hospede"].ativo is False

    def test_valor_de_pagamento_malformado(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(entrada=Decimal("50"))

        with pytest.raises(ValidationError, match="Valor do pagamento"):
            servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.PIX, valor_pagamento="50,00")

        db.expire_all()
        assert hospede.ativo is True
        assert db.query(Pagamento).filter(Pagamento.hospede_id == hospede.id).count() == 0

    def test_checkout_repetido_falha(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(entrada=Decimal("10"))
        servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.PIX)

        with pytest.raises(BusinessError, match="inativo"):
            servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.PIX)

    def test_divida_zero_sem_valor_falha(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use()
        with pytest.raises(BusinessError, match="maior que zero"):
            servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.PIX)

    def test_checkout_dinheiro_lanca_venda_no_caixa(self, db, servicos, usuarios, checkin_day_use):
        garcom = usuarios["garcom"]
        servicos.caixa.abrir_caixa(db, garcom.id, Decimal("100"))
        hospede = checkin_day_use(entrada=Decimal("50"))

        servicos.hospedes.realizar_checkout(db, hospede.id, MetodoPagamento.DINHEIRO, usuario_id=garcom.id)

        venda = db.query(LancamentoCaixa).one()
        assert venda.tipo == TipoLancamento.VENDA
        assert venda.valor == Decimal("50.00")


class TestLiberacaoDeQuarto:

    def test_ocupacao_por_contagem(self, db, servicos, quartos):
        quarto = quartos["101"]
        a = servicos.hospedes.realizar_checkin(
            db, tipo="HOSPEDE", nome="A", quarto_id=quarto.id, valor_entrada=Decimal("200")
        )
        b = servicos.hospedes.realizar_checkin(
            db, tipo="HOSPEDE", nome="B", quarto_id=quarto.id, valor_entrada=Decimal("200")
        )

        primeiro = servicos.hospedes.realizar_checkout(db, a.id, MetodoPagamento.PIX)
        assert primeiro["hospedesRestantes"] == 1
        assert "permanece OCUPADO" in primeiro["mensagemQuarto"]
        assert quarto.status == StatusQuarto.OCUPADO

        segundo = servicos.hospedes.realizar_checkout(db, b.id, MetodoPagamento.PIX)
        assert segundo["hospedesRestantes"] == 0
        assert segundo["mensagemQuarto"] == "Quarto 101 liberado para LIMPEZA"
        assert quarto.status == StatusQuarto.LIMPEZA

    def test_desativar_libera_quarto_e_pulseira(self, db, servicos, quartos):
        hospede = servicos.hospedes.realizar_checkin(
            db, tipo="HOSPEDE", nome="A", quarto_id=quartos["102"].id, uid_pulseira="NFC-Q"
        )

        servicos.hospedes.desativar_hospede(db, hospede.id)

        assert hospede.ativo is False
        assert hospede.uid_pulseira is None
        assert quartos["102"].status == StatusQuarto.LIMPEZA


class TestCadastro:

    def test_zerar_divida(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(entrada=Decimal("70"))
        servicos.hospedes.zerar_divida(db, hospede.id)
        assert hospede.divida_atual == Decimal("0.00")

    def test_atualizar_nao_mexe_em_divida(self, db, servicos, checkin_day_use):
        hospede = checkin_day_use(entrada=Decimal("70"))

        servicos.hospedes.atualizar_hospede(db, hospede.id, nome="Maria Silva", divida_atual=Decimal("0"))

        assert hospede.nome == "Maria Silva"
        assert hospede.divida_atual == Decimal("70.00")

    def test_listar_filtra_ativos(self, db, servicos, checkin_day_use):
        checkin_day_use(nome="Ativa", uid="A1")
        inativa = checkin_day_use(nome="Inativa", uid="A2")
        servicos.hospedes.desativar_hospede(db, inativa.id)

        ativos = servicos.hospedes.listar_hospedes(db, ativo=True)

        assert [h.nome for h in ativos["data"]] == ["Ativa"]

    def test_detalhe_traz_pedidos_e_pagamentos(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 2)])

        db.expire_all()
        detalhe = servicos.hospedes.buscar_hospede(db, hospede.id)

        assert len(detalhe.pedidos) == 2
        assert detalhe.pagamentos == []
