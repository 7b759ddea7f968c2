"""
Motor de pedidos: lote tudo-ou-nada, conservação de estoque e dívida,
limite Day Use, PIN de gerente e carimbos de preparo
"""
from decimal import Decimal
from unittest.mock import Mock

import pytest

from models.enums import MetodoCriacao, StatusPedido
from models.pedido import Pedido
from services import ItemPedido
from utils.erros import BusinessError, ForbiddenError, NotFoundError, ValidationError
from utils.notificador import EVENTO_NOVO_PEDIDO, EVENTO_PEDIDO_ATUALIZADO, EVENTO_PEDIDO_CANCELADO

from conftest import PIN_ADMIN, PIN_GARCOM, PIN_GERENTE


class TestCriacao:

    def test_uma_linha_por_unidade_com_snapshot_do_preco(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        cerveja = produtos["cerveja"]

        pedidos = servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(cerveja.id, 3)])

        assert len(pedidos) == 3
        assert all(p.valor == Decimal("15.00") for p in pedidos)
        assert all(p.status == StatusPedido.PENDENTE for p in pedidos)
        assert hospede.divida_atual == Decimal("45.00")
        assert cerveja.estoque == 7

    def test_preco_alterado_depois_nao_muda_pedido(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        cerveja = produtos["cerveja"]
        pedido = servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(cerveja.id)])[0]

        servicos.produtos.atualizar_produto(db, cerveja.id, preco=Decimal("20.00"))

        db.expire_all()
        assert db.get(Pedido, pedido.id).valor == Decimal("15.00")

    def test_lote_com_varios_produtos(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        itens = [ItemPedido(produtos["cerveja"].id, 2), ItemPedido(produtos["hamburguer"].id, 1)]

        pedidos = servicos.pedidos.criar_pedidos(db, hospede.id, itens)

        assert len(pedidos) == 3
        assert hospede.divida_atual == Decimal("62.50")

    def test_sem_oversell_nada_e_gravado(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        hamburguer = produtos["hamburguer"]

        with pytest.raises(BusinessError) as exc:
            servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(hamburguer.id, 5)])

        assert "Disponível: 3, Solicitado: 5" in exc.value.mensagem
        db.expire_all()
        assert hamburguer.estoque == 3
        assert hospede.divida_atual == Decimal("0.00")
        assert db.query(Pedido).filter(Pedido.hospede_id == hospede.id).count() == 0

    def test_falha_no_segundo_item_desfaz_o_primeiro(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        itens = [ItemPedido(produtos["cerveja"].id, 2), ItemPedido(produtos["agua"].id, 1)]

        with pytest.raises(BusinessError, match="esgotado"):
            servicos.pedidos.criar_pedidos(db, hospede.id, itens)

        db.expire_all()
        assert produtos["cerveja"].estoque == 10
        assert hospede.divida_atual == Decimal("0.00")

    def test_produto_inexistente(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        with pytest.raises(NotFoundError):
            servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(9999)])

    def test_hospede_inativo(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        servicos.hospedes.realizar_checkout(db, hospede.id, "PIX", valor_pagamento=Decimal("1"), forcar=True)

        with pytest.raises(BusinessError, match="inativo"):
            servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id)])

    def test_lista_vazia_e_quantidade_invalida(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        with pytest.raises(ValidationError):
            servicos.pedidos.criar_pedidos(db, hospede.id, [])
        with pytest.raises(ValidationError):
            servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 0)])

    def test_evento_emitido_por_unidade(self, db, servicos, notificador, produtos, checkin_day_use):
        assinante = Mock()
        notificador.assinar(assinante)
        hospede = checkin_day_use()

        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 2)])

        assert assinante.call_count == 2
        evento, payload = assinante.call_args[0]
        assert evento == EVENTO_NOVO_PEDIDO
        assert payload["hospede"] == "Maria"
        assert payload["setor"] == "BAR_PISCINA"

    def test_sem_evento_quando_falha(self, db, servicos, notificador, produtos, checkin_day_use):
        assinante = Mock()
        notificador.assinar(assinante)
        hospede = checkin_day_use()

        with pytest.raises(BusinessError):
            servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["hamburguer"].id, 4)])

        assinante.assert_not_called()


class TestLimiteDayUse:

    def test_pre_checagem_recusa(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use(limite=Decimal("40"))

        with pytest.raises(ForbiddenError, match="Limite de gasto excedido"):
            servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 3)])

        db.expire_all()
        assert hospede.divida_atual == Decimal("0.00")
        assert produtos["cerveja"].estoque == 10

    def test_exatamente_no_limite_passa(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use(limite=Decimal("45"))

        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 3)])

        assert hospede.divida_atual == Decimal("45.00")

    def test_entrada_conta_na_divida(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use(limite=Decimal("100"), entrada=Decimal("90"))

        with pytest.raises(ForbiddenError):
            servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id)])

    def test_hospede_sem_limite_nao_e_controlado(self, db, servicos, produtos, quartos):
        hospede = servicos.hospedes.realizar_checkin(
            db, tipo="HOSPEDE", nome="João", quarto_id=quartos["101"].id, limite_gasto=Decimal("10")
        )

        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 2)])

        assert hospede.divida_atual == Decimal("30.00")


class TestNfcEManual:

    def test_nfc_resolve_pulseira(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use(uid="ABC123")

        pedidos = servicos.pedidos.criar_pedidos_nfc(db, "ABC123", [ItemPedido(produtos["cerveja"].id)])

        assert pedidos[0].hospede_id == hospede.id
        assert pedidos[0].metodo_criacao == MetodoCriacao.NFC
        assert pedidos[0].gerente_id is None

    def test_nfc_pulseira_desconhecida(self, db, servicos, produtos):
        with pytest.raises(NotFoundError):
            servicos.pedidos.criar_pedidos_nfc(db, "NAO-EXISTE", [ItemPedido(produtos["cerveja"].id)])

    def test_manual_com_pin_de_gerente(self, db, servicos, usuarios, produtos, checkin_day_use):
        hospede = checkin_day_use()

        pedidos = servicos.pedidos.criar_pedidos_manual(
            db, hospede.id, [ItemPedido(produtos["cerveja"].id)], PIN_GERENTE, usuarios["garcom"].id
        )

        assert pedidos[0].metodo_criacao == MetodoCriacao.MANUAL
        assert pedidos[0].gerente_id == usuarios["gerente"].id
        assert pedidos[0].usuario_id == usuarios["garcom"].id

    def test_manual_com_pin_de_garcom_e_recusado(self, db, servicos, usuarios, produtos, checkin_day_use):
        hospede = checkin_day_use()

        with pytest.raises(ForbiddenError):
            servicos.pedidos.criar_pedidos_manual(
                db, hospede.id, [ItemPedido(produtos["cerveja"].id)], PIN_GARCOM
            )

        db.expire_all()
        assert produtos["cerveja"].estoque == 10

    def test_manual_sem_gerente_na_transacao(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        with pytest.raises(ForbiddenError):
            servicos.pedidos.criar_pedidos(
                db, hospede.id, [ItemPedido(produtos["cerveja"].id)], MetodoCriacao.MANUAL
            )


class TestStatusECancelamento:

    def _um_pedido(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        return hospede, servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id)])[0]

    def test_inicio_de_preparo_gravado_uma_vez(self, db, servicos, produtos, checkin_day_use):
        _, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)

        primeiro = servicos.pedidos.atualizar_status(db, pedido.id, StatusPedido.PREPARANDO).data_inicio_preparo
        segundo = servicos.pedidos.atualizar_status(db, pedido.id, StatusPedido.PREPARANDO).data_inicio_preparo

        assert primeiro is not None
        assert segundo == primeiro

    def test_data_relida_do_banco_igual_a_gravada(self, db, servicos, produtos, checkin_day_use):
        _, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)
        gravada = pedido.data

        db.expire_all()
        relida = db.get(Pedido, pedido.id).data

        assert relida == gravada
        assert relida.tzinfo is not None

    def test_pronto_grava_a_cada_chamada(self, db, servicos, produtos, checkin_day_use):
        _, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)

        atualizado = servicos.pedidos.atualizar_status(db, pedido.id, StatusPedido.PRONTO)

        assert atualizado.data_pronto is not None
        assert atualizado.status == StatusPedido.PRONTO

    def test_status_cancelado_exige_pin(self, db, servicos, produtos, checkin_day_use):
        _, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)
        with pytest.raises(BusinessError, match="PIN"):
            servicos.pedidos.atualizar_status(db, pedido.id, StatusPedido.CANCELADO)

    def test_cancelamento_estorna_estoque_e_divida(self, db, servicos, usuarios, produtos, checkin_day_use):
        hospede, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)
        cerveja = produtos["cerveja"]
        assert cerveja.estoque + 1 == 10

        cancelado = servicos.pedidos.cancelar_com_pin(db, pedido.id, PIN_ADMIN)

        db.expire_all()
        assert cancelado.status == StatusPedido.CANCELADO
        assert cerveja.estoque == 10
        assert hospede.divida_atual == Decimal("0.00")

    def test_cancelar_duas_vezes_falha(self, db, servicos, usuarios, produtos, checkin_day_use):
        _, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)
        servicos.pedidos.cancelar_com_pin(db, pedido.id, PIN_GERENTE)

        with pytest.raises(BusinessError, match="já está cancelado"):
            servicos.pedidos.cancelar_com_pin(db, pedido.id, PIN_GERENTE)

    def test_pin_invalido_nao_altera_nada(self, db, servicos, usuarios, produtos, checkin_day_use):
        hospede, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)

        with pytest.raises(ForbiddenError):
            servicos.pedidos.cancelar_com_pin(db, pedido.id, PIN_GARCOM)

        db.expire_all()
        assert hospede.divida_atual == Decimal("15.00")
        assert produtos["cerveja"].estoque == 9

    def test_cancelado_nao_muda_de_status(self, db, servicos, usuarios, produtos, checkin_day_use):
        _, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)
        servicos.pedidos.cancelar_com_pin(db, pedido.id, PIN_GERENTE)

        with pytest.raises(BusinessError):
            servicos.pedidos.atualizar_status(db, pedido.id, StatusPedido.ENTREGUE)

    def test_eventos_de_status_e_cancelamento(self, db, servicos, notificador, usuarios, produtos, checkin_day_use):
        _, pedido = self._um_pedido(db, servicos, produtos, checkin_day_use)
        assinante = Mock()
        notificador.assinar(assinante)

        servicos.pedidos.atualizar_status(db, pedido.id, StatusPedido.PREPARANDO)
        servicos.pedidos.cancelar_com_pin(db, pedido.id, PIN_GERENTE)

        eventos = [c[0][0] for c in assinante.call_args_list]
        assert eventos == [EVENTO_PEDIDO_ATUALIZADO, EVENTO_PEDIDO_CANCELADO]


class TestConservacao:

    def test_estoque_e_divida_conservados(self, db, servicos, usuarios, produtos, checkin_day_use):
        hospede = checkin_day_use()
        cerveja = produtos["cerveja"]
        estoque_inicial = cerveja.estoque

        pedidos = servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(cerveja.id, 4)])
        servicos.pedidos.cancelar_com_pin(db, pedidos[0].id, PIN_GERENTE)
        servicos.pedidos.cancelar_com_pin(db, pedidos[1].id, PIN_GERENTE)

        db.expire_all()
        ativos = (
            db.query(Pedido)
            .filter(Pedido.produto_id == cerveja.id, Pedido.status != StatusPedido.CANCELADO)
            .all()
        )
        assert cerveja.estoque + len(ativos) == estoque_inicial
        assert hospede.divida_atual == sum((p.valor for p in ativos), Decimal("0"))


class TestConsultas:

    def test_listar_com_filtros_e_paginacao(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use()
        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 3)])

        resultado = servicos.pedidos.listar_pedidos(db, status=StatusPedido.PENDENTE, page=1, limit=2)

        assert len(resultado["data"]) == 2
        assert resultado["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    def test_busca_por_nome_do_hospede(self, db, servicos, produtos, checkin_day_use):
        hospede = checkin_day_use(nome="Carla Souza")
        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id)])

        assert servicos.pedidos.listar_pedidos(db, busca="Souza")["pagination"]["total"] == 1
        assert servicos.pedidos.listar_pedidos(db, busca="Inexistente")["pagination"]["total"] == 0

    def test_periodo_invalido(self, db, servicos):
        from datetime import date
        with pytest.raises(ValidationError):
            servicos.pedidos.listar_pedidos_periodo(db, date(2024, 5, 2), date(2024, 5, 1))

    def test_periodo_de_hoje(self, db, servicos, produtos, checkin_day_use):
        from utils.timezone import hoje_negocio
        hospede = checkin_day_use()
        servicos.pedidos.criar_pedidos(db, hospede.id, [ItemPedido(produtos["cerveja"].id, 2)])

        assert len(servicos.pedidos.listar_pedidos_periodo(db, hoje_negocio(), hoje_negocio())) == 2
