"""
Motor de pedidos e estoque

criar_pedidos (lote tudo-ou-nada):
1. Hóspede existe e está ativo
2. Cada item: produto existe, não esgotado, estoque suficiente; soma o total
3. Day Use com limite: pré-checagem da dívida atual + total
4. Incrementa a dívida ANTES de mexer no estoque e relê o valor gravado;
   se passou do limite, a transação inteira é desfeita
5. Decrementa o estoque (condicional) e cria uma linha por unidade

Eventos em tempo real são emitidos somente após o commit.
"""
from datetime import date, timedelta
from typing import Iterable, List, NamedTuple, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from database.transacao import transacao, travar_linha
from models.enums import MetodoCriacao, StatusPedido, TipoHospede
from models.hospede import Hospede
from models.pedido import Pedido
from models.produto import Produto
from services.produto_service import ProdutoService
from services.usuario_service import UsuarioService
from utils.dinheiro import ZERO, formatar_brl, to_decimal
from utils.erros import BusinessError, ForbiddenError, NotFoundError, ValidationError
from utils.logging_utils import log_event
from utils.notificador import (
    EVENTO_NOVO_PEDIDO, EVENTO_PEDIDO_ATUALIZADO, EVENTO_PEDIDO_CANCELADO, Notificador
)
from utils.paginacao import paginar
from utils.timezone import agora_negocio, fim_do_dia, inicio_do_dia, to_business_time


class ItemPedido(NamedTuple):
    produto_id: int
    quantidade: int = 1


def _payload(pedido: Pedido) -> dict:
    return {
        "id": pedido.id,
        "hospedeId": pedido.hospede_id,
        "hospede": pedido.hospede.nome if pedido.hospede else None,
        "produtoId": pedido.produto_id,
        "produto": pedido.produto.nome if pedido.produto else None,
        "setor": pedido.produto.setor.value if pedido.produto and pedido.produto.setor else None,
        "valor": str(to_decimal(pedido.valor)),
        "status": pedido.status.value,
        "metodoCriacao": pedido.metodo_criacao.value,
        "data": to_business_time(pedido.data).isoformat() if pedido.data else None,
    }


class PedidoService:

    def __init__(
        self,
        notificador: Notificador,
        usuario_service: UsuarioService,
        produto_service: ProdutoService,
    ):
        self.notificador = notificador
        self.usuario_service = usuario_service
        self.produto_service = produto_service

    def _emitir(self, evento: str, pedidos: Iterable[Pedido]) -> None:
        for pedido in pedidos:
            self.notificador.emitir(evento, _payload(pedido))

    # ---------- Criação ----------

    def criar_pedidos_na_transacao(
        self,
        db: Session,
        hospede_id: int,
        itens: List[ItemPedido],
        metodo_criacao: MetodoCriacao = MetodoCriacao.NFC,
        gerente_id: Optional[int] = None,
        usuario_id: Optional[int] = None,
    ) -> List[Pedido]:
        if not itens:
            raise ValidationError("Informe ao menos um item")
        if metodo_criacao == MetodoCriacao.MANUAL and gerente_id is None:
            raise ForbiddenError("Pedido manual exige autorização de gerente")

        hospede = db.query(Hospede).filter(Hospede.id == hospede_id).populate_existing().first()
        if not hospede:
            raise NotFoundError("Hóspede")
        if not hospede.ativo:
            raise BusinessError("Hóspede inativo")

        linhas = []
        total = ZERO
        for item in itens:
            quantidade = item.quantidade if item.quantidade is not None else 1
            if quantidade < 1:
                raise ValidationError("Quantidade deve ser maior que zero")

            produto = db.query(Produto).filter(Produto.id == item.produto_id).populate_existing().first()
            if not produto:
                raise NotFoundError(f"Produto com ID {item.produto_id}")

            if produto.estoque <= 0:
                raise BusinessError(
                    f'Produto "{produto.nome}" está esgotado e não está disponível para venda'
                )
            if produto.estoque < quantidade:
                raise BusinessError(
                    f'Produto "{produto.nome}" sem estoque suficiente. '
                    f"Disponível: {produto.estoque}, Solicitado: {quantidade}"
                )

            preco = to_decimal(produto.preco)
            total += preco * quantidade
            linhas.append((produto, preco, quantidade))

        limite = to_decimal(hospede.limite_gasto) if hospede.limite_gasto is not None else None
        controla_limite = hospede.tipo == TipoHospede.DAY_USE and limite is not None

        if controla_limite:
            # Pré-checagem sobre leitura possivelmente desatualizada
            divida = to_decimal(hospede.divida_atual)
            if divida + total > limite:
                raise ForbiddenError(
                    f"Limite de gasto excedido. Limite: {formatar_brl(limite)}, "
                    f"Dívida atual: {formatar_brl(divida)}, Valor do pedido: {formatar_brl(total)}"
                )

        # Incremento relativo antes de qualquer baixa de estoque
        db.query(Hospede).filter(Hospede.id == hospede_id).update(
            {Hospede.divida_atual: Hospede.divida_atual + total},
            synchronize_session=False,
        )

        if controla_limite:
            divida_gravada = to_decimal(
                db.query(Hospede.divida_atual).filter(Hospede.id == hospede_id).scalar()
            )
            if divida_gravada > limite:
                raise ForbiddenError(
                    f"Limite de gasto excedido. Limite: {formatar_brl(limite)}, "
                    f"Dívida atual: {formatar_brl(divida_gravada - total)}, "
                    f"Valor do pedido: {formatar_brl(total)}"
                )

        pedidos = []
        for produto, preco, quantidade in linhas:
            self.produto_service.decrementar_estoque_na_transacao(db, produto.id, quantidade)
            for _ in range(quantidade):
                pedido = Pedido(
                    hospede_id=hospede_id,
                    produto_id=produto.id,
                    valor=preco,
                    status=StatusPedido.PENDENTE,
                    metodo_criacao=metodo_criacao,
                    gerente_id=gerente_id if metodo_criacao == MetodoCriacao.MANUAL else None,
                    usuario_id=usuario_id,
                    data=agora_negocio(),
                )
                db.add(pedido)
                pedidos.append(pedido)

        db.flush()
        db.expire(hospede, ["divida_atual"])
        for produto, _, _ in linhas:
            db.expire(produto, ["estoque"])
        return pedidos

    def criar_pedidos(
        self,
        db: Session,
        hospede_id: int,
        itens: List[ItemPedido],
        metodo_criacao: MetodoCriacao = MetodoCriacao.NFC,
        gerente_id: Optional[int] = None,
        usuario_id: Optional[int] = None,
    ) -> List[Pedido]:
        with transacao(db):
            pedidos = self.criar_pedidos_na_transacao(
                db, hospede_id, itens, metodo_criacao, gerente_id, usuario_id
            )

        log_event(
            "pedidos",
            usuario_id,
            "criar pedidos",
            f"hospede={hospede_id} metodo={metodo_criacao.value} unidades={len(pedidos)}",
        )
        self._emitir(EVENTO_NOVO_PEDIDO, pedidos)
        return pedidos

    def criar_pedidos_nfc(
        self, db: Session, uid_pulseira: str, itens: List[ItemPedido], usuario_id: Optional[int] = None
    ) -> List[Pedido]:
        """Toque de pulseira: aprovação automática, sem PIN"""
        if not uid_pulseira:
            raise ValidationError("UID da pulseira é obrigatório")

        hospede = (
            db.query(Hospede)
            .filter(Hospede.uid_pulseira == uid_pulseira, Hospede.ativo.is_(True))
            .first()
        )
        if not hospede:
            raise NotFoundError("Hóspede com esta pulseira")

        return self.criar_pedidos(db, hospede.id, itens, MetodoCriacao.NFC, None, usuario_id)

    def criar_pedidos_manual(
        self,
        db: Session,
        hospede_id: int,
        itens: List[ItemPedido],
        manager_pin: str,
        usuario_id: Optional[int] = None,
    ) -> List[Pedido]:
        """Lançamento digitado pelo garçom: exige PIN de gerente/admin"""
        gerente = self.usuario_service.validar_pin_gerente(db, manager_pin)
        if not gerente:
            raise ForbiddenError("PIN de gerente inválido ou sem permissão")

        return self.criar_pedidos(db, hospede_id, itens, MetodoCriacao.MANUAL, gerente.id, usuario_id)

    # ---------- Consultas ----------

    def listar_pedidos(
        self,
        db: Session,
        status: Optional[StatusPedido] = None,
        page: int = 1,
        limit: int = 10,
        busca: Optional[str] = None,
        hospede_id: Optional[int] = None,
        metodo_criacao: Optional[MetodoCriacao] = None,
        usuario_id: Optional[int] = None,
        recente: bool = False,
    ) -> dict:
        query = db.query(Pedido).options(
            joinedload(Pedido.hospede),
            joinedload(Pedido.produto),
            joinedload(Pedido.gerente),
            joinedload(Pedido.usuario),
        )
        if status:
            query = query.filter(Pedido.status == status)
        if hospede_id:
            query = query.filter(Pedido.hospede_id == hospede_id)
        if metodo_criacao:
            query = query.filter(Pedido.metodo_criacao == metodo_criacao)
        if usuario_id:
            query = query.filter(Pedido.usuario_id == usuario_id)
        if recente:
            query = query.filter(Pedido.data >= agora_negocio() - timedelta(hours=24))
        if busca:
            termo = f"%{busca}%"
            query = query.filter(or_(
                Pedido.hospede.has(Hospede.nome.ilike(termo)),
                Pedido.produto.has(Produto.nome.ilike(termo)),
            ))

        return paginar(query.order_by(Pedido.data.desc(), Pedido.id.desc()), page, limit)

    def buscar_pedido(self, db: Session, pedido_id: int) -> Pedido:
        pedido = (
            db.query(Pedido)
            .options(
                joinedload(Pedido.hospede),
                joinedload(Pedido.produto),
                joinedload(Pedido.gerente),
                joinedload(Pedido.usuario),
            )
            .filter(Pedido.id == pedido_id)
            .first()
        )
        if not pedido:
            raise NotFoundError("Pedido")
        return pedido

    def listar_pedidos_periodo(self, db: Session, inicio: date, fim: date) -> List[Pedido]:
        """Consulta somente leitura usada pelo gerador de relatórios"""
        if fim < inicio:
            raise ValidationError("Data final deve ser maior ou igual à data inicial")
        return (
            db.query(Pedido)
            .options(joinedload(Pedido.hospede), joinedload(Pedido.produto), joinedload(Pedido.usuario))
            .filter(Pedido.data >= inicio_do_dia(inicio), Pedido.data <= fim_do_dia(fim))
            .order_by(Pedido.data.asc(), Pedido.id.asc())
            .all()
        )

    # ---------- Status / cancelamento ----------

    def atualizar_status(self, db: Session, pedido_id: int, novo_status: StatusPedido) -> Pedido:
        """
        PREPARANDO grava data_inicio_preparo só na primeira vez;
        PRONTO grava data_pronto a cada chamada.
        """
        novo_status = StatusPedido(novo_status)
        if novo_status == StatusPedido.CANCELADO:
            raise BusinessError("Cancelamento exige PIN de gerente")

        with transacao(db):
            pedido = travar_linha(db, Pedido, pedido_id)
            if not pedido:
                raise NotFoundError("Pedido")
            if pedido.status == StatusPedido.CANCELADO:
                raise BusinessError("Pedido cancelado não pode mudar de status")

            agora = agora_negocio()
            if novo_status == StatusPedido.PREPARANDO and pedido.data_inicio_preparo is None:
                pedido.data_inicio_preparo = agora
            elif novo_status == StatusPedido.PRONTO:
                pedido.data_pronto = agora
            pedido.status = novo_status

        log_event("pedidos", None, "atualizar status", f"id={pedido_id} status={novo_status.value}")
        self._emitir(EVENTO_PEDIDO_ATUALIZADO, [pedido])
        return pedido

    def cancelar_com_pin(self, db: Session, pedido_id: int, manager_pin: str) -> Pedido:
        """Estorna uma unidade de estoque e o valor da dívida; exige PIN de gerente/admin"""
        with transacao(db):
            pedido = travar_linha(db, Pedido, pedido_id)
            if not pedido:
                raise NotFoundError("Pedido")
            if pedido.status == StatusPedido.CANCELADO:
                raise BusinessError("Pedido já está cancelado")

            gerente = self.usuario_service.validar_pin_gerente(db, manager_pin)
            if not gerente:
                raise ForbiddenError("PIN de gerente inválido ou sem permissão para cancelar pedidos")

            hospede = db.query(Hospede).filter(Hospede.id == pedido.hospede_id).first()
            if hospede is not None and not hospede.ativo:
                raise BusinessError("Não é possível cancelar pedido de hóspede com checkout realizado")

            self.produto_service.incrementar_estoque_na_transacao(db, pedido.produto_id, 1)
            db.query(Hospede).filter(Hospede.id == pedido.hospede_id).update(
                {Hospede.divida_atual: Hospede.divida_atual - pedido.valor},
                synchronize_session=False,
            )
            pedido.status = StatusPedido.CANCELADO
            db.flush()
            if hospede is not None:
                db.expire(hospede, ["divida_atual"])

        log_event("pedidos", gerente.nome, "cancelar pedido", f"id={pedido_id} valor={formatar_brl(pedido.valor)}")
        self._emitir(EVENTO_PEDIDO_CANCELADO, [pedido])
        return pedido
