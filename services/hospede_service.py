"""
Conta corrente do hóspede: check-in, checkout e consultas

Check-in:
- Day Use exige documento; HOSPEDE exige quarto (id ou número legado)
- Pulseira revalidada dentro da transação (índice único parcial cobre a corrida)
- Quarto ocupado de forma condicional (LIVRE -> OCUPADO)
- Valor de entrada vira um pedido ENTREGUE do produto de serviço; pago na
  entrada gera Pagamento e, em dinheiro, venda no caixa (falha só é logada)

Checkout:
- Não é idempotente: hóspede inativo falha
- Concilia pagamentos x dívida (tolerância de 1 centavo) salvo `forcar`
- Libera o quarto considerando os demais ocupantes ativos
"""
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

import config
from database.transacao import transacao, travar_linha
from models.enums import MetodoCriacao, MetodoPagamento, StatusPedido, TipoHospede
from models.hospede import Hospede, Pagamento
from models.pedido import Pedido
from services.caixa_service import CaixaService
from services.produto_service import ProdutoService
from services.quarto_service import QuartoService
from utils.dinheiro import ZERO, formatar_brl, to_decimal, valor_monetario
from utils.erros import AppError, BusinessError, ConflictError, NotFoundError, ValidationError
from utils.logging_utils import log_event, log_warning
from utils.paginacao import paginar
from utils.timezone import agora_negocio

_CAMPOS_CADASTRAIS = ("nome", "documento", "telefone", "email", "limite_gasto", "origem")


class HospedeService:

    def __init__(
        self,
        quarto_service: QuartoService,
        caixa_service: CaixaService,
        produto_service: ProdutoService,
    ):
        self.quarto_service = quarto_service
        self.caixa_service = caixa_service
        self.produto_service = produto_service

    # ---------- Auxiliares ----------

    def _registrar_venda_caixa(self, db: Session, usuario_id: int, valor: Decimal, observacao: str) -> None:
        """Venda em dinheiro no caixa do operador; falha não derruba a operação principal"""
        try:
            self.caixa_service.registrar_venda_na_transacao(db, usuario_id, valor, observacao)
        except AppError as e:
            log_warning("caixa", f"Erro ao registrar venda no caixa: {e.mensagem}")

    def _garantir_pulseira_livre(self, db: Session, uid_pulseira: str, hospede_id: Optional[int] = None) -> None:
        query = db.query(Hospede).filter(
            Hospede.uid_pulseira == uid_pulseira,
            Hospede.ativo.is_(True),
        )
        if hospede_id is not None:
            query = query.filter(Hospede.id != hospede_id)
        em_uso = query.first()
        if em_uso:
            raise ConflictError(f"Pulseira {uid_pulseira} já está vinculada ao hóspede ativo {em_uso.nome}")

    # ---------- Check-in ----------

    def realizar_checkin(
        self,
        db: Session,
        tipo: TipoHospede,
        nome: str,
        documento: Optional[str] = None,
        telefone: Optional[str] = None,
        email: Optional[str] = None,
        quarto_id: Optional[int] = None,
        quarto: Optional[str] = None,
        uid_pulseira: Optional[str] = None,
        limite_gasto=None,
        origem: Optional[str] = None,
        valor_entrada=None,
        pago_na_entrada: bool = False,
        metodo_pagamento: Optional[MetodoPagamento] = None,
        usuario_id: Optional[int] = None,
    ) -> Hospede:
        tipo = TipoHospede(tipo)
        if not nome or not nome.strip():
            raise ValidationError("Nome é obrigatório")
        if tipo == TipoHospede.DAY_USE and not documento:
            raise ValidationError("Documento é obrigatório para Day Use")
        if tipo == TipoHospede.HOSPEDE and not quarto_id and not quarto:
            raise ValidationError("Quarto é obrigatório para Hóspede")
        if pago_na_entrada and not metodo_pagamento:
            raise ValidationError("Método de pagamento é obrigatório quando o pagamento é feito na entrada")

        valor = valor_monetario(valor_entrada, "Valor de entrada") if valor_entrada is not None else ZERO
        if valor < ZERO:
            raise ValidationError("Valor de entrada não pode ser negativo")
        limite = valor_monetario(limite_gasto, "Limite de gasto") if limite_gasto is not None else None
        if limite is not None and limite < ZERO:
            raise ValidationError("Limite de gasto não pode ser negativo")

        # Resolve o quarto (id preferencial, número legado)
        quarto_obj = None
        if quarto_id:
            quarto_obj = self.quarto_service.buscar_quarto(db, quarto_id)
        elif quarto:
            quarto_obj = self.quarto_service.buscar_quarto_por_numero(db, quarto)
            if not quarto_obj:
                raise NotFoundError(f"Quarto {quarto}")
        if quarto_obj is not None:
            self.quarto_service.validar_para_checkin(quarto_obj)

        uid = uid_pulseira.strip() if uid_pulseira and uid_pulseira.strip() else None

        with transacao(db):
            if uid:
                self._garantir_pulseira_livre(db, uid)

            if quarto_obj is not None:
                quarto_obj = self.quarto_service.ocupar_na_transacao(db, quarto_obj.id)

            hospede = Hospede(
                tipo=tipo,
                nome=nome.strip(),
                documento=documento,
                telefone=telefone,
                email=email,
                quarto=quarto_obj.numero if quarto_obj is not None else None,
                quarto_id=quarto_obj.id if quarto_obj is not None else None,
                uid_pulseira=uid,
                limite_gasto=limite,
                origem=origem or "BALCAO",
                # Pago na entrada começa zerado; senão deve o valor de entrada
                divida_atual=ZERO if (pago_na_entrada or valor <= ZERO) else valor,
                ativo=True,
                data_checkin=agora_negocio(),
            )
            db.add(hospede)
            db.flush()

            if valor > ZERO:
                nome_produto = (
                    config.DAY_USE_PRODUCT_NAME if tipo == TipoHospede.DAY_USE else config.DIARIA_PRODUCT_NAME
                )
                produto = self.produto_service.obter_produto_servico_na_transacao(db, nome_produto, valor)

                agora = agora_negocio()
                db.add(Pedido(
                    hospede_id=hospede.id,
                    produto_id=produto.id,
                    valor=valor,
                    status=StatusPedido.ENTREGUE,
                    metodo_criacao=MetodoCriacao.MANUAL,
                    usuario_id=usuario_id,
                    data=agora,
                ))

                if pago_na_entrada:
                    metodo = MetodoPagamento(metodo_pagamento)
                    db.add(Pagamento(hospede_id=hospede.id, valor=valor, metodo=metodo, data=agora))

                    if metodo == MetodoPagamento.DINHEIRO and usuario_id:
                        self._registrar_venda_caixa(
                            db, usuario_id, valor, f"Check-in hóspede {hospede.nome} (ID: {hospede.id})"
                        )
                db.flush()

        log_event(
            "hospedes",
            usuario_id,
            "check-in",
            f"id={hospede.id} tipo={tipo.value} quarto={hospede.quarto or '-'} entrada={formatar_brl(valor)}",
        )
        return hospede

    # ---------- Checkout ----------

    def realizar_checkout(
        self,
        db: Session,
        hospede_id: int,
        metodo_pagamento: MetodoPagamento,
        valor_pagamento=None,
        forcar: bool = False,
        usuario_id: Optional[int] = None,
    ) -> dict:
        metodo = MetodoPagamento(metodo_pagamento)

        # Leitura antes da transação: vínculo de quarto pré-mutação
        hospede = db.query(Hospede).filter(Hospede.id == hospede_id).first()
        if not hospede:
            raise NotFoundError("Hóspede")
        quarto_id = hospede.quarto_id

        with transacao(db):
            hospede = travar_linha(db, Hospede, hospede_id)
            if not hospede:
                raise NotFoundError("Hóspede")
            if not hospede.ativo:
                raise BusinessError("Checkout já realizado: hóspede inativo")

            divida = to_decimal(hospede.divida_atual)
            valor = divida if valor_pagamento is None else valor_monetario(valor_pagamento, "Valor do pagamento")
            if valor <= ZERO:
                raise BusinessError("Valor do pagamento deve ser maior que zero")

            agora = agora_negocio()
            db.add(Pagamento(hospede_id=hospede_id, valor=valor, metodo=metodo, data=agora))

            if metodo == MetodoPagamento.DINHEIRO and usuario_id:
                self._registrar_venda_caixa(
                    db, usuario_id, valor, f"Checkout hóspede {hospede.nome} (ID: {hospede.id})"
                )

            # Pagamentos da entrada já estão abatidos de divida_atual
            diferenca = abs(valor - divida)
            if not forcar and diferenca > config.RECONCILIATION_TOLERANCE:
                raise BusinessError(
                    f"Valor pago ({formatar_brl(valor)}) não corresponde à dívida atual "
                    f"({formatar_brl(divida)}). Diferença: {formatar_brl(diferenca)}"
                )

            restantes = 0
            mensagem_quarto = None
            if quarto_id:
                restantes, mensagem_quarto = self.quarto_service.liberar_apos_checkout_na_transacao(
                    db, quarto_id, hospede_id
                )

            hospede.divida_atual = ZERO
            hospede.ativo = False
            hospede.uid_pulseira = None
            hospede.data_checkout = agora
            db.flush()

        log_event(
            "hospedes",
            usuario_id,
            "checkout",
            f"id={hospede_id} pago={formatar_brl(valor)} metodo={metodo.value} forcado={forcar}",
        )
        return {
            "hospede": hospede,
            "mensagemQuarto": mensagem_quarto,
            "hospedesRestantes": restantes,
        }

    def zerar_divida(self, db: Session, hospede_id: int, usuario_id: Optional[int] = None) -> Hospede:
        """Override administrativo: sem conciliação nem comprovante"""
        with transacao(db):
            hospede = travar_linha(db, Hospede, hospede_id)
            if not hospede:
                raise NotFoundError("Hóspede")
            divida_anterior = to_decimal(hospede.divida_atual)
            hospede.divida_atual = ZERO

        log_event("hospedes", usuario_id, "zerar divida", f"id={hospede_id} anterior={formatar_brl(divida_anterior)}")
        return hospede

    # ---------- Consultas / cadastro ----------

    def listar_hospedes(
        self,
        db: Session,
        ativo: Optional[bool] = None,
        page: int = 1,
        limit: int = 10,
        busca: Optional[str] = None,
        tipo: Optional[TipoHospede] = None,
    ) -> dict:
        query = db.query(Hospede).options(joinedload(Hospede.quarto_rel))
        if ativo is not None:
            query = query.filter(Hospede.ativo == ativo)
        if tipo:
            query = query.filter(Hospede.tipo == tipo)
        if busca:
            termo = f"%{busca}%"
            query = query.filter(or_(
                Hospede.nome.ilike(termo),
                Hospede.documento.ilike(termo),
                Hospede.quarto.ilike(termo),
                Hospede.uid_pulseira.ilike(termo),
            ))
        return paginar(query.order_by(Hospede.data_checkin.desc(), Hospede.id.desc()), page, limit)

    def buscar_hospede(self, db: Session, hospede_id: int) -> Hospede:
        hospede = (
            db.query(Hospede)
            .options(
                selectinload(Hospede.pedidos).joinedload(Pedido.produto),
                selectinload(Hospede.pagamentos),
                joinedload(Hospede.quarto_rel),
            )
            .filter(Hospede.id == hospede_id)
            .first()
        )
        if not hospede:
            raise NotFoundError("Hóspede")
        return hospede

    def buscar_por_pulseira(self, db: Session, uid_pulseira: str) -> Hospede:
        hospede = (
            db.query(Hospede)
            .options(selectinload(Hospede.pedidos).joinedload(Pedido.produto))
            .filter(Hospede.uid_pulseira == uid_pulseira, Hospede.ativo.is_(True))
            .first()
        )
        if not hospede:
            raise NotFoundError("Hóspede com esta pulseira")
        return hospede

    def atualizar_hospede(self, db: Session, hospede_id: int, **dados) -> Hospede:
        """Somente dados cadastrais: dívida e pulseira têm fluxos próprios"""
        with transacao(db):
            hospede = travar_linha(db, Hospede, hospede_id)
            if not hospede:
                raise NotFoundError("Hóspede")

            for campo, valor in dados.items():
                if campo not in _CAMPOS_CADASTRAIS or valor is None:
                    continue
                if campo == "limite_gasto":
                    valor = valor_monetario(valor, "Limite de gasto")
                    if valor < ZERO:
                        raise ValidationError("Limite de gasto não pode ser negativo")
                elif campo == "nome":
                    if not valor.strip():
                        raise ValidationError("Nome é obrigatório")
                    valor = valor.strip()
                setattr(hospede, campo, valor)

            if hospede.tipo == TipoHospede.DAY_USE and not hospede.documento:
                raise ValidationError("Documento é obrigatório para Day Use")
            db.flush()

        log_event("hospedes", None, "atualizar hospede", f"id={hospede_id}")
        return hospede

    def desativar_hospede(self, db: Session, hospede_id: int) -> Hospede:
        """Desativa sem pagamento: libera pulseira e quarto, mantém a dívida registrada"""
        with transacao(db):
            hospede = travar_linha(db, Hospede, hospede_id)
            if not hospede:
                raise NotFoundError("Hóspede")
            if not hospede.ativo:
                raise BusinessError("Hóspede já está inativo")

            if hospede.quarto_id:
                self.quarto_service.liberar_apos_checkout_na_transacao(db, hospede.quarto_id, hospede_id)

            hospede.ativo = False
            hospede.uid_pulseira = None

        log_event("hospedes", None, "desativar hospede", f"id={hospede_id}")
        return hospede
