"""
Contas a pagar / a receber

- Status inicial e após mudança de vencimento: PENDENTE se vence hoje ou depois, senão ATRASADO
- PAGO / RECEBIDO são terminais: não se edita nem remove
- Categoria precisa ser do tipo da conta (DESPESA para pagar, RECEITA para receber)
- Pagamento em dinheiro lança sangria no caixa do operador (falha só é logada)
"""
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from database.transacao import transacao, travar_linha
from models.enums import (
    MetodoPagamento, OrigemContaReceber, StatusConta, TipoCategoria
)
from models.financeiro import CategoriaFinanceira, ContaPagar, ContaReceber
from services.caixa_service import CaixaService
from utils.dinheiro import ZERO, formatar_brl, somar, to_decimal
from utils.erros import AppError, BusinessError, NotFoundError, ValidationError
from utils.logging_utils import log_event, log_warning
from utils.timezone import agora_negocio, hoje_negocio

STATUS_EM_ABERTO = (StatusConta.PENDENTE, StatusConta.ATRASADO)


def status_por_vencimento(data_vencimento: date) -> StatusConta:
    return StatusConta.PENDENTE if data_vencimento >= hoje_negocio() else StatusConta.ATRASADO


def _como_data(valor) -> date:
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    try:
        return date.fromisoformat(str(valor))
    except ValueError:
        raise ValidationError("Data de vencimento inválida (use AAAA-MM-DD)")


def _validar_valor(valor):
    valor = to_decimal(valor, padrao=None)
    if valor is None or valor <= ZERO:
        raise ValidationError("Valor deve ser maior que zero")
    return valor


def _resumo(contas) -> dict:
    return {"quantidade": len(contas), "valor": somar(c.valor for c in contas)}


class FinanceiroService:

    def __init__(self, caixa_service: CaixaService):
        self.caixa_service = caixa_service

    # ========== CATEGORIAS ==========

    def listar_categorias(self, db: Session, tipo: Optional[TipoCategoria] = None) -> List[CategoriaFinanceira]:
        query = db.query(CategoriaFinanceira)
        if tipo:
            query = query.filter(CategoriaFinanceira.tipo == tipo)
        return query.order_by(CategoriaFinanceira.nome.asc()).all()

    def _buscar_categoria(self, db: Session, categoria_id: int) -> CategoriaFinanceira:
        categoria = db.query(CategoriaFinanceira).filter(CategoriaFinanceira.id == categoria_id).first()
        if not categoria:
            raise NotFoundError("Categoria")
        return categoria

    def _categoria_do_tipo(self, db: Session, categoria_id: int, tipo: TipoCategoria) -> CategoriaFinanceira:
        categoria = self._buscar_categoria(db, categoria_id)
        if categoria.tipo != tipo:
            destino = "contas a pagar" if tipo == TipoCategoria.DESPESA else "contas a receber"
            raise BusinessError(f"Categoria deve ser do tipo {tipo.value} para {destino}")
        return categoria

    def _contas_vinculadas(self, db: Session, categoria_id: int) -> int:
        pagar = db.query(ContaPagar).filter(ContaPagar.categoria_id == categoria_id).count()
        receber = db.query(ContaReceber).filter(ContaReceber.categoria_id == categoria_id).count()
        return pagar + receber

    def criar_categoria(self, db: Session, nome: str, tipo: TipoCategoria) -> CategoriaFinanceira:
        if not nome or not nome.strip():
            raise ValidationError("Nome da categoria é obrigatório")
        with transacao(db):
            categoria = CategoriaFinanceira(nome=nome.strip(), tipo=TipoCategoria(tipo))
            db.add(categoria)
            db.flush()
        log_event("financeiro", None, "criar categoria", f"id={categoria.id} tipo={categoria.tipo.value}")
        return categoria

    def atualizar_categoria(
        self, db: Session, categoria_id: int, nome: Optional[str] = None, tipo: Optional[TipoCategoria] = None
    ) -> CategoriaFinanceira:
        with transacao(db):
            categoria = self._buscar_categoria(db, categoria_id)
            if nome is not None:
                if not nome.strip():
                    raise ValidationError("Nome da categoria é obrigatório")
                categoria.nome = nome.strip()
            if tipo is not None and TipoCategoria(tipo) != categoria.tipo:
                if self._contas_vinculadas(db, categoria_id):
                    raise BusinessError("Não é possível mudar o tipo de uma categoria com contas vinculadas")
                categoria.tipo = TipoCategoria(tipo)
            db.flush()
        return categoria

    def remover_categoria(self, db: Session, categoria_id: int) -> None:
        with transacao(db):
            categoria = self._buscar_categoria(db, categoria_id)
            if self._contas_vinculadas(db, categoria_id):
                raise BusinessError(
                    "Não é possível remover categoria com contas vinculadas. Remova ou altere as contas primeiro."
                )
            db.delete(categoria)
        log_event("financeiro", None, "remover categoria", f"id={categoria_id}")

    # ========== CONTAS A PAGAR ==========

    def listar_contas_pagar(
        self,
        db: Session,
        status: Optional[StatusConta] = None,
        categoria_id: Optional[int] = None,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
    ) -> List[ContaPagar]:
        query = db.query(ContaPagar).options(joinedload(ContaPagar.categoria))
        if status:
            query = query.filter(ContaPagar.status == status)
        if categoria_id:
            query = query.filter(ContaPagar.categoria_id == categoria_id)
        if data_inicio:
            query = query.filter(ContaPagar.data_vencimento >= data_inicio)
        if data_fim:
            query = query.filter(ContaPagar.data_vencimento <= data_fim)
        return query.order_by(ContaPagar.data_vencimento.asc(), ContaPagar.id.asc()).all()

    def buscar_conta_pagar(self, db: Session, conta_id: int) -> ContaPagar:
        conta = db.query(ContaPagar).filter(ContaPagar.id == conta_id).first()
        if not conta:
            raise NotFoundError("Conta a pagar")
        return conta

    def criar_conta_pagar(
        self,
        db: Session,
        descricao: str,
        valor,
        data_vencimento,
        categoria_id: int,
        fornecedor: Optional[str] = None,
        observacao: Optional[str] = None,
    ) -> ContaPagar:
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória")
        valor = _validar_valor(valor)
        vencimento = _como_data(data_vencimento)

        with transacao(db):
            self._categoria_do_tipo(db, categoria_id, TipoCategoria.DESPESA)
            conta = ContaPagar(
                descricao=descricao.strip(),
                valor=valor,
                data_vencimento=vencimento,
                categoria_id=categoria_id,
                fornecedor=fornecedor,
                observacao=observacao,
                status=status_por_vencimento(vencimento),
            )
            db.add(conta)
            db.flush()

        log_event("financeiro", None, "criar conta a pagar", f"id={conta.id} valor={formatar_brl(valor)}")
        return conta

    def atualizar_conta_pagar(self, db: Session, conta_id: int, **dados) -> ContaPagar:
        with transacao(db):
            conta = travar_linha(db, ContaPagar, conta_id)
            if not conta:
                raise NotFoundError("Conta a pagar")
            if conta.status == StatusConta.PAGO:
                raise BusinessError("Não é possível editar conta já paga")

            self._aplicar_edicao(db, conta, dados, TipoCategoria.DESPESA, ("fornecedor",))
            db.flush()

        log_event("financeiro", None, "atualizar conta a pagar", f"id={conta_id}")
        return conta

    def remover_conta_pagar(self, db: Session, conta_id: int) -> None:
        with transacao(db):
            conta = travar_linha(db, ContaPagar, conta_id)
            if not conta:
                raise NotFoundError("Conta a pagar")
            if conta.status == StatusConta.PAGO:
                raise BusinessError("Não é possível remover conta já paga")
            db.delete(conta)
        log_event("financeiro", None, "remover conta a pagar", f"id={conta_id}")

    def pagar_conta(
        self,
        db: Session,
        conta_id: int,
        metodo_pagamento: MetodoPagamento,
        data_pagamento: Optional[datetime] = None,
        usuario_id: Optional[int] = None,
    ) -> ContaPagar:
        metodo = MetodoPagamento(metodo_pagamento)

        with transacao(db):
            conta = travar_linha(db, ContaPagar, conta_id)
            if not conta:
                raise NotFoundError("Conta a pagar")
            if conta.status == StatusConta.PAGO:
                raise BusinessError("Conta já foi paga")

            if metodo == MetodoPagamento.DINHEIRO and usuario_id:
                descricao = f"Pagamento de conta: {conta.descricao}"
                if conta.fornecedor:
                    descricao += f" - {conta.fornecedor}"
                try:
                    lancamento = self.caixa_service.registrar_sangria_na_transacao(
                        db, usuario_id, conta.valor, descricao
                    )
                    conta.caixa_id = lancamento.caixa_id
                except AppError as e:
                    log_warning(
                        "financeiro",
                        f"Pagamento de conta em dinheiro ({formatar_brl(conta.valor)}) sem sangria no caixa: {e.mensagem}",
                    )

            conta.status = StatusConta.PAGO
            conta.data_pagamento = data_pagamento or agora_negocio()
            conta.metodo_pagamento = metodo
            db.flush()

        log_event("financeiro", usuario_id, "pagar conta", f"id={conta_id} metodo={metodo.value}")
        return conta

    # ========== CONTAS A RECEBER ==========

    def listar_contas_receber(
        self,
        db: Session,
        status: Optional[StatusConta] = None,
        categoria_id: Optional[int] = None,
        origem: Optional[OrigemContaReceber] = None,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
    ) -> List[ContaReceber]:
        query = db.query(ContaReceber).options(joinedload(ContaReceber.categoria))
        if status:
            query = query.filter(ContaReceber.status == status)
        if categoria_id:
            query = query.filter(ContaReceber.categoria_id == categoria_id)
        if origem:
            query = query.filter(ContaReceber.origem == origem)
        if data_inicio:
            query = query.filter(ContaReceber.data_vencimento >= data_inicio)
        if data_fim:
            query = query.filter(ContaReceber.data_vencimento <= data_fim)
        return query.order_by(ContaReceber.data_vencimento.asc(), ContaReceber.id.asc()).all()

    def buscar_conta_receber(self, db: Session, conta_id: int) -> ContaReceber:
        conta = db.query(ContaReceber).filter(ContaReceber.id == conta_id).first()
        if not conta:
            raise NotFoundError("Conta a receber")
        return conta

    def criar_conta_receber(
        self,
        db: Session,
        descricao: str,
        valor,
        data_vencimento,
        categoria_id: int,
        origem: OrigemContaReceber = OrigemContaReceber.OUTROS,
        observacao: Optional[str] = None,
    ) -> ContaReceber:
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória")
        valor = _validar_valor(valor)
        vencimento = _como_data(data_vencimento)

        with transacao(db):
            self._categoria_do_tipo(db, categoria_id, TipoCategoria.RECEITA)
            conta = ContaReceber(
                descricao=descricao.strip(),
                valor=valor,
                data_vencimento=vencimento,
                categoria_id=categoria_id,
                origem=OrigemContaReceber(origem or OrigemContaReceber.OUTROS),
                observacao=observacao,
                status=status_por_vencimento(vencimento),
            )
            db.add(conta)
            db.flush()

        log_event("financeiro", None, "criar conta a receber", f"id={conta.id} valor={formatar_brl(valor)}")
        return conta

    def atualizar_conta_receber(self, db: Session, conta_id: int, **dados) -> ContaReceber:
        with transacao(db):
            conta = travar_linha(db, ContaReceber, conta_id)
            if not conta:
                raise NotFoundError("Conta a receber")
            if conta.status == StatusConta.RECEBIDO:
                raise BusinessError("Não é possível editar conta já recebida")

            if dados.get("origem") is not None:
                dados["origem"] = OrigemContaReceber(dados["origem"])
            self._aplicar_edicao(db, conta, dados, TipoCategoria.RECEITA, ("origem",))
            db.flush()

        log_event("financeiro", None, "atualizar conta a receber", f"id={conta_id}")
        return conta

    def remover_conta_receber(self, db: Session, conta_id: int) -> None:
        with transacao(db):
            conta = travar_linha(db, ContaReceber, conta_id)
            if not conta:
                raise NotFoundError("Conta a receber")
            if conta.status == StatusConta.RECEBIDO:
                raise BusinessError("Não é possível remover conta já recebida")
            db.delete(conta)
        log_event("financeiro", None, "remover conta a receber", f"id={conta_id}")

    def receber_conta(self, db: Session, conta_id: int, data_recebimento: Optional[datetime] = None) -> ContaReceber:
        with transacao(db):
            conta = travar_linha(db, ContaReceber, conta_id)
            if not conta:
                raise NotFoundError("Conta a receber")
            if conta.status == StatusConta.RECEBIDO:
                raise BusinessError("Conta já foi recebida")

            conta.status = StatusConta.RECEBIDO
            conta.data_recebimento = data_recebimento or agora_negocio()

        log_event("financeiro", None, "receber conta", f"id={conta_id}")
        return conta

    # ========== DASHBOARD ==========

    def obter_dashboard(self, db: Session) -> dict:
        hoje = hoje_negocio()

        def agrupar(contas) -> dict:
            return {
                "vencidas": _resumo([c for c in contas if c.data_vencimento < hoje]),
                "hoje": _resumo([c for c in contas if c.data_vencimento == hoje]),
                "futuras": _resumo([c for c in contas if c.data_vencimento > hoje]),
                "total": _resumo(contas),
            }

        pagar = db.query(ContaPagar).filter(ContaPagar.status != StatusConta.PAGO).all()
        receber = db.query(ContaReceber).filter(ContaReceber.status != StatusConta.RECEBIDO).all()
        return {"contasPagar": agrupar(pagar), "contasReceber": agrupar(receber)}

    # ---------- Auxiliares ----------

    def _aplicar_edicao(self, db: Session, conta, dados: dict, tipo: TipoCategoria, extras: tuple) -> None:
        if dados.get("descricao") is not None:
            if not dados["descricao"].strip():
                raise ValidationError("Descrição é obrigatória")
            conta.descricao = dados["descricao"].strip()
        if dados.get("valor") is not None:
            conta.valor = _validar_valor(dados["valor"])
        if dados.get("categoria_id") is not None:
            self._categoria_do_tipo(db, dados["categoria_id"], tipo)
            conta.categoria_id = dados["categoria_id"]
        if dados.get("observacao") is not None:
            conta.observacao = dados["observacao"]
        for campo in extras:
            if dados.get(campo) is not None:
                setattr(conta, campo, dados[campo])

        if dados.get("data_vencimento") is not None:
            vencimento = _como_data(dados["data_vencimento"])
            conta.data_vencimento = vencimento
            if conta.status in STATUS_EM_ABERTO:
                conta.status = status_por_vencimento(vencimento)
