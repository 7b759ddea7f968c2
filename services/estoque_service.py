"""
Baixa técnica de estoque (quebra, vencimento, erro de lançamento)
"""
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from database.transacao import transacao
from models.produto import PerdaEstoque, Produto
from services.produto_service import ProdutoService
from utils.erros import BusinessError, NotFoundError, ValidationError
from utils.logging_utils import log_event
from utils.paginacao import paginar
from utils.timezone import fim_do_dia, inicio_do_dia


class EstoqueService:

    def __init__(self, produto_service: ProdutoService):
        self.produto_service = produto_service

    def registrar_baixa(
        self,
        db: Session,
        produto_id: int,
        quantidade: int,
        motivo: str,
        observacao: Optional[str],
        usuario_id: int,
    ) -> PerdaEstoque:
        if quantidade is None or quantidade <= 0:
            raise ValidationError("Quantidade deve ser maior que zero")
        if not motivo or not motivo.strip():
            raise ValidationError("Motivo é obrigatório")

        with transacao(db):
            produto = db.query(Produto).filter(Produto.id == produto_id).first()
            if not produto:
                raise NotFoundError("Produto")

            if produto.estoque < quantidade:
                raise BusinessError(
                    f"Estoque insuficiente. Disponível: {produto.estoque}, Solicitado: {quantidade}"
                )

            self.produto_service.decrementar_estoque_na_transacao(db, produto_id, quantidade)

            perda = PerdaEstoque(
                produto_id=produto_id,
                quantidade=quantidade,
                motivo=motivo.strip(),
                observacao=(observacao or "").strip() or None,
                usuario_id=usuario_id,
            )
            db.add(perda)
            db.flush()
            db.refresh(produto)

        log_event("estoque", usuario_id, "baixa tecnica", f"produto={produto_id} qtd={quantidade} motivo={perda.motivo}")
        return perda

    def listar_baixas(
        self,
        db: Session,
        produto_id: Optional[int] = None,
        page: int = 1,
        limit: int = 50,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
    ) -> dict:
        query = db.query(PerdaEstoque).options(
            joinedload(PerdaEstoque.produto),
            joinedload(PerdaEstoque.usuario),
        )
        if produto_id:
            query = query.filter(PerdaEstoque.produto_id == produto_id)
        if data_inicio:
            query = query.filter(PerdaEstoque.data >= inicio_do_dia(data_inicio))
        if data_fim:
            query = query.filter(PerdaEstoque.data <= fim_do_dia(data_fim))

        return paginar(query.order_by(PerdaEstoque.data.desc()), page, limit)
