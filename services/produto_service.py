"""
Serviço de produtos (cardápio + estoque)
Estoque só muda por incremento/decremento relativo dentro de transação.
"""
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

import config
from database.transacao import transacao
from models.enums import SetorProduto
from models.pedido import Pedido
from models.produto import PerdaEstoque, Produto
from utils.dinheiro import ZERO, to_decimal
from utils.erros import BusinessError, NotFoundError, ValidationError
from utils.logging_utils import log_event
from utils.paginacao import paginar

CATEGORIA_SERVICO = "Serviço"

_CAMPOS_EDITAVEIS = (
    "nome", "preco", "estoque", "foto", "categoria", "descricao", "setor", "visivel_cardapio",
)


def _validar_preco(preco) -> Decimal:
    valor = to_decimal(preco, padrao=None)
    if valor is None or valor < ZERO:
        raise ValidationError("Preço deve ser um valor maior ou igual a zero")
    return valor


class ProdutoService:

    def criar_produto(
        self,
        db: Session,
        nome: str,
        preco,
        estoque: int = 0,
        foto: Optional[str] = None,
        categoria: Optional[str] = None,
        descricao: Optional[str] = None,
        setor: Optional[SetorProduto] = None,
        visivel_cardapio: bool = True,
    ) -> Produto:
        if not nome or not nome.strip():
            raise ValidationError("Nome do produto é obrigatório")
        if estoque is None or estoque < 0:
            raise ValidationError("Estoque não pode ser negativo")

        with transacao(db):
            produto = Produto(
                nome=nome.strip(),
                preco=_validar_preco(preco),
                estoque=estoque,
                foto=foto,
                categoria=categoria,
                descricao=descricao,
                setor=setor,
                visivel_cardapio=visivel_cardapio,
            )
            db.add(produto)
            db.flush()

        log_event("produtos", None, "criar produto", f"id={produto.id} nome={produto.nome}")
        return produto

    def listar_produtos(
        self,
        db: Session,
        categoria: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        busca: Optional[str] = None,
        estoque_baixo: bool = False,
        apenas_disponiveis: bool = False,
    ) -> dict:
        """
        apenas_disponiveis: cardápio do garçom/quiosque (estoque > 0 e visível)
        estoque_baixo: estoque abaixo do limite configurado
        """
        query = db.query(Produto)
        if categoria:
            query = query.filter(Produto.categoria == categoria)

        if apenas_disponiveis:
            query = query.filter(Produto.estoque > 0, Produto.visivel_cardapio.is_(True))
        elif estoque_baixo:
            query = query.filter(Produto.estoque < config.LOW_STOCK_THRESHOLD)

        if busca:
            termo = f"%{busca}%"
            query = query.filter(or_(
                Produto.nome.ilike(termo),
                Produto.categoria.ilike(termo),
                Produto.descricao.ilike(termo),
            ))

        return paginar(query.order_by(Produto.nome.asc()), page, limit)

    def buscar_produto(self, db: Session, produto_id: int) -> Produto:
        produto = db.query(Produto).filter(Produto.id == produto_id).first()
        if not produto:
            raise NotFoundError("Produto")
        return produto

    def atualizar_produto(self, db: Session, produto_id: int, **dados) -> Produto:
        with transacao(db):
            produto = self.buscar_produto(db, produto_id)

            for campo, valor in dados.items():
                if campo not in _CAMPOS_EDITAVEIS or valor is None:
                    continue
                if campo == "preco":
                    valor = _validar_preco(valor)
                elif campo == "estoque" and valor < 0:
                    raise ValidationError("Estoque não pode ser negativo")
                elif campo == "nome":
                    if not valor.strip():
                        raise ValidationError("Nome do produto é obrigatório")
                    valor = valor.strip()
                setattr(produto, campo, valor)
            db.flush()

        log_event("produtos", None, "atualizar produto", f"id={produto_id}")
        return produto

    def adicionar_estoque(self, db: Session, produto_id: int, quantidade: int) -> Produto:
        if quantidade is None or quantidade <= 0:
            raise ValidationError("Quantidade deve ser maior que zero")

        with transacao(db):
            produto = self.buscar_produto(db, produto_id)
            self.incrementar_estoque_na_transacao(db, produto_id, quantidade)
            db.refresh(produto)

        log_event("produtos", None, "adicionar estoque", f"id={produto_id} +{quantidade}")
        return produto

    def deletar_produto(self, db: Session, produto_id: int) -> None:
        with transacao(db):
            produto = self.buscar_produto(db, produto_id)

            total_pedidos = db.query(Pedido).filter(Pedido.produto_id == produto_id).count()
            if total_pedidos > 0:
                raise BusinessError(
                    f'Não é possível deletar o produto "{produto.nome}" pois ele possui '
                    f"{total_pedidos} pedido(s) associado(s). "
                    "Para ocultar o produto do menu, defina o estoque como 0."
                )

            total_perdas = db.query(PerdaEstoque).filter(PerdaEstoque.produto_id == produto_id).count()
            if total_perdas > 0:
                raise BusinessError(
                    f'Não é possível deletar o produto "{produto.nome}" pois ele possui '
                    f"{total_perdas} registro(s) de baixa técnica. "
                    "Para ocultar o produto do menu, defina o estoque como 0."
                )

            db.delete(produto)

        log_event("produtos", None, "deletar produto", f"id={produto_id}")

    # ---------- Operações compostas (exigem transação aberta) ----------

    def incrementar_estoque_na_transacao(self, db: Session, produto_id: int, quantidade: int) -> None:
        db.query(Produto).filter(Produto.id == produto_id).update(
            {Produto.estoque: Produto.estoque + quantidade},
            synchronize_session=False,
        )

    def decrementar_estoque_na_transacao(self, db: Session, produto_id: int, quantidade: int) -> None:
        """
        Decremento condicional: só aplica se ainda houver estoque suficiente
        no momento da escrita (o CHECK estoque >= 0 cobre o resto).
        """
        afetadas = db.query(Produto).filter(
            Produto.id == produto_id,
            Produto.estoque >= quantidade,
        ).update(
            {Produto.estoque: Produto.estoque - quantidade},
            synchronize_session=False,
        )
        if afetadas == 0:
            produto = db.query(Produto).filter(Produto.id == produto_id).populate_existing().first()
            if not produto:
                raise NotFoundError("Produto")
            raise BusinessError(
                f'Produto "{produto.nome}" sem estoque suficiente. '
                f"Disponível: {produto.estoque}, Solicitado: {quantidade}"
            )

    def obter_produto_servico_na_transacao(self, db: Session, nome: str, preco) -> Produto:
        """
        Busca ou cria o produto de serviço (Day Use / Diária) e atualiza o preço.
        Estoque "infinito", fora do cardápio.
        """
        produto = (
            db.query(Produto)
            .filter(Produto.nome == nome, Produto.servico.is_(True))
            .first()
        )
        if produto is None:
            produto = Produto(
                nome=nome,
                preco=to_decimal(preco),
                estoque=config.SERVICE_PRODUCT_STOCK,
                categoria=CATEGORIA_SERVICO,
                visivel_cardapio=False,
                servico=True,
            )
            db.add(produto)
        else:
            produto.preco = to_decimal(preco)
        db.flush()
        return produto
