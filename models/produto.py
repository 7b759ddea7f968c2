"""
Modelos de Produto e Perda de Estoque (baixa técnica)
Produtos de serviço (Day Use, Diária) têm estoque "infinito" e não aparecem no cardápio
"""
from sqlalchemy import (
    Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, Numeric, String, Text
)
from sqlalchemy.orm import relationship

from database.conexion import Base
from models.enums import SetorProduto, enum_coluna
from models.tipos import DataHoraFuso
from utils.erros import CK_ESTOQUE_PRODUTO
from utils.timezone import agora_negocio


class Produto(Base):
    __tablename__ = "produtos"
    __table_args__ = (
        CheckConstraint("estoque >= 0", name=CK_ESTOQUE_PRODUTO),
        Index("idx_produto_categoria", "categoria"),
        Index("idx_produto_nome", "nome"),
    )

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(100), nullable=False)
    preco = Column(Numeric(12, 2), nullable=False)
    estoque = Column(Integer, nullable=False, default=0)
    foto = Column(String(255), nullable=True)
    categoria = Column(String(50), nullable=True)
    descricao = Column(Text, nullable=True)
    setor = Column(enum_coluna(SetorProduto, "setor_produto"), nullable=True)
    visivel_cardapio = Column(Boolean, nullable=False, default=True)
    servico = Column(Boolean, nullable=False, default=False)  # Day Use / Diária

    criado_em = Column(DataHoraFuso(), default=agora_negocio)
    atualizado_em = Column(DataHoraFuso(), default=agora_negocio, onupdate=agora_negocio)

    pedidos = relationship("Pedido", back_populates="produto")
    perdas = relationship("PerdaEstoque", back_populates="produto")

    def __repr__(self):
        return f"<Produto(id={self.id}, nome='{self.nome}', estoque={self.estoque})>"


class PerdaEstoque(Base):
    __tablename__ = "perdas_estoque"
    __table_args__ = (
        Index("idx_perda_produto", "produto_id"),
        Index("idx_perda_data", "data"),
    )

    id = Column(Integer, primary_key=True, index=True)
    produto_id = Column(Integer, ForeignKey("produtos.id"), nullable=False)
    quantidade = Column(Integer, nullable=False)
    motivo = Column(String(100), nullable=False)  # Quebra, Vencimento, Erro
    observacao = Column(Text, nullable=True)
    data = Column(DataHoraFuso(), nullable=False, default=agora_negocio)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False)

    produto = relationship("Produto", back_populates="perdas")
    usuario = relationship("Usuario")
