"""
Contas a pagar / a receber e suas categorias
Status derivado do vencimento (PENDENTE / ATRASADO); PAGO e RECEBIDO são terminais
"""
from sqlalchemy import Column, Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from database.conexion import Base
from models.enums import (
    MetodoPagamento, OrigemContaReceber, StatusConta, TipoCategoria, enum_coluna
)
from models.tipos import DataHoraFuso
from utils.timezone import agora_negocio


class CategoriaFinanceira(Base):
    __tablename__ = "categorias_financeiras"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(100), nullable=False)
    tipo = Column(enum_coluna(TipoCategoria, "tipo_categoria"), nullable=False)

    contas_pagar = relationship("ContaPagar", back_populates="categoria")
    contas_receber = relationship("ContaReceber", back_populates="categoria")


class ContaPagar(Base):
    __tablename__ = "contas_pagar"
    __table_args__ = (
        Index("idx_conta_pagar_status", "status"),
        Index("idx_conta_pagar_vencimento", "data_vencimento"),
    )

    id = Column(Integer, primary_key=True, index=True)
    descricao = Column(String(200), nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    data_vencimento = Column(Date, nullable=False)
    categoria_id = Column(Integer, ForeignKey("categorias_financeiras.id"), nullable=False)
    fornecedor = Column(String(120), nullable=True)
    observacao = Column(Text, nullable=True)
    status = Column(enum_coluna(StatusConta, "status_conta"), nullable=False, default=StatusConta.PENDENTE)

    data_pagamento = Column(DataHoraFuso(), nullable=True)
    metodo_pagamento = Column(enum_coluna(MetodoPagamento, "metodo_pagamento"), nullable=True)
    # Caixa de onde saiu a sangria (pagamento em dinheiro)
    caixa_id = Column(Integer, ForeignKey("caixas.id"), nullable=True)

    criado_em = Column(DataHoraFuso(), default=agora_negocio)

    categoria = relationship("CategoriaFinanceira", back_populates="contas_pagar")
    caixa = relationship("Caixa")


class ContaReceber(Base):
    __tablename__ = "contas_receber"
    __table_args__ = (
        Index("idx_conta_receber_status", "status"),
        Index("idx_conta_receber_vencimento", "data_vencimento"),
    )

    id = Column(Integer, primary_key=True, index=True)
    descricao = Column(String(200), nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    data_vencimento = Column(Date, nullable=False)
    categoria_id = Column(Integer, ForeignKey("categorias_financeiras.id"), nullable=False)
    origem = Column(enum_coluna(OrigemContaReceber, "origem_conta_receber"), nullable=False, default=OrigemContaReceber.OUTROS)
    observacao = Column(Text, nullable=True)
    status = Column(enum_coluna(StatusConta, "status_conta"), nullable=False, default=StatusConta.PENDENTE)

    data_recebimento = Column(DataHoraFuso(), nullable=True)

    criado_em = Column(DataHoraFuso(), default=agora_negocio)

    categoria = relationship("CategoriaFinanceira", back_populates="contas_receber")
