"""
Modelos de Hóspede e Pagamento
- Hospede: conta corrente do cliente (dívida atual), pulseira NFC e vínculo de quarto
- Pagamento: imutável; a conciliação do checkout soma os pagamentos contra a dívida
"""
from sqlalchemy import (
    Boolean, Column, ForeignKey, Index, Integer, Numeric, String, text
)
from sqlalchemy.orm import relationship

from database.conexion import Base
from models.enums import MetodoPagamento, TipoHospede, enum_coluna
from models.tipos import DataHoraFuso
from utils.erros import INDICE_PULSEIRA_ATIVA
from utils.timezone import agora_negocio


class Hospede(Base):
    __tablename__ = "hospedes"
    __table_args__ = (
        # Uma pulseira nunca fica vinculada a dois hóspedes ATIVOS
        Index(
            INDICE_PULSEIRA_ATIVA,
            "uid_pulseira",
            unique=True,
            sqlite_where=text("ativo = 1"),
            postgresql_where=text("ativo IS TRUE"),
        ),
        Index("idx_hospede_ativo", "ativo"),
        Index("idx_hospede_quarto", "quarto_id"),
        Index("idx_hospede_nome", "nome"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tipo = Column(enum_coluna(TipoHospede, "tipo_hospede"), nullable=False)
    nome = Column(String(120), nullable=False)
    documento = Column(String(30), nullable=True)
    telefone = Column(String(30), nullable=True)
    email = Column(String(120), nullable=True)

    # LEGADO: número do quarto em texto (compatibilidade)
    quarto = Column(String(20), nullable=True)
    quarto_id = Column(Integer, ForeignKey("quartos.id", ondelete="SET NULL"), nullable=True)

    uid_pulseira = Column(String(64), nullable=True)
    limite_gasto = Column(Numeric(12, 2), nullable=True)
    divida_atual = Column(Numeric(12, 2), nullable=False, default=0)
    ativo = Column(Boolean, nullable=False, default=True)
    origem = Column(String(30), nullable=False, default="BALCAO")

    data_checkin = Column(DataHoraFuso(), default=agora_negocio)
    data_checkout = Column(DataHoraFuso(), nullable=True)

    # Relações
    quarto_rel = relationship("Quarto", back_populates="hospedes")
    pedidos = relationship("Pedido", back_populates="hospede", order_by="Pedido.data.desc()")
    pagamentos = relationship("Pagamento", back_populates="hospede", order_by="Pagamento.data.desc()")

    def __repr__(self):
        return f"<Hospede(id={self.id}, nome='{self.nome}', tipo='{self.tipo}', ativo={self.ativo})>"


class Pagamento(Base):
    __tablename__ = "pagamentos"
    __table_args__ = (
        Index("idx_pagamento_hospede", "hospede_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    hospede_id = Column(Integer, ForeignKey("hospedes.id"), nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    metodo = Column(enum_coluna(MetodoPagamento, "metodo_pagamento"), nullable=False)
    data = Column(DataHoraFuso(), nullable=False, default=agora_negocio)

    hospede = relationship("Hospede", back_populates="pagamentos")
