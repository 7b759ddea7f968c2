"""
Modelo de Pedido
Uma linha = exatamente uma unidade de um produto. O valor é um snapshot do preço
no momento da criação e nunca muda depois.
"""
from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import relationship

from database.conexion import Base
from models.enums import MetodoCriacao, StatusPedido, enum_coluna
from models.tipos import DataHoraFuso
from utils.timezone import agora_negocio


class Pedido(Base):
    __tablename__ = "pedidos"
    __table_args__ = (
        Index("idx_pedido_status", "status"),
        Index("idx_pedido_hospede", "hospede_id"),
        Index("idx_pedido_data", "data"),
    )

    id = Column(Integer, primary_key=True, index=True)
    hospede_id = Column(Integer, ForeignKey("hospedes.id"), nullable=False)
    produto_id = Column(Integer, ForeignKey("produtos.id"), nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    status = Column(enum_coluna(StatusPedido, "status_pedido"), nullable=False, default=StatusPedido.PENDENTE)
    metodo_criacao = Column(enum_coluna(MetodoCriacao, "metodo_criacao"), nullable=False, default=MetodoCriacao.NFC)

    # Gerente que autorizou (somente MANUAL) e garçom que lançou
    gerente_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)

    # Horário do negócio (rastreabilidade legal)
    data = Column(DataHoraFuso(), nullable=False, default=agora_negocio)
    data_inicio_preparo = Column(DataHoraFuso(), nullable=True)
    data_pronto = Column(DataHoraFuso(), nullable=True)

    hospede = relationship("Hospede", back_populates="pedidos")
    produto = relationship("Produto", back_populates="pedidos")
    gerente = relationship("Usuario", foreign_keys=[gerente_id])
    usuario = relationship("Usuario", foreign_keys=[usuario_id])

    def __repr__(self):
        return f"<Pedido(id={self.id}, hospede_id={self.hospede_id}, status='{self.status}')>"
