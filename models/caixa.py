"""
Modelos de Caixa (sessão de caixa do operador) e LancamentoCaixa
- No máximo um caixa ABERTO por operador (índice único parcial)
- Lançamentos são append-only; sangrias gravadas com valor negativo
"""
from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric, Text, text
from sqlalchemy.orm import relationship

from database.conexion import Base
from models.enums import StatusCaixa, TipoLancamento, enum_coluna
from models.tipos import DataHoraFuso
from utils.erros import INDICE_CAIXA_ABERTO
from utils.timezone import agora_negocio


class Caixa(Base):
    __tablename__ = "caixas"
    __table_args__ = (
        Index(
            INDICE_CAIXA_ABERTO,
            "usuario_id",
            unique=True,
            sqlite_where=text("status = 'ABERTO'"),
            postgresql_where=text("status = 'ABERTO'"),
        ),
        Index("idx_caixa_status", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False)
    saldo_inicial = Column(Numeric(12, 2), nullable=False, default=0)
    data_abertura = Column(DataHoraFuso(), nullable=False, default=agora_negocio)
    data_fechamento = Column(DataHoraFuso(), nullable=True)
    saldo_final_dinheiro = Column(Numeric(12, 2), nullable=True)
    saldo_final_cartao = Column(Numeric(12, 2), nullable=True)
    observacao = Column(Text, nullable=True)
    status = Column(enum_coluna(StatusCaixa, "status_caixa"), nullable=False, default=StatusCaixa.ABERTO)

    usuario = relationship("Usuario", back_populates="caixas")
    lancamentos = relationship(
        "LancamentoCaixa",
        back_populates="caixa",
        order_by="LancamentoCaixa.data",
    )

    def __repr__(self):
        return f"<Caixa(id={self.id}, usuario_id={self.usuario_id}, status='{self.status}')>"


class LancamentoCaixa(Base):
    __tablename__ = "lancamentos_caixa"
    __table_args__ = (
        Index("idx_lancamento_caixa", "caixa_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    caixa_id = Column(Integer, ForeignKey("caixas.id"), nullable=False)
    tipo = Column(enum_coluna(TipoLancamento, "tipo_lancamento"), nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)  # SANGRIA negativa
    observacao = Column(Text, nullable=True)
    data = Column(DataHoraFuso(), nullable=False, default=agora_negocio)

    caixa = relationship("Caixa", back_populates="lancamentos")
