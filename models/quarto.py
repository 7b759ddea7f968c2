"""
Modelo de Quarto
Status controlado pelo ciclo de vida (LIVRE -> OCUPADO -> LIMPEZA -> LIVRE, MANUTENCAO)
"""
from sqlalchemy import Column, Index, Integer, String
from sqlalchemy.orm import relationship

from database.conexion import Base
from models.enums import StatusQuarto, enum_coluna
from models.tipos import DataHoraFuso
from utils.timezone import agora_negocio


class Quarto(Base):
    __tablename__ = "quartos"
    __table_args__ = (
        Index("idx_quarto_status", "status"),
        Index("idx_quarto_andar", "andar"),
    )

    id = Column(Integer, primary_key=True, index=True)
    numero = Column(String(20), nullable=False, unique=True, index=True)
    andar = Column(Integer, nullable=False)
    categoria = Column(String(50), nullable=False)
    status = Column(enum_coluna(StatusQuarto, "status_quarto"), nullable=False, default=StatusQuarto.LIVRE)

    # Auditoria
    criado_em = Column(DataHoraFuso(), default=agora_negocio)
    atualizado_em = Column(DataHoraFuso(), default=agora_negocio, onupdate=agora_negocio)

    # Histórico de hóspedes (ativos e inativos)
    hospedes = relationship("Hospede", back_populates="quarto_rel", passive_deletes=True)

    @property
    def hospedes_ativos(self):
        return [h for h in self.hospedes if h.ativo]

    @property
    def hospede_atual(self):
        """Resumo exibido na listagem: no máximo um hóspede ativo"""
        ativos = self.hospedes_ativos
        return ativos[0] if ativos else None

    def __repr__(self):
        return f"<Quarto(id={self.id}, numero='{self.numero}', status='{self.status}')>"
