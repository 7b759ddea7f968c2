"""
Modelo de Usuário (equipe: garçom, gerente, admin)
Autenticação operacional por PIN de 4 dígitos
"""
from sqlalchemy import Boolean, Column, Index, Integer, String
from sqlalchemy.orm import relationship

from database.conexion import Base
from models.enums import Cargo, enum_coluna
from models.tipos import DataHoraFuso
from utils.timezone import agora_negocio


class Usuario(Base):
    """Tabela de usuários do PDV"""
    __tablename__ = "usuarios"
    __table_args__ = (
        Index("idx_usuario_ativo", "ativo"),
        Index("idx_usuario_cargo", "cargo"),
    )

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(100), nullable=False)
    pin = Column(String(4), unique=True, nullable=False)
    cargo = Column(enum_coluna(Cargo, "cargo"), nullable=False, default=Cargo.WAITER)

    # Controle de estado (desativação lógica; o PIN pode ser reaproveitado)
    ativo = Column(Boolean, default=True, nullable=False)

    criado_em = Column(DataHoraFuso(), default=agora_negocio, nullable=False)
    atualizado_em = Column(DataHoraFuso(), default=agora_negocio, onupdate=agora_negocio)

    caixas = relationship("Caixa", back_populates="usuario")

    def __repr__(self):
        return f"<Usuario(id={self.id}, nome='{self.nome}', cargo='{self.cargo}')>"
