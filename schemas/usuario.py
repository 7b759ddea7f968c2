"""
Schemas de usuários (equipe)
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.enums import Cargo
from schemas.comum import DataHoraNegocio


class UsuarioCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=100)
    pin: str = Field(..., pattern=r"^\d{4}$")
    cargo: Cargo = Cargo.WAITER


class UsuarioUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=100)
    pin: Optional[str] = Field(None, pattern=r"^\d{4}$")
    cargo: Optional[Cargo] = None
    ativo: Optional[bool] = None


class UsuarioResponse(BaseModel):
    """O PIN nunca é devolvido"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    cargo: Cargo
    ativo: bool
    criado_em: Optional[DataHoraNegocio] = None


class ValidarPinRequest(BaseModel):
    pin: str = Field(..., pattern=r"^\d{4}$")
