"""
Schemas de quartos
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.enums import StatusQuarto, TipoHospede


class QuartoCreate(BaseModel):
    numero: str = Field(..., min_length=1, max_length=20)
    andar: int = Field(..., ge=1)
    categoria: str = Field(..., min_length=1, max_length=50)


class QuartoUpdate(BaseModel):
    numero: Optional[str] = Field(None, min_length=1, max_length=20)
    andar: Optional[int] = Field(None, ge=1)
    categoria: Optional[str] = Field(None, min_length=1, max_length=50)


class QuartoStatusUpdate(BaseModel):
    status: StatusQuarto


class HospedeNoQuarto(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    tipo: TipoHospede


class QuartoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    numero: str
    andar: int
    categoria: str
    status: StatusQuarto
    hospede_atual: Optional[HospedeNoQuarto] = None


class QuartoDetalheResponse(QuartoResponse):
    hospedes_ativos: List[HospedeNoQuarto] = []
