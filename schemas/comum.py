"""
Tipos compartilhados pelos schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import Generic, List, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from typing_extensions import Annotated

from utils.timezone import to_business_time

T = TypeVar("T")

# Datas sempre devolvidas no fuso do negócio
DataHoraNegocio = Annotated[datetime, AfterValidator(to_business_time)]

# Valor monetário de entrada: positivo, 2 casas
ValorPositivo = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
ValorNaoNegativo = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class Paginacao(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class Pagina(BaseModel, Generic[T]):
    model_config = ConfigDict(from_attributes=True)

    data: List[T]
    pagination: Paginacao


class UsuarioResumo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str


class Mensagem(BaseModel):
    success: bool = True
    message: str
