"""
Schemas de pedidos
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.enums import MetodoCriacao, StatusPedido, TipoHospede
from schemas.comum import DataHoraNegocio, UsuarioResumo
from schemas.produto import ProdutoResumo


class ItemPedidoRequest(BaseModel):
    produto_id: int
    quantidade: int = Field(1, ge=1)


class PedidoNfcRequest(BaseModel):
    uid_pulseira: str = Field(..., min_length=1)
    itens: List[ItemPedidoRequest] = Field(..., min_length=1)


class PedidoManualRequest(BaseModel):
    hospede_id: int
    itens: List[ItemPedidoRequest] = Field(..., min_length=1)
    manager_pin: str = Field(..., pattern=r"^\d{4}$")


class PedidoStatusUpdate(BaseModel):
    status: StatusPedido


class CancelarPedidoRequest(BaseModel):
    manager_pin: str = Field(..., pattern=r"^\d{4}$")


class HospedeResumo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    tipo: TipoHospede
    quarto: Optional[str] = None


class PedidoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hospede_id: int
    produto_id: int
    valor: Decimal
    status: StatusPedido
    metodo_criacao: MetodoCriacao
    gerente_id: Optional[int] = None
    usuario_id: Optional[int] = None
    data: DataHoraNegocio
    data_inicio_preparo: Optional[DataHoraNegocio] = None
    data_pronto: Optional[DataHoraNegocio] = None
    hospede: Optional[HospedeResumo] = None
    produto: Optional[ProdutoResumo] = None
    gerente: Optional[UsuarioResumo] = None
    usuario: Optional[UsuarioResumo] = None
