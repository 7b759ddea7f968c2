"""
Schemas de hóspedes: check-in, checkout e consulta da conta
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.enums import MetodoPagamento, StatusPedido, TipoHospede
from schemas.comum import DataHoraNegocio, ValorNaoNegativo, ValorPositivo
from schemas.produto import ProdutoResumo


# ============================================================================
# REQUESTS
# ============================================================================

class CheckinRequest(BaseModel):
    tipo: TipoHospede
    nome: str = Field(..., min_length=1, max_length=120)
    documento: Optional[str] = Field(None, max_length=30)
    telefone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=120)
    quarto_id: Optional[int] = None
    quarto: Optional[str] = Field(None, max_length=20)
    uid_pulseira: Optional[str] = Field(None, max_length=64)
    limite_gasto: Optional[ValorNaoNegativo] = None
    origem: Optional[str] = Field(None, max_length=30)
    valor_entrada: Optional[ValorNaoNegativo] = None
    pago_na_entrada: bool = False
    metodo_pagamento: Optional[MetodoPagamento] = None

    @field_validator("nome", mode="before")
    @classmethod
    def normalizar_nome(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("uid_pulseira", "documento", mode="before")
    @classmethod
    def vazio_para_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validar_pagamento_entrada(self):
        if self.pago_na_entrada and not self.metodo_pagamento:
            raise ValueError("Método de pagamento é obrigatório quando o pagamento é feito na entrada")
        return self


class CheckoutRequest(BaseModel):
    metodo_pagamento: MetodoPagamento
    valor_pagamento: Optional[ValorPositivo] = None
    forcar: bool = False


class HospedeUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=120)
    documento: Optional[str] = Field(None, max_length=30)
    telefone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=120)
    limite_gasto: Optional[ValorNaoNegativo] = None
    origem: Optional[str] = Field(None, max_length=30)


# ============================================================================
# RESPONSES
# ============================================================================

class PagamentoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    valor: Decimal
    metodo: MetodoPagamento
    data: DataHoraNegocio


class PedidoDaConta(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    valor: Decimal
    status: StatusPedido
    data: DataHoraNegocio
    produto: Optional[ProdutoResumo] = None


class HospedeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tipo: TipoHospede
    nome: str
    documento: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None
    quarto: Optional[str] = None
    quarto_id: Optional[int] = None
    uid_pulseira: Optional[str] = None
    limite_gasto: Optional[Decimal] = None
    divida_atual: Decimal
    ativo: bool
    origem: str
    data_checkin: Optional[DataHoraNegocio] = None
    data_checkout: Optional[DataHoraNegocio] = None


class HospedeDetalheResponse(HospedeResponse):
    pedidos: List[PedidoDaConta] = []
    pagamentos: List[PagamentoResponse] = []


class CheckoutResponse(BaseModel):
    hospede: HospedeResponse
    mensagemQuarto: Optional[str] = None
    hospedesRestantes: int = 0
