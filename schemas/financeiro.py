"""
Schemas de contas a pagar / a receber e categorias financeiras
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.enums import MetodoPagamento, OrigemContaReceber, StatusConta, TipoCategoria
from schemas.comum import DataHoraNegocio, ValorPositivo


# ========== CATEGORIAS ==========

class CategoriaCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=100)
    tipo: TipoCategoria


class CategoriaUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=100)
    tipo: Optional[TipoCategoria] = None


class CategoriaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    tipo: TipoCategoria


# ========== CONTAS A PAGAR ==========

class ContaPagarCreate(BaseModel):
    descricao: str = Field(..., min_length=1, max_length=200)
    valor: ValorPositivo
    data_vencimento: date
    categoria_id: int
    fornecedor: Optional[str] = Field(None, max_length=120)
    observacao: Optional[str] = None


class ContaPagarUpdate(BaseModel):
    descricao: Optional[str] = Field(None, min_length=1, max_length=200)
    valor: Optional[ValorPositivo] = None
    data_vencimento: Optional[date] = None
    categoria_id: Optional[int] = None
    fornecedor: Optional[str] = Field(None, max_length=120)
    observacao: Optional[str] = None


class PagarContaRequest(BaseModel):
    metodo_pagamento: MetodoPagamento
    data_pagamento: Optional[DataHoraNegocio] = None


class ContaPagarResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    descricao: str
    valor: Decimal
    data_vencimento: date
    categoria_id: int
    fornecedor: Optional[str] = None
    observacao: Optional[str] = None
    status: StatusConta
    data_pagamento: Optional[DataHoraNegocio] = None
    metodo_pagamento: Optional[MetodoPagamento] = None
    caixa_id: Optional[int] = None
    categoria: Optional[CategoriaResponse] = None


# ========== CONTAS A RECEBER ==========

class ContaReceberCreate(BaseModel):
    descricao: str = Field(..., min_length=1, max_length=200)
    valor: ValorPositivo
    data_vencimento: date
    categoria_id: int
    origem: OrigemContaReceber = OrigemContaReceber.OUTROS
    observacao: Optional[str] = None


class ContaReceberUpdate(BaseModel):
    descricao: Optional[str] = Field(None, min_length=1, max_length=200)
    valor: Optional[ValorPositivo] = None
    data_vencimento: Optional[date] = None
    categoria_id: Optional[int] = None
    origem: Optional[OrigemContaReceber] = None
    observacao: Optional[str] = None


class ReceberContaRequest(BaseModel):
    data_recebimento: Optional[DataHoraNegocio] = None


class ContaReceberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    descricao: str
    valor: Decimal
    data_vencimento: date
    categoria_id: int
    origem: OrigemContaReceber
    observacao: Optional[str] = None
    status: StatusConta
    data_recebimento: Optional[DataHoraNegocio] = None
    categoria: Optional[CategoriaResponse] = None


# ========== DASHBOARD ==========

class ResumoContas(BaseModel):
    quantidade: int
    valor: Decimal


class GrupoVencimento(BaseModel):
    vencidas: ResumoContas
    hoje: ResumoContas
    futuras: ResumoContas
    total: ResumoContas


class DashboardResponse(BaseModel):
    contasPagar: GrupoVencimento
    contasReceber: GrupoVencimento
