"""
Schemas do caixa do operador
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.enums import StatusCaixa, TipoLancamento
from schemas.comum import DataHoraNegocio, UsuarioResumo, ValorNaoNegativo, ValorPositivo


class AbrirCaixaRequest(BaseModel):
    saldo_inicial: ValorNaoNegativo


class FecharCaixaRequest(BaseModel):
    saldo_final_dinheiro: ValorNaoNegativo
    saldo_final_cartao: Optional[ValorNaoNegativo] = None
    observacao: Optional[str] = None


class LancamentoRequest(BaseModel):
    """Sangria ou suprimento"""
    valor: ValorPositivo
    observacao: Optional[str] = Field(None, max_length=255)


class LancamentoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    caixa_id: int
    tipo: TipoLancamento
    valor: Decimal
    observacao: Optional[str] = None
    data: DataHoraNegocio


class CaixaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    usuario_id: int
    saldo_inicial: Decimal
    data_abertura: DataHoraNegocio
    data_fechamento: Optional[DataHoraNegocio] = None
    saldo_final_dinheiro: Optional[Decimal] = None
    saldo_final_cartao: Optional[Decimal] = None
    observacao: Optional[str] = None
    status: StatusCaixa
    usuario: Optional[UsuarioResumo] = None


class ResumoCaixa(BaseModel):
    saldoInicial: Decimal
    vendasDinheiro: Decimal
    sangrias: Decimal
    suprimentos: Decimal
    saldoEsperadoDinheiro: Decimal
    totalLancamentos: int
    saldoFinalDinheiro: Optional[Decimal] = None
    quebraCaixa: Optional[Decimal] = None


class StatusCaixaResponse(BaseModel):
    temCaixaAberto: bool
    caixa: Optional[CaixaResponse] = None
    resumo: Optional[ResumoCaixa] = None
    ultimosLancamentos: List[LancamentoResponse] = []


class FechamentoResponse(BaseModel):
    caixa: CaixaResponse
    resumo: ResumoCaixa
