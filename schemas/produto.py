"""
Schemas de produtos e baixa técnica de estoque
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.enums import SetorProduto
from schemas.comum import DataHoraNegocio, UsuarioResumo, ValorNaoNegativo


class ProdutoCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=100)
    preco: ValorNaoNegativo
    estoque: int = Field(0, ge=0)
    foto: Optional[str] = None
    categoria: Optional[str] = Field(None, max_length=50)
    descricao: Optional[str] = None
    setor: Optional[SetorProduto] = None
    visivel_cardapio: bool = True


class ProdutoUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=100)
    preco: Optional[ValorNaoNegativo] = None
    estoque: Optional[int] = Field(None, ge=0)
    foto: Optional[str] = None
    categoria: Optional[str] = Field(None, max_length=50)
    descricao: Optional[str] = None
    setor: Optional[SetorProduto] = None
    visivel_cardapio: Optional[bool] = None


class AdicionarEstoqueRequest(BaseModel):
    quantidade: int = Field(..., gt=0)


class ProdutoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    preco: Decimal
    estoque: int
    foto: Optional[str] = None
    categoria: Optional[str] = None
    descricao: Optional[str] = None
    setor: Optional[SetorProduto] = None
    visivel_cardapio: bool
    servico: bool


class ProdutoResumo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    setor: Optional[SetorProduto] = None


class BaixaCreate(BaseModel):
    produto_id: int
    quantidade: int = Field(..., gt=0)
    motivo: str = Field(..., min_length=1, max_length=100)
    observacao: Optional[str] = None


class BaixaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    produto_id: int
    quantidade: int
    motivo: str
    observacao: Optional[str] = None
    data: DataHoraNegocio
    produto: Optional[ProdutoResumo] = None
    usuario: Optional[UsuarioResumo] = None
