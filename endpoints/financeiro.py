"""
Endpoints financeiros: categorias, contas a pagar, contas a receber e dashboard
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from models.enums import OrigemContaReceber, StatusConta, TipoCategoria
from schemas.financeiro import (
    CategoriaCreate, CategoriaResponse, CategoriaUpdate, ContaPagarCreate, ContaPagarResponse,
    ContaPagarUpdate, ContaReceberCreate, ContaReceberResponse, ContaReceberUpdate, DashboardResponse,
    PagarContaRequest, ReceberContaRequest
)
from services import Servicos
from utils.dependencies import Identidade, get_db, get_servicos, require_identidade, require_manager

router = APIRouter(prefix="/api/financeiro", tags=["financeiro"])


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.obter_dashboard(db)


# ========== CATEGORIAS ==========

@router.get("/categorias", response_model=List[CategoriaResponse])
def listar_categorias(
    tipo: Optional[TipoCategoria] = None,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.listar_categorias(db, tipo)


@router.post("/categorias", response_model=CategoriaResponse, status_code=status.HTTP_201_CREATED)
def criar_categoria(
    dados: CategoriaCreate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.criar_categoria(db, dados.nome, dados.tipo)


@router.put("/categorias/{categoria_id}", response_model=CategoriaResponse)
def atualizar_categoria(
    categoria_id: int,
    dados: CategoriaUpdate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.atualizar_categoria(db, categoria_id, nome=dados.nome, tipo=dados.tipo)


@router.delete("/categorias/{categoria_id}", status_code=status.HTTP_204_NO_CONTENT)
def remover_categoria(
    categoria_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    servicos.financeiro.remover_categoria(db, categoria_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========== CONTAS A PAGAR ==========

@router.get("/contas-pagar", response_model=List[ContaPagarResponse])
def listar_contas_pagar(
    filtro_status: Optional[StatusConta] = Query(None, alias="status"),
    categoria_id: Optional[int] = None,
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.listar_contas_pagar(db, filtro_status, categoria_id, data_inicio, data_fim)


@router.get("/contas-pagar/{conta_id}", response_model=ContaPagarResponse)
def obter_conta_pagar(
    conta_id: int,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.buscar_conta_pagar(db, conta_id)


@router.post("/contas-pagar", response_model=ContaPagarResponse, status_code=status.HTTP_201_CREATED)
def criar_conta_pagar(
    dados: ContaPagarCreate,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.criar_conta_pagar(db, **dados.model_dump())


@router.put("/contas-pagar/{conta_id}", response_model=ContaPagarResponse)
def atualizar_conta_pagar(
    conta_id: int,
    dados: ContaPagarUpdate,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.atualizar_conta_pagar(db, conta_id, **dados.model_dump(exclude_unset=True))


@router.delete("/contas-pagar/{conta_id}", status_code=status.HTTP_204_NO_CONTENT)
def remover_conta_pagar(
    conta_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    servicos.financeiro.remover_conta_pagar(db, conta_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/contas-pagar/{conta_id}/pagar", response_model=ContaPagarResponse)
def pagar_conta(
    conta_id: int,
    dados: PagarContaRequest,
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.pagar_conta(
        db, conta_id, dados.metodo_pagamento, dados.data_pagamento, identidade.operador_id
    )


# ========== CONTAS A RECEBER ==========

@router.get("/contas-receber", response_model=List[ContaReceberResponse])
def listar_contas_receber(
    filtro_status: Optional[StatusConta] = Query(None, alias="status"),
    categoria_id: Optional[int] = None,
    origem: Optional[OrigemContaReceber] = None,
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.listar_contas_receber(
        db, filtro_status, categoria_id, origem, data_inicio, data_fim
    )


@router.get("/contas-receber/{conta_id}", response_model=ContaReceberResponse)
def obter_conta_receber(
    conta_id: int,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.buscar_conta_receber(db, conta_id)


@router.post("/contas-receber", response_model=ContaReceberResponse, status_code=status.HTTP_201_CREATED)
def criar_conta_receber(
    dados: ContaReceberCreate,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.criar_conta_receber(db, **dados.model_dump())


@router.put("/contas-receber/{conta_id}", response_model=ContaReceberResponse)
def atualizar_conta_receber(
    conta_id: int,
    dados: ContaReceberUpdate,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.atualizar_conta_receber(db, conta_id, **dados.model_dump(exclude_unset=True))


@router.delete("/contas-receber/{conta_id}", status_code=status.HTTP_204_NO_CONTENT)
def remover_conta_receber(
    conta_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    servicos.financeiro.remover_conta_receber(db, conta_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/contas-receber/{conta_id}/receber", response_model=ContaReceberResponse)
def receber_conta(
    conta_id: int,
    dados: ReceberContaRequest,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.financeiro.receber_conta(db, conta_id, dados.data_recebimento)
