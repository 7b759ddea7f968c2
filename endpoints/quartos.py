"""
Endpoints de quartos
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from models.enums import StatusQuarto
from schemas.quarto import (
    QuartoCreate, QuartoDetalheResponse, QuartoResponse, QuartoStatusUpdate, QuartoUpdate
)
from services import Servicos
from utils.dependencies import Identidade, get_db, get_servicos, require_identidade, require_manager
from utils.erros import NotFoundError

router = APIRouter(prefix="/api/quartos", tags=["quartos"])


@router.get("", response_model=List[QuartoResponse])
def listar_quartos(
    filtro_status: Optional[StatusQuarto] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.quartos.listar_quartos(db, filtro_status)


@router.get("/numero/{numero}", response_model=QuartoDetalheResponse)
def obter_quarto_por_numero(numero: str, db: Session = Depends(get_db), servicos: Servicos = Depends(get_servicos)):
    quarto = servicos.quartos.buscar_quarto_por_numero(db, numero)
    if not quarto:
        raise NotFoundError("Quarto")
    return quarto


@router.get("/{quarto_id}", response_model=QuartoDetalheResponse)
def obter_quarto(quarto_id: int, db: Session = Depends(get_db), servicos: Servicos = Depends(get_servicos)):
    return servicos.quartos.buscar_quarto(db, quarto_id)


@router.post("", response_model=QuartoResponse, status_code=status.HTTP_201_CREATED)
def criar_quarto(
    dados: QuartoCreate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.quartos.criar_quarto(db, dados.numero, dados.andar, dados.categoria)


@router.put("/{quarto_id}", response_model=QuartoResponse)
def atualizar_quarto(
    quarto_id: int,
    dados: QuartoUpdate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.quartos.atualizar_quarto(db, quarto_id, **dados.model_dump(exclude_unset=True))


@router.patch("/{quarto_id}/status", response_model=QuartoResponse)
def atualizar_status_quarto(
    quarto_id: int,
    dados: QuartoStatusUpdate,
    _: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.quartos.atualizar_status(db, quarto_id, dados.status)


@router.delete("/{quarto_id}", status_code=status.HTTP_204_NO_CONTENT)
def remover_quarto(
    quarto_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    servicos.quartos.remover_quarto(db, quarto_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
