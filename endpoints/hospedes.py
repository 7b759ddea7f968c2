"""
Endpoints de hóspedes: check-in, checkout e conta corrente
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from models.enums import TipoHospede
from schemas.comum import Pagina
from schemas.hospede import (
    CheckinRequest, CheckoutRequest, CheckoutResponse, HospedeDetalheResponse, HospedeResponse, HospedeUpdate
)
from services import Servicos
from utils.dependencies import Identidade, get_db, get_identidade, get_servicos, require_manager

router = APIRouter(prefix="/api/hospedes", tags=["hospedes"])


@router.post("/checkin", response_model=HospedeResponse, status_code=status.HTTP_201_CREATED)
def realizar_checkin(
    dados: CheckinRequest,
    identidade: Optional[Identidade] = Depends(get_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.hospedes.realizar_checkin(
        db, **dados.model_dump(), usuario_id=identidade.operador_id if identidade else None
    )


@router.post("/{hospede_id}/checkout", response_model=CheckoutResponse)
def realizar_checkout(
    hospede_id: int,
    dados: CheckoutRequest,
    identidade: Optional[Identidade] = Depends(get_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.hospedes.realizar_checkout(
        db,
        hospede_id,
        dados.metodo_pagamento,
        valor_pagamento=dados.valor_pagamento,
        forcar=dados.forcar,
        usuario_id=identidade.operador_id if identidade else None,
    )


@router.post("/{hospede_id}/zerar-divida", response_model=HospedeResponse)
def zerar_divida(
    hospede_id: int,
    identidade: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.hospedes.zerar_divida(db, hospede_id, identidade.operador_id)


@router.get("", response_model=Pagina[HospedeResponse])
def listar_hospedes(
    ativo: Optional[bool] = None,
    tipo: Optional[TipoHospede] = None,
    busca: Optional[str] = None,
    page: int = Query(1),
    limit: int = Query(10),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.hospedes.listar_hospedes(db, ativo=ativo, page=page, limit=limit, busca=busca, tipo=tipo)


@router.get("/pulseira/{uid_pulseira}", response_model=HospedeResponse)
def obter_por_pulseira(uid_pulseira: str, db: Session = Depends(get_db), servicos: Servicos = Depends(get_servicos)):
    return servicos.hospedes.buscar_por_pulseira(db, uid_pulseira)


@router.get("/{hospede_id}", response_model=HospedeDetalheResponse)
def obter_hospede(hospede_id: int, db: Session = Depends(get_db), servicos: Servicos = Depends(get_servicos)):
    return servicos.hospedes.buscar_hospede(db, hospede_id)


@router.put("/{hospede_id}", response_model=HospedeResponse)
def atualizar_hospede(
    hospede_id: int,
    dados: HospedeUpdate,
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.hospedes.atualizar_hospede(db, hospede_id, **dados.model_dump(exclude_unset=True))


@router.delete("/{hospede_id}", response_model=HospedeResponse)
def desativar_hospede(
    hospede_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.hospedes.desativar_hospede(db, hospede_id)
