"""
Endpoints do caixa do operador autenticado
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from schemas.caixa import (
    AbrirCaixaRequest, CaixaResponse, FechamentoResponse, FecharCaixaRequest, LancamentoRequest,
    LancamentoResponse, StatusCaixaResponse
)
from schemas.comum import Pagina
from services import Servicos
from utils.dependencies import Identidade, get_db, get_servicos, require_identidade

router = APIRouter(prefix="/api/caixa", tags=["caixa"])


@router.get("/status", response_model=StatusCaixaResponse)
def status_caixa(
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.caixa.obter_status(db, identidade.operador_id)


@router.post("/abrir", response_model=CaixaResponse, status_code=status.HTTP_201_CREATED)
def abrir_caixa(
    dados: AbrirCaixaRequest,
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.caixa.abrir_caixa(db, identidade.operador_id, dados.saldo_inicial)


@router.post("/fechar", response_model=FechamentoResponse)
def fechar_caixa(
    dados: FecharCaixaRequest,
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.caixa.fechar_caixa(
        db,
        identidade.operador_id,
        dados.saldo_final_dinheiro,
        saldo_final_cartao=dados.saldo_final_cartao,
        observacao=dados.observacao,
    )


@router.post("/sangria", response_model=LancamentoResponse, status_code=status.HTTP_201_CREATED)
def registrar_sangria(
    dados: LancamentoRequest,
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.caixa.registrar_sangria(db, identidade.operador_id, dados.valor, dados.observacao)


@router.post("/suprimento", response_model=LancamentoResponse, status_code=status.HTTP_201_CREATED)
def registrar_suprimento(
    dados: LancamentoRequest,
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.caixa.registrar_suprimento(db, identidade.operador_id, dados.valor, dados.observacao)


@router.get("/historico", response_model=Pagina[CaixaResponse])
def historico_caixa(
    page: int = Query(1),
    limit: int = Query(10),
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.caixa.historico(db, identidade.operador_id, page, limit)
