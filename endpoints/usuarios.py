"""
Endpoints de usuários (equipe do PDV)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from models.enums import Cargo
from schemas.comum import Pagina
from schemas.usuario import UsuarioCreate, UsuarioResponse, UsuarioUpdate, ValidarPinRequest
from services import Servicos
from utils.dependencies import Identidade, get_db, get_servicos, require_identidade, require_manager
from utils.erros import ForbiddenError

router = APIRouter(prefix="/api/usuarios", tags=["usuarios"])


@router.get("/me", response_model=UsuarioResponse)
def usuario_atual(
    identidade: Identidade = Depends(require_identidade),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.usuarios.buscar_usuario(db, identidade.operador_id)


@router.post("/validar-pin-gerente", response_model=UsuarioResponse)
def validar_pin_gerente(
    dados: ValidarPinRequest,
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    gerente = servicos.usuarios.validar_pin_gerente(db, dados.pin)
    if not gerente:
        raise ForbiddenError("PIN de gerente inválido ou sem permissão")
    return gerente


@router.get("", response_model=Pagina[UsuarioResponse])
def listar_usuarios(
    ativo: Optional[bool] = None,
    cargo: Optional[Cargo] = None,
    busca: Optional[str] = None,
    page: int = Query(1),
    limit: int = Query(10),
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.usuarios.listar_usuarios(db, ativo=ativo, page=page, limit=limit, busca=busca, cargo=cargo)


@router.post("", response_model=UsuarioResponse, status_code=status.HTTP_201_CREATED)
def criar_usuario(
    dados: UsuarioCreate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.usuarios.criar_usuario(db, dados.nome, dados.pin, dados.cargo)


@router.get("/{usuario_id}", response_model=UsuarioResponse)
def obter_usuario(
    usuario_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.usuarios.buscar_usuario(db, usuario_id)


@router.put("/{usuario_id}", response_model=UsuarioResponse)
def atualizar_usuario(
    usuario_id: int,
    dados: UsuarioUpdate,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.usuarios.atualizar_usuario(db, usuario_id, **dados.model_dump(exclude_unset=True))


@router.delete("/{usuario_id}", response_model=UsuarioResponse)
def desativar_usuario(
    usuario_id: int,
    _: Identidade = Depends(require_manager),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
):
    return servicos.usuarios.desativar_usuario(db, usuario_id)
