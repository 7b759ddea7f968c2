"""
Dependências FastAPI: sessão de banco, serviços e identidade do operador
"""
from typing import Iterator, NamedTuple, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from models.enums import CARGOS_GERENCIA, Cargo
from models.usuario import Usuario
from services import Servicos
from utils.auth import extrair_bearer, verify_token
from utils.erros import AppError, ForbiddenError
from utils.logging_utils import log_event


class Identidade(NamedTuple):
    operador_id: int
    cargo: Cargo

    @property
    def gerente(self) -> bool:
        return self.cargo in CARGOS_GERENCIA


# ========== BANCO / SERVIÇOS ==========

def get_db(request: Request) -> Iterator[Session]:
    """Uma sessão por requisição, aberta no storage da aplicação"""
    yield from request.app.state.storage.get_db()


def get_servicos(request: Request) -> Servicos:
    return request.app.state.servicos


# ========== IDENTIDADE ==========

def _identidade_por_usuario(usuario: Optional[Usuario]) -> Optional[Identidade]:
    if usuario is None or not usuario.ativo:
        return None
    return Identidade(operador_id=usuario.id, cargo=Cargo(usuario.cargo))


def get_identidade(
    x_user_pin: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    servicos: Servicos = Depends(get_servicos),
) -> Optional[Identidade]:
    """
    Resolve o operador da requisição: PIN no header X-User-Pin ou
    Bearer JWT (claim userId). Sem credencial válida, retorna None.
    """
    if x_user_pin:
        return _identidade_por_usuario(servicos.usuarios.autenticar_por_pin(db, x_user_pin))

    token = extrair_bearer(authorization)
    if token:
        payload = verify_token(token)
        if not payload or payload.get("userId") is None:
            return None
        try:
            usuario = servicos.usuarios.buscar_usuario(db, int(payload["userId"]))
        except (AppError, TypeError, ValueError):
            return None
        return _identidade_por_usuario(usuario)

    return None


def require_identidade(identidade: Optional[Identidade] = Depends(get_identidade)) -> Identidade:
    if identidade is None:
        raise AppError("Não autenticado", status_code=401, codigo="UNAUTHORIZED")
    return identidade


def require_manager(identidade: Identidade = Depends(require_identidade)) -> Identidade:
    if not identidade.gerente:
        log_event("auth", identidade.operador_id, "acesso negado", f"cargo={identidade.cargo.value}")
        raise ForbiddenError("Acesso restrito a gerente ou administrador")
    return identidade
