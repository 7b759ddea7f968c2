"""
Serviço de usuários (equipe)
- PIN de 4 dígitos, único entre usuários ativos
- Autorização de gerente por PIN (pedidos manuais, cancelamentos)
"""
import re
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.transacao import transacao
from models.enums import CARGOS_GERENCIA, Cargo
from models.usuario import Usuario
from utils.erros import NotFoundError, ValidationError
from utils.logging_utils import log_event
from utils.paginacao import paginar

_PIN_RE = re.compile(r"^\d{4}$")


def _validar_formato_pin(pin: str) -> None:
    if not pin or not _PIN_RE.match(pin):
        raise ValidationError("PIN deve conter exatamente 4 dígitos")


class UsuarioService:

    def criar_usuario(self, db: Session, nome: str, pin: str, cargo: Cargo = Cargo.WAITER) -> Usuario:
        """
        Cria um usuário. Se o PIN pertence a um usuário inativo, ele é reativado
        com os novos dados em vez de criar outro registro.
        """
        _validar_formato_pin(pin)
        if not nome or not nome.strip():
            raise ValidationError("Nome é obrigatório")

        with transacao(db):
            existente = db.query(Usuario).filter(Usuario.pin == pin).first()

            if existente and existente.ativo:
                raise ValidationError("PIN já está em uso por outro usuário ativo")

            if existente:
                existente.nome = nome.strip()
                existente.cargo = cargo
                existente.ativo = True
                usuario = existente
                accao = "reativar usuario"
            else:
                usuario = Usuario(nome=nome.strip(), pin=pin, cargo=cargo, ativo=True)
                db.add(usuario)
                accao = "criar usuario"
            db.flush()

        log_event("usuarios", None, accao, f"id={usuario.id} cargo={usuario.cargo.value}")
        return usuario

    def listar_usuarios(
        self,
        db: Session,
        ativo: Optional[bool] = None,
        page: int = 1,
        limit: int = 10,
        busca: Optional[str] = None,
        cargo: Optional[Cargo] = None,
    ) -> dict:
        query = db.query(Usuario)
        if ativo is not None:
            query = query.filter(Usuario.ativo == ativo)
        if cargo:
            query = query.filter(Usuario.cargo == cargo)
        if busca:
            termo = f"%{busca}%"
            query = query.filter(or_(Usuario.nome.ilike(termo), Usuario.pin.like(termo)))
        return paginar(query.order_by(Usuario.nome.asc()), page, limit)

    def buscar_usuario(self, db: Session, usuario_id: int) -> Usuario:
        usuario = db.query(Usuario).filter(Usuario.id == usuario_id).first()
        if not usuario:
            raise NotFoundError("Usuário")
        return usuario

    def autenticar_por_pin(self, db: Session, pin: str) -> Optional[Usuario]:
        if not pin:
            return None
        return db.query(Usuario).filter(Usuario.pin == pin, Usuario.ativo.is_(True)).first()

    def validar_pin_gerente(self, db: Session, pin: str) -> Optional[Usuario]:
        """Retorna o usuário somente se o PIN for de um MANAGER/ADMIN ativo"""
        usuario = self.autenticar_por_pin(db, pin)
        if usuario is None or usuario.cargo not in CARGOS_GERENCIA:
            return None
        return usuario

    def atualizar_usuario(
        self,
        db: Session,
        usuario_id: int,
        nome: Optional[str] = None,
        pin: Optional[str] = None,
        cargo: Optional[Cargo] = None,
        ativo: Optional[bool] = None,
    ) -> Usuario:
        with transacao(db):
            usuario = self.buscar_usuario(db, usuario_id)

            if pin is not None:
                _validar_formato_pin(pin)
                outro = db.query(Usuario).filter(Usuario.pin == pin, Usuario.id != usuario_id).first()
                if outro and outro.ativo:
                    raise ValidationError("PIN já está em uso por outro usuário ativo")
                if outro:
                    # O PIN é único na tabela: o inativo cede o PIN
                    raise ValidationError("PIN pertence a um usuário inativo; reative-o ou escolha outro PIN")
                usuario.pin = pin

            if nome is not None:
                if not nome.strip():
                    raise ValidationError("Nome é obrigatório")
                usuario.nome = nome.strip()
            if cargo is not None:
                usuario.cargo = cargo
            if ativo is not None:
                usuario.ativo = ativo
            db.flush()

        log_event("usuarios", None, "atualizar usuario", f"id={usuario.id}")
        return usuario

    def desativar_usuario(self, db: Session, usuario_id: int) -> Usuario:
        with transacao(db):
            usuario = self.buscar_usuario(db, usuario_id)
            usuario.ativo = False

        log_event("usuarios", None, "desativar usuario", f"id={usuario_id}")
        return usuario
