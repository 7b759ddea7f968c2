"""
Taxonomia de erros do núcleo transacional

Cada erro tem um tipo fechado (ErrorKind), um código estável para máquina
e a classe HTTP usada na fronteira. Os serviços lançam; a transação faz
rollback; main.py converte em {"success": false, "error", "code"}.
"""
import enum
from typing import Optional

from sqlalchemy.exc import IntegrityError


class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    BUSINESS = "BUSINESS_ERROR"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    INTERNAL = "APP_ERROR"


class AppError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(self, mensagem: str, status_code: Optional[int] = None, codigo: Optional[str] = None):
        super().__init__(mensagem)
        self.mensagem = mensagem
        if status_code is not None:
            self.status_code = status_code
        self.codigo = codigo or self.kind.value

    def to_dict(self) -> dict:
        return {"success": False, "error": self.mensagem, "code": self.codigo}


class ValidationError(AppError):
    """Entrada malformada ou ausente"""
    kind = ErrorKind.VALIDATION
    status_code = 400

    def __init__(self, mensagem: str):
        super().__init__(mensagem)


class NotFoundError(AppError):
    """Entidade referenciada não existe"""
    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(self, recurso: str):
        super().__init__(f"{recurso} não encontrado")
        self.recurso = recurso


class BusinessError(AppError):
    """Regra de domínio violada (estoque, estado terminal, caixa fechado...)"""
    kind = ErrorKind.BUSINESS
    status_code = 400

    def __init__(self, mensagem: str):
        super().__init__(mensagem)


class ForbiddenError(AppError):
    """Fronteira de autorização/política (limite Day Use, PIN de gerente inválido)"""
    kind = ErrorKind.FORBIDDEN
    status_code = 403

    def __init__(self, mensagem: str):
        super().__init__(mensagem)


class ConflictError(AppError):
    """Violação de unicidade sob concorrência (pulseira em uso)"""
    kind = ErrorKind.CONFLICT
    status_code = 409

    def __init__(self, mensagem: str):
        super().__init__(mensagem)


# Índice parcial que garante uma pulseira por hóspede ativo
INDICE_PULSEIRA_ATIVA = "uq_hospede_pulseira_ativa"
# Índice parcial: no máximo um caixa ABERTO por operador
INDICE_CAIXA_ABERTO = "uq_caixa_aberto_por_usuario"
# CHECK estoque >= 0
CK_ESTOQUE_PRODUTO = "ck_produto_estoque_nao_negativo"


def traduzir_integrity_error(erro: IntegrityError) -> AppError:
    """Converte violações de constraint do banco na taxonomia acima"""
    texto = str(getattr(erro, "orig", erro)).lower()

    if INDICE_PULSEIRA_ATIVA in texto or "hospedes.uid_pulseira" in texto:
        return ConflictError("Pulseira já está vinculada a outro hóspede ativo")

    if INDICE_CAIXA_ABERTO in texto or "caixas.usuario_id" in texto:
        return BusinessError("Já existe um caixa aberto para este usuário")

    if CK_ESTOQUE_PRODUTO in texto:
        return BusinessError("Estoque insuficiente")

    if "unique" in texto or "duplicate" in texto:
        return ValidationError("Registro duplicado: valor já está em uso")

    if "foreign key" in texto:
        return ValidationError("Referência inválida")

    if "check constraint" in texto:
        return BusinessError("Operação viola uma restrição de integridade")

    return AppError("Erro no banco de dados", 500, "DATABASE_ERROR")
