"""
Unidade de trabalho: toda mutação multi-etapa roda dentro de `transacao(db)`.
Commit no sucesso, rollback em qualquer exceção (nada parcial é persistido).
"""
from contextlib import contextmanager
from typing import Iterator, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from utils.erros import traduzir_integrity_error

T = TypeVar("T")


@contextmanager
def transacao(db: Session) -> Iterator[Session]:
    try:
        yield db
        db.commit()
    except IntegrityError as ie:
        db.rollback()
        raise traduzir_integrity_error(ie) from ie
    except Exception:
        db.rollback()
        raise


def travar_linha(db: Session, model: Type[T], id_: int) -> Optional[T]:
    """
    Lê a linha com SELECT ... FOR UPDATE (ignorado pelo SQLite, que já
    serializa escritores) e sempre a partir do banco, nunca do identity map.
    """
    return (
        db.query(model)
        .filter(model.id == id_)
        .populate_existing()
        .with_for_update()
        .first()
    )
