"""
Paginação padrão das listagens: {"data": [...], "pagination": {...}}
"""
import math

from sqlalchemy.orm import Query

from utils.erros import ValidationError

LIMITE_MAXIMO = 100


def paginar(query: Query, page: int = 1, limit: int = 10) -> dict:
    if page < 1:
        raise ValidationError("Página deve ser maior ou igual a 1")
    if limit < 1 or limit > LIMITE_MAXIMO:
        raise ValidationError(f"Limite deve estar entre 1 e {LIMITE_MAXIMO}")

    total = query.order_by(None).count()
    itens = query.offset((page - 1) * limit).limit(limit).all()

    return {
        "data": itens,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if total else 0,
        },
    }
