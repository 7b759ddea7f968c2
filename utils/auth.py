"""
Verificação de token JWT (Bearer)
A emissão de tokens é feita pelo serviço de login, fora deste backend
"""
from typing import Optional

from jose import JWTError, jwt

import config


def verify_token(token: str) -> Optional[dict]:
    """
    Verifica assinatura e expiração do token

    Returns:
        dict: payload decodificado, ou None se o token for inválido/expirado
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        return None

    # jose valida "exp" quando presente; tokens sem expiração são recusados
    if payload.get("exp") is None:
        return None
    return payload


def extrair_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    partes = authorization.split(" ", 1)
    if len(partes) != 2 or partes[0].lower() != "bearer" or not partes[1].strip():
        return None
    return partes[1].strip()
