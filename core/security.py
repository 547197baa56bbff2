# core/security.py
"""
Validação dos ID tokens emitidos pelo provedor de identidade externo.

A API não guarda senhas: o login acontece no provedor, que entrega um JWT
cujo `sub` é o uid estável do usuário.
"""
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError

from .config import settings


def decode_token(token: str) -> Optional[dict]:
    """
    Decodifica e valida um ID token.

    Args:
        token: Token JWT

    Returns:
        Payload do token ou None se inválido
    """
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options=options,
        )
    except JWTError:
        return None

    if not payload.get("sub"):
        return None
    return payload


def create_id_token(
    uid: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Emite um token no mesmo formato do provedor de identidade.
    Usado em desenvolvimento local e nos testes.
    """
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=1))

    payload = {
        "sub": uid,
        "email": email,
        "exp": expire,
        "iat": datetime.utcnow(),
    }
    if settings.JWT_AUDIENCE:
        payload["aud"] = settings.JWT_AUDIENCE
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
