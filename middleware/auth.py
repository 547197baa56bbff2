# middleware/auth.py
"""
Middleware de autenticação - Validação do ID token e carga do perfil.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from db import get_db
from core.security import decode_token
from models import PapelEmpresa, PapelUsuario
from services.auth_service import carregar_perfil_usuario

# Security scheme para Swagger
security = HTTPBearer(auto_error=False)


class CurrentUser:
    """Contexto do usuário atual."""

    def __init__(
        self,
        user_id: str,
        email: str,
        nome: str,
        empresa_id: int,
        papel_empresa: PapelEmpresa,
        papel: PapelUsuario = PapelUsuario.ADMIN,
    ):
        self.user_id = user_id
        self.email = email
        self.nome = nome
        self.empresa_id = empresa_id
        self.papel_empresa = papel_empresa
        self.papel = papel

    @property
    def is_banho(self) -> bool:
        return self.papel_empresa == PapelEmpresa.BANHO

    def __repr__(self):
        return f"<CurrentUser(id='{self.user_id}', empresa_id={self.empresa_id}, papel_empresa='{self.papel_empresa}')>"


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Dependency que valida o ID token e retorna o payload.
    Não exige perfil cadastrado (usada no registro).

    Raises:
        HTTPException 401: token ausente ou inválido
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de autenticação não fornecido",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido ou expirado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


def get_current_user(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Dependency que valida o token e carrega o perfil do usuário.

    Raises:
        HTTPException 401: token ausente ou inválido
        HTTPException 403: usuário sem empresa cadastrada
    """
    usuario = carregar_perfil_usuario(db, payload["sub"])
    if usuario is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cadastro da empresa não concluído",
        )

    return CurrentUser(
        user_id=usuario.id,
        email=usuario.email,
        nome=usuario.nome,
        empresa_id=usuario.empresa_id,
        papel_empresa=usuario.papel_empresa,
        papel=usuario.papel,
    )
