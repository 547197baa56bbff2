from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from db import get_db
from middleware.auth import get_current_user, get_token_payload, CurrentUser
from schemas.auth_schema import RegistroRequest, UserMe
from services.auth_service import registrar_empresa, carregar_perfil_usuario


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/registro", response_model=UserMe, status_code=status.HTTP_201_CREATED)
def auth_registro(
    dados: RegistroRequest,
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
):
    """Cadastra a empresa do usuário autenticado no provedor de identidade."""
    usuario = registrar_empresa(db, payload["sub"], dados)
    return {"usuario": usuario, "empresa": usuario.empresa}


@router.get("/me", response_model=UserMe)
def auth_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    usuario = carregar_perfil_usuario(db, current_user.user_id)
    return {"usuario": usuario, "empresa": usuario.empresa}
