from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db import get_db
from middleware.auth import CurrentUser
from middleware.permission import require_banho
from schemas.empresa_schema import AssinaturaOut
from services.assinatura_service import obter_assinatura, pular_pagamento

router = APIRouter(prefix="/assinatura", tags=["Assinatura"])


@router.get("", response_model=AssinaturaOut)
def obter(db: Session = Depends(get_db), current_user: CurrentUser = Depends(require_banho)):
    return obter_assinatura(db, current_user.empresa_id)


@router.post("/pular-pagamento", response_model=AssinaturaOut)
def pular(db: Session = Depends(get_db), current_user: CurrentUser = Depends(require_banho)):
    """Começa pelo período de trial sem pagar agora. 409 se a assinatura já saiu do pendente."""
    return pular_pagamento(db, current_user.empresa_id)
