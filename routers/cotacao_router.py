from fastapi import APIRouter, Depends

from middleware.auth import CurrentUser, get_current_user
from schemas.cotacao_schema import CotacaoOuroOut
from services.cotacao_ouro_service import cotacao_ouro_service

router = APIRouter(prefix="/cotacao-ouro", tags=["Cotação"])


@router.get("", response_model=CotacaoOuroOut)
def cotacao_atual(current_user: CurrentUser = Depends(get_current_user)):
    return cotacao_ouro_service.obter_cotacao_atual()
