from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db import get_db
from middleware.auth import CurrentUser, get_current_user
from schemas.analytics_schema import AnalyticsResponse
from services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])

service = AnalyticsService()


@router.get("", response_model=AnalyticsResponse)
def obter_analytics(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    """Indicadores e gráfico dos últimos seis meses da empresa logada."""
    return service.get_analytics(db, current_user.empresa_id, current_user.papel_empresa)
