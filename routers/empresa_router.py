from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from db import get_db
from models import PapelEmpresa
from schemas.empresa_schema import EmpresaOut, EmpresaResumo
from services.empresa_service import listar_empresas, obter_empresa
from middleware.auth import CurrentUser, get_current_user
from middleware.permission import require_banho

router = APIRouter(prefix="/empresas", tags=["Empresa"])


@router.get("", response_model=List[EmpresaResumo])
def listar(
    papel: Optional[PapelEmpresa] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_banho),
):
    """Usado pelo banho para escolher o cliente ao abrir um lote."""
    return listar_empresas(db, papel)


@router.get("/minha", response_model=EmpresaOut)
def minha_empresa(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return obter_empresa(db, current_user.empresa_id)


@router.get("/{empresa_id}", response_model=EmpresaResumo)
def obter(empresa_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    """Dados públicos de uma empresa parceira (banho ou cliente de um lote)."""
    return obter_empresa(db, empresa_id)
