from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models import Empresa, PapelEmpresa


def obter_empresa(db: Session, empresa_id: int) -> Empresa:
    empresa = db.query(Empresa).filter(Empresa.id == empresa_id).first()
    if not empresa:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa não encontrada")
    return empresa


def listar_empresas(db: Session, papel: Optional[PapelEmpresa] = None) -> List[Empresa]:
    """Empresas cadastradas, opcionalmente só as de um papel, por razão social."""
    query = db.query(Empresa)
    if papel is not None:
        query = query.filter(Empresa.papel == papel)
    return query.order_by(Empresa.razao_social, Empresa.id).all()
