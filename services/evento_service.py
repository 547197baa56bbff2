"""
Registro de eventos operacionais (cadastro, lotes, peças, pagamentos).
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from models import Evento, PapelEmpresa

logger = logging.getLogger(__name__)


def registrar_evento(
    db: Session,
    tipo: str,
    empresa_id: Optional[int],
    papel_empresa: Optional[PapelEmpresa],
    entidade_id: Any = None,
    metadados: Optional[Dict[str, Any]] = None,
) -> None:
    """Adiciona o evento à sessão; é gravado no commit da operação que o gerou."""
    logger.info("[%s] empresa=%s entidade=%s", tipo, empresa_id, entidade_id)
    db.add(
        Evento(
            tipo=tipo,
            empresa_id=empresa_id,
            papel_empresa=papel_empresa,
            entidade_id=str(entidade_id) if entidade_id is not None else None,
            metadados=metadados or {},
        )
    )
