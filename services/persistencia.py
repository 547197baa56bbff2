"""
Transação das operações de domínio.

Erros do banco não são reinterpretados: registra, desfaz a sessão e relança.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@contextmanager
def transacao(db: Session, operacao: str):
    """
    Uso:
        with transacao(db, "criar_lote"):
            db.add(lote)
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Erro de persistência em %s", operacao)
        raise
