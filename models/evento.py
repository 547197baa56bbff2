# models/evento.py
from datetime import datetime, timezone

from sqlalchemy import Column, BigInteger, Integer, String, DateTime
from db import Base

from .enums import PapelEmpresa
from .tipos import EnumTexto, JsonDocumento


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Evento(Base):
    """Evento operacional registrado para analytics."""

    __tablename__ = "evento"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    tipo = Column(String(50), nullable=False, index=True)
    empresa_id = Column(Integer, nullable=True, index=True)
    papel_empresa = Column(EnumTexto(PapelEmpresa), nullable=True)
    entidade_id = Column(String(64), nullable=True)
    metadados = Column(JsonDocumento, nullable=True)

    # Timestamp
    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False, index=True)

    def __repr__(self):
        return f"<Evento(id={self.id}, tipo='{self.tipo}', empresa_id={self.empresa_id})>"


# Constantes de tipos de evento
class TipoEvento:
    """Constantes para tipos de evento operacional."""

    # Cadastro
    COMPANY_CREATED = "COMPANY_CREATED"
    CLIENT_LINKED = "CLIENT_LINKED"

    # Lotes e peças
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"
    PIECE_CREATED = "PIECE_CREATED"
    LABEL_PRINTED = "LABEL_PRINTED"
    QR_CODE_SCANNED = "QR_CODE_SCANNED"

    # Pagamento
    PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
    PAYMENT_SKIPPED = "PAYMENT_SKIPPED"
    SUBSCRIPTION_CHANGED = "SUBSCRIPTION_CHANGED"
