# models/evento_webhook.py
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from db import Base


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class EventoWebhook(Base):
    """Eventos do processador de pagamento já processados (deduplicação)."""

    __tablename__ = "evento_webhook"

    id = Column(String(255), primary_key=True)
    tipo = Column(String(100), nullable=False)
    processado_em = Column(DateTime(timezone=True), default=_now_utc, nullable=False)

    def __repr__(self):
        return f"<EventoWebhook(id='{self.id}', tipo='{self.tipo}')>"
