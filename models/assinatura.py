# models/assinatura.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from db import Base

from .enums import StatusAssinatura
from .tipos import EnumTexto


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Assinatura(Base):
    """Assinatura de uma empresa banho."""

    __tablename__ = "assinatura"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    empresa_id = Column(
        Integer,
        ForeignKey("empresa.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    status = Column(
        EnumTexto(StatusAssinatura),
        nullable=False,
        default=StatusAssinatura.PAYMENT_PENDING,
        index=True,
    )
    plano = Column(String(50), nullable=False)
    stripe_customer_id = Column(String(100), nullable=True, index=True)
    stripe_subscription_id = Column(String(100), nullable=True)
    trial_iniciado_em = Column(DateTime(timezone=True), nullable=True)
    trial_termina_em = Column(DateTime(timezone=True), nullable=True)

    updated_at = Column(DateTime(timezone=True), default=_now_utc, onupdate=_now_utc, nullable=False)

    empresa = relationship("Empresa", back_populates="assinatura")

    def __repr__(self):
        return f"<Assinatura(empresa_id={self.empresa_id}, status='{self.status}')>"
