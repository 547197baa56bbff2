# models/faturamento.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from db import Base

from .tipos import Monetario


class Faturamento(Base):
    """Último pagamento confirmado pelo processador. Só é gravado em sucesso."""

    __tablename__ = "faturamento"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    empresa_id = Column(
        Integer,
        ForeignKey("empresa.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    status = Column(String(20), nullable=False, default="paid")
    modo = Column(String(20), nullable=False, default="test")
    provedor = Column(String(30), nullable=False, default="stripe")
    transacao_id = Column(String(100), nullable=False)
    valor = Column(Monetario, nullable=False)
    pago_em = Column(DateTime(timezone=True), nullable=False)

    empresa = relationship("Empresa", back_populates="faturamento")

    def __repr__(self):
        return f"<Faturamento(empresa_id={self.empresa_id}, transacao_id='{self.transacao_id}')>"
