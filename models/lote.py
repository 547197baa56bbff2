# models/lote.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from db import Base

from .enums import StatusLote
from .tipos import EnumTexto, Monetario


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Lote(Base):
    """Lote de peças banhadas com os mesmos parâmetros."""

    __tablename__ = "lote"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    empresa_banho_id = Column(Integer, ForeignKey("empresa.id"), nullable=False, index=True)
    empresa_cliente_id = Column(Integer, ForeignKey("empresa.id"), nullable=True, index=True)
    status = Column(EnumTexto(StatusLote), nullable=False, default=StatusLote.PENDING, index=True)

    # Parâmetros de banho
    cotacao_ouro = Column(Monetario, nullable=False, default=0)
    camadas = Column(Monetario, nullable=False, default=0)
    mao_de_obra = Column(Monetario, nullable=False, default=0)
    margem_padrao = Column(Monetario, nullable=False, default=0)

    # Código para o cliente se vincular ao lote
    codigo_acesso = Column(String(16), nullable=False, unique=True, index=True)

    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)

    # ============================================================
    # RELACIONAMENTOS
    # ============================================================

    empresa_banho = relationship("Empresa", foreign_keys=[empresa_banho_id])
    empresa_cliente = relationship("Empresa", foreign_keys=[empresa_cliente_id])

    # 1 lote → N peças
    pecas = relationship(
        "Peca",
        back_populates="lote",
        lazy="dynamic",
    )

    def __repr__(self):
        return f"<Lote(id={self.id}, codigo_acesso='{self.codigo_acesso}', status='{self.status}')>"
