# models/empresa.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from db import Base

from .enums import PapelEmpresa
from .tipos import EnumTexto


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Empresa(Base):
    """Modelo de Empresa - banho (prestador) ou cliente."""

    __tablename__ = "empresa"

    # Colunas
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    razao_social = Column(String(200), nullable=False, default="")
    nome_fantasia = Column(String(200), nullable=False, default="")
    papel = Column(EnumTexto(PapelEmpresa), nullable=False, index=True)
    email = Column(String(255), nullable=False, default="")
    cnpj = Column(String(20), nullable=False, default="")
    telefone = Column(String(30), nullable=False, default="")
    endereco = Column(String(300), nullable=False, default="")
    logo = Column(String(500), nullable=True)

    # Timestamps - padrão snake_case
    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_now_utc, onupdate=_now_utc, nullable=False)

    # ============================================================
    # RELACIONAMENTOS
    # ============================================================

    # 1 empresa → N usuários
    usuarios = relationship(
        "Usuario",
        back_populates="empresa",
        lazy="dynamic",
    )

    # 1 empresa banho → 0..1 assinatura
    assinatura = relationship(
        "Assinatura",
        back_populates="empresa",
        uselist=False,
        cascade="all, delete-orphan",
    )

    # 1 empresa → 0..1 registro de faturamento (último pagamento confirmado)
    faturamento = relationship(
        "Faturamento",
        back_populates="empresa",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Empresa(id={self.id}, nome_fantasia='{self.nome_fantasia}', papel='{self.papel}')>"
