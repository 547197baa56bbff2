# models/usuario.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from db import Base

from .enums import PapelEmpresa, PapelUsuario
from .tipos import EnumTexto


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Usuario(Base):
    """Usuário autenticado pelo provedor de identidade, vinculado a uma empresa."""

    __tablename__ = "usuario"

    # id = uid do provedor de identidade
    id = Column(String(128), primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    nome = Column(String(255), nullable=False)
    empresa_id = Column(
        Integer,
        ForeignKey("empresa.id"),
        nullable=False,
        index=True,
    )
    papel = Column(EnumTexto(PapelUsuario), nullable=False, default=PapelUsuario.ADMIN)

    # Espelho de Empresa.papel para checagens de acesso
    papel_empresa = Column(EnumTexto(PapelEmpresa), nullable=False)

    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)

    empresa = relationship("Empresa", back_populates="usuarios")

    def __repr__(self):
        return f"<Usuario(id='{self.id}', email='{self.email}', empresa_id={self.empresa_id})>"
