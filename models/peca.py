# models/peca.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from db import Base

from .tipos import JsonDocumento, Monetario


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Peca(Base):
    """
    Peça física dentro de um lote.

    camadas, mao_de_obra e cotacao_ouro_dia são copiados do lote na criação;
    calculo_metal, custo_final_cliente e preco_sugerido ficam congelados
    a partir desses valores.
    """

    __tablename__ = "peca"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    lote_id = Column(Integer, ForeignKey("lote.id"), nullable=False, index=True)

    foto = Column(Text, nullable=False, default="")
    codigo_interno = Column(String(100), nullable=False, default="N/A")
    tipo = Column(String(100), nullable=False, default="Generic")
    peso_peca = Column(Monetario, nullable=False, default=0)
    valor_peca_bruta = Column(Monetario, nullable=False, default=0)

    # Cópia dos parâmetros do lote
    camadas = Column(Monetario, nullable=False)
    mao_de_obra = Column(Monetario, nullable=False)
    cotacao_ouro_dia = Column(Monetario, nullable=False)

    # Derivados
    calculo_metal = Column(Monetario, nullable=False)
    custo_final_cliente = Column(Monetario, nullable=False)
    preco_sugerido = Column(Monetario, nullable=False)

    # Snapshot da última impressão de etiqueta
    etiqueta = Column(JsonDocumento, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)

    lote = relationship("Lote", back_populates="pecas")

    def __repr__(self):
        return f"<Peca(id={self.id}, lote_id={self.lote_id}, codigo_interno='{self.codigo_interno}')>"
