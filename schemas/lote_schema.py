# schemas/lote_schema.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from models.enums import StatusLote


class LoteCreate(BaseModel):
    """Abertura de lote. Sem cotacao_ouro, usa a cotação atual."""
    empresa_cliente_id: Optional[int] = None
    cotacao_ouro: Optional[Decimal] = None
    camadas: Decimal = Decimal(0)
    mao_de_obra: Decimal = Decimal(0)
    margem_padrao: Decimal = Decimal("2.5")


class VincularLoteRequest(BaseModel):
    codigo_acesso: str = Field(..., min_length=1, max_length=16)


class AtualizarStatusLoteRequest(BaseModel):
    status: StatusLote


class LoteOut(BaseModel):
    id: int
    empresa_banho_id: int
    empresa_cliente_id: Optional[int]
    status: StatusLote
    cotacao_ouro: Decimal
    camadas: Decimal
    mao_de_obra: Decimal
    margem_padrao: Decimal
    codigo_acesso: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
