# schemas/cotacao_schema.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class CotacaoOuroOut(BaseModel):
    preco: Decimal
    fonte: Optional[str] = None
    titulo_fonte: Optional[str] = None

    class Config:
        from_attributes = True
