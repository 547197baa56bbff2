# schemas/pagamento_schema.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    """Valor em reais (unidade maior) e empresa a ser ativada."""
    amount: Optional[Decimal] = None
    company_id: Optional[int] = Field(None, alias="companyId")

    class Config:
        populate_by_name = True


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(..., alias="clientSecret")
    id: str

    class Config:
        populate_by_name = True


class WebhookAck(BaseModel):
    received: bool = True
