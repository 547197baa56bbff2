# schemas/empresa_schema.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from core.config import settings
from models.enums import PapelEmpresa, StatusAssinatura


class AssinaturaOut(BaseModel):
    """Assinatura da empresa banho."""
    status: StatusAssinatura
    plano: str
    valor_plano: Decimal = Field(default_factory=lambda: settings.PLANO_VALOR)
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    trial_iniciado_em: Optional[datetime] = None
    trial_termina_em: Optional[datetime] = None

    class Config:
        from_attributes = True


class FaturamentoOut(BaseModel):
    """Último pagamento confirmado."""
    status: str
    modo: str
    provedor: str
    transacao_id: str
    valor: Decimal
    pago_em: datetime

    class Config:
        from_attributes = True


class EmpresaResumo(BaseModel):
    """Dados públicos de uma empresa parceira."""
    id: int
    razao_social: str
    nome_fantasia: str
    papel: PapelEmpresa

    class Config:
        from_attributes = True


class EmpresaOut(BaseModel):
    id: int
    razao_social: str
    nome_fantasia: str
    papel: PapelEmpresa
    email: str
    cnpj: str
    telefone: str
    endereco: str
    logo: Optional[str] = None
    assinatura: Optional[AssinaturaOut] = None
    faturamento: Optional[FaturamentoOut] = None
    created_at: datetime

    class Config:
        from_attributes = True
