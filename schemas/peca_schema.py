# schemas/peca_schema.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from models.enums import LayoutEtiqueta


class PecaCreate(BaseModel):
    """Dados informados na captura da peça. Ausentes assumem o padrão."""
    foto: Optional[str] = None
    codigo_interno: Optional[str] = Field(None, max_length=100)
    tipo: Optional[str] = Field(None, max_length=100)
    peso_peca: Optional[Decimal] = None
    valor_peca_bruta: Optional[Decimal] = None


class EtiquetaSnapshot(BaseModel):
    """Valores da peça no momento da impressão da etiqueta."""
    layout: LayoutEtiqueta
    gerada_em: datetime
    codigo_interno: str
    peso: Decimal
    valor_bruto: Decimal
    camadas: Decimal
    mao_de_obra: Decimal
    cotacao_ouro: Decimal
    custo_final: Decimal


class ImprimirEtiquetaRequest(BaseModel):
    layout: LayoutEtiqueta = LayoutEtiqueta.A4


class ScanRequest(BaseModel):
    """Conteúdo lido do QR code da etiqueta."""
    conteudo: str = Field(..., min_length=1)


class PecaOut(BaseModel):
    id: int
    lote_id: int
    foto: str
    codigo_interno: str
    tipo: str
    peso_peca: Decimal
    valor_peca_bruta: Decimal
    camadas: Decimal
    mao_de_obra: Decimal
    cotacao_ouro_dia: Decimal
    calculo_metal: Decimal
    custo_final_cliente: Decimal
    preco_sugerido: Decimal
    etiqueta: Optional[EtiquetaSnapshot] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PecaDetalheOut(PecaOut):
    """Peça com a URL codificada no QR da etiqueta."""
    url_qr: str
