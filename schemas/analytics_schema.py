"""
Schemas para o painel de analytics.
"""
from decimal import Decimal
from typing import List

from pydantic import BaseModel


class EstatisticasOperacao(BaseModel):
    """Indicadores calculados a partir dos lotes e peças da empresa."""
    lotes_ativos: int
    total_pecas: int
    peso_medio: Decimal
    aguardando_coleta: int
    faturamento_total: Decimal
    ticket_medio: Decimal
    crescimento_mensal: Decimal


class GraficoMensal(BaseModel):
    """Faturamento e peças por mês (data de criação do lote)."""
    mes: str  # "Jan", "Fev", etc.
    ano: int
    faturamento: Decimal
    quantidade_pecas: int


class AnalyticsResponse(BaseModel):
    stats: EstatisticasOperacao
    grafico_mensal: List[GraficoMensal]
