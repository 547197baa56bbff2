"""
Service de analytics: indicadores da operação de lotes e peças.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from models import Lote, Peca, PapelEmpresa, StatusLote
from schemas.analytics_schema import (
    AnalyticsResponse,
    EstatisticasOperacao,
    GraficoMensal,
)
from services.lote_service import listar_lotes_da_empresa

logger = logging.getLogger(__name__)

NOMES_MESES = [
    "", "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez"
]


def calcular_estatisticas(lotes: List[Lote], pecas: List[Peca]) -> EstatisticasOperacao:
    """Indicadores a partir dos lotes e peças já carregados."""
    lotes_ativos = sum(
        1 for l in lotes if l.status not in (StatusLote.FINISHED, StatusLote.DELIVERED)
    )
    aguardando_coleta = sum(1 for l in lotes if l.status == StatusLote.FINISHED)

    total_pecas = len(pecas)
    peso_total = sum((p.peso_peca or Decimal(0) for p in pecas), Decimal(0))
    faturamento_total = sum((p.custo_final_cliente or Decimal(0) for p in pecas), Decimal(0))

    peso_medio = peso_total / total_pecas if total_pecas else Decimal(0)
    ticket_medio = faturamento_total / len(lotes) if lotes else Decimal(0)

    return EstatisticasOperacao(
        lotes_ativos=lotes_ativos,
        total_pecas=total_pecas,
        peso_medio=peso_medio,
        aguardando_coleta=aguardando_coleta,
        faturamento_total=faturamento_total,
        ticket_medio=ticket_medio,
        # sem histórico mensal ainda
        crescimento_mensal=Decimal(0),
    )


def montar_grafico_mensal(
    lotes: List[Lote],
    pecas: List[Peca],
    meses: int = 6,
    agora: Optional[datetime] = None,
) -> List[GraficoMensal]:
    """Faturamento e peças por mês, usando a data de criação do lote da peça."""
    agora = agora or datetime.now(timezone.utc)
    lotes_por_id = {l.id: l for l in lotes}

    resultado = []
    for i in range(meses - 1, -1, -1):
        data = agora - relativedelta(months=i)
        resultado.append(GraficoMensal(
            mes=NOMES_MESES[data.month],
            ano=data.year,
            faturamento=Decimal(0),
            quantidade_pecas=0,
        ))

    indice = {(g.ano, NOMES_MESES.index(g.mes)): g for g in resultado}
    for peca in pecas:
        lote = lotes_por_id.get(peca.lote_id)
        if lote is None:
            continue
        item = indice.get((lote.created_at.year, lote.created_at.month))
        if item is None:
            continue
        item.faturamento += peca.custo_final_cliente or Decimal(0)
        item.quantidade_pecas += 1

    return resultado


class AnalyticsService:
    """Service para o painel de analytics da empresa."""

    def get_analytics(
        self, db: Session, empresa_id: int, papel: PapelEmpresa
    ) -> AnalyticsResponse:
        lotes = listar_lotes_da_empresa(db, empresa_id, papel)
        lote_ids = [l.id for l in lotes]
        pecas = (
            db.query(Peca).filter(Peca.lote_id.in_(lote_ids)).all() if lote_ids else []
        )
        logger.info("Analytics empresa %s: %s lote(s), %s peça(s)", empresa_id, len(lotes), len(pecas))

        return AnalyticsResponse(
            stats=calcular_estatisticas(lotes, pecas),
            grafico_mensal=montar_grafico_mensal(lotes, pecas),
        )
