"""
Máquina de estados da assinatura das empresas banho.

    PAYMENT_PENDING --pular pagamento--------> TRIAL
    PAYMENT_PENDING --pagamento confirmado---> ACTIVE
    TRIAL           --pagamento confirmado---> ACTIVE
    ACTIVE          --cobrança falhou--------> PAST_DUE
    (qualquer, exceto CANCELED) --cancelada--> CANCELED

Pares fora da tabela não alteram a assinatura.
"""
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.config import settings
from models import Assinatura, Empresa, Faturamento, PapelEmpresa, StatusAssinatura, TipoEvento
from services.evento_service import registrar_evento
from services.persistencia import transacao

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class EventoAssinatura(str, Enum):
    PULAR_PAGAMENTO = "pular_pagamento"
    PAGAMENTO_CONFIRMADO = "pagamento_confirmado"
    COBRANCA_FALHOU = "cobranca_falhou"
    ASSINATURA_CANCELADA = "assinatura_cancelada"


TRANSICOES = {
    (StatusAssinatura.PAYMENT_PENDING, EventoAssinatura.PULAR_PAGAMENTO): StatusAssinatura.TRIAL,
    (StatusAssinatura.PAYMENT_PENDING, EventoAssinatura.PAGAMENTO_CONFIRMADO): StatusAssinatura.ACTIVE,
    (StatusAssinatura.TRIAL, EventoAssinatura.PAGAMENTO_CONFIRMADO): StatusAssinatura.ACTIVE,
    (StatusAssinatura.ACTIVE, EventoAssinatura.COBRANCA_FALHOU): StatusAssinatura.PAST_DUE,
}
TRANSICOES.update({
    (atual, EventoAssinatura.ASSINATURA_CANCELADA): StatusAssinatura.CANCELED
    for atual in StatusAssinatura
    if atual != StatusAssinatura.CANCELED
})


def transicionar(atual: StatusAssinatura, evento: EventoAssinatura) -> Optional[StatusAssinatura]:
    """Novo status para o par (atual, evento), ou None se não permitido."""
    return TRANSICOES.get((atual, evento))


def criar_assinatura_inicial(empresa: Empresa) -> Assinatura:
    """Assinatura pendente de pagamento, com a janela de trial já marcada."""
    agora = _now_utc()
    assinatura = Assinatura(
        status=StatusAssinatura.PAYMENT_PENDING,
        plano=settings.PLANO_PADRAO,
        trial_iniciado_em=agora,
        trial_termina_em=agora + timedelta(days=settings.TRIAL_DIAS),
        updated_at=agora,
    )
    empresa.assinatura = assinatura
    return assinatura


def obter_assinatura(db: Session, empresa_id: int) -> Assinatura:
    assinatura = db.query(Assinatura).filter(Assinatura.empresa_id == empresa_id).first()
    if not assinatura:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa sem assinatura",
        )
    return assinatura


def aplicar_evento_assinatura(
    db: Session,
    empresa_id: int,
    evento: EventoAssinatura,
    estrito: bool = False,
) -> Optional[Assinatura]:
    """
    Aplica o evento à assinatura da empresa (sem commit).

    Transição não permitida: com estrito=True levanta 409; senão registra
    um warning e retorna None sem alterar nada.
    """
    assinatura = db.query(Assinatura).filter(Assinatura.empresa_id == empresa_id).first()
    if assinatura is None:
        if estrito:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa sem assinatura")
        logger.warning("Evento %s ignorado: empresa %s sem assinatura", evento.value, empresa_id)
        return None

    anterior = assinatura.status
    novo = transicionar(anterior, evento)
    if novo is None:
        if estrito:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Transição não permitida a partir de {anterior.value}",
            )
        logger.warning(
            "Transição ignorada para empresa %s: %s + %s", empresa_id, anterior.value, evento.value
        )
        return None

    assinatura.status = novo
    assinatura.updated_at = _now_utc()
    registrar_evento(
        db, TipoEvento.SUBSCRIPTION_CHANGED, empresa_id, PapelEmpresa.BANHO, None,
        {"de": anterior.value, "para": novo.value, "evento": evento.value},
    )
    logger.info("Assinatura da empresa %s: %s -> %s", empresa_id, anterior.value, novo.value)
    return assinatura


def pular_pagamento(db: Session, empresa_id: int) -> Assinatura:
    """Usuário escolheu começar pelo trial sem pagar."""
    with transacao(db, "pular_pagamento"):
        assinatura = aplicar_evento_assinatura(
            db, empresa_id, EventoAssinatura.PULAR_PAGAMENTO, estrito=True
        )
        registrar_evento(db, TipoEvento.PAYMENT_SKIPPED, empresa_id, PapelEmpresa.BANHO)
    return assinatura


def registrar_pagamento_confirmado(
    db: Session,
    empresa_id: int,
    transacao_id: str,
    valor: Decimal,
    modo: str = "test",
) -> Optional[Faturamento]:
    """
    Ativa a assinatura e grava o último pagamento confirmado (sem commit).

    O faturamento é gravado mesmo que a assinatura já esteja ACTIVE.
    """
    empresa = db.query(Empresa).filter(Empresa.id == empresa_id).first()
    if empresa is None:
        logger.warning("Pagamento %s para empresa inexistente %s", transacao_id, empresa_id)
        return None

    aplicar_evento_assinatura(db, empresa_id, EventoAssinatura.PAGAMENTO_CONFIRMADO)

    faturamento = empresa.faturamento
    if faturamento is None:
        faturamento = Faturamento(empresa_id=empresa_id)
        db.add(faturamento)
    faturamento.status = "paid"
    faturamento.modo = modo
    faturamento.provedor = "stripe"
    faturamento.transacao_id = transacao_id
    faturamento.valor = valor
    faturamento.pago_em = _now_utc()

    registrar_evento(
        db, TipoEvento.PAYMENT_SUCCESS, empresa_id, PapelEmpresa.BANHO, transacao_id,
        {"valor": str(valor)},
    )
    logger.info("Pagamento %s confirmado para empresa %s (R$ %s)", transacao_id, empresa_id, valor)
    return faturamento
