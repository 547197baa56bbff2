"""
Ciclo de vida dos lotes: abertura, vínculo do cliente por código e listagem.
"""
import logging
import secrets
import string
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.config import settings
from models import Lote, PapelEmpresa, StatusLote, TipoEvento
from services.cotacao_ouro_service import cotacao_ouro_service
from services.evento_service import registrar_evento
from services.persistencia import transacao
from services.precificacao_service import para_decimal

logger = logging.getLogger(__name__)

ALFABETO_CODIGO = string.ascii_uppercase + string.digits


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def gerar_codigo_acesso(tamanho: Optional[int] = None) -> str:
    """Token base-36 maiúsculo. Sem checagem de colisão."""
    tamanho = tamanho or settings.CODIGO_ACESSO_TAMANHO
    return "".join(secrets.choice(ALFABETO_CODIGO) for _ in range(tamanho))


def criar_lote(
    db: Session,
    empresa_banho_id: int,
    empresa_cliente_id: Optional[int],
    cotacao_ouro: Optional[Decimal],
    camadas: Decimal,
    mao_de_obra: Decimal,
    margem_padrao: Decimal,
) -> Lote:
    if cotacao_ouro is None:
        cotacao_ouro = cotacao_ouro_service.obter_cotacao_atual().preco

    agora = _now_utc()
    lote = Lote(
        empresa_banho_id=empresa_banho_id,
        empresa_cliente_id=empresa_cliente_id,
        status=StatusLote.PENDING,
        cotacao_ouro=para_decimal(cotacao_ouro),
        camadas=para_decimal(camadas),
        mao_de_obra=para_decimal(mao_de_obra),
        margem_padrao=para_decimal(margem_padrao),
        codigo_acesso=gerar_codigo_acesso(),
        created_at=agora,
        updated_at=agora,
    )
    with transacao(db, "criar_lote"):
        db.add(lote)
        db.flush()
        registrar_evento(
            db, TipoEvento.ORDER_CREATED, empresa_banho_id, PapelEmpresa.BANHO, lote.id,
            {"codigo_acesso": lote.codigo_acesso},
        )
    logger.info("Lote %s criado pela empresa %s (código %s)", lote.id, empresa_banho_id, lote.codigo_acesso)
    return lote


def obter_lote(db: Session, lote_id: int) -> Lote:
    lote = db.query(Lote).filter(Lote.id == lote_id).first()
    if not lote:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lote não encontrado")
    return lote


def vincular_lote_por_codigo(db: Session, codigo: str, empresa_cliente_id: int) -> Optional[Lote]:
    """
    Vincula a empresa cliente ao lote do código informado.

    Retorna None quando nenhum lote tem o código; nada é alterado nesse caso.
    Um lote já vinculado é sobrescrito.
    """
    codigo = (codigo or "").strip().upper()
    lote = db.query(Lote).filter(Lote.codigo_acesso == codigo).first()
    if lote is None:
        logger.info("Código de acesso inválido: %s", codigo)
        return None

    if lote.empresa_cliente_id is not None and lote.empresa_cliente_id != empresa_cliente_id:
        logger.warning(
            "Lote %s já vinculado à empresa %s; sobrescrevendo com %s",
            lote.id, lote.empresa_cliente_id, empresa_cliente_id,
        )

    with transacao(db, "vincular_lote_por_codigo"):
        lote.empresa_cliente_id = empresa_cliente_id
        lote.updated_at = _now_utc()
        registrar_evento(db, TipoEvento.CLIENT_LINKED, empresa_cliente_id, PapelEmpresa.CLIENTE, lote.id)
    return lote


def atualizar_status_lote(db: Session, lote_id: int, novo_status: StatusLote) -> Lote:
    """Qualquer status é aceito; a sequência é conduzida pela tela."""
    lote = obter_lote(db, lote_id)
    anterior = lote.status
    with transacao(db, "atualizar_status_lote"):
        lote.status = novo_status
        lote.updated_at = _now_utc()
        registrar_evento(
            db, TipoEvento.ORDER_STATUS_CHANGED, lote.empresa_banho_id, PapelEmpresa.BANHO, lote.id,
            {"de": anterior.value if anterior else None, "para": novo_status.value},
        )
    return lote


def listar_lotes_da_empresa(db: Session, empresa_id: int, papel: PapelEmpresa) -> List[Lote]:
    """O papel define a coluna filtrada: banho vê os seus, cliente vê os vinculados."""
    if papel == PapelEmpresa.BANHO:
        coluna = Lote.empresa_banho_id
    else:
        coluna = Lote.empresa_cliente_id
    return db.query(Lote).filter(coluna == empresa_id).order_by(Lote.created_at.desc()).all()


def verificar_acesso_lote(lote: Lote, empresa_id: int) -> None:
    """Só o banho dono e o cliente vinculado enxergam o lote."""
    if empresa_id not in (lote.empresa_banho_id, lote.empresa_cliente_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Lote de outra empresa")
