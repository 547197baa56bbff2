"""
Peças de um lote: criação com custo congelado, etiqueta e QR.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.config import settings
from models import LayoutEtiqueta, Lote, PapelEmpresa, Peca, TipoEvento
from schemas.peca_schema import EtiquetaSnapshot
from services.evento_service import registrar_evento
from services.persistencia import transacao
from services.precificacao_service import calcular_custo_peca, para_decimal

logger = logging.getLogger(__name__)

MARCADOR_QR = "/piece/"

SO_DIGITOS = re.compile(r"[0-9]+")

FOTO_PADRAO = "https://picsum.photos/200/200"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def criar_peca(db: Session, lote_id: int, dados: Dict[str, Any]) -> Peca:
    """
    Cria a peça copiando os parâmetros do lote e calculando os custos.
    Os valores derivados não são recalculados depois.
    """
    lote = db.query(Lote).filter(Lote.id == lote_id).first()
    if not lote:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lote não encontrado")

    peso = para_decimal(dados.get("peso_peca"))
    valor_bruto = para_decimal(dados.get("valor_peca_bruta"))
    custo = calcular_custo_peca(
        peso,
        valor_bruto,
        lote.camadas,
        lote.mao_de_obra,
        lote.cotacao_ouro,
        lote.margem_padrao,
    )

    peca = Peca(
        lote_id=lote.id,
        foto=dados.get("foto") or FOTO_PADRAO,
        codigo_interno=dados.get("codigo_interno") or "N/A",
        tipo=dados.get("tipo") or "Generic",
        peso_peca=peso,
        valor_peca_bruta=valor_bruto,
        camadas=para_decimal(lote.camadas),
        mao_de_obra=para_decimal(lote.mao_de_obra),
        cotacao_ouro_dia=para_decimal(lote.cotacao_ouro),
        calculo_metal=custo.calculo_metal,
        custo_final_cliente=custo.custo_final_cliente,
        preco_sugerido=custo.preco_sugerido,
        created_at=_now_utc(),
    )
    with transacao(db, "criar_peca"):
        db.add(peca)
        db.flush()
        registrar_evento(
            db, TipoEvento.PIECE_CREATED, lote.empresa_banho_id, PapelEmpresa.BANHO, peca.id,
            {"lote_id": lote.id, "custo_final_cliente": str(custo.custo_final_cliente)},
        )
    logger.info("Peça %s criada no lote %s (custo final %s)", peca.id, lote.id, custo.custo_final_cliente)
    return peca


def obter_peca(db: Session, peca_id: int) -> Peca:
    peca = db.query(Peca).filter(Peca.id == peca_id).first()
    if not peca:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Peça não encontrada")
    return peca


def listar_pecas_do_lote(db: Session, lote_id: int) -> List[Peca]:
    return db.query(Peca).filter(Peca.lote_id == lote_id).order_by(Peca.id).all()


def montar_etiqueta(peca: Peca, layout: LayoutEtiqueta) -> EtiquetaSnapshot:
    """Snapshot dos valores atuais da peça para impressão."""
    return EtiquetaSnapshot(
        layout=layout,
        gerada_em=_now_utc(),
        codigo_interno=peca.codigo_interno,
        peso=peca.peso_peca,
        valor_bruto=peca.valor_peca_bruta,
        camadas=peca.camadas,
        mao_de_obra=peca.mao_de_obra,
        cotacao_ouro=peca.cotacao_ouro_dia,
        custo_final=peca.custo_final_cliente,
    )


def atualizar_etiqueta_peca(
    db: Session,
    peca_id: int,
    etiqueta: EtiquetaSnapshot,
    empresa_id: Optional[int] = None,
) -> None:
    """Grava o snapshot da última impressão. Só o campo etiqueta é alterado."""
    peca = obter_peca(db, peca_id)
    with transacao(db, "atualizar_etiqueta_peca"):
        peca.etiqueta = etiqueta.model_dump(mode="json")
        registrar_evento(
            db, TipoEvento.LABEL_PRINTED, empresa_id, PapelEmpresa.BANHO, peca.id,
            {"layout": etiqueta.layout.value},
        )


# ============================================================
# QR CODE
# ============================================================

def url_qr_peca(peca_id: int) -> str:
    """URL gravada no QR da etiqueta; abre o detalhe da peça no front."""
    return f"{settings.FRONTEND_URL.rstrip('/')}/#{MARCADOR_QR}{peca_id}"


def extrair_id_peca(conteudo: str) -> Optional[int]:
    """Aceita a URL da etiqueta ou o id puro. None se não for um id válido."""
    texto = (conteudo or "").strip()
    if MARCADOR_QR in texto:
        texto = texto.split(MARCADOR_QR, 1)[1]
    texto = texto.split("?", 1)[0].strip("/")
    if not SO_DIGITOS.fullmatch(texto):
        return None
    return int(texto)


def registrar_leitura_qr(db: Session, peca: Peca, empresa_id: int, papel_empresa: PapelEmpresa) -> None:
    with transacao(db, "registrar_leitura_qr"):
        registrar_evento(db, TipoEvento.QR_CODE_SCANNED, empresa_id, papel_empresa, peca.id)
