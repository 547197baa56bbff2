from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from db import get_db
from middleware.auth import CurrentUser, get_current_user
from middleware.permission import require_banho
from models import Peca
from schemas.peca_schema import ImprimirEtiquetaRequest, PecaDetalheOut, PecaOut, ScanRequest
from services.lote_service import verificar_acesso_lote
from services.peca_service import (
    atualizar_etiqueta_peca,
    extrair_id_peca,
    montar_etiqueta,
    obter_peca,
    registrar_leitura_qr,
    url_qr_peca,
)

router = APIRouter(prefix="/pecas", tags=["Peças"])


def _detalhe(peca: Peca) -> PecaDetalheOut:
    dados = PecaOut.model_validate(peca).model_dump()
    return PecaDetalheOut(**dados, url_qr=url_qr_peca(peca.id))


@router.post("/scan", response_model=PecaDetalheOut)
def escanear(dados: ScanRequest, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    """Resolve o conteúdo lido do QR da etiqueta para a peça."""
    peca_id = extrair_id_peca(dados.conteudo)
    if peca_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="QR code não reconhecido")
    peca = obter_peca(db, peca_id)
    verificar_acesso_lote(peca.lote, current_user.empresa_id)
    registrar_leitura_qr(db, peca, current_user.empresa_id, current_user.papel_empresa)
    return _detalhe(peca)


@router.get("/{peca_id}", response_model=PecaDetalheOut)
def obter(peca_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    peca = obter_peca(db, peca_id)
    verificar_acesso_lote(peca.lote, current_user.empresa_id)
    return _detalhe(peca)


@router.put("/{peca_id}/etiqueta", response_model=PecaDetalheOut)
def imprimir_etiqueta(
    peca_id: int,
    dados: ImprimirEtiquetaRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_banho),
):
    """Registra a impressão: grava o snapshot dos valores atuais na peça."""
    peca = obter_peca(db, peca_id)
    if peca.lote.empresa_banho_id != current_user.empresa_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Peça de outra empresa")
    atualizar_etiqueta_peca(db, peca_id, montar_etiqueta(peca, dados.layout), current_user.empresa_id)
    return _detalhe(obter_peca(db, peca_id))
