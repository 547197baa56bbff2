from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from db import get_db
from middleware.auth import CurrentUser, get_current_user
from middleware.permission import require_banho, require_cliente
from schemas.lote_schema import AtualizarStatusLoteRequest, LoteCreate, LoteOut, VincularLoteRequest
from schemas.peca_schema import PecaCreate, PecaOut
from services.lote_service import (
    atualizar_status_lote,
    criar_lote,
    listar_lotes_da_empresa,
    obter_lote,
    verificar_acesso_lote,
    vincular_lote_por_codigo,
)
from services.peca_service import criar_peca, listar_pecas_do_lote

router = APIRouter(prefix="/lotes", tags=["Lotes"])


def _lote_do_banho(db: Session, lote_id: int, current_user: CurrentUser):
    lote = obter_lote(db, lote_id)
    if lote.empresa_banho_id != current_user.empresa_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Lote de outra empresa")
    return lote


@router.get("", response_model=list[LoteOut])
def listar(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return listar_lotes_da_empresa(db, current_user.empresa_id, current_user.papel_empresa)


@router.post("", response_model=LoteOut, status_code=status.HTTP_201_CREATED)
def criar(dados: LoteCreate, db: Session = Depends(get_db), current_user: CurrentUser = Depends(require_banho)):
    return criar_lote(
        db,
        current_user.empresa_id,
        dados.empresa_cliente_id,
        dados.cotacao_ouro,
        dados.camadas,
        dados.mao_de_obra,
        dados.margem_padrao,
    )


@router.post("/vincular", response_model=LoteOut)
def vincular(
    dados: VincularLoteRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_cliente),
):
    """Cliente informa o código de acesso recebido do banho."""
    lote = vincular_lote_por_codigo(db, dados.codigo_acesso, current_user.empresa_id)
    if lote is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Código de acesso inválido")
    return lote


@router.get("/{lote_id}", response_model=LoteOut)
def obter(lote_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    lote = obter_lote(db, lote_id)
    verificar_acesso_lote(lote, current_user.empresa_id)
    return lote


@router.patch("/{lote_id}/status", response_model=LoteOut)
def atualizar_status(
    lote_id: int,
    dados: AtualizarStatusLoteRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_banho),
):
    _lote_do_banho(db, lote_id, current_user)
    return atualizar_status_lote(db, lote_id, dados.status)


# ============================================================
# PEÇAS DO LOTE
# ============================================================

@router.get("/{lote_id}/pecas", response_model=list[PecaOut])
def listar_pecas(lote_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    lote = obter_lote(db, lote_id)
    verificar_acesso_lote(lote, current_user.empresa_id)
    return listar_pecas_do_lote(db, lote_id)


@router.post("/{lote_id}/pecas", response_model=PecaOut, status_code=status.HTTP_201_CREATED)
def adicionar_peca(
    lote_id: int,
    dados: PecaCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_banho),
):
    _lote_do_banho(db, lote_id, current_user)
    return criar_peca(db, lote_id, dados.model_dump())
