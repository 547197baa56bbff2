"""
Cadastro de empresa + usuário e carregamento do perfil autenticado.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from core.config import settings
from models import Empresa, PapelEmpresa, PapelUsuario, TipoEvento, Usuario
from schemas.auth_schema import RegistroRequest
from services.assinatura_service import criar_assinatura_inicial
from services.evento_service import registrar_evento
from services.persistencia import transacao

logger = logging.getLogger(__name__)

# SQLSTATE insufficient_privilege
PGCODE_PERMISSAO_NEGADA = "42501"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _permissao_negada(erro: DBAPIError) -> bool:
    return getattr(erro.orig, "pgcode", None) == PGCODE_PERMISSAO_NEGADA


def _buscar_usuario(db: Session, uid: str) -> Optional[Usuario]:
    return db.query(Usuario).filter(Usuario.id == uid).first()


def carregar_perfil_usuario(db: Session, uid: str) -> Optional[Usuario]:
    """
    Carrega o perfil do uid. Permissão negada pelo banco logo após o
    cadastro é repetida até PERFIL_MAX_TENTATIVAS vezes; outros erros sobem.
    """
    restantes = settings.PERFIL_MAX_TENTATIVAS
    while True:
        try:
            return _buscar_usuario(db, uid)
        except DBAPIError as e:
            db.rollback()
            if restantes <= 0 or not _permissao_negada(e):
                raise
            logger.warning(
                "Permissão negada ao carregar perfil %s. Tentando novamente... (%s restantes)",
                uid, restantes,
            )
            restantes -= 1
            time.sleep(settings.PERFIL_ESPERA_SEGUNDOS)


def registrar_empresa(db: Session, uid: str, dados: RegistroRequest) -> Usuario:
    """
    Cria a empresa e o usuário administrador para o uid autenticado.
    Empresa banho nasce com assinatura pendente de pagamento.
    """
    if _buscar_usuario(db, uid):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Usuário já possui empresa cadastrada",
        )

    agora = _now_utc()
    empresa = Empresa(
        razao_social=dados.razao_social,
        nome_fantasia=dados.nome_fantasia,
        papel=dados.papel,
        email=dados.email,
        cnpj=dados.cnpj,
        telefone=dados.telefone,
        endereco=dados.endereco,
        created_at=agora,
        updated_at=agora,
    )
    if dados.papel == PapelEmpresa.BANHO:
        criar_assinatura_inicial(empresa)

    with transacao(db, "registrar_empresa"):
        db.add(empresa)
        db.flush()

        usuario = Usuario(
            id=uid,
            email=dados.email,
            nome=dados.nome_fantasia or dados.razao_social or "Usuário",
            empresa_id=empresa.id,
            papel=PapelUsuario.ADMIN,
            papel_empresa=dados.papel,
            created_at=agora,
        )
        db.add(usuario)
        registrar_evento(
            db, TipoEvento.COMPANY_CREATED, empresa.id, dados.papel, empresa.id,
            {"nome": empresa.razao_social},
        )

    logger.info("Empresa %s (%s) cadastrada pelo usuário %s", empresa.id, dados.papel.value, uid)
    return usuario
