from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError

from core.security import create_id_token, decode_token
from models import Assinatura, Evento, PapelEmpresa, TipoEvento, Usuario
from services import auth_service


class _PermissaoNegada(Exception):
    pgcode = "42501"


def _erro_permissao():
    return OperationalError("SELECT usuario", {}, _PermissaoNegada("permission denied"))


def test_token_valido_e_expirado():
    assert decode_token(create_id_token("uid-1"))["sub"] == "uid-1"
    assert decode_token(create_id_token("uid-1", expires_delta=timedelta(seconds=-10))) is None
    assert decode_token("nao-e-um-jwt") is None


def test_registro_banho_cria_assinatura_pendente(client, headers_de, db):
    response = client.post(
        "/api/auth/registro",
        json={"razao_social": "Banho Ouro Ltda", "nome_fantasia": "Banho Ouro",
              "papel": "banho", "email": "contato@banhoouro.com.br"},
        headers=headers_de("uid-novo"),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["usuario"]["id"] == "uid-novo"
    assert body["usuario"]["papel"] == "admin"
    assert body["usuario"]["papel_empresa"] == "banho"
    assert body["usuario"]["nome"] == "Banho Ouro"
    assinatura = body["empresa"]["assinatura"]
    assert assinatura["status"] == "payment_pending"
    assert assinatura["plano"] == "banho_mensal"
    assert assinatura["trial_termina_em"] is not None

    eventos = db.query(Evento).filter(Evento.tipo == TipoEvento.COMPANY_CREATED).all()
    assert len(eventos) == 1


def test_registro_cliente_sem_assinatura(client, headers_de, db):
    response = client.post(
        "/api/auth/registro",
        json={"razao_social": "Joias Aurora", "email": "contato@aurora.com.br"},
        headers=headers_de("uid-cli"),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["empresa"]["papel"] == "cliente"
    assert body["empresa"]["assinatura"] is None
    assert db.query(Assinatura).count() == 0


def test_registro_exige_token(client):
    response = client.post("/api/auth/registro", json={"email": "a@xtagy.com.br"})
    assert response.status_code == 401


def test_registro_duplicado(client, banho):
    response = client.post(
        "/api/auth/registro",
        json={"email": "outra@xtagy.com.br", "papel": "banho"},
        headers=banho["headers"],
    )
    assert response.status_code == 409


def test_me(client, cliente):
    response = client.get("/api/auth/me", headers=cliente["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["usuario"]["id"] == "uid-cliente"
    assert body["empresa"]["id"] == cliente["empresa_id"]


def test_me_sem_cadastro(client, headers_de, db):
    response = client.get("/api/auth/me", headers=headers_de("uid-sem-empresa"))
    assert response.status_code == 403


def test_me_token_invalido(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer xyz"})
    assert response.status_code == 401


# ============================================================
# CARGA DO PERFIL
# ============================================================

def _buscar_com_falhas(monkeypatch, falhas, erro_factory=_erro_permissao):
    original = auth_service._buscar_usuario
    chamadas = []

    def fake(db, uid):
        chamadas.append(uid)
        if len(chamadas) <= falhas:
            raise erro_factory()
        return original(db, uid)

    monkeypatch.setattr(auth_service, "_buscar_usuario", fake)
    return chamadas


def test_perfil_repete_em_permissao_negada(monkeypatch, db, empresas):
    db.add(Usuario(id="uid-x", email="x@xtagy.com.br", nome="X", empresa_id=empresas["banho"],
                   papel_empresa=PapelEmpresa.BANHO))
    db.commit()
    chamadas = _buscar_com_falhas(monkeypatch, falhas=2)

    usuario = auth_service.carregar_perfil_usuario(db, "uid-x")

    assert usuario.id == "uid-x"
    assert len(chamadas) == 3


def test_perfil_desiste_apos_tentativas(monkeypatch, db):
    chamadas = _buscar_com_falhas(monkeypatch, falhas=100)

    with pytest.raises(OperationalError):
        auth_service.carregar_perfil_usuario(db, "uid-x")
    # primeira tentativa + PERFIL_MAX_TENTATIVAS
    assert len(chamadas) == 4


def test_perfil_outro_erro_nao_repete(monkeypatch, db):
    chamadas = _buscar_com_falhas(
        monkeypatch, falhas=100,
        erro_factory=lambda: ProgrammingError("SELECT", {}, Exception("syntax")),
    )

    with pytest.raises(ProgrammingError):
        auth_service.carregar_perfil_usuario(db, "uid-x")
    assert len(chamadas) == 1
