import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "segredo-de-teste")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings
from core.security import create_id_token
from db import Base, get_db
from main import app
from models import Empresa, PapelEmpresa
from services.cotacao_ouro_service import cotacao_ouro_service
from services.stripe_service import stripe_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def _configuracao_isolada(monkeypatch):
    """Sem rede e sem espera nos testes."""
    monkeypatch.setattr(settings, "PERFIL_ESPERA_SEGUNDOS", 0)
    monkeypatch.setattr(settings, "JWT_AUDIENCE", None)
    monkeypatch.setattr(settings, "JWT_ISSUER", None)
    monkeypatch.setattr(cotacao_ouro_service, "url", "")
    monkeypatch.setattr(stripe_service, "webhook_secret", "")
    monkeypatch.setattr(stripe_service, "secret_key", "sk_test_123")


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(uid: str, email: str = None) -> dict:
    return {"Authorization": f"Bearer {create_id_token(uid, email)}"}


def _registrar(client, uid: str, papel: str, nome: str) -> dict:
    headers = auth_headers(uid)
    response = client.post(
        "/api/auth/registro",
        json={
            "razao_social": f"{nome} Ltda",
            "nome_fantasia": nome,
            "papel": papel,
            "email": f"{uid}@xtagy.com.br",
            "cnpj": "12.345.678/0001-90",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {"headers": headers, "empresa_id": body["empresa"]["id"], "uid": uid}


@pytest.fixture()
def banho(client):
    return _registrar(client, "uid-banho", "banho", "Banho Dourado")


@pytest.fixture()
def cliente(client):
    return _registrar(client, "uid-cliente", "cliente", "Joias Aurora")


@pytest.fixture()
def outro_cliente(client):
    return _registrar(client, "uid-cliente-2", "cliente", "Bijoux Prata")


@pytest.fixture()
def empresas(db):
    """Empresas gravadas direto no banco, para testes de service."""
    banho = Empresa(razao_social="Banho SA", nome_fantasia="Banho", papel=PapelEmpresa.BANHO)
    cliente = Empresa(razao_social="Cliente SA", nome_fantasia="Cliente", papel=PapelEmpresa.CLIENTE)
    outro = Empresa(razao_social="Outro SA", nome_fantasia="Outro", papel=PapelEmpresa.CLIENTE)
    db.add_all([banho, cliente, outro])
    db.commit()
    return {"banho": banho.id, "cliente": cliente.id, "outro": outro.id}


@pytest.fixture()
def headers_de():
    return auth_headers
