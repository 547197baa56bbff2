import logging
from decimal import Decimal

from models import Evento, Lote, PapelEmpresa, StatusLote, TipoEvento
from services.lote_service import (
    ALFABETO_CODIGO,
    criar_lote,
    gerar_codigo_acesso,
    listar_lotes_da_empresa,
    vincular_lote_por_codigo,
)


def _novo_lote(db, empresas, cliente_id=None, cotacao=Decimal("350.50")):
    return criar_lote(db, empresas["banho"], cliente_id, cotacao, Decimal(5), Decimal(2), Decimal("2.5"))


def test_codigo_acesso_formato():
    codigo = gerar_codigo_acesso()
    assert len(codigo) == 8
    assert all(c in ALFABETO_CODIGO for c in codigo)
    assert codigo == codigo.upper()


def test_criar_lote(db, empresas):
    lote = _novo_lote(db, empresas)

    assert lote.id is not None
    assert lote.status == StatusLote.PENDING
    assert lote.empresa_cliente_id is None
    assert lote.cotacao_ouro == Decimal("350.50")
    assert len(lote.codigo_acesso) == 8
    assert lote.created_at is not None and lote.updated_at is not None
    assert db.query(Evento).filter(Evento.tipo == TipoEvento.ORDER_CREATED).count() == 1


def test_criar_lote_sem_cotacao_usa_cotacao_atual(db, empresas):
    lote = _novo_lote(db, empresas, cotacao=None)
    assert lote.cotacao_ouro == Decimal("345.67")


def test_codigos_distintos(db, empresas):
    codigos = {_novo_lote(db, empresas).codigo_acesso for _ in range(30)}
    assert len(codigos) == 30


def test_vincular_codigo_inexistente_nao_altera(db, empresas):
    lote = _novo_lote(db, empresas)

    assert vincular_lote_por_codigo(db, "ZZZZZZZZ", empresas["cliente"]) is None

    db.expire_all()
    assert db.query(Lote).filter(Lote.empresa_cliente_id.isnot(None)).count() == 0
    assert db.get(Lote, lote.id).empresa_cliente_id is None


def test_vincular_ignora_caixa(db, empresas):
    lote = _novo_lote(db, empresas)
    antes = lote.updated_at

    vinculado = vincular_lote_por_codigo(db, f"  {lote.codigo_acesso.lower()} ", empresas["cliente"])

    assert vinculado.id == lote.id
    assert vinculado.empresa_cliente_id == empresas["cliente"]
    assert vinculado.updated_at >= antes
    assert db.query(Evento).filter(Evento.tipo == TipoEvento.CLIENT_LINKED).count() == 1


def test_revincular_sobrescreve_e_avisa(db, empresas, caplog):
    lote = _novo_lote(db, empresas)
    vincular_lote_por_codigo(db, lote.codigo_acesso, empresas["cliente"])

    with caplog.at_level(logging.WARNING, logger="services.lote_service"):
        vincular_lote_por_codigo(db, lote.codigo_acesso, empresas["outro"])

    assert db.get(Lote, lote.id).empresa_cliente_id == empresas["outro"]
    assert "sobrescrevendo" in caplog.text


def test_listar_por_papel(db, empresas):
    vinculado = _novo_lote(db, empresas, cliente_id=empresas["cliente"])
    _novo_lote(db, empresas)

    do_banho = listar_lotes_da_empresa(db, empresas["banho"], PapelEmpresa.BANHO)
    do_cliente = listar_lotes_da_empresa(db, empresas["cliente"], PapelEmpresa.CLIENTE)
    do_outro = listar_lotes_da_empresa(db, empresas["outro"], PapelEmpresa.CLIENTE)

    assert len(do_banho) == 2
    assert [l.id for l in do_cliente] == [vinculado.id]
    assert do_outro == []


# ============================================================
# API
# ============================================================

def _criar_lote_api(client, banho, **extra):
    dados = {"cotacao_ouro": "350.50", "camadas": "5", "mao_de_obra": "2", "margem_padrao": "2.5"}
    dados.update(extra)
    response = client.post("/api/lotes", json=dados, headers=banho["headers"])
    assert response.status_code == 201, response.text
    return response.json()


def test_api_fluxo_vinculo(client, banho, cliente):
    lote = _criar_lote_api(client, banho)
    assert lote["status"] == "pending"

    assert client.get("/api/lotes", headers=cliente["headers"]).json() == []

    response = client.post(
        "/api/lotes/vincular",
        json={"codigo_acesso": lote["codigo_acesso"].lower()},
        headers=cliente["headers"],
    )
    assert response.status_code == 200
    assert response.json()["empresa_cliente_id"] == cliente["empresa_id"]

    listados = client.get("/api/lotes", headers=cliente["headers"]).json()
    assert [l["id"] for l in listados] == [lote["id"]]
    assert client.get(f"/api/lotes/{lote['id']}", headers=cliente["headers"]).status_code == 200


def test_api_codigo_invalido(client, cliente):
    response = client.post("/api/lotes/vincular", json={"codigo_acesso": "NAOEXISTE"}, headers=cliente["headers"])
    assert response.status_code == 404


def test_api_cliente_nao_cria_lote(client, cliente):
    response = client.post("/api/lotes", json={}, headers=cliente["headers"])
    assert response.status_code == 403


def test_api_lote_de_outra_empresa(client, banho, cliente):
    lote = _criar_lote_api(client, banho)
    response = client.get(f"/api/lotes/{lote['id']}", headers=cliente["headers"])
    assert response.status_code == 403


def test_api_lote_inexistente(client, banho):
    assert client.get("/api/lotes/999", headers=banho["headers"]).status_code == 404


def test_api_atualizar_status(client, banho):
    lote = _criar_lote_api(client, banho)

    response = client.patch(
        f"/api/lotes/{lote['id']}/status", json={"status": "finished"}, headers=banho["headers"]
    )

    assert response.status_code == 200
    assert response.json()["status"] == "finished"
