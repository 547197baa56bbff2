from models import PapelEmpresa
from services.empresa_service import listar_empresas


def test_listar_empresas_por_papel(db, empresas):
    clientes = listar_empresas(db, PapelEmpresa.CLIENTE)

    assert [e.id for e in clientes] == [empresas["cliente"], empresas["outro"]]
    assert len(listar_empresas(db)) == 3


def test_api_banho_lista_clientes(client, banho, cliente, outro_cliente):
    response = client.get("/api/empresas", params={"papel": "cliente"}, headers=banho["headers"])

    assert response.status_code == 200
    body = response.json()
    assert {e["id"] for e in body} == {cliente["empresa_id"], outro_cliente["empresa_id"]}
    assert all(e["papel"] == "cliente" for e in body)
    assert [e["razao_social"] for e in body] == ["Bijoux Prata Ltda", "Joias Aurora Ltda"]


def test_api_lista_exige_banho(client, cliente):
    response = client.get("/api/empresas", params={"papel": "cliente"}, headers=cliente["headers"])

    assert response.status_code == 403


def test_api_papel_invalido(client, banho):
    response = client.get("/api/empresas", params={"papel": "fornecedor"}, headers=banho["headers"])

    assert response.status_code == 422
