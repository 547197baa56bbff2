import hashlib
import hmac
import json
import time
from decimal import Decimal

import pytest

from services import stripe_service as modulo
from services.stripe_service import para_centavos, stripe_service


def _evento(evento_id, tipo, objeto, livemode=False):
    return {"id": evento_id, "type": tipo, "livemode": livemode, "data": {"object": objeto}}


def _webhook(client, evento, headers=None):
    response = client.post("/api/pagamentos/webhook", content=json.dumps(evento), headers=headers or {})
    return response


def _minha_empresa(client, banho):
    return client.get("/api/empresas/minha", headers=banho["headers"]).json()


def test_para_centavos():
    assert para_centavos(Decimal("199.90")) == 19990
    assert para_centavos(Decimal("0.005")) == 1
    assert para_centavos(Decimal(10)) == 1000


# ============================================================
# WEBHOOK
# ============================================================

def test_pagamento_confirmado_ativa_e_registra_faturamento(client, banho):
    evento = _evento("evt_1", "payment_intent.succeeded", {
        "id": "pi_123", "amount": 19990, "metadata": {"companyId": str(banho["empresa_id"])},
    })

    response = _webhook(client, evento)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    empresa = _minha_empresa(client, banho)
    assert empresa["assinatura"]["status"] == "active"
    faturamento = empresa["faturamento"]
    assert faturamento["status"] == "paid"
    assert faturamento["modo"] == "test"
    assert faturamento["provedor"] == "stripe"
    assert faturamento["transacao_id"] == "pi_123"
    assert Decimal(str(faturamento["valor"])) == Decimal("199.90")


def test_pagamento_sem_empresa_so_confirma(client, banho):
    evento = _evento("evt_2", "payment_intent.succeeded", {"id": "pi_9", "amount": 100, "metadata": {}})

    response = _webhook(client, evento)

    assert response.json() == {"received": True}
    empresa = _minha_empresa(client, banho)
    assert empresa["assinatura"]["status"] == "payment_pending"
    assert empresa["faturamento"] is None


def test_pagamento_sem_company_id_nao_usa_customer(client, banho):
    _webhook(client, _evento("evt_5", "checkout.session.completed", {
        "customer": "cus_9", "metadata": {"companyId": str(banho["empresa_id"])},
    }))
    antes = _minha_empresa(client, banho)
    assert antes["faturamento"] is None

    response = _webhook(client, _evento("evt_6", "payment_intent.succeeded", {
        "id": "pi_sem_empresa", "amount": 19990, "metadata": {}, "customer": "cus_9",
    }))

    assert response.json() == {"received": True}
    depois = _minha_empresa(client, banho)
    assert depois["faturamento"] is None
    assert depois["assinatura"]["status"] == antes["assinatura"]["status"]


def test_company_id_com_digito_sobrescrito_e_ignorado(client, banho):
    response = _webhook(client, _evento("evt_7", "payment_intent.succeeded", {
        "id": "pi_7", "amount": 100, "metadata": {"companyId": "²"},
    }))

    assert response.status_code == 200
    assert _minha_empresa(client, banho)["faturamento"] is None


def test_evento_repetido_e_ignorado(client, banho):
    metadata = {"companyId": str(banho["empresa_id"])}
    _webhook(client, _evento("evt_3", "payment_intent.succeeded", {"id": "pi_a", "amount": 1000, "metadata": metadata}))
    _webhook(client, _evento("evt_3", "payment_intent.succeeded", {"id": "pi_b", "amount": 5000, "metadata": metadata}))

    assert _minha_empresa(client, banho)["faturamento"]["transacao_id"] == "pi_a"


def test_ciclo_de_cobranca(client, banho):
    metadata = {"companyId": str(banho["empresa_id"])}

    _webhook(client, _evento("evt_10", "checkout.session.completed",
                             {"customer": "cus_1", "subscription": "sub_1", "metadata": metadata}))
    empresa = _minha_empresa(client, banho)
    assert empresa["assinatura"]["status"] == "active"
    assert empresa["assinatura"]["stripe_customer_id"] == "cus_1"
    assert empresa["assinatura"]["stripe_subscription_id"] == "sub_1"

    # sem metadata: resolvido pelo customer
    _webhook(client, _evento("evt_11", "invoice.payment_failed", {"customer": "cus_1"}))
    assert _minha_empresa(client, banho)["assinatura"]["status"] == "past_due"

    # PAST_DUE -> ACTIVE não está na tabela de transições
    _webhook(client, _evento("evt_12", "invoice.paid", {"customer": "cus_1"}))
    assert _minha_empresa(client, banho)["assinatura"]["status"] == "past_due"

    _webhook(client, _evento("evt_13", "customer.subscription.deleted", {"customer": "cus_1"}))
    assert _minha_empresa(client, banho)["assinatura"]["status"] == "canceled"


def test_tipo_desconhecido(client, banho):
    response = _webhook(client, _evento("evt_20", "charge.refunded", {"id": "ch_1"}))
    assert response.json() == {"received": True}


def test_payload_invalido(client):
    response = client.post("/api/pagamentos/webhook", content="nao-e-json")
    assert response.status_code == 400


def test_falha_no_processamento_ainda_confirma(client, banho, monkeypatch):
    def explode(db, evento):
        raise RuntimeError("falha inesperada")

    monkeypatch.setattr("routers.pagamento_router.processar_webhook", explode)

    response = _webhook(client, _evento("evt_30", "invoice.paid", {}))
    assert response.status_code == 200
    assert response.json() == {"received": True}


def _assinar(payload: str, segredo: str, timestamp: int = None) -> str:
    timestamp = timestamp or int(time.time())
    assinatura = hmac.new(segredo.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={assinatura}"


def test_assinatura_do_webhook(client, banho, monkeypatch):
    monkeypatch.setattr(stripe_service, "webhook_secret", "whsec_teste")
    payload = json.dumps(_evento("evt_40", "payment_intent.succeeded", {
        "id": "pi_40", "amount": 19990, "metadata": {"companyId": str(banho["empresa_id"])},
    }))

    sem_header = client.post("/api/pagamentos/webhook", content=payload)
    assert sem_header.status_code == 400

    errado = client.post("/api/pagamentos/webhook", content=payload,
                         headers={"Stripe-Signature": _assinar(payload, "outro")})
    assert errado.status_code == 400

    antigo = client.post("/api/pagamentos/webhook", content=payload,
                         headers={"Stripe-Signature": _assinar(payload, "whsec_teste", int(time.time()) - 3600)})
    assert antigo.status_code == 400

    valido = client.post("/api/pagamentos/webhook", content=payload,
                         headers={"Stripe-Signature": _assinar(payload, "whsec_teste")})
    assert valido.status_code == 200
    assert _minha_empresa(client, banho)["assinatura"]["status"] == "active"


@pytest.mark.parametrize("timestamp", ["²", "", "12a", "-5"])
def test_assinatura_com_timestamp_invalido(monkeypatch, timestamp):
    monkeypatch.setattr(stripe_service, "webhook_secret", "whsec_teste")

    assert stripe_service.validar_assinatura_webhook(b"{}", f"t={timestamp},v1=abc") is False


# ============================================================
# PAYMENT INTENT
# ============================================================

class _RespostaStripe:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


@pytest.fixture()
def stripe_fake(monkeypatch):
    enviados = []
    respostas = []

    def fake_request(method, url, headers=None, data=None, timeout=None):
        enviados.append({"method": method, "url": url, "headers": headers, "data": data})
        return respostas.pop(0)

    monkeypatch.setattr(modulo.requests, "request", fake_request)
    return enviados, respostas


def test_intent_sem_token(client):
    response = client.post("/api/pagamentos/intent", json={"amount": 199.9, "companyId": 1})
    assert response.status_code == 401


@pytest.mark.parametrize("body", [{"companyId": 1}, {"amount": 199.9}, {}])
def test_intent_campos_obrigatorios(client, banho, body):
    response = client.post("/api/pagamentos/intent", json=body, headers=banho["headers"])
    assert response.status_code == 400


def test_intent_empresa_de_outro_usuario(client, banho, cliente):
    response = client.post(
        "/api/pagamentos/intent",
        json={"amount": 199.9, "companyId": cliente["empresa_id"]},
        headers=banho["headers"],
    )
    assert response.status_code == 403


def test_intent_criado(client, banho, stripe_fake):
    enviados, respostas = stripe_fake
    respostas.append(_RespostaStripe(200, {"id": "pi_77", "client_secret": "pi_77_secret_x"}))

    response = client.post(
        "/api/pagamentos/intent",
        json={"amount": "199.90", "companyId": banho["empresa_id"]},
        headers=banho["headers"],
    )

    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_77_secret_x", "id": "pi_77"}
    enviado = enviados[0]
    assert enviado["url"].endswith("/v1/payment_intents")
    assert enviado["headers"]["Authorization"] == "Bearer sk_test_123"
    assert enviado["data"]["amount"] == 19990
    assert enviado["data"]["currency"] == "brl"
    assert enviado["data"]["metadata[companyId]"] == str(banho["empresa_id"])
    assert enviado["data"]["metadata[userId]"] == "uid-banho"
    assert enviado["data"]["metadata[environment]"]


def test_intent_erro_do_processador(client, banho, stripe_fake):
    _, respostas = stripe_fake
    respostas.append(_RespostaStripe(402, {"error": {"message": "Your card was declined."}}))

    response = client.post(
        "/api/pagamentos/intent",
        json={"amount": "199.90", "companyId": banho["empresa_id"]},
        headers=banho["headers"],
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "Your card was declined."
