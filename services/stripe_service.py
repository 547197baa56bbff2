"""
Integração com a API REST do Stripe: PaymentIntent e webhooks.
"""
import hashlib
import hmac
import logging
import re
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

import requests
from sqlalchemy.orm import Session

from core.config import settings
from models import Assinatura, EventoWebhook
from services.assinatura_service import (
    EventoAssinatura,
    aplicar_evento_assinatura,
    registrar_pagamento_confirmado,
)
from services.persistencia import transacao

logger = logging.getLogger(__name__)

CEM = Decimal(100)

SO_DIGITOS = re.compile(r"[0-9]+")

# Eventos que só movem a assinatura
EVENTOS_ASSINATURA = {
    "checkout.session.completed": EventoAssinatura.PAGAMENTO_CONFIRMADO,
    "invoice.paid": EventoAssinatura.PAGAMENTO_CONFIRMADO,
    "invoice.payment_failed": EventoAssinatura.COBRANCA_FALHOU,
    "customer.subscription.deleted": EventoAssinatura.ASSINATURA_CANCELADA,
}


class StripeErro(Exception):
    """Falha do processador; a mensagem é devolvida ao cliente."""


def para_centavos(valor: Decimal) -> int:
    return int((Decimal(valor) * CEM).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class StripeService:
    """Cliente mínimo da API do Stripe (form-encoded, Bearer)."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        webhook_secret: Optional[str] = None,
        api_base: Optional[str] = None,
    ):
        self.secret_key = settings.STRIPE_SECRET_KEY if secret_key is None else secret_key
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET if webhook_secret is None else webhook_secret
        self.api_base = (api_base or settings.STRIPE_API_BASE).rstrip("/")

    def _make_request(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.secret_key:
            raise StripeErro("STRIPE_SECRET_KEY não configurada")

        url = f"{self.api_base}{endpoint}"
        headers = {"Authorization": f"Bearer {self.secret_key}"}
        logger.info("%s %s", method, url)

        try:
            response = requests.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=settings.STRIPE_TIMEOUT_SEGUNDOS,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Erro na requisição ao Stripe: %s", e)
            raise StripeErro(str(e)) from e

        if response.status_code >= 400:
            try:
                mensagem = response.json().get("error", {}).get("message")
            except ValueError:
                mensagem = None
            mensagem = mensagem or f"Stripe respondeu {response.status_code}"
            logger.error("Erro na API Stripe (%s): %s", response.status_code, mensagem)
            raise StripeErro(mensagem)

        return response.json()

    def criar_payment_intent(self, valor: Decimal, empresa_id: int, usuario_id: str) -> Dict[str, str]:
        """Cria o PaymentIntent em centavos; retorna client_secret e id."""
        dados = {
            "amount": para_centavos(valor),
            "currency": settings.STRIPE_MOEDA,
            "automatic_payment_methods[enabled]": "true",
            "metadata[companyId]": str(empresa_id),
            "metadata[userId]": usuario_id,
            "metadata[environment]": settings.AMBIENTE,
        }
        intent = self._make_request("POST", "/v1/payment_intents", dados)
        logger.info("PaymentIntent %s criado para empresa %s", intent.get("id"), empresa_id)
        return {"client_secret": intent["client_secret"], "id": intent["id"]}

    def validar_assinatura_webhook(self, payload: bytes, assinatura: Optional[str], tolerancia: int = 300) -> bool:
        """
        Confere o header Stripe-Signature (t=...,v1=...) com HMAC-SHA256.
        Sem segredo configurado, não há o que validar.
        """
        if not self.webhook_secret:
            return True
        if not assinatura:
            logger.warning("Webhook sem header de assinatura")
            return False

        partes: Dict[str, list] = {}
        for item in assinatura.split(","):
            chave, _, valor = item.strip().partition("=")
            partes.setdefault(chave, []).append(valor)

        timestamp = (partes.get("t") or [""])[0]
        if not SO_DIGITOS.fullmatch(timestamp):
            return False
        if tolerancia and abs(time.time() - int(timestamp)) > tolerancia:
            logger.warning("Webhook com timestamp fora da tolerância: %s", timestamp)
            return False

        assinado = f"{timestamp}.".encode() + payload
        esperado = hmac.new(self.webhook_secret.encode(), assinado, hashlib.sha256).hexdigest()
        valido = any(hmac.compare_digest(esperado, v) for v in partes.get("v1", []))
        if not valido:
            logger.warning("Assinatura de webhook inválida")
        return valido


stripe_service = StripeService()


# ============================================================
# WEBHOOK
# ============================================================

def _resolver_empresa(db: Session, objeto: Dict[str, Any], usar_customer: bool = True) -> Optional[int]:
    """
    metadata.companyId primeiro; senão, se permitido, o customer já
    associado a uma assinatura.
    """
    metadata = objeto.get("metadata") or {}
    company_id = str(metadata.get("companyId") or "")
    if SO_DIGITOS.fullmatch(company_id):
        return int(company_id)
    if not usar_customer:
        return None

    customer = objeto.get("customer")
    if customer:
        assinatura = db.query(Assinatura).filter(Assinatura.stripe_customer_id == customer).first()
        if assinatura:
            return assinatura.empresa_id
    return None


def _guardar_ids_stripe(db: Session, empresa_id: int, objeto: Dict[str, Any]) -> None:
    assinatura = db.query(Assinatura).filter(Assinatura.empresa_id == empresa_id).first()
    if assinatura is None:
        return
    if objeto.get("customer") and not assinatura.stripe_customer_id:
        assinatura.stripe_customer_id = objeto["customer"]
    if objeto.get("subscription") and not assinatura.stripe_subscription_id:
        assinatura.stripe_subscription_id = objeto["subscription"]


def processar_webhook(db: Session, evento: Dict[str, Any]) -> bool:
    """
    Aplica um evento do Stripe. Retorna False quando o evento já foi
    processado antes ou não pôde ser associado a uma empresa.
    """
    evento_id = evento.get("id")
    tipo = evento.get("type") or ""
    objeto = (evento.get("data") or {}).get("object") or {}

    if evento_id and db.query(EventoWebhook).filter(EventoWebhook.id == evento_id).first():
        logger.info("Webhook %s (%s) já processado", evento_id, tipo)
        return False

    with transacao(db, "processar_webhook"):
        if evento_id:
            db.add(EventoWebhook(id=evento_id, tipo=tipo))

        if tipo != "payment_intent.succeeded" and tipo not in EVENTOS_ASSINATURA:
            logger.info("Webhook %s ignorado (tipo %s)", evento_id, tipo)
            return False

        # Pagamento avulso só vale com companyId explícito
        empresa_id = _resolver_empresa(db, objeto, usar_customer=tipo in EVENTOS_ASSINATURA)
        if empresa_id is None:
            logger.warning("Webhook %s (%s) sem empresa associada", evento_id, tipo)
            return False

        _guardar_ids_stripe(db, empresa_id, objeto)

        if tipo == "payment_intent.succeeded":
            valor = Decimal(objeto.get("amount") or 0) / CEM
            modo = "live" if evento.get("livemode") else "test"
            registrar_pagamento_confirmado(db, empresa_id, objeto.get("id") or "", valor, modo)
        else:
            aplicar_evento_assinatura(db, empresa_id, EVENTOS_ASSINATURA[tipo])

    return True
