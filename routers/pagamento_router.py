"""
Rotas de pagamento: criação do PaymentIntent e webhook do Stripe.
"""
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from db import get_db
from middleware.auth import CurrentUser, get_current_user
from schemas.pagamento_schema import PaymentIntentRequest, PaymentIntentResponse, WebhookAck
from services.stripe_service import StripeErro, processar_webhook, stripe_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pagamentos", tags=["Pagamentos"])


@router.post("/intent", response_model=PaymentIntentResponse, response_model_by_alias=True)
def criar_intent(
    dados: PaymentIntentRequest,
    current_user: CurrentUser = Depends(get_current_user),
):
    """Cria o PaymentIntent da assinatura; o front confirma com o clientSecret."""
    if dados.amount is None or dados.company_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="amount e companyId são obrigatórios")
    if dados.amount <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="amount deve ser positivo")
    if dados.company_id != current_user.empresa_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Empresa não pertence ao usuário")

    try:
        intent = stripe_service.criar_payment_intent(dados.amount, dados.company_id, current_user.user_id)
    except StripeErro as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return PaymentIntentResponse(clientSecret=intent["client_secret"], id=intent["id"])


@router.post("/webhook", response_model=WebhookAck)
async def receber_webhook(request: Request, db: Session = Depends(get_db)):
    """
    Recebe eventos do Stripe. Depois de validado, sempre responde
    received=true; falhas no processamento ficam só no log.
    """
    payload = await request.body()

    if not stripe_service.validar_assinatura_webhook(payload, request.headers.get("stripe-signature")):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Assinatura inválida")

    try:
        evento = json.loads(payload)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payload inválido")
    if not isinstance(evento, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payload inválido")

    logger.info("Webhook recebido: %s (%s)", evento.get("type"), evento.get("id"))
    try:
        processar_webhook(db, evento)
    except Exception:
        db.rollback()
        logger.exception("Erro ao processar webhook %s", evento.get("id"))

    return WebhookAck(received=True)
