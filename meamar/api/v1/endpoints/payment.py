import logging
from typing import Optional
import httpx
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.core.payments import PaymentClient, WebhookSignatureError
from meamar.crud import order as crud_order
from meamar.schemas.payment import PaymentIntent, PaymentIntentCreate

logger = logging.getLogger(__name__)

router = APIRouter()

ORDER_NOT_FOUND = "Order not found"
UNAUTHORIZED = "Not enough permissions"
ORDER_HAS_NO_TOTAL = "Order has no total amount"
PAYMENTS_UNAVAILABLE = "Payment processor unavailable"
INVALID_SIGNATURE = "Invalid webhook signature"

@router.post("/create-payment-intent", response_model=PaymentIntent)
async def create_payment_intent(
    payment_in: PaymentIntentCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
    payments: PaymentClient = Depends(deps.get_payment_client),
):
    """
    Create a payment intent; with orderId the amount and currency come from the order
    """
    amount = payment_in.amount
    currency = payment_in.currency
    metadata = {"user_id": auth.user_id}

    if payment_in.order_id:
        order = crud_order.get_order(db, payment_in.order_id)
        if not order:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORDER_NOT_FOUND)
        if order.user_id != auth.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)
        if order.total_amount is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ORDER_HAS_NO_TOTAL)
        amount = order.total_amount
        currency = order.currency
        metadata["order_id"] = order.id
        metadata["order_number"] = order.order_number

    try:
        intent = await payments.create_payment_intent(amount, currency, metadata)
    except httpx.HTTPError:
        logger.exception("Payment intent creation failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=PAYMENTS_UNAVAILABLE)

    return PaymentIntent(client_secret=intent["client_secret"])

@router.post("/payments/webhook")
async def payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    db: Session = Depends(deps.get_db),
    payments: PaymentClient = Depends(deps.get_payment_client),
):
    """
    Processor callbacks. A succeeded intent records the payment on its order.
    """
    payload = await request.body()
    try:
        event = payments.verify_webhook(payload, stripe_signature)
    except WebhookSignatureError as e:
        logger.warning("Rejected payment webhook", extra={"reason": str(e)})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_SIGNATURE)

    event_type = event.get("type")
    logger.info("Payment webhook received", extra={"event": "payment.webhook", "type": event_type})

    if event_type == "payment_intent.succeeded":
        intent = event.get("data", {}).get("object", {})
        order_id = (intent.get("metadata") or {}).get("order_id")
        order = crud_order.get_order(db, order_id) if order_id else None
        if order is not None:
            method_types = intent.get("payment_method_types") or []
            crud_order.update_order(
                db,
                order,
                {
                    "payment_reference": intent.get("id"),
                    "payment_method": method_types[0] if method_types else order.payment_method,
                },
            )
            logger.info(
                "Order payment recorded",
                extra={"event": "order.paid", "order_id": order.id, "payment_intent": intent.get("id")},
            )
        else:
            logger.warning("Payment for unknown order", extra={"payment_intent": intent.get("id"), "order_id": order_id})

    return {"received": True}
