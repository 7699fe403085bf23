import hashlib
import hmac
import json
import logging
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional
import httpx
from meamar.core.config import settings

logger = logging.getLogger(__name__)

class WebhookSignatureError(Exception):
    pass

def to_minor_units(amount: Decimal) -> int:
    """QAR 12.34 -> 1234"""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

class PaymentClient:
    """Thin client for the payment processor's REST API (payment intents and webhooks)"""

    def __init__(self):
        self.base_url = settings.PAYMENT_API_BASE.rstrip("/")
        self.secret_key = settings.PAYMENT_SECRET_KEY
        self.webhook_secret = settings.PAYMENT_WEBHOOK_SECRET
        self.tolerance = settings.PAYMENT_WEBHOOK_TOLERANCE_SECONDS

    async def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Raises:
            httpx.HTTPError: If the processor is unreachable or rejects the request
        """
        data = {
            "amount": str(to_minor_units(amount)),
            "currency": currency.lower(),
            "automatic_payment_methods[enabled]": "true",
        }
        for key, value in (metadata or {}).items():
            data[f"metadata[{key}]"] = str(value)

        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{self.base_url}/v1/payment_intents",
                data=data,
                headers={"Authorization": f"Bearer {self.secret_key}"},
                timeout=30.0,
            )
            response.raise_for_status()
            result = response.json()

        logger.info(
            "Payment intent created",
            extra={"event": "payment.intent_created", "payment_intent": result.get("id"), "amount": data["amount"]},
        )
        return result

    def verify_webhook(self, payload: bytes, signature_header: Optional[str]) -> Dict[str, Any]:
        """Check a `t=<ts>,v1=<hex>` signature header and return the parsed event.

        Raises:
            WebhookSignatureError: If the header is missing, malformed, stale or does not match
        """
        if not signature_header:
            raise WebhookSignatureError("Missing signature header")

        timestamp = None
        signatures: List[str] = []
        for part in signature_header.split(","):
            key, _, value = part.strip().partition("=")
            if key == "t":
                timestamp = value
            elif key == "v1":
                signatures.append(value)

        if not timestamp or not timestamp.isdigit() or not signatures:
            raise WebhookSignatureError("Malformed signature header")

        signed_payload = timestamp.encode() + b"." + payload
        expected = hmac.new(self.webhook_secret.encode(), signed_payload, hashlib.sha256).hexdigest()
        if not any(hmac.compare_digest(expected, signature) for signature in signatures):
            raise WebhookSignatureError("Signature mismatch")

        if abs(time.time() - int(timestamp)) > self.tolerance:
            raise WebhookSignatureError("Timestamp outside tolerance")

        try:
            return json.loads(payload)
        except ValueError as e:
            raise WebhookSignatureError("Payload is not valid JSON") from e
