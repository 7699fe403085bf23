import hashlib
import hmac
import json
import time
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from meamar.api import deps
from meamar.core.payments import PaymentClient, WebhookSignatureError, to_minor_units
from meamar.main import app
from meamar.models.order import Order
from tests.helpers import auth_headers

WEBHOOK_SECRET = "whsec_test"


def _sign(payload: bytes, timestamp=None, secret=WEBHOOK_SECRET) -> str:
    timestamp = timestamp or int(time.time())
    signature = hmac.new(secret.encode(), f"{timestamp}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def processor():
    fake = MagicMock()
    fake.create_payment_intent = AsyncMock(return_value={"id": "pi_123", "client_secret": "pi_123_secret_abc"})
    app.dependency_overrides[deps.get_payment_client] = lambda: fake
    return fake


@pytest.fixture
def order(db_session, make_user, make_organization):
    make_user("buyer-1")
    organization = make_organization("vendor-1")
    order = Order(
        user_id="buyer-1",
        organization_id=organization.id,
        order_number="ORD-1700000000000-ABCDE",
        total_amount=Decimal("950.00"),
        currency="QAR",
    )
    db_session.add(order)
    db_session.commit()
    db_session.refresh(order)
    return order


@pytest.mark.parametrize(
    "amount,expected",
    [(Decimal("12.34"), 1234), (Decimal("950"), 95000), (Decimal("0.005"), 1), (Decimal("19.999"), 2000)],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


def test_verify_webhook_accepts_valid_signature():
    payload = json.dumps({"type": "payment_intent.succeeded"}).encode()
    event = PaymentClient().verify_webhook(payload, _sign(payload))
    assert event["type"] == "payment_intent.succeeded"


def test_verify_webhook_accepts_any_of_several_signatures():
    payload = b'{"type": "ping"}'
    header = _sign(payload)
    timestamp = header.split(",")[0]
    assert PaymentClient().verify_webhook(payload, f"{timestamp},v1=deadbeef,{header.split(',')[1]}")["type"] == "ping"


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "garbage",
        "t=abc,v1=00",
        _sign(b'{"type": "ping"}', secret="whsec_other"),
        _sign(b'{"type": "ping"}', timestamp=int(time.time()) - 3600),
    ],
)
def test_verify_webhook_rejects(header):
    with pytest.raises(WebhookSignatureError):
        PaymentClient().verify_webhook(b'{"type": "ping"}', header)


def test_create_intent_for_explicit_amount(client, processor, buyer_headers):
    response = client.post(
        "/api/create-payment-intent", json={"amount": "120.50", "currency": "QAR"}, headers=buyer_headers
    )
    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_123_secret_abc"}

    amount, currency, metadata = processor.create_payment_intent.await_args.args
    assert amount == Decimal("120.50")
    assert currency == "QAR"
    assert metadata == {"user_id": "buyer-1"}


def test_create_intent_needs_amount_or_order(client, processor, buyer_headers):
    assert client.post("/api/create-payment-intent", json={}, headers=buyer_headers).status_code == 400
    assert client.post("/api/create-payment-intent", json={"amount": 10}).status_code == 401


def test_create_intent_for_order_uses_order_total(client, processor, buyer_headers, order):
    response = client.post("/api/create-payment-intent", json={"orderId": order.id}, headers=buyer_headers)
    assert response.status_code == 200

    amount, currency, metadata = processor.create_payment_intent.await_args.args
    assert amount == Decimal("950.00")
    assert currency == "QAR"
    assert metadata["order_id"] == order.id
    assert metadata["order_number"] == "ORD-1700000000000-ABCDE"


def test_create_intent_for_someone_elses_order(client, processor, order):
    response = client.post("/api/create-payment-intent", json={"orderId": order.id}, headers=auth_headers("buyer-2"))
    assert response.status_code == 403
    processor.create_payment_intent.assert_not_awaited()


def test_create_intent_for_missing_order(client, processor, buyer_headers):
    response = client.post("/api/create-payment-intent", json={"orderId": "missing"}, headers=buyer_headers)
    assert response.status_code == 404


def test_processor_outage_is_a_bad_gateway(client, processor, buyer_headers):
    processor.create_payment_intent.side_effect = httpx.ConnectError("connection refused")
    response = client.post("/api/create-payment-intent", json={"amount": 10}, headers=buyer_headers)
    assert response.status_code == 502
    assert response.json() == {"message": "Payment processor unavailable"}


def test_webhook_records_payment_on_order(client, db_session, order):
    payload = json.dumps(
        {
            "type": "payment_intent.succeeded",
            "data": {
                "object": {
                    "id": "pi_987",
                    "payment_method_types": ["card"],
                    "metadata": {"order_id": order.id},
                }
            },
        }
    ).encode()

    response = client.post(
        "/api/payments/webhook",
        content=payload,
        headers={"Stripe-Signature": _sign(payload), "Content-Type": "application/json"},
    )
    assert response.status_code == 200
    assert response.json() == {"received": True}

    db_session.refresh(order)
    assert order.payment_reference == "pi_987"
    assert order.payment_method == "card"


def test_webhook_with_bad_signature(client, order):
    payload = b'{"type": "payment_intent.succeeded"}'
    response = client.post(
        "/api/payments/webhook",
        content=payload,
        headers={"Stripe-Signature": _sign(payload, secret="whsec_wrong")},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid webhook signature"}


def test_webhook_ignores_other_events(client):
    payload = b'{"type": "charge.refunded", "data": {"object": {}}}'
    response = client.post("/api/payments/webhook", content=payload, headers={"Stripe-Signature": _sign(payload)})
    assert response.status_code == 200
