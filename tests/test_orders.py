import re
from decimal import Decimal

import pytest

from meamar.crud.order import generate_order_number
from tests.helpers import auth_headers

ORDER_NUMBER = re.compile(r"^ORD-\d+-[A-Z0-9]{5}$")


@pytest.fixture
def catalog(make_organization, make_product):
    organization = make_organization("vendor-1")
    tile = make_product(organization, name="Floor tile", price=Decimal("45.00"), min_order_quantity=10)
    grout = make_product(organization, name="Grout 5kg", price=Decimal("12.50"))
    return organization, tile, grout


def _place(client, headers, organization, *items):
    return client.post(
        "/api/orders",
        json={
            "organizationId": organization.id,
            "shippingAddress": "Building 7, West Bay",
            "items": [{"productId": p.id, "quantity": q} for p, q in items],
        },
        headers=headers,
    )


def test_order_number_format():
    numbers = {generate_order_number() for _ in range(50)}
    assert len(numbers) == 50
    assert all(ORDER_NUMBER.match(number) for number in numbers)


def test_order_requires_auth(client, catalog):
    organization, tile, _ = catalog
    assert _place(client, {}, organization, (tile, 10)).status_code == 401


def test_items_snapshot_current_prices(client, buyer_headers, catalog, db_session):
    organization, tile, grout = catalog
    response = _place(client, buyer_headers, organization, (tile, 20), (grout, 4))
    assert response.status_code == 201
    order = response.json()

    assert ORDER_NUMBER.match(order["orderNumber"])
    assert order["status"] == "pending"
    assert order["userId"] == "buyer-1"
    assert Decimal(order["totalAmount"]) == Decimal("950.00")
    lines = {item["productId"]: item for item in order["items"]}
    assert Decimal(lines[tile.id]["unitPrice"]) == Decimal("45.00")
    assert Decimal(lines[tile.id]["totalPrice"]) == Decimal("900.00")

    # Later price changes do not touch the placed order
    tile.price = Decimal("60.00")
    db_session.commit()
    detail = client.get(f"/api/orders/{order['id']}", headers=buyer_headers).json()
    assert Decimal(detail["totalAmount"]) == Decimal("950.00")


def test_order_numbers_are_unique(client, buyer_headers, catalog):
    organization, tile, _ = catalog
    numbers = {_place(client, buyer_headers, organization, (tile, 10)).json()["orderNumber"] for _ in range(5)}
    assert len(numbers) == 5


def test_minimum_order_quantity(client, buyer_headers, catalog):
    organization, tile, _ = catalog
    response = _place(client, buyer_headers, organization, (tile, 2))
    assert response.status_code == 400
    assert "Minimum order quantity" in response.json()["message"]


def test_products_must_belong_to_the_organization(client, buyer_headers, catalog, make_organization, make_product):
    organization, _, _ = catalog
    foreign = make_product(make_organization("vendor-2", legal_name="Other"), name="Foreign item")
    assert _place(client, buyer_headers, organization, (foreign, 1)).status_code == 404


def test_contact_for_price_products_cannot_be_ordered(client, buyer_headers, make_organization, make_product):
    organization = make_organization("vendor-1")
    bespoke = make_product(organization, name="Bespoke majlis", price=None)
    assert _place(client, buyer_headers, organization, (bespoke, 1)).status_code == 400


def test_source_is_required(client, buyer_headers):
    response = client.post("/api/orders", json={"items": []}, headers=buyer_headers)
    assert response.status_code == 400


def test_list_is_scoped_to_the_buyer(client, buyer_headers, catalog):
    organization, tile, _ = catalog
    _place(client, buyer_headers, organization, (tile, 10))
    _place(client, auth_headers("buyer-2"), organization, (tile, 10))

    mine = client.get("/api/orders", headers=buyer_headers).json()
    assert mine["total"] == 1
    assert mine["items"][0]["userId"] == "buyer-1"


def test_organization_orders_need_ownership(client, buyer_headers, vendor_headers, catalog):
    organization, tile, _ = catalog
    _place(client, buyer_headers, organization, (tile, 10))
    _place(client, auth_headers("buyer-2"), organization, (tile, 10))

    received = client.get("/api/orders", params={"organizationId": organization.id}, headers=vendor_headers)
    assert received.json()["total"] == 2

    snooping = client.get("/api/orders", params={"organizationId": organization.id}, headers=buyer_headers)
    assert snooping.status_code == 403


def test_order_visible_to_buyer_vendor_and_admin_only(client, buyer_headers, vendor_headers, admin_headers, catalog):
    organization, tile, _ = catalog
    order = _place(client, buyer_headers, organization, (tile, 10)).json()
    url = f"/api/orders/{order['id']}"

    assert client.get(url, headers=buyer_headers).status_code == 200
    assert client.get(url, headers=vendor_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 200
    assert client.get(url, headers=auth_headers("stranger")).status_code == 403
    assert client.get("/api/orders/missing", headers=buyer_headers).status_code == 404


def test_buyer_may_only_cancel(client, buyer_headers, catalog):
    organization, tile, _ = catalog
    order = _place(client, buyer_headers, organization, (tile, 10)).json()
    url = f"/api/orders/{order['id']}/status"

    assert client.patch(url, json={"status": "confirmed"}, headers=buyer_headers).status_code == 403
    response = client.patch(url, json={"status": "cancelled"}, headers=buyer_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


def test_invalid_order_transitions_conflict(client, buyer_headers, vendor_headers, catalog):
    organization, tile, _ = catalog
    order = _place(client, buyer_headers, organization, (tile, 10)).json()
    url = f"/api/orders/{order['id']}/status"

    assert client.patch(url, json={"status": "shipped"}, headers=vendor_headers).status_code == 409
    client.patch(url, json={"status": "confirmed"}, headers=vendor_headers)
    client.patch(url, json={"status": "shipped"}, headers=vendor_headers)

    response = client.patch(url, json={"status": "cancelled"}, headers=buyer_headers)
    assert response.status_code == 409
    assert response.json()["message"] == "Cannot change order status from shipped to cancelled"


def test_unknown_status_value_is_a_validation_error(client, buyer_headers, vendor_headers, catalog):
    organization, tile, _ = catalog
    order = _place(client, buyer_headers, organization, (tile, 10)).json()
    response = client.patch(f"/api/orders/{order['id']}/status", json={"status": "lost"}, headers=vendor_headers)
    assert response.status_code == 400
