from decimal import Decimal

from meamar.models.order import Order, OrderStatus
from tests.helpers import auth_headers


def test_reviews_maintain_organization_rating(client, make_organization):
    organization = make_organization("vendor-1")

    for reviewer, rating in (("buyer-1", 5), ("buyer-2", 4), ("buyer-3", 4)):
        response = client.post(
            "/api/reviews",
            json={"organizationId": organization.id, "rating": rating, "title": "Solid work"},
            headers=auth_headers(reviewer),
        )
        assert response.status_code == 201

    body = client.get(f"/api/organizations/{organization.id}").json()
    assert body["reviewCount"] == 3
    assert Decimal(body["rating"]) == Decimal("4.33")


def test_product_rating_is_maintained_separately(client, make_organization, make_product):
    organization = make_organization("vendor-1")
    product = make_product(organization)

    client.post(
        "/api/reviews",
        json={"productId": product.id, "rating": 2},
        headers=auth_headers("buyer-1"),
    )

    assert client.get(f"/api/products/{product.id}").json()["reviewCount"] == 1
    assert client.get(f"/api/organizations/{organization.id}").json()["reviewCount"] == 0


def test_rating_bounds(client, make_organization, buyer_headers):
    organization = make_organization("vendor-1")
    for rating in (0, 6):
        response = client.post(
            "/api/reviews", json={"organizationId": organization.id, "rating": rating}, headers=buyer_headers
        )
        assert response.status_code == 400


def test_review_needs_a_target(client, buyer_headers):
    response = client.post("/api/reviews", json={"rating": 5}, headers=buyer_headers)
    assert response.status_code == 400


def test_review_of_unknown_organization(client, buyer_headers):
    response = client.post("/api/reviews", json={"organizationId": "nope", "rating": 5}, headers=buyer_headers)
    assert response.status_code == 404


def test_verified_only_for_own_delivered_order(client, db_session, make_organization, buyer_headers):
    organization = make_organization("vendor-1")
    client.get("/api/auth/user", headers=buyer_headers)

    delivered = Order(
        user_id="buyer-1",
        organization_id=organization.id,
        order_number="ORD-1-AAAAA",
        status=OrderStatus.DELIVERED,
    )
    pending = Order(
        user_id="buyer-1",
        organization_id=organization.id,
        order_number="ORD-2-BBBBB",
        status=OrderStatus.PENDING,
    )
    db_session.add_all([delivered, pending])
    db_session.commit()

    def review(order_id, headers):
        return client.post(
            "/api/reviews",
            json={"organizationId": organization.id, "orderId": order_id, "rating": 5},
            headers=headers,
        ).json()

    assert review(delivered.id, buyer_headers)["isVerified"] is True
    assert review(pending.id, buyer_headers)["isVerified"] is False
    assert review(delivered.id, auth_headers("buyer-2"))["isVerified"] is False


def test_list_filters(client, make_organization):
    first = make_organization("vendor-1")
    second = make_organization("vendor-2", legal_name="Other")
    client.post("/api/reviews", json={"organizationId": first.id, "rating": 5}, headers=auth_headers("buyer-1"))
    client.post("/api/reviews", json={"organizationId": second.id, "rating": 3}, headers=auth_headers("buyer-1"))
    client.post("/api/reviews", json={"organizationId": second.id, "rating": 4}, headers=auth_headers("buyer-2"))

    assert client.get("/api/reviews", params={"organizationId": second.id}).json()["total"] == 2
    assert client.get("/api/reviews", params={"userId": "buyer-1"}).json()["total"] == 2
    assert client.get("/api/reviews").json()["total"] == 3


def test_review_of_unknown_order(client, make_organization, buyer_headers):
    organization = make_organization("vendor-1")
    response = client.post(
        "/api/reviews",
        json={"organizationId": organization.id, "orderId": "no-such-order", "rating": 5},
        headers=buyer_headers,
    )
    assert response.status_code == 404
    assert response.json() == {"message": "Order not found"}
