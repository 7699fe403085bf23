from meamar.models.organization import OrganizationStatus
from meamar.models.rfq import Rfq
from tests.helpers import auth_headers


def test_stats_require_admin(client, buyer_headers):
    assert client.get("/api/admin/stats").status_code == 401
    assert client.get("/api/admin/stats", headers=buyer_headers).status_code == 403


def test_stats_aggregate_all_four_reads(client, db_session, admin_headers, make_organization, make_product):
    active = make_organization("vendor-1", status=OrganizationStatus.ACTIVE)
    make_organization("vendor-2", legal_name="Waiting", status=OrganizationStatus.PENDING)
    make_organization("vendor-3", legal_name="Also waiting", status=OrganizationStatus.PENDING)
    make_product(active, name="Listed")
    make_product(active, name="Delisted", is_active=False)
    db_session.add(Rfq(user_id="admin-1", title="Office fit-out", description="2 floors"))
    db_session.commit()

    response = client.get("/api/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {
        "totalUsers": 4,
        "totalVendors": 3,
        "totalProducts": 1,
        "totalRfqs": 1,
        "pendingApprovals": 2,
        "activeVendors": 1,
    }


def test_user_directory_is_admin_only(client, admin_headers):
    client.get("/api/auth/user", headers=auth_headers("buyer-1"))
    client.get("/api/auth/user", headers=auth_headers("buyer-2"))

    assert client.get("/api/users", headers=auth_headers("buyer-1")).status_code == 403

    everyone = client.get("/api/users", headers=admin_headers).json()
    assert everyone["total"] == 3

    admins = client.get("/api/users", params={"role": "admin"}, headers=admin_headers).json()
    assert [u["id"] for u in admins["items"]] == ["admin-1"]
