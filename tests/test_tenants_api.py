"""API tests for tenants, policy, customers and auth"""

import pytest

from reservo.models.reservation import ReservationStatus


class TestPolicy:
    async def test_get_policy(self, authenticated_client, test_tenant):
        response = await authenticated_client.get(f"/tenants/{test_tenant.id}/policy")

        assert response.status_code == 200
        assert response.json() == {
            "tenant_id": test_tenant.id,
            "max_auto_confirm_people": 6,
            "same_day_cutoff": "11:00",
        }

    async def test_update_policy(self, authenticated_client, test_tenant):
        response = await authenticated_client.put(
            f"/tenants/{test_tenant.id}/policy",
            json={"max_auto_confirm_people": 12, "same_day_cutoff": "15:30"},
        )

        assert response.status_code == 200
        assert response.json()["max_auto_confirm_people"] == 12
        assert response.json()["same_day_cutoff"] == "15:30"

    async def test_partial_update_keeps_other_field(self, authenticated_client, test_tenant):
        response = await authenticated_client.put(
            f"/tenants/{test_tenant.id}/policy", json={"same_day_cutoff": "12:00"}
        )

        assert response.json()["max_auto_confirm_people"] == 6

    @pytest.mark.parametrize(
        "body",
        [
            {"max_auto_confirm_people": 0},
            {"max_auto_confirm_people": 51},
            {"same_day_cutoff": "9:00"},
            {"same_day_cutoff": "25:00"},
        ],
    )
    async def test_rejects_invalid_policy(self, authenticated_client, test_tenant, body):
        response = await authenticated_client.put(f"/tenants/{test_tenant.id}/policy", json=body)
        assert response.status_code == 422

    async def test_staff_cannot_update_policy(self, staff_client, test_tenant):
        response = await staff_client.put(
            f"/tenants/{test_tenant.id}/policy", json={"max_auto_confirm_people": 2}
        )
        assert response.status_code == 403

    async def test_policy_change_applies_to_next_request(self, authenticated_client, test_tenant):
        await authenticated_client.put(f"/tenants/{test_tenant.id}/policy", json={"max_auto_confirm_people": 2})

        response = await authenticated_client.post(
            f"/tenants/{test_tenant.id}/reservations",
            json={
                "customer_name": "Trio",
                "phone": "+355690000003",
                "date": "2025-06-20",
                "time": "19:00",
                "party_size": 3,
            },
        )

        assert response.status_code == 202
        assert response.json()["reason"] == "group_over_threshold"


class TestTenants:
    async def test_get_own_tenant(self, authenticated_client, test_tenant):
        response = await authenticated_client.get(f"/tenants/{test_tenant.id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Test Restaurant"

    async def test_other_tenant_is_forbidden(self, authenticated_client, other_tenant):
        response = await authenticated_client.get(f"/tenants/{other_tenant.id}")
        assert response.status_code == 403

    async def test_super_admin_sees_any_tenant(self, admin_client, other_tenant):
        response = await admin_client.get(f"/tenants/{other_tenant.id}")
        assert response.status_code == 200


class TestCustomers:
    async def test_lists_guests_by_recent_visit(self, authenticated_client, make_reservation, test_tenant):
        for phone in ("+355690000011", "+355690000022"):
            reservation = await make_reservation(test_tenant, status=ReservationStatus.CONFIRMED, phone=phone)
            await authenticated_client.post(
                f"/tenants/{test_tenant.id}/reservations/{reservation.id}/complete"
            )

        await authenticated_client.post(
            f"/tenants/{test_tenant.id}/reservations",
            json={
                "customer_name": "New Guest",
                "phone": "+355690000033",
                "date": "2025-06-20",
                "time": "19:00",
                "party_size": 2,
            },
        )

        response = await authenticated_client.get(f"/tenants/{test_tenant.id}/customers")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [item["visits_count"] for item in data["items"]] == [1, 1, 0]
        assert data["items"][-1]["phone"] == "+355690000033"

    async def test_limit(self, authenticated_client, test_tenant):
        response = await authenticated_client.get(
            f"/tenants/{test_tenant.id}/customers", params={"limit": 500}
        )
        assert response.status_code == 422


class TestAuth:
    async def test_login_and_me(self, client, test_user):
        response = await client.post(
            "/auth/login",
            data={"username": "owner@example.com", "password": "ownerpass123"},
        )

        assert response.status_code == 200
        token = response.json()["access_token"]

        me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "owner@example.com"
        assert me.json()["role"] == "restaurant_admin"

    async def test_wrong_password(self, client, test_user):
        response = await client.post(
            "/auth/login",
            data={"username": "owner@example.com", "password": "wrong"},
        )
        assert response.status_code == 401

    async def test_garbage_token(self, client):
        response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
