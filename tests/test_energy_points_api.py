"""Tests for the ship, crew and Energy Point HTTP endpoints.

Covers:
- Ship and crew management is admin-only
- GET /ships/{id}/energy-points summary and can_modify flag
- POST /ships/{id}/energy-points/tokens provisioning
- PUT /ships/{id}/energy-points/active: max check, auto-provisioning, crew reset
- PUT /ships/{id}/energy-points/crew/{crew_id}: clamping, permissions, unknown crew
- DELETE crew returns their EP to the ship
"""

from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

async def register_and_login(client: AsyncClient, tag: str) -> dict:
    await client.post(
        "/auth/register",
        json={"email": f"{tag}@example.com", "username": tag, "password": "password1"},
    )
    resp = await client.post(
        "/auth/login", json={"email": f"{tag}@example.com", "password": "password1"}
    )
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def user_id(client: AsyncClient, headers: dict) -> int:
    return (await client.get("/auth/me", headers=headers)).json()["id"]


async def setup_ship(client: AsyncClient, admin_headers: dict, max_ep: int | None = 6) -> int:
    resp = await client.post(
        "/ships", json={"name": "Kite", "max_energy_points": max_ep}, headers=admin_headers
    )
    assert resp.status_code == 201
    return resp.json()["id"]


async def add_crew(
    client: AsyncClient, admin_headers: dict, ship_id: int, name: str,
    position: str = "pilot", owner: int | None = None,
) -> int:
    resp = await client.post(
        f"/ships/{ship_id}/crew",
        json={"name": name, "position": position, "owner_user_id": owner},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# Ships and crew
# ---------------------------------------------------------------------------

class TestShipsAndCrew:
    async def test_create_ship_requires_admin(self, db_client: AsyncClient):
        headers = await register_and_login(db_client, "player")
        resp = await db_client.post("/ships", json={"name": "Kite"}, headers=headers)
        assert resp.status_code == 403

    async def test_create_and_get_ship(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        resp = await db_client.get(f"/ships/{ship_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["max_energy_points"] == 6
        listing = await db_client.get("/ships", headers=admin_headers)
        assert [s["id"] for s in listing.json()] == [ship_id]

    async def test_unknown_ship_404(self, db_client: AsyncClient, admin_headers):
        resp = await db_client.get("/ships/999/energy-points", headers=admin_headers)
        assert resp.status_code == 404

    async def test_crew_roster(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        crew_id = await add_crew(db_client, admin_headers, ship_id, "Ava")
        resp = await db_client.patch(
            f"/ships/{ship_id}/crew/{crew_id}",
            json={"position": "engineer"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["position"] == "engineer"
        roster = (await db_client.get(f"/ships/{ship_id}/crew", headers=admin_headers)).json()
        assert [c["name"] for c in roster] == ["Ava"]

    async def test_invalid_position_rejected(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        resp = await db_client.post(
            f"/ships/{ship_id}/crew",
            json={"name": "X", "position": "cook"},
            headers=admin_headers,
        )
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Energy points
# ---------------------------------------------------------------------------

class TestEnergyPoints:
    async def test_provision_tokens(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        resp = await db_client.post(
            f"/ships/{ship_id}/energy-points/tokens", json={"count": 5}, headers=admin_headers
        )
        assert resp.status_code == 201
        tokens = resp.json()
        assert len(tokens) == 5
        assert all(not t["active"] and t["holder"] == f"ship:{ship_id}" for t in tokens)

    async def test_provision_negative_rejected(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        resp = await db_client.post(
            f"/ships/{ship_id}/energy-points/tokens", json={"count": -1}, headers=admin_headers
        )
        assert resp.status_code == 422

    async def test_set_active_provisions_missing_tokens(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/active",
            json={"active_count": 4},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_tokens"] == 4
        assert data["active_tokens"] == 4
        assert data["ship_pool"] == 4

    async def test_set_active_above_max_rejected(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers, max_ep=3)
        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/active",
            json={"active_count": 4},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    async def test_allocation_walkthrough(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        crew_a = await add_crew(db_client, admin_headers, ship_id, "A")
        crew_b = await add_crew(db_client, admin_headers, ship_id, "B")
        await db_client.post(
            f"/ships/{ship_id}/energy-points/tokens", json={"count": 5}, headers=admin_headers
        )
        await db_client.put(
            f"/ships/{ship_id}/energy-points/active",
            json={"active_count": 3},
            headers=admin_headers,
        )

        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/crew/{crew_a}", json={"count": 2}, headers=admin_headers
        )
        assert resp.json() == {"crew_id": crew_a, "requested": 2, "granted": 2, "ship_pool": 1}

        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/crew/{crew_b}", json={"count": 5}, headers=admin_headers
        )
        assert resp.json()["granted"] == 1
        assert resp.json()["ship_pool"] == 0

        summary = (await db_client.get(f"/ships/{ship_id}/energy-points", headers=admin_headers)).json()
        assert summary["total_tokens"] == 5
        assert summary["crew_has_tokens"] is True
        assert {c["crew_id"]: c["ep_count"] for c in summary["crew"]} == {crew_a: 2, crew_b: 1}

        # resizing hands everything back to the ship
        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/active",
            json={"active_count": 2},
            headers=admin_headers,
        )
        assert resp.json()["crew_has_tokens"] is False
        assert resp.json()["ship_pool"] == 2

    async def test_unknown_crew_404(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/crew/999", json={"count": 1}, headers=admin_headers
        )
        assert resp.status_code == 404

    async def test_delete_crew_returns_tokens(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        crew_id = await add_crew(db_client, admin_headers, ship_id, "A")
        await db_client.put(
            f"/ships/{ship_id}/energy-points/active", json={"active_count": 3}, headers=admin_headers
        )
        await db_client.put(
            f"/ships/{ship_id}/energy-points/crew/{crew_id}", json={"count": 3}, headers=admin_headers
        )
        resp = await db_client.delete(f"/ships/{ship_id}/crew/{crew_id}", headers=admin_headers)
        assert resp.status_code == 204
        summary = (await db_client.get(f"/ships/{ship_id}/energy-points", headers=admin_headers)).json()
        assert summary["ship_pool"] == 3
        assert summary["crew"] == []


class TestEnergyPointPermissions:
    async def test_player_without_engineer_cannot_modify(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        player = await register_and_login(db_client, "player")
        summary = (await db_client.get(f"/ships/{ship_id}/energy-points", headers=player)).json()
        assert summary["can_modify"] is False
        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/active", json={"active_count": 1}, headers=player
        )
        assert resp.status_code == 403

    async def test_engineer_owner_can_modify(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        player = await register_and_login(db_client, "engineer")
        owner = await user_id(db_client, player)
        crew_id = await add_crew(
            db_client, admin_headers, ship_id, "Eng", position="engineer", owner=owner
        )

        summary = (await db_client.get(f"/ships/{ship_id}/energy-points", headers=player)).json()
        assert summary["can_modify"] is True

        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/active", json={"active_count": 2}, headers=player
        )
        assert resp.status_code == 200
        resp = await db_client.put(
            f"/ships/{ship_id}/energy-points/crew/{crew_id}", json={"count": 1}, headers=player
        )
        assert resp.status_code == 200
        assert resp.json()["granted"] == 1

    async def test_provisioning_is_admin_only(self, db_client: AsyncClient, admin_headers):
        ship_id = await setup_ship(db_client, admin_headers)
        player = await register_and_login(db_client, "engineer")
        owner = await user_id(db_client, player)
        await add_crew(db_client, admin_headers, ship_id, "Eng", position="engineer", owner=owner)
        resp = await db_client.post(
            f"/ships/{ship_id}/energy-points/tokens", json={"count": 2}, headers=player
        )
        assert resp.status_code == 403
