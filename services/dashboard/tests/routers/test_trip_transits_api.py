"""
HTTP tests for /trips/{trip_id}/transits against FakeBookingBackend.

Coverage targets:
  - first GET loads the sequence, later reads come from the local copy
  - drag / position / append / remove reach the backend with dense ranks
  - local validation errors never reach the backend
  - backend failure -> error envelope + local copy equals the server's
  - backend 401 ends the dashboard session
"""

from __future__ import annotations

import pytest

from services.dashboard.tests.helpers.factories import make_point, make_transit


TRIP = "trip-1"
BASE = f"/trips/{TRIP}/transits"


@pytest.fixture
def seeded(backend):
    backend.seed_transits(TRIP, [
        make_transit(id="A", transitPointId="p-A", transitOrder=0, arrivalTime="08:00"),
        make_transit(id="B", transitPointId="p-B", transitOrder=1, arrivalTime="09:00"),
        make_transit(id="C", transitPointId="p-C", transitOrder=2, arrivalTime="10:00"),
    ])
    backend.seed_point(make_point(id="p-A", name="Port Authority"))
    backend.seed_point(make_point(id="p-D", name="South Station"))
    return backend


def _order(body: dict) -> list[tuple[str, int]]:
    return [(item["id"], item["transitOrder"]) for item in body["data"]["items"]]


def _backend_calls(backend, method: str) -> list[str]:
    return [path for m, path in backend.calls if m == method]


class TestRead:
    @pytest.mark.asyncio
    async def test_get_loads_once(self, authed_client, seeded):
        first = await authed_client.get(BASE)
        second = await authed_client.get(BASE)

        assert first.status_code == 200
        body = first.json()
        assert body["success"] is True
        assert body["data"]["state"] == "synced"
        assert _order(body) == [("A", 0), ("B", 1), ("C", 2)]
        assert second.json()["data"] == body["data"]
        assert _backend_calls(seeded, "GET").count(f"/trips/{TRIP}/transits") == 1

    @pytest.mark.asyncio
    async def test_available_excludes_attached_points(self, authed_client, seeded):
        response = await authed_client.get(f"{BASE}/available")
        assert [p["id"] for p in response.json()["data"]["items"]] == ["p-D"]

    @pytest.mark.asyncio
    async def test_unknown_trip_is_not_kept(self, authed_client, seeded, app):
        seeded.fail_next("GET", "/trips/nope/transits", 404)

        response = await authed_client.get("/trips/nope/transits")

        assert response.status_code == 404
        assert "nope" not in app.state.sequencers

    @pytest.mark.asyncio
    async def test_unknown_stop_type_is_rejected(self, authed_client, seeded):
        response = await authed_client.post(BASE, json={"transitPointId": "p-D", "arrivalTime": "11:30", "type": "TELEPORT"})
        assert response.status_code == 422
        assert _backend_calls(seeded, "POST") == []

    @pytest.mark.asyncio
    async def test_requires_session(self, client, seeded):
        response = await client.get(BASE)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert seeded.calls == []


class TestMutations:
    @pytest.mark.asyncio
    async def test_drag_last_to_first(self, authed_client, seeded):
        response = await authed_client.post(f"{BASE}/move", json={"sourceIndex": 2, "destinationIndex": 0})

        assert response.status_code == 200
        assert _order(response.json()) == [("C", 0), ("A", 1), ("B", 2)]
        assert seeded.bodies[-1] == {
            "transitOrders": [{"id": "C", "order": 0}, {"id": "A", "order": 1}, {"id": "B", "order": 2}],
        }
        assert seeded.order_of(TRIP) == [("C", 0), ("A", 1), ("B", 2)]
        assert response.json()["notices"][0]["description"] == "Transit point order updated."

    @pytest.mark.asyncio
    async def test_drop_outside_list_changes_nothing(self, authed_client, seeded):
        response = await authed_client.post(f"{BASE}/move", json={"sourceIndex": 1})
        assert response.json()["data"]["changed"] is False
        assert _backend_calls(seeded, "PUT") == []

    @pytest.mark.asyncio
    async def test_set_position(self, authed_client, seeded):
        response = await authed_client.put(f"{BASE}/A/position", json={"index": 2})
        assert _order(response.json()) == [("B", 0), ("C", 1), ("A", 2)]
        assert seeded.order_of(TRIP) == [("B", 0), ("C", 1), ("A", 2)]

    @pytest.mark.asyncio
    async def test_append(self, authed_client, seeded):
        response = await authed_client.post(
            BASE,
            json={"transitPointId": "p-D", "arrivalTime": "11:30", "type": "DROPOFF"},
        )

        assert response.status_code == 201
        items = response.json()["data"]["items"]
        assert [i["transitOrder"] for i in items] == [0, 1, 2, 3]
        assert items[3]["transitPointId"] == "p-D"
        assert items[3]["transitPoint"]["name"] == "South Station"
        assert seeded.bodies[-1]["transitOrder"] == 3

    @pytest.mark.asyncio
    async def test_duplicate_append_never_reaches_backend(self, authed_client, seeded):
        await authed_client.get(BASE)
        response = await authed_client.post(BASE, json={"transitPointId": "p-B", "arrivalTime": "09:30"})

        assert response.status_code == 422
        body = response.json()
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["notices"][0]["variant"] == "destructive"
        assert _backend_calls(seeded, "POST") == []

    @pytest.mark.asyncio
    async def test_remove_closes_gap(self, authed_client, seeded):
        response = await authed_client.delete(f"{BASE}/B")

        assert _order(response.json()) == [("A", 0), ("C", 1)]
        assert seeded.order_of(TRIP) == [("A", 0), ("C", 1)]

    @pytest.mark.asyncio
    async def test_patch_time_and_type(self, authed_client, seeded):
        response = await authed_client.patch(f"{BASE}/C", json={"arrivalTime": "10:15", "type": "STOP"})

        body = response.json()
        stop = body["data"]["items"][2]
        assert stop["arrivalTime"] == "10:15"
        assert stop["type"] == "STOP"
        assert body["data"]["changed"] is True
        assert [n["description"] for n in body["notices"]] == ["Stop type updated."]
        assert _backend_calls(seeded, "PUT") == [f"/trips/{TRIP}/transits/C"]
        assert seeded.bodies[-1] == {"arrivalTime": "10:15", "type": "STOP"}

    @pytest.mark.asyncio
    async def test_patch_nothing(self, authed_client, seeded):
        response = await authed_client.patch(f"{BASE}/C", json={})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_stop(self, authed_client, seeded):
        response = await authed_client.delete(f"{BASE}/Z")
        assert response.status_code == 404
        assert _backend_calls(seeded, "DELETE") == []


class TestFailures:
    @pytest.mark.asyncio
    async def test_failed_reorder_resyncs(self, authed_client, seeded):
        await authed_client.get(BASE)
        seeded.fail_next("PUT", f"/trips/{TRIP}/transits/reorder", 500)

        response = await authed_client.post(f"{BASE}/move", json={"sourceIndex": 2, "destinationIndex": 0})

        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["notices"][0]["description"] == (
            "Could not update the transit point order. Please try again later."
        )

        after = await authed_client.get(BASE)
        assert _order(after.json()) == [("A", 0), ("B", 1), ("C", 2)]
        assert after.json()["data"]["state"] == "synced"

    @pytest.mark.asyncio
    async def test_backend_unauthorized_ends_session(self, authed_client, seeded, app, session_id):
        await authed_client.get(BASE)
        seeded.expire_tokens()

        response = await authed_client.delete(f"{BASE}/B")

        assert response.status_code == 401
        assert await app.state.sessions.get(session_id) is None
        again = await authed_client.get(BASE)
        assert again.status_code == 401

    @pytest.mark.asyncio
    async def test_resync_endpoint_picks_up_external_changes(self, authed_client, seeded):
        await authed_client.get(BASE)
        seeded.transits[TRIP].pop()

        response = await authed_client.post(f"{BASE}/resync")
        assert _order(response.json()) == [("A", 0), ("B", 1)]
