"""
FakeBookingBackend -- in-memory stand-in for the booking REST backend, served
to httpx through MockTransport.

Usage:
    backend = FakeBookingBackend()
    backend.seed_transits("trip-1", [make_transit(id="A", transitOrder=0), ...])
    backend.fail_next("PUT", "/trips/trip-1/transits/reorder", 500)
    http = httpx.AsyncClient(transport=backend.transport(), base_url="http://backend")

Assert via:
    backend.calls             -> [("GET", "/trips/trip-1/transits"), ...]
    backend.bodies[-1]        -> decoded JSON of the last request with a body
    backend.transits["trip-1"]
"""

from __future__ import annotations

import json
import re
import uuid
from typing import Any, Optional

import httpx

VALID_TOKEN = "backend-token-1"
ADMIN_EMAIL = "admin@busgo.com"
ADMIN_PASSWORD = "secret"

_TRANSITS = re.compile(r"^/trips/([^/]+)/transits$")
_TRANSIT = re.compile(r"^/trips/([^/]+)/transits/([^/]+)$")
_AVAILABLE = re.compile(r"^/trips/([^/]+)/available-transit-points$")
_TRIP = re.compile(r"^/trips/([^/]+)$")


def _json(status: int, body: Any = None) -> httpx.Response:
    if body is None:
        return httpx.Response(status)
    return httpx.Response(status, json=body)


def _page(items: list[dict], request: httpx.Request) -> dict:
    page_index = int(request.url.params.get("pageIndex", 0))
    page_size = int(request.url.params.get("pageSize", 10))
    keyword = (request.url.params.get("keyword") or "").lower()
    excluded = set(request.url.params.get_list("excludeIds"))
    matched = [
        item for item in items
        if item["id"] not in excluded and (not keyword or keyword in item.get("name", "").lower())
    ]
    start = page_index * page_size
    total_pages = -(-len(matched) // page_size) if matched else 0
    return {
        "items": matched[start:start + page_size],
        "totalItems": len(matched),
        "totalPages": total_pages,
        "currentPage": page_index,
        "hasNext": page_index + 1 < total_pages,
        "hasPrevious": page_index > 0,
    }


class FakeBookingBackend:
    def __init__(self) -> None:
        self.trips: dict[str, dict] = {}
        self.points: dict[str, dict] = {}
        self.transits: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self.bodies: list[Any] = []
        self.tokens: set[str] = {VALID_TOKEN}
        self._failures: list[tuple[str, str, int]] = []

    # -- setup ------------------------------------------------------------

    def seed_trip(self, trip: dict) -> dict:
        self.trips[trip["id"]] = trip
        return trip

    def seed_point(self, point: dict) -> dict:
        self.points[point["id"]] = point
        return point

    def seed_transits(self, trip_id: str, transits: list[dict]) -> None:
        self.transits[trip_id] = [dict(t, tripId=trip_id) for t in transits]

    def fail_next(self, method: str, path: str, status: int) -> None:
        """Answer the next matching request with `status` instead of handling it."""
        self._failures.append((method, path, status))

    def expire_tokens(self) -> None:
        self.tokens.clear()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def order_of(self, trip_id: str) -> list[tuple[str, int]]:
        rows = sorted(self.transits.get(trip_id, []), key=lambda t: t["transitOrder"])
        return [(t["id"], t["transitOrder"]) for t in rows]

    # -- dispatch ---------------------------------------------------------

    def _take_failure(self, method: str, path: str) -> Optional[int]:
        for index, (f_method, f_path, status) in enumerate(self._failures):
            if f_method == method and f_path == path:
                del self._failures[index]
                return status
        return None

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))
        body = json.loads(request.content) if request.content else None
        if body is not None:
            self.bodies.append(body)

        status = self._take_failure(method, path)
        if status is not None:
            return _json(status, {"message": f"forced {status}"})

        if path == "/iam/auth/login" and method == "POST":
            if body.get("email") == ADMIN_EMAIL and body.get("password") == ADMIN_PASSWORD:
                return _json(200, {
                    "token": VALID_TOKEN,
                    "user": {"id": "u-1", "email": ADMIN_EMAIL, "name": "Admin User", "role": "ADMIN"},
                })
            return _json(400, {"message": "Bad credentials"})

        token = request.headers.get("authorization", "").removeprefix("Bearer ")
        if token not in self.tokens:
            return _json(401, {"message": "Unauthorized"})

        if path == "/iam/auth/logout" and method == "POST":
            self.tokens.discard(token)
            return _json(204)
        if path == "/iam/auth/me" and method == "GET":
            return _json(200, {"id": "u-1", "email": ADMIN_EMAIL, "name": "Admin User", "role": "ADMIN"})

        if path == "/transit-points" and method == "GET":
            return _json(200, _page(list(self.points.values()), request))

        if path == "/trips":
            if method == "GET":
                return _json(200, _page(list(self.trips.values()), request))
            trip = dict(body, id=str(uuid.uuid4()), transitCount=0, detailsCount=0)
            self.trips[trip["id"]] = trip
            return _json(201, trip)

        if path.endswith("/transits/reorder") and method == "PUT":
            return self._reorder(path.split("/")[2], body)

        match = _TRANSITS.match(path)
        if match:
            return self._transits(method, match.group(1), body)
        match = _TRANSIT.match(path)
        if match:
            return self._transit(method, match.group(1), match.group(2), body)
        match = _AVAILABLE.match(path)
        if match:
            attached = {t["transitPointId"] for t in self.transits.get(match.group(1), [])}
            return _json(200, [p for p in self.points.values() if p["id"] not in attached])
        match = _TRIP.match(path)
        if match:
            return self._trip(method, match.group(1), body)

        return _json(404, {"message": f"No route {method} {path}"})

    # -- handlers ---------------------------------------------------------

    def _trip(self, method: str, trip_id: str, body: Any) -> httpx.Response:
        trip = self.trips.get(trip_id)
        if trip is None:
            return _json(404, {"message": "Trip not found"})
        if method == "GET":
            return _json(200, trip)
        if method == "PUT":
            trip.update(body)
            return _json(200, trip)
        if method == "DELETE":
            del self.trips[trip_id]
            self.transits.pop(trip_id, None)
            return _json(204)
        return _json(405)

    def _transits(self, method: str, trip_id: str, body: Any) -> httpx.Response:
        rows = self.transits.setdefault(trip_id, [])
        if method == "GET":
            return _json(200, sorted(rows, key=lambda t: t["transitOrder"]))
        if method == "POST":
            if any(t["transitPointId"] == body["transitPointId"] for t in rows):
                return _json(409, {"message": "Transit point already attached"})
            record = dict(body, id=str(uuid.uuid4()), tripId=trip_id)
            point = self.points.get(body["transitPointId"])
            if point is not None:
                record["transitPoint"] = point
            rows.append(record)
            return _json(201, record)
        return _json(405)

    def _transit(self, method: str, trip_id: str, transit_id: str, body: Any) -> httpx.Response:
        rows = self.transits.get(trip_id, [])
        record = next((t for t in rows if t["id"] == transit_id), None)
        if record is None:
            return _json(404, {"message": "Transit not found"})
        if method == "PUT":
            record.update(body)
            return _json(200, record)
        if method == "DELETE":
            rows.remove(record)
            return _json(204)
        return _json(405)

    def _reorder(self, trip_id: str, body: Any) -> httpx.Response:
        rows = {t["id"]: t for t in self.transits.get(trip_id, [])}
        for entry in body["transitOrders"]:
            if entry["id"] not in rows:
                return _json(404, {"message": f"Transit {entry['id']} not found"})
            rows[entry["id"]]["transitOrder"] = entry["order"]
        return _json(204)
