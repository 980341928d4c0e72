"""In-memory record store for training locations, saved routes and route times.

Handlers receive the store through ``get_store`` (a FastAPI dependency), so
tests and callers can substitute their own instance.
"""
from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from runroute.core.pace import pace_from_time


class RouteNotFound(KeyError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._locations: Dict[str, Dict[str, Any]] = {}
        self._routes: Dict[str, Dict[str, Any]] = {}
        self._times: Dict[str, List[Dict[str, Any]]] = {}

    # ── Locations ────────────────────────────────────────────────────────

    def list_locations(self) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._locations.values()]
        return sorted(rows, key=lambda r: r["name"])

    def create_location(
        self,
        name: str,
        latitude: float,
        longitude: float,
        type: str,
        description: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Dict[str, Any]:
        row = {
            "id": str(uuid.uuid4()),
            "name": name,
            "description": description,
            "latitude": latitude,
            "longitude": longitude,
            "address": address,
            "type": type,
        }
        with self._lock:
            self._locations[row["id"]] = row
        return copy.deepcopy(row)

    # ── Routes ───────────────────────────────────────────────────────────

    def _route_view(self, row: Dict[str, Any]) -> Dict[str, Any]:
        out = copy.deepcopy(row)
        times = self._times.get(row["id"], [])
        out["latest_time"] = copy.deepcopy(times[0]) if times else None
        return out

    def list_routes(self) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [self._route_view(r) for r in self._routes.values()]
        return sorted(rows, key=lambda r: r["name"])

    def get_route(self, route_id: str) -> Dict[str, Any]:
        with self._lock:
            row = self._routes.get(route_id)
            if row is None:
                raise RouteNotFound(route_id)
            return self._route_view(row)

    def create_route(
        self,
        name: str,
        distance: float,
        coordinates: List[Dict[str, float]],
        user_id: str,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        row = {
            "id": str(uuid.uuid4()),
            "name": name,
            "description": description,
            "distance": distance,
            "user_id": user_id,
            "coordinates": [
                {"latitude": c["latitude"], "longitude": c["longitude"], "order": i}
                for i, c in enumerate(coordinates)
            ],
            "created_at": _now(),
        }
        with self._lock:
            self._routes[row["id"]] = row
            self._times[row["id"]] = []
            return self._route_view(row)

    # ── Route times ──────────────────────────────────────────────────────

    def list_times(self, route_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            if route_id not in self._routes:
                raise RouteNotFound(route_id)
            return copy.deepcopy(self._times[route_id])

    def add_time(self, route_id: str, time: float, date: Optional[datetime] = None) -> Dict[str, Any]:
        """Record a run; pace is derived from the route distance (None for a zero-length route)."""
        with self._lock:
            route = self._routes.get(route_id)
            if route is None:
                raise RouteNotFound(route_id)

            if date is not None and date.tzinfo is None:
                date = date.replace(tzinfo=timezone.utc)

            distance = route["distance"]
            row = {
                "id": str(uuid.uuid4()),
                "route_id": route_id,
                "time": time,
                "pace": pace_from_time(time, distance) if distance > 0 else None,
                "date": date or _now(),
            }
            times = self._times[route_id]
            times.append(row)
            times.sort(key=lambda r: r["date"], reverse=True)
            return copy.deepcopy(row)


_store: Optional[InMemoryStore] = None


def get_store() -> InMemoryStore:
    """Lazy singleton used as the default FastAPI dependency."""
    global _store
    if _store is None:
        _store = InMemoryStore()
    return _store
