from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from runroute.core.models import Coordinate
from runroute.core.polyline import encode_polyline
from runroute.providers.base import RoutingBackend, RoutingServiceError


class FailingBackend(RoutingBackend):
    """Every call fails, as an unreachable or unauthorised service would."""

    def __init__(self, message: str = "simulated outage"):
        self.message = message
        self.calls: List[Dict[str, Any]] = []

    def compute_routes(self, body, field_mask, timeout_s, retry=True):
        self.calls.append(body)
        raise RoutingServiceError(self.message)


class FixedRouteBackend(RoutingBackend):
    """
    Deterministic fake service: answers every request with the same route.

    Pass ``path=None`` to omit the encoded polyline from the response, or
    ``distance_meters=None`` to omit the distance.
    """

    def __init__(
        self,
        distance_meters: Optional[float] = 5200,
        path: Optional[Sequence[Coordinate]] = None,
        duration: Optional[str] = "1800s",
        encoded: Optional[str] = None,
    ):
        self.distance_meters = distance_meters
        self.duration = duration
        if encoded is None and path is not None:
            encoded = encode_polyline(path)
        self.encoded = encoded
        self.calls: List[Dict[str, Any]] = []
        self.field_masks: List[str] = []

    def compute_routes(self, body, field_mask, timeout_s, retry=True):
        self.calls.append(body)
        self.field_masks.append(field_mask)

        route: Dict[str, Any] = {}
        if self.distance_meters is not None:
            route["distanceMeters"] = self.distance_meters
        if self.duration is not None:
            route["duration"] = self.duration
        if self.encoded is not None and "polyline" in field_mask:
            route["polyline"] = {"encodedPolyline": self.encoded}
        return {"routes": [route]}


class ProbeOnlyBackend(FixedRouteBackend):
    """Passes the capability probe, then returns ``response`` for full requests."""

    def __init__(self, response: Dict[str, Any]):
        super().__init__()
        self.response = response

    def compute_routes(self, body, field_mask, timeout_s, retry=True):
        if "polyline" not in field_mask:
            return super().compute_routes(body, field_mask, timeout_s, retry)
        self.calls.append(body)
        self.field_masks.append(field_mask)
        return self.response
