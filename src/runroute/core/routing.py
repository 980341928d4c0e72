"""
Route requests against the external routing service.

``RoutingServiceClient.route`` never raises: whatever goes wrong (probe
failure, HTTP error, no routes, undecodable path, timeout) the caller gets a
straight-line ``Approximated`` result instead of a ``Routed`` one.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from runroute.config import Settings, settings as default_settings
from runroute.core.geodesy import path_length
from runroute.core.models import Coordinate, RouteResult, RouteSource, TravelMode
from runroute.core.polyline import decode_polyline
from runroute.providers.base import RoutingBackend, RoutingServiceError

log = logging.getLogger(__name__)

PROBE_FIELD_MASK = "routes.duration,routes.distanceMeters"
ROUTE_FIELD_MASK = "routes.duration,routes.distanceMeters,routes.polyline.encodedPolyline"

_PROBE_ORIGIN = Coordinate(latitude=0.0, longitude=0.0)
_PROBE_DESTINATION = Coordinate(latitude=0.001, longitude=0.001)


def _waypoint(c: Coordinate) -> Dict[str, Any]:
    return {"location": {"latLng": c.as_lat_lng()}}


def _parse_duration_s(value: Any) -> Optional[float]:
    """Service durations look like ``"1234s"``."""
    if value is None:
        return None
    try:
        return float(str(value).strip().rstrip("s"))
    except ValueError:
        return None


class RoutingServiceClient:
    def __init__(self, backend: RoutingBackend, cfg: Optional[Settings] = None):
        self.backend = backend
        self.cfg = cfg or default_settings

    # ------------------------------------------------------------------
    # Request bodies
    # ------------------------------------------------------------------

    def probe_body(self) -> Dict[str, Any]:
        return {
            "origin": _waypoint(_PROBE_ORIGIN),
            "destination": _waypoint(_PROBE_DESTINATION),
            "travelMode": TravelMode.WALK.value,
        }

    def route_body(
        self,
        origin: Coordinate,
        destination: Coordinate,
        intermediates: Sequence[Coordinate],
        travel_mode: TravelMode,
    ) -> Dict[str, Any]:
        return {
            "origin": _waypoint(origin),
            "destination": _waypoint(destination),
            "intermediates": [_waypoint(c) for c in intermediates],
            "travelMode": TravelMode(travel_mode).value,
            "routingPreference": self.cfg.routing_preference,
            "computeAlternativeRoutes": False,
            "routeModifiers": {
                "avoidTolls": self.cfg.avoid_tolls,
                "avoidHighways": self.cfg.avoid_highways,
                "avoidFerries": self.cfg.avoid_ferries,
            },
            "languageCode": self.cfg.language_code,
            "units": self.cfg.units,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def probe(self) -> bool:
        """Cheap reachability/authorisation check; only success matters."""
        try:
            self.backend.compute_routes(
                self.probe_body(),
                PROBE_FIELD_MASK,
                timeout_s=self.cfg.probe_timeout_s,
                retry=False,
            )
            return True
        except Exception as e:
            log.warning("Routing service probe failed: %s", e)
            return False

    def route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        intermediates: Sequence[Coordinate] = (),
        travel_mode: TravelMode = TravelMode.WALK,
    ) -> RouteResult:
        intermediates = list(intermediates)

        if not self.probe():
            log.warning("Routing service unavailable - using straight-line distance instead")
            return self.approximate(origin, destination, intermediates)

        try:
            data = self.backend.compute_routes(
                self.route_body(origin, destination, intermediates, travel_mode),
                ROUTE_FIELD_MASK,
                timeout_s=self.cfg.timeout_s,
            )
            return self._decode_response(data, origin, destination, intermediates)
        except Exception as e:
            log.warning("Routing request failed (%s: %s) - falling back to straight-line distance",
                        type(e).__name__, e)
            return self.approximate(origin, destination, intermediates)

    @staticmethod
    def approximate(
        origin: Coordinate,
        destination: Coordinate,
        intermediates: Sequence[Coordinate] = (),
    ) -> RouteResult:
        path = [origin, *intermediates, destination]
        return RouteResult(
            path=path,
            distance_km=path_length(path),
            source=RouteSource.APPROXIMATED,
        )

    # ------------------------------------------------------------------
    # Response decoding
    # ------------------------------------------------------------------

    def _decode_response(
        self,
        data: Dict[str, Any],
        origin: Coordinate,
        destination: Coordinate,
        intermediates: List[Coordinate],
    ) -> RouteResult:
        routes = (data or {}).get("routes") or []
        if not routes:
            raise RoutingServiceError("No routes returned from the API")

        route = routes[0]
        distance_m = route.get("distanceMeters")
        encoded = (route.get("polyline") or {}).get("encodedPolyline")
        duration_s = _parse_duration_s(route.get("duration"))

        if encoded:
            path = decode_polyline(encoded)
            distance_km = float(distance_m) / 1000 if distance_m is not None else path_length(path)
        elif distance_m is not None:
            # No geometry back: draw the waypoints, keep the service distance
            path = [origin, *intermediates, destination]
            distance_km = float(distance_m) / 1000
        else:
            raise RoutingServiceError("Route has neither distance nor encoded path")

        log.debug("Routed %.2f km through %d waypoints", distance_km, len(intermediates))
        return RouteResult(
            path=path,
            distance_km=distance_km,
            source=RouteSource.ROUTED,
            duration_s=duration_s,
        )
