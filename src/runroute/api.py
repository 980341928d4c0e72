"""FastAPI REST backend for the runroute planner."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from runroute.config import settings
from runroute.core.engine import NoRoutesAvailable, RouteSuggestionEngine
from runroute.core.models import (
    Coordinate,
    GenerationRequest,
    PaceTimeState,
    RouteCandidate,
    RouteResult,
    RouteSource,
)
from runroute.core.routing import RoutingServiceClient
from runroute.providers.google_routes import GoogleRoutesBackend
from runroute.routers import locations, routes

log = logging.getLogger(__name__)

app = FastAPI(title="Run Route", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(locations.router)
app.include_router(routes.router)


@app.exception_handler(RequestValidationError)
async def _missing_fields(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Missing required fields", "detail": _jsonable_errors(exc)},
    )


def _jsonable_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


# ---------------------------------------------------------------------------
# Module-level routing singletons (one HTTP session per process)
# ---------------------------------------------------------------------------
_routing_client: Optional[RoutingServiceClient] = None


def get_routing_client() -> RoutingServiceClient:
    global _routing_client
    if _routing_client is None:
        _routing_client = RoutingServiceClient(GoogleRoutesBackend())
    return _routing_client


def get_engine(client: RoutingServiceClient = Depends(get_routing_client)) -> RouteSuggestionEngine:
    return RouteSuggestionEngine(client)


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class SuggestRoutesRequest(BaseModel):
    # Missing location is allowed here and reported as "no routes available"
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    distance_km: float = Field(5.0, gt=0, le=settings.max_distance_km)
    tolerance_km: float = Field(0.5, ge=0, le=settings.max_tolerance_km)


class SuggestRoutesResponse(BaseModel):
    candidates: List[RouteCandidate]


class RouteDistanceRequest(BaseModel):
    coordinates: List[Coordinate]


class PaceRequest(BaseModel):
    distance_km: float = Field(..., ge=0)
    time_seconds: Optional[float] = Field(None, ge=0)
    pace_min_per_km: Optional[float] = Field(None, ge=0)


class PaceResponse(BaseModel):
    distance_km: float
    time_seconds: float
    pace_min_per_km: float
    formatted_time: str
    formatted_pace: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health():
    return {"status": "ok", "routing_configured": bool(settings.routes_api_key)}


@app.post("/suggest-routes", response_model=SuggestRoutesResponse)
def suggest_routes(
    req: SuggestRoutesRequest,
    engine: RouteSuggestionEngine = Depends(get_engine),
):
    origin = None
    if req.latitude is not None and req.longitude is not None:
        origin = Coordinate(latitude=req.latitude, longitude=req.longitude)

    gen_req = GenerationRequest(
        origin=origin,
        desired_distance_km=req.distance_km,
        tolerance_km=req.tolerance_km,
    )
    try:
        candidates = engine.suggest(gen_req)
    except NoRoutesAvailable as e:
        log.warning("No routes available: %s", e)
        raise HTTPException(status_code=503, detail="No routes available")

    return SuggestRoutesResponse(candidates=candidates)


@app.post("/route-distance", response_model=RouteResult)
def route_distance(
    req: RouteDistanceRequest,
    client: RoutingServiceClient = Depends(get_routing_client),
):
    coords = req.coordinates
    if len(coords) < 2:
        return RouteResult(path=coords, distance_km=0.0, source=RouteSource.APPROXIMATED)
    return client.route(coords[0], coords[-1], coords[1:-1])


@app.post("/pace", response_model=PaceResponse)
def pace(req: PaceRequest):
    if (req.time_seconds is None) == (req.pace_min_per_km is None):
        raise HTTPException(status_code=400, detail="Provide exactly one of time_seconds or pace_min_per_km")

    if req.time_seconds is not None:
        state = PaceTimeState.from_time(req.distance_km, req.time_seconds)
    else:
        state = PaceTimeState.from_pace(req.distance_km, req.pace_min_per_km)

    return PaceResponse(
        **state.model_dump(),
        formatted_time=state.formatted_time,
        formatted_pace=state.formatted_pace,
    )
