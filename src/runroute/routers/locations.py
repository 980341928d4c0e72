"""Training locations CRUD."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from runroute.config import settings
from runroute.core.locations import nearby_locations
from runroute.core.models import Coordinate
from runroute.store import InMemoryStore, get_store

router = APIRouter(prefix="/locations", tags=["locations"])


class LocationOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    latitude: float
    longitude: float
    address: Optional[str] = None
    type: str


class NearbyLocationOut(LocationOut):
    distance_km: float


class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    type: str = Field(..., min_length=1)
    description: Optional[str] = None
    address: Optional[str] = None


@router.get("", response_model=List[LocationOut])
def list_locations(store: InMemoryStore = Depends(get_store)):
    return store.list_locations()


@router.post("", response_model=LocationOut, status_code=201)
def create_location(body: LocationCreate, store: InMemoryStore = Depends(get_store)):
    return store.create_location(**body.model_dump())


@router.get("/nearby", response_model=List[NearbyLocationOut])
def list_nearby(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    max_distance_km: Optional[float] = Query(None, gt=0),
    store: InMemoryStore = Depends(get_store),
):
    origin = Coordinate(latitude=latitude, longitude=longitude)
    limit = max_distance_km if max_distance_km is not None else settings.nearby_max_distance_km
    return [
        {**loc, "distance_km": d}
        for loc, d in nearby_locations(store.list_locations(), origin, limit)
    ]
