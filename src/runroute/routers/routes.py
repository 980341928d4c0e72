"""Saved routes CRUD and recorded times."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from runroute.store import InMemoryStore, RouteNotFound, get_store

router = APIRouter(prefix="/routes", tags=["routes"])


class CoordinateIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class RouteCoordinateOut(BaseModel):
    latitude: float
    longitude: float
    order: int


class RouteTimeOut(BaseModel):
    id: str
    route_id: str
    time: float
    pace: Optional[float] = None
    date: datetime


class RouteOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    distance: float
    user_id: str
    coordinates: List[RouteCoordinateOut]
    latest_time: Optional[RouteTimeOut] = None
    created_at: Optional[datetime] = None


class RouteCreate(BaseModel):
    name: str = Field(..., min_length=1)
    distance: float = Field(..., ge=0)
    coordinates: List[CoordinateIn] = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    description: Optional[str] = None


class RouteTimeCreate(BaseModel):
    time: float = Field(..., ge=0)
    date: Optional[datetime] = None


@router.get("", response_model=List[RouteOut])
def list_routes(store: InMemoryStore = Depends(get_store)):
    return store.list_routes()


@router.post("", response_model=RouteOut, status_code=201)
def create_route(body: RouteCreate, store: InMemoryStore = Depends(get_store)):
    return store.create_route(
        name=body.name,
        distance=body.distance,
        coordinates=[c.model_dump() for c in body.coordinates],
        user_id=body.user_id,
        description=body.description,
    )


@router.get("/{route_id}", response_model=RouteOut)
def get_route(route_id: str, store: InMemoryStore = Depends(get_store)):
    try:
        return store.get_route(route_id)
    except RouteNotFound:
        raise HTTPException(status_code=404, detail="Route not found")


@router.get("/{route_id}/times", response_model=List[RouteTimeOut])
def list_route_times(route_id: str, store: InMemoryStore = Depends(get_store)):
    try:
        return store.list_times(route_id)
    except RouteNotFound:
        raise HTTPException(status_code=404, detail="Route not found")


@router.post("/{route_id}/times", response_model=RouteTimeOut, status_code=201)
def create_route_time(
    route_id: str,
    body: RouteTimeCreate,
    store: InMemoryStore = Depends(get_store),
):
    try:
        return store.add_time(route_id, time=body.time, date=body.date)
    except RouteNotFound:
        raise HTTPException(status_code=404, detail="Route not found")
