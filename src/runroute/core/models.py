from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from runroute.core.pace import format_pace, format_time, pace_from_time, time_from_pace


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def as_lat_lng(self) -> dict:
        """Wire shape used by the routing service."""
        return {"latitude": self.latitude, "longitude": self.longitude}


Path = List[Coordinate]


class RouteSource(str, Enum):
    ROUTED = "Routed"
    APPROXIMATED = "Approximated"


class TravelMode(str, Enum):
    WALK = "WALK"
    BICYCLE = "BICYCLE"
    DRIVE = "DRIVE"


class WaypointStrategy(str, Enum):
    LOOP = "loop"
    OUT_AND_BACK = "out_and_back"
    RANDOM = "random"

    @property
    def label(self) -> str:
        return _STRATEGY_LABELS[self]


_STRATEGY_LABELS = {
    WaypointStrategy.LOOP: "Loop Route",
    WaypointStrategy.OUT_AND_BACK: "Out and Back",
    WaypointStrategy.RANDOM: "Neighborhood Route",
}


class RouteResult(BaseModel):
    """Outcome of one routing call; ``source`` says how far to trust it."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(default_factory=list)
    distance_km: float = Field(..., ge=0)
    source: RouteSource
    duration_s: Optional[float] = None  # only reported by the service


class RouteCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    path: Path
    distance_km: float = Field(..., ge=0)
    description: str
    source: RouteSource
    strategy: Optional[WaypointStrategy] = None  # None for local fallback routes
    target_distance_km: Optional[float] = None


class PaceTimeState(BaseModel):
    """
    Distance, elapsed time and pace for one run.

    Two of the three are supplied by the user and the third is derived.
    Values are stored unrounded; flooring only happens in the formatted views.
    """

    model_config = ConfigDict(frozen=True)

    distance_km: float = Field(0.0, ge=0)
    time_seconds: float = Field(0.0, ge=0)
    pace_min_per_km: float = Field(0.0, ge=0)

    @classmethod
    def from_time(cls, distance_km: float, time_seconds: float) -> "PaceTimeState":
        return cls(
            distance_km=distance_km,
            time_seconds=time_seconds,
            pace_min_per_km=pace_from_time(time_seconds, distance_km),
        )

    @classmethod
    def from_pace(cls, distance_km: float, pace_min_per_km: float) -> "PaceTimeState":
        return cls(
            distance_km=distance_km,
            time_seconds=time_from_pace(pace_min_per_km, distance_km),
            pace_min_per_km=pace_min_per_km,
        )

    @property
    def formatted_time(self) -> str:
        return format_time(self.time_seconds)

    @property
    def formatted_pace(self) -> str:
        return format_pace(self.pace_min_per_km)


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None when the caller has no location fix
    origin: Optional[Coordinate] = None
    desired_distance_km: float = Field(..., gt=0)
    tolerance_km: float = Field(0.0, ge=0)
