"""Centralized settings for the runroute backend."""
from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "RUNROUTE_"}

    # Routing service; an empty key disables it and routes fall back to straight lines
    routes_api_url: str = "https://routes.googleapis.com/directions/v2:computeRoutes"
    routes_api_key: str = ""
    user_agent: str = "runroute/0.1 (route planner)"

    # Timeouts in seconds; every external call is bounded
    timeout_s: float = 10.0
    probe_timeout_s: float = 5.0

    # Retry policy for the full route request (the probe is never retried)
    tries: int = 2
    backoff_s: float = 0.5

    # Request parameters sent with every route request
    language_code: str = "en-US"
    units: str = "METRIC"
    routing_preference: str = "ROUTING_PREFERENCE_UNSPECIFIED"
    avoid_tolls: bool = False
    avoid_highways: bool = False
    avoid_ferries: bool = False

    # Upper bounds on a suggestion request
    max_distance_km: float = 20.0
    max_tolerance_km: float = 2.0
    # computeRoutes rejects more than 25 intermediate waypoints
    max_intermediates: int = 25

    # Nearby training locations
    nearby_max_distance_km: float = 10.0


settings = Settings()
