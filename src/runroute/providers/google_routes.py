"""Google Routes API (``directions/v2:computeRoutes``) transport."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from runroute.config import Settings, settings as default_settings
from runroute.providers.base import RoutingBackend, RoutingServiceError
from runroute.providers.http import HTTPClient

log = logging.getLogger(__name__)


class GoogleRoutesBackend(RoutingBackend):
    def __init__(self, cfg: Optional[Settings] = None, http: Optional[HTTPClient] = None):
        self.cfg = cfg or default_settings
        self.http = http or HTTPClient(
            user_agent=self.cfg.user_agent,
            timeout_s=self.cfg.timeout_s,
            tries=self.cfg.tries,
            backoff_s=self.cfg.backoff_s,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cfg.routes_api_key)

    def compute_routes(
        self,
        body: Dict[str, Any],
        field_mask: str,
        timeout_s: float,
        retry: bool = True,
    ) -> Dict[str, Any]:
        if not self.configured:
            raise RoutingServiceError("Routes API key not configured")

        try:
            return self.http.post_json(
                self.cfg.routes_api_url,
                body,
                headers={
                    "Content-Type": "application/json",
                    "X-Goog-FieldMask": field_mask,
                },
                params={"key": self.cfg.routes_api_key},
                timeout_s=timeout_s,
                tries=None if retry else 1,
            )
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise RoutingServiceError(f"Routes API request failed with status: {status}") from e
        except (requests.RequestException, ValueError) as e:
            # ValueError covers a non-JSON body
            raise RoutingServiceError(f"Routes API request failed: {type(e).__name__}: {e}") from e

    def __repr__(self) -> str:
        return f"GoogleRoutesBackend(url={self.cfg.routes_api_url!r}, configured={self.configured})"
