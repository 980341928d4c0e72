from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class RoutingServiceError(RuntimeError):
    """The routing service could not be reached or refused the request."""


class RoutingBackend(ABC):
    """Transport for compute-routes requests (one POST, JSON in and out)."""

    @abstractmethod
    def compute_routes(
        self,
        body: Dict[str, Any],
        field_mask: str,
        timeout_s: float,
        retry: bool = True,
    ) -> Dict[str, Any]:
        """
        Return the decoded JSON response or raise RoutingServiceError.

        ``retry=False`` asks for a single attempt (used by the capability probe).
        """
        raise NotImplementedError
