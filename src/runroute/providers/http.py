from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests
from requests.exceptions import ReadTimeout, ConnectionError


@dataclass
class HTTPClient:
    user_agent: str
    timeout_s: float = 10.0
    tries: int = 2
    backoff_s: float = 0.5

    def __post_init__(self) -> None:
        self.s = requests.Session()
        self.s.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
        )

    def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        timeout_s: Optional[float] = None,
        tries: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        POST ``payload`` as JSON and return the decoded body.

        Connection errors and read timeouts are retried with exponential
        backoff; HTTP error statuses raise immediately.
        """
        timeout = timeout_s if timeout_s is not None else self.timeout_s
        attempts = max(1, tries if tries is not None else self.tries)
        last_err: Optional[Exception] = None
        for attempt in range(attempts):
            try:
                r = self.s.post(url, json=payload, headers=headers, params=params, timeout=timeout)
                r.raise_for_status()
                return r.json()
            except (ReadTimeout, ConnectionError) as e:
                last_err = e
                if attempt < attempts - 1:
                    time.sleep(self.backoff_s * (2**attempt))
        raise last_err if last_err else RuntimeError("HTTP post_json failed")
