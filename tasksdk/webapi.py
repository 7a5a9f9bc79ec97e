"""Base class for vendor web API clients.

Vendor ``*HttpClient`` types built by ClientFactory are constructed as
``client_type(base_url, credentials)``; deriving from HttpClientBase gives them
authenticated requests. Auth headers travel with each request, so a session
passed in by the caller is used but never modified.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from .credentials import FederatedCredential
from .errors import ClientRequestError

DEFAULT_TIMEOUT = 60


class HttpClientBase:
    user_agent = "tasksdk"

    def __init__(
        self,
        base_url: str,
        credentials: FederatedCredential,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.credentials = credentials
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.headers: Dict[str, str] = {
            "Authorization": credentials.authorization_header(),
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def url_for(self, route: str) -> str:
        return f"{self.base_url}/{str(route).lstrip('/')}"

    def send(
        self,
        method: str,
        route: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        r = self.session.request(
            method,
            self.url_for(route),
            params=params,
            json=json,
            headers=self.headers,
            timeout=self.timeout,
        )
        if not 200 <= r.status_code < 300:
            raise ClientRequestError(r.status_code, r.text[:2000])
        if not r.content:
            return None
        return r.json()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
