"""
Thin HTTP client for the attendance API.

Every call except login and register carries the stored bearer token. Non-2xx
answers raise ``ApiError`` with the server's ``error`` message; transport
failures raise ``ApiError`` with a generic message.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from squad.client.storage import MemoryTokenStorage, TokenStorage

logger = logging.getLogger(__name__)

DEFAULT_API_URL = os.environ.get("SQUAD_API_URL", "http://localhost:8000/api")


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token_storage: Optional[TokenStorage] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_storage = token_storage or MemoryTokenStorage()
        self._http = http_client or httpx.Client(timeout=timeout)
        self._owns_http = http_client is None

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self, include_auth: bool = True) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if include_auth:
            token = self.token_storage.get()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Any] = None,
        include_auth: bool = True,
    ) -> Dict[str, Any]:
        try:
            response = self._http.request(
                method,
                f"{self.base_url}{endpoint}",
                json=json,
                headers=self._headers(include_auth),
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, endpoint, exc)
            raise ApiError("Network error, please try again") from exc

        if response.is_error:
            try:
                message = response.json().get("error") or "Request failed"
            except ValueError:
                message = "Request failed"
            raise ApiError(message, status_code=response.status_code)
        return response.json()

    # Auth endpoints
    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.request("POST", "/auth/login", {"email": email, "password": password}, include_auth=False)

    def register(self, email: str, password: str, name: str) -> Dict[str, Any]:
        return self.request(
            "POST", "/auth/register", {"email": email, "password": password, "name": name}, include_auth=False
        )

    def get_me(self) -> Dict[str, Any]:
        return self.request("GET", "/auth/me")

    # Users endpoints
    def get_all_users(self) -> Dict[str, List[dict]]:
        return self.request("GET", "/users")

    def toggle_user_status(self, user_id: str, is_active: bool) -> Dict[str, Any]:
        return self.request("PATCH", f"/users/{user_id}/status", {"is_active": is_active})

    # Events endpoints
    def get_all_events(self) -> Dict[str, List[dict]]:
        return self.request("GET", "/events")

    def create_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", "/events", event)

    def update_event(self, event_id: str, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PATCH", f"/events/{event_id}", event)

    def delete_event(self, event_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/events/{event_id}")

    def get_event_equipment(self, event_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/events/{event_id}/equipment")

    # Attendance endpoints
    def create_or_update_attendance(self, event_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", f"/attendance/{event_id}", data)

    def delete_attendance(self, event_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/attendance/{event_id}")

    def health(self) -> Dict[str, Any]:
        return self.request("GET", "/health", include_auth=False)
