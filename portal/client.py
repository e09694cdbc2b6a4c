"""HTTP client for the assessment REST backend."""
from __future__ import annotations

import logging

import requests

from portal.config import BACKEND_TIMEOUT_SECONDS, backend_api_url
from portal.services.auth_context import AuthContext

log = logging.getLogger(__name__)


class BackendError(Exception):
    """Backend call failed (HTTP error status or network failure)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BackendUnauthorized(BackendError):
    """Backend answered 401; the caller's auth context has been cleared."""


def _error_message(response: requests.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class BackendClient:
    """Thin wrapper over the backend endpoints.

    The auth context is injected; its token is sent as a bearer header and it
    is cleared when the backend rejects it.
    """

    def __init__(
        self,
        base_url: str | None = None,
        auth: AuthContext | None = None,
        session: requests.Session | None = None,
        timeout: int = BACKEND_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or backend_api_url()).rstrip("/")
        self.auth = auth
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> object:
        headers = {}
        if self.auth is not None and self.auth.token:
            headers["Authorization"] = f"Bearer {self.auth.token}"
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, path, exc)
            raise BackendError("Could not reach the server. Please try again.") from exc

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = response.status_code
            if status == 401:
                if self.auth is not None and self.auth.is_authenticated:
                    log.info("Backend rejected token on %s %s; signing out", method, path)
                    self.auth.clear()
                raise BackendUnauthorized(
                    _error_message(response, "Session expired. Please log in again."),
                    status,
                ) from exc
            log.warning("%s %s returned %s", method, path, status)
            raise BackendError(
                _error_message(response, f"Request failed with status {status}"),
                status,
            ) from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            log.warning("%s %s returned a non-JSON body", method, path)
            raise BackendError(
                "Received an invalid response from the server",
                response.status_code,
            ) from exc

    # Auth

    def login(self, email: str, password: str) -> dict[str, object]:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    # Categories

    def get_categories(self) -> list[dict[str, object]]:
        return self._request("GET", "/categories/") or []

    def create_category(self, data: dict[str, object]) -> object:
        return self._request("POST", "/categories/", json=data)

    def update_category(self, category_id: int, data: dict[str, object]) -> object:
        return self._request("PUT", f"/categories/{category_id}", json=data)

    def delete_category(self, category_id: int) -> object:
        return self._request("DELETE", f"/categories/{category_id}")

    # Questions

    def get_questions(
        self, page: int = 1, per_page: int = 10, **filters: object
    ) -> dict[str, object]:
        params = {"page": page, "per_page": per_page}
        params.update({k: v for k, v in filters.items() if v is not None})
        return self._request("GET", "/questions/", params=params) or {}

    def create_question(self, data: dict[str, object]) -> object:
        return self._request("POST", "/questions/", json=data)

    def update_question(self, question_id: int, data: dict[str, object]) -> object:
        return self._request("PUT", f"/questions/{question_id}", json=data)

    def delete_question(self, question_id: int) -> object:
        return self._request("DELETE", f"/questions/{question_id}")

    # Tests

    def get_tests(self) -> list[dict[str, object]]:
        return self._request("GET", "/tests/my-tests") or []

    def create_test(self, data: dict[str, object]) -> object:
        return self._request("POST", "/tests/create", json=data)

    def delete_test(self, test_id: int) -> object:
        return self._request("DELETE", f"/tests/{test_id}")

    # Results

    def get_results(self) -> list[dict[str, object]]:
        return self._request("GET", "/candidates/results") or []

    def get_result_detail(self, result_id: int) -> dict[str, object]:
        return self._request("GET", f"/candidates/result/{result_id}") or {}

    def delete_result(self, result_id: int) -> object:
        return self._request("DELETE", f"/candidates/response/{result_id}")

    # Candidate (public)

    def get_public_test(self, test_code: str) -> dict[str, object]:
        return self._request("GET", f"/candidates/test/{test_code}") or {}

    def submit_test_result(self, payload: dict[str, object]) -> object:
        return self._request("POST", "/candidates/submit", json=payload)
