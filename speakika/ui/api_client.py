"""
Synchronous HTTP client for the Speak Ika backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
"""

import logging

import httpx
import streamlit as st

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    Used by the UI to display appropriate error messages.
    """

    def __init__(self, message: str, category: str = "unknown") -> None:
        self.message = message
        self.category = category
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed JSON or raise ``APIError`` with
    user-friendly messages for display in the UI.
    """

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the Speak Ika FastAPI backend.
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self._base_url, timeout=30.0)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/api/db-check").
            **kwargs: Passed through to httpx (json, params, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn speakika.api.app:app --reload --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                body = exc.response.json()
                detail = body.get("detail") or body.get("error") or exc.response.text
            except Exception:
                detail = exc.response.text or str(exc)
            raise APIError(str(detail), category="http") from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def db_check(self) -> dict:
        """GET /api/db-check; raises APIError when the database is unreachable."""
        return self._request("get", "/api/db-check").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend and its database are reachable. Returns (ok, message)."""
        try:
            result = self.db_check()
        except APIError as exc:
            return False, exc.message
        return True, f"Connected (database {result.get('roundTripMs', 0)} ms)"

    # -- speech --

    def transcribe(self, speech_array: list[float], sampling_rate: int) -> str:
        """POST /api/transcribe and return the recognized text."""
        return self._request(
            "post",
            "/api/transcribe",
            json={"speech_array": speech_array, "sampling_rate": sampling_rate},
        ).json()


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    When the base URL changes (e.g. user updates sidebar), a new client
    is created automatically because the cache key includes the parameter.
    """
    return APIClient(base_url=base_url)
