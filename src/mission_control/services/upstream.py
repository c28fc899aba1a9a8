"""Client for the upstream agent API (session source and pass-through routes)."""

import logging
from typing import Any

import httpx

from mission_control.config import Settings
from mission_control.schemas.agents import SessionRecord
from mission_control.services.ingestion import InvalidBatchError, parse_session_records

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Base class for upstream failures."""


class UpstreamNotConfiguredError(UpstreamError):
    """No upstream API token has been configured."""


class UpstreamUnavailableError(UpstreamError):
    """The upstream could not be reached or answered with an error.

    ``status_code`` carries the upstream HTTP status when there was one.
    """

    def __init__(self, message: str, status_code: int | None = None, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class UpstreamClient:
    """Thin async wrapper around the upstream HTTP API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        source_name: str = "mission-control",
        timeout: float = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.source_name = source_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "UpstreamClient":
        return cls(
            base_url=settings.upstream_api_url,
            token=settings.upstream_api_token,
            source_name=settings.upstream_source_name,
            timeout=settings.upstream_timeout_seconds,
        )

    def _headers(self) -> dict[str, str]:
        if not self.token:
            raise UpstreamNotConfiguredError("Upstream API token is not configured")
        return {
            "Authorization": f"Bearer {self.token}",
            "X-Source": self.source_name,
        }

    async def request_json(
        self,
        method: str,
        path: str,
        params: Any = None,
        payload: Any = None,
    ) -> Any:
        """Send a request to ``{base_url}/{path}`` and decode the JSON answer."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = self._headers()

        try:
            async with httpx.AsyncClient() as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=payload,
                    headers=headers,
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as exc:
            logger.error("Upstream %s %s timed out", method, url)
            raise UpstreamUnavailableError("Upstream request timed out") from exc
        except httpx.RequestError as exc:
            logger.error("Upstream %s %s failed: %s", method, url, exc)
            raise UpstreamUnavailableError(f"Failed to connect to upstream: {exc}") from exc

        if response.status_code >= 400:
            logger.warning("Upstream %s %s returned %d", method, url, response.status_code)
            raise UpstreamUnavailableError(
                f"Upstream {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError("Upstream returned invalid JSON") from exc

    async def fetch_sessions(self) -> list[SessionRecord]:
        """Fetch the current session records of all agents."""
        data = await self.request_json("GET", "sessions")
        sessions = data.get("sessions") if isinstance(data, dict) else None
        try:
            return parse_session_records(sessions or [])
        except InvalidBatchError as exc:
            raise UpstreamUnavailableError("Upstream returned malformed session data") from exc
