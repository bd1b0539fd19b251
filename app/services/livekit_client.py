# app/services/livekit_client.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.core.config import get_settings
from app.core.tokens import DEFAULT_TTL_SECONDS, create_room_list_token
from app.schemas.call_session import SessionFilters
from app.schemas.livekit import RawSession, SessionsPage

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://cloud-api.livekit.io"


class LiveKitClientError(RuntimeError):
    """
    Base class for failures while listing sessions from the Analytics API.
    """


class ConfigurationError(LiveKitClientError):
    """
    Raised when credentials or the project id are missing. No request is sent.
    """


class UpstreamHttpError(LiveKitClientError):
    """
    Raised when the Analytics API answers with a non-2xx status.
    """

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"LiveKit API responded with status {status_code}: {body}")


class TransportError(LiveKitClientError):
    """
    Raised when the request fails before any response was received.
    """


class DecodeError(LiveKitClientError):
    """
    Raised when the response body does not match the sessions page schema.
    """


class LiveKitAnalyticsClient:
    """
    Minimal client for the LiveKit Cloud Analytics API.

    Responsibilities
    ----------------
    - Mint a short-lived service token for every request.
    - Forward the optional session filters to the sessions endpoint.
    - Map every failure into one of the LiveKitClientError subclasses.

    Notes
    -----
    - Exactly one HTTP request per call, no retries.
    - Tokens are never cached; each call signs a new one.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        project_id: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        token_identity: str = "playground-api-service",
        token_ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        if not api_key or not api_secret or not project_id:
            raise ConfigurationError("api_key, api_secret and project_id are required")

        self._api_key = api_key
        self._api_secret = api_secret
        self._project_id = project_id
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._token_identity = token_identity
        self._token_ttl_seconds = token_ttl_seconds

    @property
    def sessions_url(self) -> str:
        """
        Returns the sessions endpoint of the configured project.
        """
        return f"{self._base_url}/api/project/{self._project_id}/sessions"

    def _build_token(self) -> str:
        return create_room_list_token(
            api_key=self._api_key,
            api_secret=self._api_secret,
            identity=self._token_identity,
            name="Playground Analytics Service",
            ttl_seconds=self._token_ttl_seconds,
        )

    async def fetch_sessions_page(
        self,
        filters: Optional[SessionFilters] = None,
    ) -> SessionsPage:
        """
        List sessions of the project, returning the full upstream page.

        Parameters
        ----------
        filters:
            Optional limit/page/date/room filters. Only the supplied ones are
            added to the query string.

        Raises
        ------
        UpstreamHttpError
            Non-2xx answer; carries the upstream status and body.
        TransportError
            Connection/timeout failure before a response arrived.
        DecodeError
            Body is not JSON or does not look like a sessions page.
        """
        params: Dict[str, str] = (filters or SessionFilters()).to_query_params()
        headers = {
            "Authorization": f"Bearer {self._build_token()}",
            "Accept": "application/json",
            "Cache-Control": "no-store",
        }

        logger.info("Fetching sessions from: %s", httpx.URL(self.sessions_url, params=params))

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.get(self.sessions_url, headers=headers, params=params)
        except httpx.RequestError as exc:
            logger.error("Request to LiveKit failed: %s", exc)
            raise TransportError(f"Request to LiveKit failed: {exc}") from exc

        if resp.status_code // 100 != 2:
            logger.error(
                "LiveKit API error: %s. Body: %s", resp.status_code, resp.text
            )
            raise UpstreamHttpError(resp.status_code, resp.text)

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error("LiveKit API returned a non-JSON body: %s", resp.text)
            raise DecodeError(f"LiveKit API returned a non-JSON body: {exc}") from exc

        try:
            return SessionsPage.model_validate(payload)
        except ValidationError as exc:
            logger.error("Unexpected sessions payload from LiveKit: %s", exc)
            raise DecodeError(f"Unexpected sessions payload from LiveKit: {exc}") from exc

    async def fetch_sessions(
        self,
        filters: Optional[SessionFilters] = None,
    ) -> List[RawSession]:
        """
        List sessions of the project, in upstream order.
        """
        page = await self.fetch_sessions_page(filters)
        return page.sessions


def get_livekit_client() -> LiveKitAnalyticsClient:
    """
    Construct a LiveKitAnalyticsClient from application settings.

    Fails fast with ConfigurationError when any required setting is missing.
    Used as a FastAPI dependency by the session routes.
    """
    settings = get_settings()
    missing = [
        name
        for name in ("LIVEKIT_API_KEY", "LIVEKIT_API_SECRET", "LIVEKIT_PROJECT_ID")
        if not getattr(settings, name)
    ]
    if missing:
        logger.error("Missing LiveKit settings: %s", ", ".join(missing))
        raise ConfigurationError(
            f"{', '.join(missing)} must be configured to query LiveKit sessions."
        )

    return LiveKitAnalyticsClient(
        api_key=settings.LIVEKIT_API_KEY,
        api_secret=settings.LIVEKIT_API_SECRET,
        project_id=settings.LIVEKIT_PROJECT_ID,
        base_url=str(settings.LIVEKIT_BASE_URL or DEFAULT_BASE_URL),
        timeout_seconds=settings.LIVEKIT_TIMEOUT_SECONDS,
        token_identity=settings.LIVEKIT_TOKEN_IDENTITY,
        token_ttl_seconds=settings.LIVEKIT_TOKEN_TTL_SECONDS,
    )
