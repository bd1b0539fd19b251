from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import get_settings


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Response schema for the health check endpoint.
    """

    status: str = Field(
        ...,
        description="Overall health status of the Call History service.",
        examples=["ok"],
    )
    app_name: str = Field(
        ...,
        description="Human-friendly name of the running application.",
        examples=["Call History Service"],
    )
    environment: str = Field(
        ...,
        description="Current deployment environment (local/dev/stage/prod).",
        examples=["local"],
    )
    livekit_configured: bool = Field(
        ...,
        description="Whether LiveKit API key, secret and project id are all set.",
        examples=[True],
    )
    timestamp_utc: datetime = Field(
        ...,
        description="Server-side timestamp (UTC) at which this health check was generated.",
        examples=["2025-01-01T10:30:00Z"],
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check for the Call History service",
    description=(
        "Lightweight endpoint to verify that the backend is up and responding.\n\n"
        "Typical use-cases:\n"
        "- Kubernetes / Docker / VM health probes\n"
        "- Uptime monitoring & alerting\n"
        "- Quick smoke-test after deployments\n"
    ),
)
async def health_check() -> HealthResponse:
    """
    Returns the current health status of the service.

    Does **not** call LiveKit, so it stays reliable when the upstream is
    degraded; `livekit_configured` only reflects local settings.
    """
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        livekit_configured=bool(
            settings.LIVEKIT_API_KEY
            and settings.LIVEKIT_API_SECRET
            and settings.LIVEKIT_PROJECT_ID
        ),
        timestamp_utc=datetime.now(tz=timezone.utc),
    )
