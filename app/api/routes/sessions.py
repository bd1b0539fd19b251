# app/api/routes/sessions.py
from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies.normalizer import get_session_normalizer
from app.schemas.call_session import CallHistory, ErrorResponse, SessionFilters
from app.schemas.livekit import SessionsPage
from app.services.call_history import load_call_history
from app.services.livekit_client import LiveKitAnalyticsClient, get_livekit_client
from app.services.session_normalizer import SessionNormalizer

router = APIRouter(tags=["Sessions"])


_ERROR_RESPONSES = {
    500: {
        "model": ErrorResponse,
        "description": "Missing LiveKit configuration, transport failure or unreadable upstream payload.",
    },
    502: {
        "model": ErrorResponse,
        "description": "Upstream answered with an unusable status or an invalid session.",
    },
}


def session_filters(
    limit: Optional[str] = Query(
        None,
        description="Maximum number of sessions to return.",
        examples=["20"],
    ),
    page: Optional[str] = Query(
        None,
        description="Page number / cursor forwarded to LiveKit.",
        examples=["1"],
    ),
    start_date: Optional[str] = Query(
        None,
        description="Only sessions after this date (forwarded as-is).",
        examples=["2025-01-01"],
    ),
    end_date: Optional[str] = Query(
        None,
        description="Only sessions before this date (forwarded as-is).",
        examples=["2025-01-31"],
    ),
    room_name: Optional[str] = Query(
        None,
        description="Only sessions of this room.",
        examples=["daily-standup"],
    ),
) -> SessionFilters:
    """
    Collect the optional query parameters into SessionFilters.
    """
    return SessionFilters(
        limit=limit,
        page=page,
        start_date=start_date,
        end_date=end_date,
        room_name=room_name,
    )


@router.get(
    "/api/livekit/sessions",
    response_model=SessionsPage,
    response_model_exclude_none=True,
    status_code=HTTPStatus.OK,
    summary="List raw LiveKit sessions",
    description=(
        "Proxy to the LiveKit Analytics `list sessions` endpoint of the configured "
        "project.\n\n"
        "The optional `limit`, `page`, `start_date`, `end_date` and `room_name` "
        "query parameters are forwarded verbatim; omitted ones are not sent.\n\n"
        "Upstream errors are propagated with the upstream status code (or 502)."
    ),
    responses=_ERROR_RESPONSES,
)
async def list_livekit_sessions(
    filters: SessionFilters = Depends(session_filters),
    client: LiveKitAnalyticsClient = Depends(get_livekit_client),
) -> SessionsPage:
    """
    Return one page of sessions exactly as LiveKit listed them.
    """
    return await client.fetch_sessions_page(filters)


@router.get(
    "/call-history",
    response_model=CallHistory,
    status_code=HTTPStatus.OK,
    summary="List normalized call history",
    description=(
        "Fetch one page of sessions from LiveKit and normalize each of them into "
        "a call history entry, preserving the upstream order.\n\n"
        "For every session the response includes:\n"
        "- Start time (falls back to the room creation time)\n"
        "- End time (current time for ongoing sessions)\n"
        "- Human-readable duration or `Ongoing`\n"
        "- Participant count (0 when unknown)\n"
        "- Recording status: none, processing, available or failed\n\n"
        "An empty `sessions` list means there is no history for the filters."
    ),
    responses=_ERROR_RESPONSES,
)
async def get_call_history(
    filters: SessionFilters = Depends(session_filters),
    client: LiveKitAnalyticsClient = Depends(get_livekit_client),
    normalizer: SessionNormalizer = Depends(get_session_normalizer),
) -> CallHistory:
    """
    Run a single fetch-then-normalize cycle for the caller.
    """
    return await load_call_history(client, normalizer, filters)
