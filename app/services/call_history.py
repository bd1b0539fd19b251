# app/services/call_history.py
from __future__ import annotations

from typing import Optional

from app.schemas.call_session import CallHistory, SessionFilters
from app.services.livekit_client import LiveKitAnalyticsClient
from app.services.session_normalizer import SessionNormalizer


async def load_call_history(
    client: LiveKitAnalyticsClient,
    normalizer: SessionNormalizer,
    filters: Optional[SessionFilters] = None,
) -> CallHistory:
    """
    Run one fetch-then-normalize cycle.

    Behavior
    --------
    1) Fetch one page of sessions from the Analytics API using `filters`.
    2) Normalize every session, keeping the upstream order.
    3) Return the normalized list together with the upstream page cursor.

    Nothing is cached between calls; every invocation hits the upstream.

    Parameters
    ----------
    client:
        Analytics client used for the single outbound request.
    normalizer:
        Normalizer carrying the clock used for ongoing sessions.
    filters:
        Optional limit/page/date/room filters forwarded upstream.

    Returns
    -------
    CallHistory:
        Normalized sessions, possibly empty.

    Raises
    ------
    LiveKitClientError
        Any upstream failure, unchanged.
    MissingSessionIdentifierError
        When a session of the page has no identifier.
    """
    page = await client.fetch_sessions_page(filters)
    sessions = normalizer.normalize_all(page.sessions)
    return CallHistory(sessions=sessions, next_page_token=page.next_page_token)
