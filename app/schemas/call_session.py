# app/schemas/call_session.py
from datetime import datetime
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class RecordingStatus(str, Enum):
    """
    Recording state of a session as shown to operators.
    """

    NONE = "none"
    PROCESSING = "processing"
    AVAILABLE = "available"
    FAILED = "failed"


class CallSession(BaseModel):
    """
    Normalized, UI-ready representation of one room session.

    Every field is always populated: missing upstream values are resolved to
    documented defaults by the SessionNormalizer.
    """

    id: str = Field(
        ...,
        description="Upstream session identifier.",
        examples=["RM_xL3Ns8Jd2Kq7"],
    )
    room_name: str = Field(
        ...,
        description="Name of the room.",
        examples=["daily-standup"],
    )
    start_time: datetime = Field(
        ...,
        description=(
            "Session start (UTC). Falls back to the room creation instant when "
            "the upstream record has no explicit start."
        ),
        examples=["2025-01-10T10:30:00Z"],
    )
    end_time: datetime = Field(
        ...,
        description=(
            "Session end (UTC). For ongoing sessions this is the time at which "
            "the record was normalized."
        ),
        examples=["2025-01-10T11:35:00Z"],
    )
    duration: str = Field(
        ...,
        description="Human-readable elapsed time, e.g. '5m' or '1h 5m', or 'Ongoing'.",
        examples=["1h 5m"],
    )
    participant_count: int = Field(
        ...,
        description="Number of participants seen in the session (0 when unknown).",
        examples=[3],
    )
    recording_status: RecordingStatus = Field(
        ...,
        description="Outcome of the latest recording attempt.",
        examples=["available"],
    )


class CallHistory(BaseModel):
    """
    Ordered list of normalized sessions, in upstream order.

    An empty `sessions` list means there is no history for the given filters.
    """

    sessions: List[CallSession] = Field(
        ...,
        description="Normalized sessions, preserving the upstream order.",
    )
    next_page_token: str | None = Field(
        None,
        description="Opaque cursor for the next page, when the upstream returned one.",
    )


class SessionFilters(BaseModel):
    """
    Optional filters forwarded verbatim to the analytics sessions endpoint.
    """

    limit: str | None = Field(None, description="Maximum number of sessions per page.", examples=["20"])
    page: str | None = Field(None, description="Page number or cursor.", examples=["2"])
    start_date: str | None = Field(None, description="Lower date bound.", examples=["2025-01-01"])
    end_date: str | None = Field(None, description="Upper date bound.", examples=["2025-01-31"])
    room_name: str | None = Field(None, description="Only list sessions of this room.", examples=["daily-standup"])

    def to_query_params(self) -> Dict[str, str]:
        """
        Return only the filters that were supplied.

        Empty strings count as absent so they never reach the upstream query.
        """
        return {
            key: value
            for key, value in self.model_dump().items()
            if value
        }


class ErrorResponse(BaseModel):
    """
    Error body returned by the session endpoints.
    """

    error: str = Field(..., examples=["Failed to fetch sessions from LiveKit."])
    details: str | None = Field(
        None,
        examples=["LiveKit API responded with status 404. Check server logs for more details."],
    )
