# app/services/session_normalizer.py
from __future__ import annotations

import logging
from typing import Iterable, List

from app.core.clock import Clock, utc_now
from app.schemas.call_session import CallSession
from app.schemas.livekit import RawSession
from app.services.duration_formatter import format_duration
from app.services.recording_status import RecordingStatusResolver

logger = logging.getLogger(__name__)


class MissingSessionIdentifierError(ValueError):
    """
    Raised when an upstream session carries no usable identifier.

    Such a record cannot be shown or referenced, so the whole batch is
    rejected instead of silently dropping it.
    """


class SessionNormalizer:
    """
    Converts raw LiveKit session records into CallSession entries.

    This keeps the presentation layer isolated from the raw analytics shapes.
    The clock is injected so that the "now" used for ongoing sessions can be
    controlled in tests.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock

    def normalize(self, raw: RawSession) -> CallSession:
        """
        Build a CallSession from a single RawSession.

        Rules
        -----
        - start_time: raw.start_time, else raw.created_at.
        - duration: computed from the resolved start and the raw end_time, so a
          session without end_time is reported as "Ongoing".
        - end_time: raw.end_time, else the current time from the clock. The
          substitution happens after the duration was computed.
        - participant_count: raw.num_participants, else 0.
        - recording_status: derived from the latest egress attempt.
        """
        if not raw.session_id:
            logger.error("Upstream session for room %r has no session_id", raw.name)
            raise MissingSessionIdentifierError(
                f"Upstream session for room {raw.name!r} has no session_id"
            )

        start_time = raw.start_time or raw.created_at
        end_time = raw.end_time

        duration = format_duration(start_time, end_time)

        participant_count = raw.num_participants or 0
        recording_status = RecordingStatusResolver.resolve(raw.egress_info)

        # Display value only; the formatter above already saw the real end.
        if end_time is None:
            end_time = self._clock()

        return CallSession(
            id=raw.session_id,
            room_name=raw.name,
            start_time=start_time,
            end_time=end_time,
            duration=duration,
            participant_count=participant_count,
            recording_status=recording_status,
        )

    def normalize_all(self, raws: Iterable[RawSession]) -> List[CallSession]:
        """
        Normalize every record, preserving input order and length.
        """
        return [self.normalize(raw) for raw in raws]
