# app/services/recording_status.py
from __future__ import annotations

from typing import Sequence

from app.schemas.call_session import RecordingStatus
from app.schemas.livekit import EgressStatus, RawEgressAttempt

_STATUS_MAP = {
    EgressStatus.EGRESS_COMPLETE: RecordingStatus.AVAILABLE,
    EgressStatus.EGRESS_STARTING: RecordingStatus.PROCESSING,
    EgressStatus.EGRESS_ACTIVE: RecordingStatus.PROCESSING,
    EgressStatus.EGRESS_ENDING: RecordingStatus.PROCESSING,
    EgressStatus.EGRESS_FAILED: RecordingStatus.FAILED,
    EgressStatus.EGRESS_ABORTED: RecordingStatus.FAILED,
    EgressStatus.EGRESS_LIMIT_REACHED: RecordingStatus.FAILED,
}


class RecordingStatusResolver:
    """
    Derives the recording status of a session from its egress history.

    Rules
    -----
    - No egress history                            => NONE
    - Latest attempt COMPLETE                      => AVAILABLE
    - Latest attempt STARTING / ACTIVE / ENDING    => PROCESSING
    - Latest attempt FAILED / ABORTED / LIMIT_REACHED => FAILED
    - Latest attempt with any other status         => NONE

    Note
    ----
    Only the last element of the history is considered. The upstream service
    appends attempts, so the tail is the most recent one.
    """

    @staticmethod
    def resolve(egress_history: Sequence[RawEgressAttempt] | None) -> RecordingStatus:
        if not egress_history:
            return RecordingStatus.NONE

        latest = egress_history[-1]
        return _STATUS_MAP.get(latest.status_code, RecordingStatus.NONE)
