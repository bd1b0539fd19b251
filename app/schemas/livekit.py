# app/schemas/livekit.py
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _unset_to_none(value):
    """
    Protobuf-backed responses send unset timestamps as 0; treat them as absent.
    """
    if value in (0, "0", ""):
        return None
    return value


def _as_utc(value: datetime | None) -> datetime | None:
    """
    Normalize upstream instants to aware UTC datetimes.

    Unix timestamps are already parsed as UTC by pydantic; naive ISO strings
    are assumed to be UTC as well.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EgressStatus(str, Enum):
    """
    Status of a single egress (recording/export) job.

    Mirrors the EgressStatus enum of the LiveKit protocol. UNKNOWN covers any
    value this service does not recognise yet.
    """

    EGRESS_STARTING = "EGRESS_STARTING"
    EGRESS_ACTIVE = "EGRESS_ACTIVE"
    EGRESS_ENDING = "EGRESS_ENDING"
    EGRESS_COMPLETE = "EGRESS_COMPLETE"
    EGRESS_FAILED = "EGRESS_FAILED"
    EGRESS_ABORTED = "EGRESS_ABORTED"
    EGRESS_LIMIT_REACHED = "EGRESS_LIMIT_REACHED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_code(cls, code: str | int | None) -> "EgressStatus":
        """
        Parse an upstream status code.

        Accepts protobuf names ("EGRESS_COMPLETE"), short codes ("complete",
        "limit-reached") and protobuf numbers (0-6, as int or string).
        Never raises; unrecognised values map to UNKNOWN.
        """
        if code is None:
            return cls.UNKNOWN

        text = str(code).strip()
        if text.isdigit():
            try:
                index = int(text)
            except ValueError:
                return cls.UNKNOWN
            if index < len(_PROTOBUF_ORDER):
                return _PROTOBUF_ORDER[index]
            return cls.UNKNOWN

        name = text.upper().replace("-", "_")
        if not name.startswith("EGRESS_"):
            name = f"EGRESS_{name}"
        try:
            status = cls(name)
        except ValueError:
            return cls.UNKNOWN
        return status


# Numeric values as defined by livekit_egress.proto.
_PROTOBUF_ORDER = (
    EgressStatus.EGRESS_STARTING,
    EgressStatus.EGRESS_ACTIVE,
    EgressStatus.EGRESS_ENDING,
    EgressStatus.EGRESS_COMPLETE,
    EgressStatus.EGRESS_FAILED,
    EgressStatus.EGRESS_ABORTED,
    EgressStatus.EGRESS_LIMIT_REACHED,
)


class RawEgressAttempt(BaseModel):
    """
    One recording/export attempt attached to a session, as returned upstream.

    `status` keeps the raw upstream value; use `status_code` for the parsed
    enum.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    egress_id: str = Field(
        ...,
        validation_alias=AliasChoices("egress_id", "egressId"),
        description="Upstream egress identifier.",
        examples=["EG_hK9s2uQ3bX4c"],
    )
    room_id: str | None = Field(
        None,
        validation_alias=AliasChoices("room_id", "roomId"),
        description="Identifier of the room the egress belongs to.",
    )
    room_name: str | None = Field(
        None,
        validation_alias=AliasChoices("room_name", "roomName"),
        description="Name of the room the egress belongs to.",
    )
    status: str | None = Field(
        None,
        description="Raw upstream status, e.g. EGRESS_COMPLETE.",
        examples=["EGRESS_COMPLETE"],
    )
    started_at: datetime | None = Field(
        None,
        validation_alias=AliasChoices("started_at", "startedAt"),
    )
    ended_at: datetime | None = Field(
        None,
        validation_alias=AliasChoices("ended_at", "endedAt"),
    )
    error: str | None = Field(None, description="Upstream error message, if any.")

    @field_validator("status", mode="before")
    @classmethod
    def _status_to_str(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("started_at", "ended_at", mode="before")
    @classmethod
    def _unset(cls, value):
        return _unset_to_none(value)

    @field_validator("started_at", "ended_at")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @property
    def status_code(self) -> EgressStatus:
        return EgressStatus.from_code(self.status)


class RawParticipant(BaseModel):
    """One participant of a session, when the upstream includes them."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    identity: str
    name: str | None = None
    joined_at: datetime | None = Field(
        None, validation_alias=AliasChoices("joined_at", "joinedAt")
    )
    left_at: datetime | None = Field(
        None, validation_alias=AliasChoices("left_at", "leftAt")
    )
    duration: float | None = Field(None, description="Time spent in the room, in seconds.")

    @field_validator("joined_at", "left_at", mode="before")
    @classmethod
    def _unset(cls, value):
        return _unset_to_none(value)

    @field_validator("joined_at", "left_at")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class RawSession(BaseModel):
    """
    One room session as listed by the LiveKit Analytics API.

    Only `session_id`, `name` and `created_at` are guaranteed; everything else
    may be missing depending on the session state and on which endpoint
    produced the record. Instants are accepted as unix seconds or ISO-8601.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    session_id: str = Field(
        ...,
        validation_alias=AliasChoices("session_id", "sessionId"),
        description="Upstream session identifier.",
        examples=["RM_xL3Ns8Jd2Kq7"],
    )
    name: str = Field(
        ...,
        validation_alias=AliasChoices("name", "room_name", "roomName"),
        description="Room name.",
        examples=["daily-standup"],
    )
    created_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("created_at", "createdAt"),
        description="Creation instant of the room.",
    )
    updated_at: datetime | None = Field(
        None,
        validation_alias=AliasChoices("updated_at", "updatedAt", "last_active", "lastActive"),
        description="Instant of the last recorded activity.",
    )
    start_time: datetime | None = Field(
        None, validation_alias=AliasChoices("start_time", "startTime")
    )
    end_time: datetime | None = Field(
        None, validation_alias=AliasChoices("end_time", "endTime")
    )
    duration: float | None = Field(None, description="Session length in seconds.")
    num_participants: int | None = Field(
        None, validation_alias=AliasChoices("num_participants", "numParticipants")
    )
    num_active_participants: int | None = Field(
        None,
        validation_alias=AliasChoices("num_active_participants", "numActiveParticipants"),
    )
    max_participants: int | None = Field(
        None, validation_alias=AliasChoices("max_participants", "maxParticipants")
    )
    egress_info: List[RawEgressAttempt] | None = Field(
        None,
        validation_alias=AliasChoices("egress_info", "egressInfo"),
        description="Egress attempts in the order they were started.",
    )
    participants: List[RawParticipant] | None = None

    @field_validator("updated_at", "start_time", "end_time", mode="before")
    @classmethod
    def _unset(cls, value):
        return _unset_to_none(value)

    @field_validator("created_at", "updated_at", "start_time", "end_time")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class SessionsPage(BaseModel):
    """
    Response body of `GET /api/project/{project_id}/sessions`.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sessions: List[RawSession]
    next_page_token: str | None = Field(
        None, validation_alias=AliasChoices("next_page_token", "nextPageToken")
    )
