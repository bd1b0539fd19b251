from datetime import datetime, timezone
from http import HTTPStatus

import pytest

from app.api.dependencies.normalizer import get_session_normalizer
from app.schemas.livekit import SessionsPage
from app.services import livekit_client as client_module
from app.services.livekit_client import (
    DecodeError,
    TransportError,
    UpstreamHttpError,
    get_livekit_client,
)
from app.services.session_normalizer import SessionNormalizer

PAYLOAD = {
    "sessions": [
        {
            "session_id": "RM_2",
            "name": "retro",
            "created_at": 1736503200,
            "start_time": 1736505000,
            "end_time": 1736508900,
            "num_participants": 3,
            "egress_info": [
                {"egress_id": "EG_1", "status": "EGRESS_FAILED"},
                {"egress_id": "EG_2", "status": "EGRESS_COMPLETE"},
            ],
        },
        {"session_id": "RM_1", "name": "standup", "created_at": 1000},
    ],
    "next_page_token": "page-2",
}


class FakeLiveKitClient:
    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.filters = None

    async def fetch_sessions_page(self, filters=None):
        self.filters = filters
        if self.error is not None:
            raise self.error
        return SessionsPage.model_validate(self.payload)


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture()
def use_fake(app, fixed_clock):
    """
    Install a FakeLiveKitClient and a fixed-clock normalizer on the app.
    """

    def _install(payload=None, error=None) -> FakeLiveKitClient:
        fake = FakeLiveKitClient(payload, error)
        app.dependency_overrides[get_livekit_client] = lambda: fake
        app.dependency_overrides[get_session_normalizer] = lambda: SessionNormalizer(clock=fixed_clock)
        return fake

    return _install


def test_call_history_returns_normalized_sessions(client, use_fake, fixed_clock):
    use_fake(PAYLOAD)

    resp = client.get("/call-history")

    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["next_page_token"] == "page-2"
    assert [s["id"] for s in data["sessions"]] == ["RM_2", "RM_1"]

    retro, standup = data["sessions"]
    assert retro == {
        "id": "RM_2",
        "room_name": "retro",
        "start_time": retro["start_time"],
        "end_time": retro["end_time"],
        "duration": "1h 5m",
        "participant_count": 3,
        "recording_status": "available",
    }
    assert _parse(retro["start_time"]) == datetime(2025, 1, 10, 10, 30, tzinfo=timezone.utc)
    assert _parse(retro["end_time"]) == datetime(2025, 1, 10, 11, 35, tzinfo=timezone.utc)

    assert standup["duration"] == "Ongoing"
    assert standup["participant_count"] == 0
    assert standup["recording_status"] == "none"
    assert _parse(standup["start_time"]) == datetime.fromtimestamp(1000, tz=timezone.utc)
    assert _parse(standup["end_time"]) == fixed_clock()


def test_call_history_empty_is_not_an_error(client, use_fake):
    use_fake({"sessions": []})

    resp = client.get("/call-history")

    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["sessions"] == []


def test_call_history_forwards_query_params(client, use_fake):
    fake = use_fake({"sessions": []})

    resp = client.get(
        "/call-history",
        params={"limit": "10", "page": "2", "start_date": "2025-01-01", "room_name": "standup"},
    )

    assert resp.status_code == HTTPStatus.OK
    assert fake.filters.to_query_params() == {
        "limit": "10",
        "page": "2",
        "start_date": "2025-01-01",
        "room_name": "standup",
    }


def test_raw_sessions_proxy_returns_upstream_page(client, use_fake):
    use_fake(PAYLOAD)

    resp = client.get("/api/livekit/sessions?limit=2")

    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["next_page_token"] == "page-2"
    assert [s["session_id"] for s in data["sessions"]] == ["RM_2", "RM_1"]
    assert data["sessions"][0]["egress_info"][1]["status"] == "EGRESS_COMPLETE"


@pytest.mark.parametrize("path", ["/call-history", "/api/livekit/sessions"])
@pytest.mark.parametrize("status", [HTTPStatus.NOT_FOUND, HTTPStatus.INTERNAL_SERVER_ERROR])
def test_upstream_status_is_propagated(client, use_fake, path, status):
    use_fake(error=UpstreamHttpError(int(status), "upstream body"))

    resp = client.get(path)

    assert resp.status_code == status
    body = resp.json()
    assert body["error"] == "Failed to fetch sessions from LiveKit."
    assert str(int(status)) in body["details"]


@pytest.mark.parametrize("upstream_status", [None, 302, 99])
def test_unusable_upstream_status_becomes_502(client, use_fake, upstream_status):
    use_fake(error=UpstreamHttpError(upstream_status, ""))

    resp = client.get("/call-history")

    assert resp.status_code == HTTPStatus.BAD_GATEWAY
    assert resp.json()["error"] == "Failed to fetch sessions from LiveKit."


@pytest.mark.parametrize(
    "error",
    [TransportError("Request to LiveKit failed: timeout"), DecodeError("bad payload")],
)
def test_transport_and_decode_errors_are_generic_failures(client, use_fake, error):
    use_fake(error=error)

    resp = client.get("/call-history")

    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    body = resp.json()
    assert body["error"] == "Internal server error."
    assert body["details"] == str(error)


def test_missing_session_identifier_rejects_batch(client, use_fake):
    use_fake({"sessions": [{"session_id": "", "name": "ghost", "created_at": 1000}]})

    resp = client.get("/call-history")

    assert resp.status_code == HTTPStatus.BAD_GATEWAY
    assert "identifier" in resp.json()["error"]


class _MissingSettings:
    LIVEKIT_API_KEY = None
    LIVEKIT_API_SECRET = None
    LIVEKIT_PROJECT_ID = None


def test_missing_configuration_is_server_error(monkeypatch, client):
    monkeypatch.setattr(client_module, "get_settings", lambda: _MissingSettings())

    resp = client.get("/call-history")

    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    body = resp.json()
    assert body["error"] == "Server configuration error: Missing LiveKit credentials."
    assert "LIVEKIT_API_KEY" in body["details"]


def test_non_get_is_rejected(client, use_fake):
    use_fake({"sessions": []})

    resp = client.post("/api/livekit/sessions")

    assert resp.status_code == HTTPStatus.METHOD_NOT_ALLOWED
    assert "GET" in resp.headers["allow"]
