from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from eufy_motion.session import MotionSession, SessionConfig

from fakes import FakeConnector


def _parse_iso_z(ts: str) -> datetime:
    """
    Parse ISO-8601 timestamps that may end with 'Z' (UTC).
    Python's datetime.fromisoformat() doesn't accept trailing 'Z' on older versions, so convert to +00:00.
    """
    if not isinstance(ts, str):
        raise TypeError(f"timestamp must be str, got {type(ts)}")
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


@pytest.fixture
def session():
    return MotionSession(
        SessionConfig(server_endpoint="ws://host:3000", watched_entity_id="T8210N0123"),
        connector=FakeConnector(),
    )


@pytest.fixture
def client(session):
    from eufy_motion.status_api import create_app

    return TestClient(create_app(session, manage_session=False))


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ok"
    _parse_iso_z(data["time_utc"])


def test_status_reports_session_snapshot(client, session):
    data = client.get("/status").json()

    assert data["watched_entity_id"] == "T8210N0123"
    assert data["server_endpoint"] == "ws://host:3000"
    assert data["motion_detected"] is False
    assert data["supervisor_state"] == "running"
    assert data["handshake_state"] == "idle"
    assert data["attempts"] == 0
    assert data["last_error"] is None
    assert data["uptime_seconds"] >= 0


def test_status_reflects_motion_and_stop(client, session):
    session.motion.set(True)
    session.stop()

    data = client.get("/status").json()
    assert data["motion_detected"] is True
    assert data["supervisor_state"] == "stopped"


def test_put_config_updates_next_attempt(client, session):
    response = client.put("/config", json={"watched_entity_id": "T8410P0000"})
    assert response.status_code == 200
    assert response.json() == {"server_endpoint": "ws://host:3000", "watched_entity_id": "T8410P0000"}

    assert session.config.watched_entity_id == "T8410P0000"
    assert client.get("/status").json()["watched_entity_id"] == "T8410P0000"


def test_lifespan_starts_and_releases_session(session, monkeypatch):
    from eufy_motion.status_api import create_app

    calls = []
    monkeypatch.setattr(session, "start", lambda: calls.append("start"))
    monkeypatch.setattr(session, "stop", lambda: calls.append("stop"))

    with TestClient(create_app(session)) as client:
        assert client.get("/health").status_code == 200
        assert calls == ["start"]

    assert calls == ["start", "stop"]
