from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from geo_attendance.container import assemble
from geo_attendance.core.enums import ClockStatus, Role
from geo_attendance.main import create_app
from geo_attendance.users.model import User

AT_OFFICE = {"coords": {"latitude": 10.0, "longitude": 10.0}}
FAR_AWAY = {"coords": {"latitude": 10.01, "longitude": 10.01}}


@dataclass
class InMemoryUsers:
    users_by_username: dict[str, User]

    def get_by_username(self, username: str) -> Optional[User]:
        return self.users_by_username.get(username)


@pytest.fixture
def app(monkeypatch, events, geofence_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    user = User(
        user_id=1,
        full_name="Nguyen Van A",
        username="a",
        password_hash=generate_password_hash("pw123456"),
        role=Role.STAFF,
    )
    container = assemble(
        users_repo=InMemoryUsers({"a": user}),
        events_repo=events,
        geofence_repo=geofence_repo,
    )
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client):
    with client.session_transaction() as s:
        s["user_id"] = 1
        s["name"] = "Nguyen Van A"
        s["role"] = "staff"
    return client


def test_unauthenticated_dashboard_redirects_without_status_query(client, events):
    res = client.get("/dashboard")

    assert res.status_code == 302
    assert res.headers["Location"].endswith("/")
    assert events.reads == 0


def test_unauthenticated_toggle_is_401(client, events):
    res = client.post("/api/attendance/toggle", json={"position": AT_OFFICE})

    assert res.status_code == 401
    assert res.get_json()["login_url"] == "/"
    assert events.rows == []


def test_login_sets_session_and_redirects(client):
    res = client.post("/", data={"username": "a", "password": "pw123456"})

    assert res.status_code == 302
    assert res.headers["Location"].endswith("/dashboard")
    with client.session_transaction() as s:
        assert s["user_id"] == 1


def test_login_with_wrong_password_stays_on_form(client):
    res = client.post("/", data={"username": "a", "password": "nope"})

    assert res.status_code == 200
    assert b"Invalid username or password" in res.data


def test_logout_clears_session(logged_in):
    logged_in.get("/logout")
    assert logged_in.get("/dashboard").status_code == 302


def test_dashboard_shows_clock_in_control(logged_in):
    res = logged_in.get("/dashboard")

    assert res.status_code == 200
    assert b"Clock In" in res.data


def test_toggle_inside_geofence_records_event(logged_in, events):
    res = logged_in.post(
        "/api/attendance/toggle",
        json={"position": AT_OFFICE, "device_info": {"platform": "Linux", "vendor": "Test"}},
        headers={"User-Agent": "pytest-browser"},
    )
    body = res.get_json()

    assert res.status_code == 200
    assert body["success"] is True
    assert body["status"] == "clock_in"
    assert body["button_label"] == "Clock Out"
    assert body["location"] == {"lat": 10.0, "lng": 10.0}
    assert body["event"]["is_within_geofence"] is True
    assert len(events.rows) == 1
    assert events.rows[0].device_info == {
        "platform": "Linux",
        "vendor": "Test",
        "user_agent": "pytest-browser",
        "remote_addr": "127.0.0.1",
    }


def test_toggle_twice_clocks_out(logged_in, events):
    logged_in.post("/api/attendance/toggle", json={"position": AT_OFFICE})
    res = logged_in.post("/api/attendance/toggle", json={"position": AT_OFFICE})

    assert res.get_json()["status"] == "clock_out"
    assert [e.status for e in events.rows] == [ClockStatus.CLOCK_IN, ClockStatus.CLOCK_OUT]


def test_toggle_outside_geofence_is_rejected(logged_in, events):
    res = logged_in.post("/api/attendance/toggle", json={"position": FAR_AWAY})
    body = res.get_json()

    assert res.status_code == 403
    assert body["error"] == "geofence_violation"
    assert "outside the allowed area" in body["message"]
    assert body["location"] == {"lat": 10.01, "lng": 10.01}
    assert body["status"] == "clock_out"
    assert events.rows == []


def test_toggle_without_geolocation_capability(logged_in, events):
    res = logged_in.post("/api/attendance/toggle", json={"position": {"geolocation_supported": False}})

    assert res.status_code == 400
    assert res.get_json()["error"] == "capability_unavailable"
    assert events.rows == []


def test_toggle_with_denied_permission(logged_in, events):
    res = logged_in.post(
        "/api/attendance/toggle",
        json={"position": {"error": {"code": 1, "message": "User denied Geolocation"}}},
    )

    assert res.status_code == 400
    assert res.get_json()["error"] == "location_error"
    assert events.rows == []


def test_toggle_storage_failure_is_503(logged_in, events):
    events.fail_writes = True

    res = logged_in.post("/api/attendance/toggle", json={"position": AT_OFFICE})

    assert res.status_code == 503
    assert res.get_json()["status"] == "clock_out"


def test_status_endpoint_follows_toggles(logged_in):
    assert logged_in.get("/api/attendance/status").get_json()["status"] == "clock_out"

    logged_in.post("/api/attendance/toggle", json={"position": AT_OFFICE})
    body = logged_in.get("/api/attendance/status").get_json()

    assert body["status"] == "clock_in"
    assert body["button_label"] == "Clock Out"


def test_status_endpoint_reports_outage(logged_in, events):
    events.fail_reads = True
    res = logged_in.get("/api/attendance/status")

    assert res.status_code == 503
    assert res.get_json()["error"] == "storage_failure"


def test_history_endpoint(logged_in):
    logged_in.post("/api/attendance/toggle", json={"position": AT_OFFICE})
    logged_in.post("/api/attendance/toggle", json={"position": AT_OFFICE})

    rows = logged_in.get("/api/attendance/history").get_json()["rows"]

    assert [r["status"] for r in rows] == ["clock_out", "clock_in"]


def test_geofence_endpoint(logged_in, geofence_repo):
    body = logged_in.get("/api/geofence").get_json()
    assert body["geofence"]["center"] == {"lat": 10.0, "lng": 10.0}
    assert body["geofence"]["radius_meters"] == 100.0

    geofence_repo.setting = None
    assert logged_in.get("/api/geofence").get_json()["geofence"] is None
