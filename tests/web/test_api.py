from __future__ import annotations

from datetime import datetime

import pytest

import attendance_ledger.records.service as record_service_module
from attendance_ledger.main import create_app

ADMIN = {"email": "admin@example.com", "password": "admin123"}
EMPLOYEE = {"name": "Ana", "email": "ana@example.com", "password": "secret1"}


class Clock:
    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


@pytest.fixture()
def clock(monkeypatch):
    fake = Clock(datetime(2026, 2, 2, 8, 0))
    monkeypatch.setattr(record_service_module, "now_local", fake)
    return fake


@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    return create_app()


@pytest.fixture()
def client(app):
    return app.test_client()


def login(client, creds):
    resp = client.post("/login", json=creds)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def test_protected_routes_need_login(client):
    resp = client.get("/records")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "authentication_error"


def test_bad_login_is_401(client):
    resp = client.post("/login", json={"email": "admin@example.com", "password": "nope"})
    assert resp.status_code == 401


def test_employee_cannot_use_admin_routes(client):
    login(client, ADMIN)
    assert client.post("/admin/users", json=EMPLOYEE).status_code == 201

    client.post("/logout")
    login(client, EMPLOYEE)

    assert client.get("/admin/users").status_code == 403
    assert client.get("/admin/change-requests").status_code == 403
    assert client.get("/records?all=1").status_code == 403


def test_full_attendance_and_correction_flow(client, clock):
    login(client, ADMIN)
    created = client.post("/admin/users", json=EMPLOYEE)
    assert created.status_code == 201
    assert "password_hash" not in created.get_json()
    assert client.post("/admin/users", json=EMPLOYEE).status_code == 409
    client.post("/logout")

    login(client, EMPLOYEE)
    resp = client.post("/records/check-in", json={"notes": "office"})
    assert resp.status_code == 201
    record = resp.get_json()
    assert (record["work_date"], record["check_in"], record["check_out"]) == ("2026-02-02", "08:00", None)

    again = client.post("/records/check-in")
    assert again.status_code == 409
    assert again.get_json()["error"] == "conflict"

    assert client.get("/records/active").get_json()["record"]["record_id"] == record["record_id"]

    clock.moment = datetime(2026, 2, 2, 17, 0)
    done = client.post(f"/records/{record['record_id']}/check-out")
    assert done.status_code == 200
    assert done.get_json()["check_out"] == "17:00"
    assert client.get("/records/active").get_json() == {"record": None}
    assert client.post(f"/records/{record['record_id']}/check-out").status_code == 409

    bad = client.post(
        "/change-requests",
        json={"record_id": record["record_id"], "suggested_check_in": "18:00", "suggested_check_out": "09:00", "reason": "typo"},
    )
    assert bad.status_code == 400
    assert bad.get_json()["error"] == "invalid_range"

    req = client.post(
        "/change-requests",
        json={"record_id": record["record_id"], "suggested_check_in": "08:15", "suggested_check_out": "17:30", "reason": "badge"},
    )
    assert req.status_code == 201
    req_id = req.get_json()["request_id"]
    assert req.get_json()["status"] == "pending"
    assert [r["request_id"] for r in client.get("/change-requests/mine").get_json()] == [req_id]
    client.post("/logout")

    login(client, ADMIN)
    pending = client.get("/admin/change-requests").get_json()
    assert [r["request_id"] for r in pending] == [req_id]

    approved = client.post(f"/admin/change-requests/{req_id}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["status"] == "approved"
    assert client.post(f"/admin/change-requests/{req_id}/approve").status_code == 409
    assert client.post(f"/admin/change-requests/{req_id}/reject").status_code == 409
    assert client.get("/admin/change-requests").get_json() == []

    rows = client.get("/records?all=1").get_json()
    assert [(r["check_in"], r["check_out"]) for r in rows] == [("08:15", "17:30")]


def test_unknown_change_request_is_404(client):
    login(client, ADMIN)
    resp = client.post("/admin/change-requests/999/approve")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


def test_records_range_query_validates_dates(client):
    login(client, ADMIN)
    assert client.get("/records?start=2026-13-01").status_code == 400
    assert client.get("/records?start=2026-02-03&end=2026-02-01").status_code == 400
    assert client.get("/records?start=2026-02-01&end=2026-02-03").status_code == 200


def test_change_request_with_non_numeric_record_id_is_400(client):
    login(client, ADMIN)
    resp = client.post(
        "/change-requests",
        json={"record_id": "abc", "suggested_check_in": "08:15", "suggested_check_out": "17:30", "reason": "badge"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_disabled_user_loses_an_existing_session(app):
    admin = app.test_client()
    employee = app.test_client()
    login(admin, ADMIN)
    ana = admin.post("/admin/users", json=EMPLOYEE).get_json()
    login(employee, EMPLOYEE)
    assert employee.get("/me").status_code == 200

    assert admin.post(f"/admin/users/{ana['user_id']}/disable").status_code == 200

    resp = employee.get("/records/today")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "authentication_error"
    assert employee.get("/me").status_code == 401
