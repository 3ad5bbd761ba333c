from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.shiftbook.shiftbook.container import build_container
from src.shiftbook.shiftbook.main import create_app
from src.shiftbook.shiftbook.notifications.dispatcher import RecordingNotifier
from src.shiftbook.shiftbook.timeclock.model import WorkSession

MANAGER = {"X-Actor-Id": "mgr-1", "X-Actor-Role": "MANAGER"}
BASE = "/api/businesses/biz"


@pytest.fixture()
def container():
    return build_container(notifier=RecordingNotifier())


@pytest.fixture()
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("AUTO_SEED_DB", "0")
    app = create_app(container=container)
    return app.test_client()


def _as_employee(user_id: str) -> dict:
    return {"X-Actor-Id": user_id, "X-Actor-Role": "EMPLOYEE"}


def _hire(client, *, user_id="user-1", first_name="John", hourly_rate="15", base=BASE):
    res = client.post(
        f"{base}/employees",
        json={
            "first_name": first_name,
            "last_name": "Doe",
            "email": f"{first_name.lower()}@example.com",
            "hourly_rate": hourly_rate,
            "start_date": "2024-01-15",
            "user_id": user_id,
        },
        headers=MANAGER,
    )
    assert res.status_code == 201
    return res.get_json()["employee"]


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.get_json() == {"status": "ok", "backend": "memory"}


def test_create_employee_renders_money_as_strings(client):
    john = _hire(client)

    assert john["hourly_rate"] == "15.00"
    assert john["overtime_rate"] == "22.50"
    assert john["role"] == "EMPLOYEE"
    assert john["start_date"] == "2024-01-15"

    listed = client.get(f"{BASE}/employees").get_json()["employees"]
    assert [e["id"] for e in listed] == [john["id"]]


def test_missing_actor_headers_is_forbidden(client):
    res = client.post(f"{BASE}/employees", json={"first_name": "X", "hourly_rate": "10"})

    assert res.status_code == 403
    assert "error" in res.get_json()


def test_employee_cannot_hire(client):
    res = client.post(
        f"{BASE}/employees",
        json={"first_name": "X", "hourly_rate": "10"},
        headers=_as_employee("user-1"),
    )

    assert res.status_code == 403


def test_validation_errors_are_bad_requests(client):
    res = client.post(f"{BASE}/employees", json={"first_name": "X", "hourly_rate": "-3"}, headers=MANAGER)
    assert res.status_code == 400

    res = client.post(f"{BASE}/employees", data="not json", headers=MANAGER)
    assert res.status_code == 400

    res = client.get(f"{BASE}/schedules?start=2024-13-01")
    assert res.status_code == 400


def test_update_rate_and_deactivate(client):
    john = _hire(client)

    res = client.put(f"{BASE}/employees/{john['id']}/rate", json={"hourly_rate": "20"}, headers=MANAGER)
    assert res.status_code == 200
    assert res.get_json()["employee"]["overtime_rate"] == "30.00"

    res = client.post(f"{BASE}/employees/{john['id']}/deactivate", headers=MANAGER)
    assert res.get_json()["employee"]["is_active"] is False

    res = client.put(f"/api/businesses/other/employees/{john['id']}/rate", json={"hourly_rate": "1"}, headers=MANAGER)
    assert res.status_code == 400


def test_schedule_create_and_status(client, container):
    john = _hire(client)

    res = client.post(
        f"{BASE}/schedules",
        json={"employee_id": john["id"], "date": "2024-03-20", "start_time": "09:00", "end_time": "17:00"},
        headers=MANAGER,
    )
    assert res.status_code == 201
    shift = res.get_json()["schedule"]
    assert shift["break_duration"] == 30
    assert shift["status"] == "scheduled"
    assert container.notifier.events[-1].type.value == "schedule_update"

    res = client.post(
        f"{BASE}/schedules",
        json={"employee_id": john["id"], "date": "2024-03-20", "start_time": "17:00", "end_time": "09:00"},
        headers=MANAGER,
    )
    assert res.status_code == 400

    res = client.post(f"{BASE}/schedules/{shift['id']}/status", json={"status": "cancelled"}, headers=MANAGER)
    assert res.get_json()["schedule"]["status"] == "cancelled"
    res = client.post(f"{BASE}/schedules/{shift['id']}/status", json={"status": "missed"}, headers=MANAGER)
    assert res.status_code == 409

    res = client.get(f"{BASE}/schedules?start=2024-03-17&end=2024-03-23")
    assert len(res.get_json()["schedules"]) == 1


def test_clock_in_and_out_flow(client):
    john = _hire(client)
    me = _as_employee("user-1")

    res = client.post(f"{BASE}/clock-in", json={"employee_id": john["id"]}, headers=me)
    assert res.status_code == 201
    session = res.get_json()["session"]
    assert session["is_open"] is True
    assert session["clock_out_time"] is None

    res = client.post(f"{BASE}/clock-in", json={"employee_id": john["id"]}, headers=me)
    assert res.status_code == 409

    res = client.post(f"{BASE}/clock-out", json={"session_id": session["id"]}, headers=me)
    assert res.status_code == 200
    assert res.get_json()["session"]["is_open"] is False

    res = client.post(f"{BASE}/clock-out", json={"employee_id": john["id"]}, headers=me)
    assert res.status_code == 409

    sessions = client.get(f"{BASE}/sessions?employee_id={john['id']}").get_json()["sessions"]
    assert len(sessions) == 1


def test_employee_cannot_clock_someone_else(client):
    john = _hire(client)
    _hire(client, user_id="user-2", first_name="Jane")

    res = client.post(f"{BASE}/clock-in", json={"employee_id": john["id"]}, headers=_as_employee("user-2"))

    assert res.status_code == 403


def test_week_overview(client):
    john = _hire(client)

    res = client.get(f"{BASE}/employees/{john['id']}/week?today=2024-03-20")

    body = res.get_json()
    assert res.status_code == 200
    assert body["week_start"] == "2024-03-17"
    assert body["hours"] == {"scheduled_hours": 0.0, "worked_hours": 0.0, "remaining": 0.0}
    assert body["active_session"] is None


def test_time_off_flow(client):
    john = _hire(client)
    me = _as_employee("user-1")

    res = client.post(
        f"{BASE}/time-off",
        json={
            "employee_id": john["id"],
            "type": "Vacation",
            "start_date": "2024-04-01",
            "end_date": "2024-04-03",
            "reason": "Trip",
        },
        headers=me,
    )
    assert res.status_code == 201
    request_id = res.get_json()["request"]["id"]

    res = client.post(f"{BASE}/time-off/{request_id}/resolve", json={"decision": "approve"}, headers=me)
    assert res.status_code == 403

    res = client.post(f"{BASE}/time-off/{request_id}/resolve", json={"decision": "approve"}, headers=MANAGER)
    assert res.status_code == 200
    assert res.get_json()["request"]["approved_by"] == "mgr-1"

    res = client.post(f"{BASE}/time-off/{request_id}/resolve", json={"decision": "deny"}, headers=MANAGER)
    assert res.status_code == 409

    body = client.get(f"{BASE}/time-off").get_json()
    assert body["pending"] == []
    assert [r["id"] for r in body["resolved"]] == [request_id]
    assert body["counts"] == {"pending": 0, "approved": 1, "denied": 0, "total": 1}


def test_bulk_approve_reports_failures(client):
    john = _hire(client)
    ids = []
    for start in ("2024-04-01", "2024-05-01"):
        res = client.post(
            f"{BASE}/time-off",
            json={"employee_id": john["id"], "type": "personal", "start_date": start, "end_date": start, "reason": "x"},
            headers=MANAGER,
        )
        ids.append(res.get_json()["request"]["id"])

    res = client.post(f"{BASE}/time-off/bulk-approve", json={"request_ids": ids + ["missing"]}, headers=MANAGER)

    body = res.get_json()
    assert res.status_code == 200
    assert sorted(r["id"] for r in body["approved"]) == sorted(ids)
    assert body["failed_count"] == 1
    assert body["failures"][0]["request_id"] == "missing"

    res = client.post(f"{BASE}/time-off/bulk-approve", json={"request_ids": "nope"}, headers=MANAGER)
    assert res.status_code == 400


def test_payroll_close_and_advance(client, container):
    john = _hire(client)

    res = client.post(f"{BASE}/payroll/periods/sync?today=2024-03-20", headers=MANAGER)
    assert res.status_code == 200
    assert len(res.get_json()["periods"]) == 4

    body = client.get(f"{BASE}/payroll/periods?today=2024-03-20").get_json()
    by_start = {p["start_date"]: p for p in body["periods"]}
    assert body["current_period_id"] == by_start["2024-03-17"]["id"]
    closed_period = by_start["2024-03-03"]

    for first in (date(2024, 3, 3), date(2024, 3, 10)):
        for i in range(5):
            clock_in = datetime.combine(first + timedelta(days=i), datetime.min.time()).replace(hour=8)
            container.sessions_repo.add(
                WorkSession(
                    id=f"s-{first.isoformat()}-{i}",
                    business_id="biz",
                    employee_id=john["id"],
                    clock_in_time=clock_in,
                    clock_out_time=clock_in + timedelta(hours=8, minutes=30),
                    total_hours=8.5,
                )
            )

    res = client.post(
        f"{BASE}/payroll/periods/{by_start['2024-03-17']['id']}/close?today=2024-03-20",
        json={},
        headers=MANAGER,
    )
    assert res.status_code == 409

    res = client.post(
        f"{BASE}/payroll/periods/{closed_period['id']}/close?today=2024-03-20",
        json={"deduction_rate": "0.1"},
        headers=MANAGER,
    )
    assert res.status_code == 200
    entry = res.get_json()["entries"][0]
    assert entry["regular_hours"] == "80.00"
    assert entry["overtime_hours"] == "5.00"
    assert entry["gross_pay"] == "1312.50"
    assert entry["deductions"] == "131.25"
    assert entry["net_pay"] == "1181.25"
    assert entry["status"] == "draft"

    summary = client.get(f"{BASE}/payroll/summary?period_id={closed_period['id']}").get_json()["summary"]
    assert summary == {"total_hours": "85.00", "total_gross": "1312.50", "total_net": "1181.25", "entry_count": 1}

    res = client.post(f"{BASE}/payroll/entries/{entry['id']}/advance", headers=_as_employee("user-1"))
    assert res.status_code == 403
    res = client.post(f"{BASE}/payroll/entries/{entry['id']}/advance", headers=MANAGER)
    assert res.get_json()["entry"]["status"] == "approved"

    events = [e.type.value for e in container.notifier.events]
    assert "payroll_ready" in events


def test_payroll_sync_requires_manager(client):
    res = client.post(f"{BASE}/payroll/periods/sync", headers=_as_employee("user-1"))

    assert res.status_code == 403


OTHER = "/api/businesses/other-biz"


def test_bulk_approve_ignores_requests_of_another_business(client, container):
    stranger = _hire(client, user_id="user-9", first_name="Sam", base=OTHER)
    res = client.post(
        f"{OTHER}/time-off",
        json={"employee_id": stranger["id"], "type": "sick", "start_date": "2024-04-01", "end_date": "2024-04-01", "reason": "Flu"},
        headers=MANAGER,
    )
    foreign_id = res.get_json()["request"]["id"]

    res = client.post(f"{BASE}/time-off/{foreign_id}/resolve", json={"decision": "approve"}, headers=MANAGER)
    assert res.status_code == 400

    res = client.post(f"{BASE}/time-off/bulk-approve", json={"request_ids": [foreign_id]}, headers=MANAGER)
    body = res.get_json()
    assert res.status_code == 200
    assert body["approved"] == []
    assert body["failures"] == [{"request_id": foreign_id, "error": "Time-off request not found"}]
    assert container.time_off_repo.get_by_id(foreign_id).is_pending


def test_clock_out_by_employee_id_stays_in_business(client, container):
    stranger = _hire(client, user_id="user-9", first_name="Sam", base=OTHER)
    res = client.post(f"{OTHER}/clock-in", json={"employee_id": stranger["id"]}, headers=MANAGER)
    assert res.status_code == 201

    res = client.post(f"{BASE}/clock-out", json={"employee_id": stranger["id"]}, headers=MANAGER)

    assert res.status_code == 400
    assert container.sessions_repo.get_open_for_employee(stranger["id"]) is not None


def test_schedule_status_stays_in_business(client, container):
    stranger = _hire(client, user_id="user-9", first_name="Sam", base=OTHER)
    res = client.post(
        f"{OTHER}/schedules",
        json={"employee_id": stranger["id"], "date": "2024-03-20", "start_time": "09:00", "end_time": "17:00"},
        headers=MANAGER,
    )
    shift_id = res.get_json()["schedule"]["id"]

    res = client.post(f"{BASE}/schedules/{shift_id}/status", json={"status": "cancelled"}, headers=MANAGER)

    assert res.status_code == 400
    assert container.schedules_repo.get_by_id(shift_id).status.value == "scheduled"
