from __future__ import annotations

import pytest

from clinic_booking.deps import get_ledger
from clinic_booking.main import app


def _register(api, email="client@x.com", name="Ana"):
    return api.post(
        "/users",
        json={"name": name, "email": email, "phone": "11999998888", "password": "secret"},
    )


def _book(api, on_date="2024-06-10", time="09:00"):
    return api.post("/appointments", json={"date": on_date, "time": time})


def test_health(api) -> None:
    assert api.get("/health").json() == {"status": "ok"}


def test_register_opens_session_and_hides_password(api) -> None:
    res = _register(api)

    assert res.status_code == 201
    assert res.json() == {"type": "client", "name": "Ana", "email": "client@x.com", "phone": "11999998888"}
    assert api.get("/me").json()["email"] == "client@x.com"


def test_register_errors(api) -> None:
    _register(api)

    dup = _register(api, name="Other")
    assert dup.status_code == 409
    assert dup.json()["detail"] == "Email already registered"

    missing = api.post("/users", json={"name": "Ana", "email": "a@x.com"})
    assert missing.status_code == 422
    assert missing.json()["detail"] == "Please fill in all fields"


def test_login_logout_and_session(api) -> None:
    _register(api)
    assert api.post("/auth/logout").status_code == 204
    assert api.get("/me").status_code == 401

    bad = api.post("/auth/login", data={"username": "client@x.com", "password": "nope"})
    assert bad.status_code == 401

    ok = api.post("/auth/login", data={"username": "client@x.com", "password": "secret"})
    assert ok.status_code == 200
    assert ok.json()["name"] == "Ana"
    assert api.get("/me").json()["type"] == "client"


def test_admin_login(api) -> None:
    assert api.post("/auth/admin/login", data={"username": "admin", "password": "x"}).status_code == 401

    res = api.post("/auth/admin/login", data={"username": "admin", "password": "admin123"})
    assert res.status_code == 200
    assert res.json() == {"type": "admin", "username": "admin"}
    assert api.get("/me").json() == {"type": "admin", "username": "admin"}


def test_book_and_requery_slot(api, store) -> None:
    _register(api)

    res = _book(api)
    assert res.status_code == 201
    body = res.json()
    assert body["clientEmail"] == "client@x.com"
    assert body["date"] == "2024-06-10"
    assert body["time"] == "09:00"
    assert body["status"] == "scheduled"
    assert store.read_json("appointments")[0]["id"] == body["id"]

    slots = api.get("/slots", params={"on_date": "2024-06-10"}).json()
    states = {s["time"]: s["state"] for s in slots["slots"]}
    assert states["09:00"] == "taken"
    assert states["10:00"] == "available"
    assert slots["scheduled_by_client"] == 1


@pytest.mark.parametrize(
    "on_date,time,status,detail",
    [
        ("2024-06-08", "09:00", 422, "Appointments can only be booked Monday to Friday"),
        ("2024-06-10", "12:00", 422, "Time is not one of the clinic's slots"),
        ("2024-06-03", "08:00", 409, "Slot has already started"),
    ],
)
def test_booking_rejections(api, on_date, time, status, detail) -> None:
    _register(api)

    res = _book(api, on_date, time)
    assert res.status_code == status
    assert res.json()["detail"] == detail


def test_double_booking_and_daily_limit_are_distinct(api) -> None:
    _register(api, email="bia@x.com", name="Bia")
    _book(api, time="08:00")

    _register(api)
    taken = _book(api, time="08:00")
    assert taken.status_code == 409
    assert taken.json()["detail"] == "Slot is not available"

    for t in ("09:00", "10:00", "11:00"):
        assert _book(api, time=t).status_code == 201
    capped = _book(api, time="13:00")
    assert capped.status_code == 409
    assert capped.json()["detail"] == "Daily appointment limit reached"


def test_booking_requires_client_session(api) -> None:
    assert _book(api).status_code == 401

    api.post("/auth/admin/login", data={"username": "admin", "password": "admin123"})
    assert _book(api).status_code == 403


def test_cancel_own_appointment_only(api) -> None:
    _register(api, email="bia@x.com", name="Bia")
    bia_appt = _book(api, time="08:00").json()

    _register(api)
    own = _book(api, time="10:00").json()

    assert api.patch(f"/appointments/{bia_appt['id']}/cancel").status_code == 403
    assert api.patch("/appointments/missing/cancel").status_code == 404

    first = api.patch(f"/appointments/{own['id']}/cancel")
    again = api.patch(f"/appointments/{own['id']}/cancel")
    assert first.json()["status"] == "cancelled"
    assert again.status_code == 200
    assert again.json()["status"] == "cancelled"
    assert api.get("/clients/me/appointments").json() == []


def test_admin_sees_all_scheduled_in_order(api) -> None:
    _register(api, email="bia@x.com", name="Bia")
    _book(api, on_date="2024-06-11", time="08:00")
    _register(api)
    _book(api, on_date="2024-06-10", time="15:00")
    cancelled = _book(api, on_date="2024-06-10", time="08:00").json()
    api.patch(f"/appointments/{cancelled['id']}/cancel")

    assert api.get("/admin/appointments").status_code == 403

    api.post("/auth/admin/login", data={"username": "admin", "password": "admin123"})
    listed = api.get("/admin/appointments").json()
    assert [(a["date"], a["time"], a["clientName"]) for a in listed] == [
        ("2024-06-10", "15:00", "Ana"),
        ("2024-06-11", "08:00", "Bia"),
    ]


def test_unexpected_error_is_reported_generically(api) -> None:
    _register(api)

    class BrokenLedger:
        def book(self, *args):
            raise RuntimeError("disk on fire")

    app.dependency_overrides[get_ledger] = lambda: BrokenLedger()
    res = _book(api)

    assert res.status_code == 500
    assert res.json() == {"detail": "An unexpected error occurred"}
