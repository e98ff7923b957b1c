from __future__ import annotations

import threading
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from clinic_booking.db import create_db_and_tables, make_engine
from clinic_booking.deps import get_clock, get_store
from clinic_booking.identity import IdentityStore
from clinic_booking.ledger import AppointmentLedger
from clinic_booking.main import app
from clinic_booking.schemas import ClientUser
from clinic_booking.storage import MemoryStore

# Monday 2024-06-03, 12:00 UTC (09:00 at the clinic)
NOW = datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'clinic.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def identity(store: MemoryStore) -> IdentityStore:
    return IdentityStore(store, admin_username="admin", admin_password="admin123")


@pytest.fixture
def ledger(store: MemoryStore) -> AppointmentLedger:
    return AppointmentLedger(store, now=fixed_clock, max_daily=3, utc_offset_hours=-3)


@pytest.fixture
def client_user() -> ClientUser:
    return ClientUser(name="Ana", email="client@x.com", phone="11999998888", password="secret")


@pytest.fixture
def api(store: MemoryStore):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def run_concurrently(engine):
    """Run ``work(session, i)`` in ``count`` threads released together, one Session each."""

    def run(count, work):
        barrier = threading.Barrier(count)
        results = [None] * count

        def worker(i):
            with Session(engine) as session:
                barrier.wait()
                try:
                    results[i] = ("ok", work(session, i))
                except Exception as exc:
                    results[i] = ("error", type(exc).__name__)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return results

    return run
