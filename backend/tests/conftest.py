import os
from datetime import datetime, timedelta, timezone

# Must be set before the app package reads its config
os.environ["DATABASE_URL"] = "sqlite://"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db import SessionLocal, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.hazards import Hazard  # noqa: E402
from app.services.hazard_store import HazardStore, get_clock  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


def _wipe():
    db = SessionLocal()
    try:
        db.query(Hazard).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        _wipe()


@pytest.fixture
def store(db, clock):
    return HazardStore(db, clock)


@pytest.fixture
def client(clock):
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        init_db()
        _wipe()
