"""
Pytest configuration and fixtures

Every time-dependent test pins ``now`` explicitly; API tests swap the
application clock for a FixedClock and switch the rate limiter off.
"""
import os
from datetime import datetime

import pytest

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_FORMAT", "text")

from fastapi.testclient import TestClient

from app.core import config
from app.core.clock import FixedClock, get_clock
from app.core.limits import limiter
from app.main import app

CRON_SECRET = "test-cron-secret"


class MutableClock(FixedClock):
    def set(self, moment: datetime):
        self.moment = moment


@pytest.fixture
def clock():
    return MutableClock(datetime(2025, 3, 3, 10, 0))


@pytest.fixture
def client(clock, monkeypatch):
    monkeypatch.setattr(config, "CRON_SECRET", CRON_SECRET)
    app.dependency_overrides[get_clock] = lambda: clock
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def cron_headers():
    return {"Authorization": f"Bearer {CRON_SECRET}"}
