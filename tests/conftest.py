import os
import shutil
import tempfile
from pathlib import Path

import pytest
import requests

# api.main builds its JSON alert store at import time; keep it out of the repo
ALERTS_DIR = None
if "ALERTS_FILE" not in os.environ:
    ALERTS_DIR = tempfile.mkdtemp(prefix="alerts-")
    os.environ["ALERTS_FILE"] = str(Path(ALERTS_DIR) / "alerts.json")
os.environ.setdefault("WEATHER_API_KEY", "test-key")


def pytest_sessionfinish(session, exitstatus):
    if ALERTS_DIR is not None:
        shutil.rmtree(ALERTS_DIR, ignore_errors=True)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        return self._payload


class FakeSession:
    """Stands in for requests.Session, answering by endpoint name"""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        endpoint = url.rsplit("/", 1)[-1]
        payload, status = self.responses.get(endpoint, ({}, 404))
        return FakeResponse(payload, status)


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def openweather_payload(temp=20.0, humidity=50, wind=5.0, pressure=1013, rain_1h=None, name="New Delhi"):
    payload = {
        "name": name,
        "main": {"temp": temp, "humidity": humidity, "pressure": pressure},
        "wind": {"speed": wind},
        "weather": [{"description": "clear sky"}],
    }
    if rain_1h is not None:
        payload["rain"] = {"1h": rain_1h}
    return payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_session():
    return FakeSession()
