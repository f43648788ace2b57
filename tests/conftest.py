"""
Shared pytest fixtures for the threat-intel API test suite.

``seeded_store`` is an IntelStore on a temp-file database populated with
a small, fully known data set (ids below). Counts that depend on
"now" (new indicators, recent observations) are seeded relative to the
current UTC time so they land in predictable windows.
"""

from datetime import datetime, timedelta, timezone

import pytest

from threat_intel_api.api.main import create_app
from threat_intel_api.api.services import AppServices
from threat_intel_api.db.store import IntelStore
from threat_intel_api.intel.dashboard import SnapshotCache

# ── Fixture ids ──────────────────────────────────────────────────────

IND_IP = "11111111-1111-4111-8111-111111111111"
IND_DOMAIN = "22222222-2222-4222-8222-222222222222"
IND_URL = "33333333-3333-4333-8333-333333333333"
IND_HASH = "44444444-4444-4444-8444-444444444444"
IND_OLD_IP = "55555555-5555-4555-8555-555555555555"

CAMP_A = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"
CAMP_B = "bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb"
CAMP_EMPTY = "cccccccc-cccc-4ccc-8ccc-cccccccccccc"

ACTOR_APT28 = "dddddddd-dddd-4ddd-8ddd-dddddddddddd"
ACTOR_LAZARUS = "eeeeeeee-eeee-4eee-8eee-eeeeeeeeeeee"

MISSING_ID = "99999999-9999-4999-8999-999999999999"


def _sqlite_ts(delta: timedelta) -> str:
    """UTC timestamp in SQLite's datetime('now') format, shifted by ``delta``."""
    return (datetime.now(timezone.utc) + delta).strftime("%Y-%m-%d %H:%M:%S")


def seed(store: IntelStore) -> None:
    conn = store._conn
    conn.executemany(
        """
        INSERT INTO indicators (id, type, value, confidence, first_seen, last_seen, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (IND_IP, "ip", "203.0.113.7", 90,
             "2024-01-01T00:00:00Z", "2024-02-01T00:00:00Z", _sqlite_ts(timedelta(hours=-2))),
            (IND_DOMAIN, "domain", "evil.example.com", 75,
             "2024-01-02T00:00:00Z", "2024-01-20T00:00:00Z", _sqlite_ts(timedelta(days=-2))),
            (IND_URL, "url", "http://evil.example.com/payload", 60,
             "2024-01-03T00:00:00Z", "2024-01-10T00:00:00Z", _sqlite_ts(timedelta(days=-10))),
            (IND_HASH, "hash", "d41d8cd98f00b204e9800998ecf8427e", 50,
             "2024-01-04T00:00:00Z", "2024-03-01T00:00:00Z", _sqlite_ts(timedelta(days=-10))),
            (IND_OLD_IP, "ip", "198.51.100.23", 30,
             "2023-06-01T00:00:00Z", "2023-07-01T00:00:00Z", _sqlite_ts(timedelta(days=-40))),
        ],
    )
    conn.executemany(
        "INSERT INTO campaigns (id, name, status, start_date, end_date) VALUES (?, ?, ?, ?, ?)",
        [
            (CAMP_A, "Operation A", "active", "2024-01-01", None),
            (CAMP_B, "Operation B", "inactive", "2024-01-15", "2024-03-01"),
            (CAMP_EMPTY, "Operation C", "active", "2024-04-01", None),
        ],
    )
    conn.executemany(
        "INSERT INTO threat_actors (id, name, origin, first_seen, last_seen) VALUES (?, ?, ?, ?, ?)",
        [
            (ACTOR_APT28, "APT28", "RU", "2010-01-01", "2024-03-01"),
            (ACTOR_LAZARUS, "Lazarus", "KP", "2009-01-01", "2024-03-01"),
        ],
    )
    conn.executemany(
        "INSERT INTO campaign_indicators (campaign_id, indicator_id, observed_at) VALUES (?, ?, ?)",
        [
            (CAMP_A, IND_IP, "2024-01-05T10:00:00Z"),
            (CAMP_A, IND_DOMAIN, "2024-01-05T12:00:00Z"),
            (CAMP_A, IND_URL, "2024-01-08T09:00:00Z"),
            (CAMP_B, IND_IP, "2024-02-01T00:00:00Z"),
            (CAMP_B, IND_HASH, "2024-02-02T00:00:00Z"),
        ],
    )
    conn.executemany(
        "INSERT INTO actor_campaigns (threat_actor_id, campaign_id, confidence) VALUES (?, ?, ?)",
        [
            (ACTOR_APT28, CAMP_A, 80),
            (ACTOR_APT28, CAMP_B, 60),
            (ACTOR_LAZARUS, CAMP_B, 70),
        ],
    )
    conn.executemany(
        """
        INSERT INTO indicator_relationships
            (source_indicator_id, target_indicator_id, relationship_type)
        VALUES (?, ?, ?)
        """,
        [
            (IND_IP, IND_DOMAIN, "resolves_to"),
            (IND_IP, IND_URL, "communicates_with"),
        ],
    )
    conn.executemany(
        "INSERT INTO observations (id, indicator_id, observed_at, source) VALUES (?, ?, ?, ?)",
        [
            ("obs-1", IND_IP, _sqlite_ts(timedelta(hours=-1)), "sensor-a"),
            ("obs-2", IND_DOMAIN, _sqlite_ts(timedelta(days=-3)), "sensor-a"),
            ("obs-3", IND_URL, _sqlite_ts(timedelta(days=-20)), "feed-b"),
            ("obs-4", IND_HASH, _sqlite_ts(timedelta(days=-60)), "feed-b"),
        ],
    )
    conn.commit()


@pytest.fixture
def store(tmp_path):
    """Empty store on a temp database."""
    s = IntelStore(str(tmp_path / "threat_intel.db"))
    yield s
    s.close()


@pytest.fixture
def seeded_store(store):
    """Store populated with the fixture data set."""
    seed(store)
    return store


class FakeClock:
    """Controllable monotonic clock for cache TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def services(seeded_store, clock):
    return AppServices(seeded_store, SnapshotCache(ttl=300.0, clock=clock))


@pytest.fixture
def client(services):
    """FastAPI TestClient wired to the seeded store."""
    from fastapi.testclient import TestClient

    app = create_app(services=services)
    with TestClient(app) as c:
        yield c
