"""
Database schema for the threat-intel store.

Creates the entity tables, the three join tables, and the indexes the
read queries rely on. Idempotent (safe to call on every startup).
"""

import logging
import sqlite3

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS indicators (
    id          TEXT PRIMARY KEY,
    type        TEXT NOT NULL CHECK (type IN ('ip', 'domain', 'url', 'hash')),
    value       TEXT NOT NULL,
    confidence  INTEGER NOT NULL DEFAULT 50,
    first_seen  TEXT NOT NULL,
    last_seen   TEXT NOT NULL,
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS threat_actors (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    description TEXT,
    origin      TEXT,
    first_seen  TEXT NOT NULL,
    last_seen   TEXT NOT NULL,
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS campaigns (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    description TEXT,
    status      TEXT NOT NULL DEFAULT 'active',
    start_date  TEXT NOT NULL,
    end_date    TEXT,
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS campaign_indicators (
    campaign_id  TEXT NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
    indicator_id TEXT NOT NULL REFERENCES indicators(id) ON DELETE CASCADE,
    observed_at  TEXT NOT NULL,
    PRIMARY KEY (campaign_id, indicator_id, observed_at)
);

CREATE TABLE IF NOT EXISTS actor_campaigns (
    threat_actor_id TEXT NOT NULL REFERENCES threat_actors(id) ON DELETE CASCADE,
    campaign_id     TEXT NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
    confidence      INTEGER NOT NULL DEFAULT 50,
    PRIMARY KEY (threat_actor_id, campaign_id)
);

CREATE TABLE IF NOT EXISTS indicator_relationships (
    source_indicator_id TEXT NOT NULL REFERENCES indicators(id) ON DELETE CASCADE,
    target_indicator_id TEXT NOT NULL REFERENCES indicators(id) ON DELETE CASCADE,
    relationship_type   TEXT NOT NULL,
    PRIMARY KEY (source_indicator_id, target_indicator_id, relationship_type)
);

CREATE TABLE IF NOT EXISTS observations (
    id           TEXT PRIMARY KEY,
    indicator_id TEXT NOT NULL REFERENCES indicators(id) ON DELETE CASCADE,
    observed_at  TEXT NOT NULL,
    source       TEXT NOT NULL,
    context      TEXT,
    created_at   TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_indicators_type ON indicators(type);
CREATE INDEX IF NOT EXISTS idx_indicators_value ON indicators(value);
CREATE INDEX IF NOT EXISTS idx_indicators_first_seen ON indicators(first_seen);
CREATE INDEX IF NOT EXISTS idx_indicators_last_seen ON indicators(last_seen);
CREATE INDEX IF NOT EXISTS idx_indicators_created_at ON indicators(created_at);
CREATE INDEX IF NOT EXISTS idx_campaigns_status ON campaigns(status);
CREATE INDEX IF NOT EXISTS idx_ci_indicator ON campaign_indicators(indicator_id);
CREATE INDEX IF NOT EXISTS idx_ci_observed_at ON campaign_indicators(observed_at);
CREATE INDEX IF NOT EXISTS idx_ac_campaign ON actor_campaigns(campaign_id);
CREATE INDEX IF NOT EXISTS idx_observations_observed_at ON observations(observed_at);
CREATE INDEX IF NOT EXISTS idx_observations_indicator ON observations(indicator_id);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""


def initialize_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they don't already exist."""
    conn.executescript(SCHEMA_SQL)
    # executescript() commits and resets connection state
    conn.execute("PRAGMA foreign_keys=ON")
    row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
    if row is None:
        conn.execute(
            "INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,)
        )
        logger.info("Initialized threat-intel schema v%d", SCHEMA_VERSION)
    conn.commit()
