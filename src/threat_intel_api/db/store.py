# Threat-Intel Store - SQLite Query Provider
#
# Read-only access to the threat-intel database. Every query the
# aggregation layer needs lives here and returns plain dicts (or ints
# for counts). Callers treat the rows as immutable value data.

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import DatabaseError
from ..intel.models import SearchFilters, time_range_modifier
from .schema import initialize_schema

logger = logging.getLogger(__name__)


DEFAULT_DB_PATH = "threat_intel.db"
TOP_N = 5
RELATED_LIMIT = 5


class IntelStore:
    """SQLite-backed query provider for threat intelligence entities.

    A single connection is shared by all callers; a reentrant lock
    serializes access so the store can be used from worker threads
    (``asyncio.to_thread``) without interleaving statements.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, create_schema: bool = True):
        self.db_path = db_path
        self._lock = threading.RLock()
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._conn = self._open(db_path)
            if create_schema:
                with self._lock:
                    initialize_schema(self._conn)
        except sqlite3.Error as exc:
            logger.error("Cannot open threat-intel store at %s: %s", db_path, exc)
            raise DatabaseError(
                "Could not open threat-intel database", details={"path": db_path}
            ) from exc
        logger.info("Opened threat-intel store at %s", db_path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _open(db_path: str) -> sqlite3.Connection:
        # Shared across worker threads; self._lock guards every statement.
        # WAL: readers proceed while an ingest process writes.
        conn = sqlite3.connect(db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _fetch_all(self, sql: str, params: Tuple[Any, ...] = ()) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [dict(r) for r in rows]

    def _fetch_one(self, sql: str, params: Tuple[Any, ...] = ()) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._conn.execute(sql, params).fetchone()
        return dict(row) if row else None

    def _count(self, sql: str, params: Tuple[Any, ...] = ()) -> int:
        with self._lock:
            row = self._conn.execute(sql, params).fetchone()
        return row[0] if row else 0

    # ------------------------------------------------------------------
    # Indicators
    # ------------------------------------------------------------------

    def get_indicator(self, indicator_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single indicator row by id."""
        return self._fetch_one("SELECT * FROM indicators WHERE id = ?", (indicator_id,))

    def get_indicator_threat_actors(self, indicator_id: str) -> List[Dict[str, Any]]:
        """Threat actors attributed to any campaign the indicator appears in."""
        return self._fetch_all(
            """
            SELECT DISTINCT ta.id, ta.name, ac.confidence
            FROM threat_actors ta
            JOIN actor_campaigns ac ON ta.id = ac.threat_actor_id
            JOIN campaign_indicators ci ON ac.campaign_id = ci.campaign_id
            WHERE ci.indicator_id = ?
            """,
            (indicator_id,),
        )

    def get_indicator_campaigns(self, indicator_id: str) -> List[Dict[str, Any]]:
        """Campaigns the indicator was observed in, with the observation time."""
        return self._fetch_all(
            """
            SELECT c.id, c.name, c.status, ci.observed_at
            FROM campaigns c
            JOIN campaign_indicators ci ON c.id = ci.campaign_id
            WHERE ci.indicator_id = ?
            """,
            (indicator_id,),
        )

    def get_related_indicators(self, indicator_id: str) -> List[Dict[str, Any]]:
        """Targets of the indicator's outgoing relationship edges."""
        return self._fetch_all(
            """
            SELECT i.id, i.type, i.value, ir.relationship_type
            FROM indicators i
            JOIN indicator_relationships ir ON i.id = ir.target_indicator_id
            WHERE ir.source_indicator_id = ?
            LIMIT ?
            """,
            (indicator_id, RELATED_LIMIT),
        )

    @staticmethod
    def _search_clauses(filters: SearchFilters) -> Tuple[str, List[Any]]:
        clauses: List[str] = []
        params: List[Any] = []

        if filters.type:
            clauses.append("i.type = ?")
            params.append(filters.type)
        if filters.value:
            clauses.append("i.value LIKE ?")
            params.append(f"%{filters.value}%")
        if filters.threat_actor:
            clauses.append("ac.threat_actor_id = ?")
            params.append(filters.threat_actor)
        if filters.campaign:
            clauses.append("ci.campaign_id = ?")
            params.append(filters.campaign)
        if filters.first_seen_after:
            clauses.append("i.first_seen >= ?")
            params.append(filters.first_seen_after)
        if filters.last_seen_before:
            clauses.append("i.last_seen <= ?")
            params.append(filters.last_seen_before)

        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        return where, params

    _SEARCH_FROM = """
        FROM indicators i
        LEFT JOIN campaign_indicators ci ON i.id = ci.indicator_id
        LEFT JOIN actor_campaigns ac ON ci.campaign_id = ac.campaign_id
    """

    def search_indicators(
        self, filters: SearchFilters, limit: int, offset: int
    ) -> List[Dict[str, Any]]:
        """One page of distinct indicators matching ``filters``, newest first."""
        where, params = self._search_clauses(filters)
        sql = (
            f"SELECT DISTINCT i.* {self._SEARCH_FROM}{where}"
            " ORDER BY i.first_seen DESC LIMIT ? OFFSET ?"
        )
        params.extend([limit, offset])
        return self._fetch_all(sql, tuple(params))

    def count_indicators(self, filters: SearchFilters) -> int:
        """Count distinct indicators matching ``filters``."""
        where, params = self._search_clauses(filters)
        sql = f"SELECT COUNT(DISTINCT i.id) {self._SEARCH_FROM}{where}"
        return self._count(sql, tuple(params))

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def get_campaign(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single campaign row by id."""
        return self._fetch_one("SELECT * FROM campaigns WHERE id = ?", (campaign_id,))

    def get_campaign_indicators(
        self,
        campaign_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Indicator observations for a campaign, newest first.

        Each row carries ``day_key`` (YYYY-MM-DD) and ``week_key``
        (YYYY-Www); both are NULL when ``observed_at`` is not a
        parseable datetime.
        """
        sql = """
            SELECT
                i.id, i.type, i.value, i.confidence,
                ci.observed_at,
                strftime('%Y-%m-%d', ci.observed_at) AS day_key,
                strftime('%Y-W%W', ci.observed_at) AS week_key
            FROM campaign_indicators ci
            JOIN indicators i ON ci.indicator_id = i.id
            WHERE ci.campaign_id = ?
        """
        params: List[Any] = [campaign_id]

        if start_date:
            sql += " AND ci.observed_at >= ?"
            params.append(start_date)
        if end_date:
            sql += " AND ci.observed_at <= ?"
            params.append(end_date)

        sql += " ORDER BY ci.observed_at DESC"
        return self._fetch_all(sql, tuple(params))

    # ------------------------------------------------------------------
    # Dashboard statistics
    # ------------------------------------------------------------------

    def get_indicator_distribution(self) -> List[Dict[str, Any]]:
        """All-time indicator count per type."""
        return self._fetch_all(
            "SELECT type, COUNT(*) AS count FROM indicators GROUP BY type"
        )

    def get_new_indicators_count(self, time_range: str) -> int:
        """Indicators created inside the time-range window."""
        return self._count(
            "SELECT COUNT(*) FROM indicators WHERE created_at >= datetime('now', ?)",
            (time_range_modifier(time_range),),
        )

    def get_active_campaigns_count(self) -> int:
        """Campaigns currently in ``active`` status."""
        return self._count("SELECT COUNT(*) FROM campaigns WHERE status = 'active'")

    def get_top_threat_actors(self) -> List[Dict[str, Any]]:
        """Top actors by distinct indicators reachable through their campaigns."""
        return self._fetch_all(
            """
            SELECT ta.id, ta.name, COUNT(DISTINCT ci.indicator_id) AS count
            FROM threat_actors ta
            JOIN actor_campaigns ac ON ta.id = ac.threat_actor_id
            JOIN campaign_indicators ci ON ac.campaign_id = ci.campaign_id
            GROUP BY ta.id
            ORDER BY count DESC
            LIMIT ?
            """,
            (TOP_N,),
        )

    def get_recent_observations_count(self, time_range: str) -> int:
        """Observations recorded inside the time-range window."""
        return self._count(
            "SELECT COUNT(*) FROM observations WHERE observed_at >= datetime('now', ?)",
            (time_range_modifier(time_range),),
        )

    def get_top_campaigns(self) -> List[Dict[str, Any]]:
        """Top campaigns by linked indicator count."""
        return self._fetch_all(
            """
            SELECT c.id, c.name, COUNT(ci.indicator_id) AS count
            FROM campaigns c
            JOIN campaign_indicators ci ON c.id = ci.campaign_id
            GROUP BY c.id
            ORDER BY count DESC
            LIMIT ?
            """,
            (TOP_N,),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()
        logger.info("Closed threat-intel store at %s", self.db_path)
