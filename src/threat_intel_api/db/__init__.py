"""
Database module for the threat-intel API.

Provides the SQLite schema and the read-only query provider.

Usage:
    store = IntelStore("threat_intel.db")
    campaign = store.get_campaign(campaign_id)
    store.close()
"""

from .schema import SCHEMA_VERSION, initialize_schema
from .store import IntelStore

__all__ = [
    "SCHEMA_VERSION",
    "initialize_schema",
    "IntelStore",
]
