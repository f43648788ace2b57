# Threat Intel API - Main Package
#
# Read-only aggregation API over a relational threat-intelligence store:
# indicator lookup/search, campaign timelines, and cached dashboard
# statistics.

__version__ = "1.0.0"

__all__ = [
    "__version__",
]
