# Main Entry Point - API server
#
# ``python -m threat_intel_api`` or the ``threat-intel-api`` console
# script. Command-line flags override the environment.

import argparse
from dataclasses import replace

from . import __version__
from .config import get_settings


def main():
    """Parse arguments and run the API server."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Threat Intelligence API - read-only REST API over a threat-intel database",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Bind address (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Bind port (default: {settings.port})",
    )
    parser.add_argument(
        "--db",
        default=settings.database_path,
        help="Path to the SQLite database (default: $DATABASE_PATH or ./threat_intel.db)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Threat Intel API v{__version__}",
    )

    args = parser.parse_args()
    settings = replace(settings, host=args.host, port=args.port, database_path=args.db)

    from .api.main import start_api_server

    start_api_server(settings)


if __name__ == "__main__":
    main()
