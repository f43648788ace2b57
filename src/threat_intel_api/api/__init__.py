# API - HTTP layer
#
# FastAPI routers, the response envelope, and the service container.

from .main import create_app, start_api_server
from .services import AppServices, get_services

__all__ = [
    "create_app",
    "start_api_server",
    "AppServices",
    "get_services",
]
