"""Catpoint HTTP API"""

from .app import create_app
from .security_api import security_router, set_service, get_service

__all__ = [
    'create_app',
    'security_router',
    'set_service',
    'get_service',
]
