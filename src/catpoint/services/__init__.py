"""Catpoint Services"""

from .security_service import SecurityService, CAT_CONFIDENCE_THRESHOLD
from .status_notifier import StatusListener, StatusNotifier
from .repository import (
    SecurityRepository,
    InMemorySecurityRepository,
    JsonFileSecurityRepository,
)
from .image_service import ImageService, FakeImageService
from .listeners import LoggingStatusListener, EventLogListener

__all__ = [
    # Alarm State Machine
    'SecurityService',
    'CAT_CONFIDENCE_THRESHOLD',
    # Notification Hub
    'StatusListener',
    'StatusNotifier',
    # Persistence
    'SecurityRepository',
    'InMemorySecurityRepository',
    'JsonFileSecurityRepository',
    # Image Verdict
    'ImageService',
    'FakeImageService',
    # Listeners
    'LoggingStatusListener',
    'EventLogListener',
]
