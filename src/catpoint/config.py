"""
Catpoint configuration and wiring

ServiceConfig holds runtime settings; build_security_service() turns a
config into a ready SecurityService with its store, classifier and the
built-in listeners attached.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .services.image_service import FakeImageService, ImageService
from .services.listeners import EventLogListener, LoggingStatusListener
from .services.repository import (
    InMemorySecurityRepository,
    JsonFileSecurityRepository,
    SecurityRepository,
)
from .services.security_service import SecurityService

ENV_PREFIX = "CATPOINT_"
IMAGE_SERVICES = ("fake", "yolo")

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


@dataclass
class ServiceConfig:
    """Runtime settings for the engine and its collaborators."""
    # Persistence (None = in-memory only)
    state_file: Optional[str] = None

    # Classifier
    image_service: str = "fake"
    yolo_model: str = "yolo11n.pt"
    device: str = "cpu"

    # Observability
    log_level: str = "INFO"
    event_log_size: int = 200

    def __post_init__(self):
        if self.image_service not in IMAGE_SERVICES:
            raise ValueError(f"image_service must be one of {IMAGE_SERVICES}, got {self.image_service!r}")
        if self.event_log_size < 1:
            raise ValueError("event_log_size must be positive")

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "ServiceConfig":
        """Build a config from CATPOINT_* variables, defaults for the rest."""
        env = os.environ if environ is None else environ
        kwargs = {}
        if f"{ENV_PREFIX}STATE_FILE" in env:
            kwargs["state_file"] = env[f"{ENV_PREFIX}STATE_FILE"] or None
        if f"{ENV_PREFIX}IMAGE_SERVICE" in env:
            kwargs["image_service"] = env[f"{ENV_PREFIX}IMAGE_SERVICE"].lower()
        if f"{ENV_PREFIX}YOLO_MODEL" in env:
            kwargs["yolo_model"] = env[f"{ENV_PREFIX}YOLO_MODEL"]
        if f"{ENV_PREFIX}DEVICE" in env:
            kwargs["device"] = env[f"{ENV_PREFIX}DEVICE"]
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            kwargs["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"].upper()
        if f"{ENV_PREFIX}EVENT_LOG_SIZE" in env:
            kwargs["event_log_size"] = int(env[f"{ENV_PREFIX}EVENT_LOG_SIZE"])
        return cls(**kwargs)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("catpoint").setLevel(level.upper())


def build_repository(config: ServiceConfig) -> SecurityRepository:
    if config.state_file:
        return JsonFileSecurityRepository(config.state_file)
    return InMemorySecurityRepository()


def build_image_service(config: ServiceConfig) -> ImageService:
    if config.image_service == "yolo":
        # Import here so ultralytics stays optional
        from .hardware.yolo_cat_detector import YoloImageService
        return YoloImageService(model_name=config.yolo_model, device=config.device)
    return FakeImageService()


def build_security_service(config: ServiceConfig) -> tuple[SecurityService, EventLogListener]:
    """Wire a SecurityService and return it with its event log listener."""
    service = SecurityService(build_repository(config), build_image_service(config))
    event_log = EventLogListener(max_events=config.event_log_size)
    service.add_status_listener(event_log)
    service.add_status_listener(LoggingStatusListener())
    return service, event_log
