"""
Built-in status listeners

- LoggingStatusListener: writes every notification to the log
- EventLogListener: keeps the most recent notifications for the HTTP API
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

from ..domain.enums import AlarmStatus, ArmingStatus
from .status_notifier import StatusListener

logger = logging.getLogger(__name__)


class LoggingStatusListener(StatusListener):
    """Logs each notification on the ``catpoint.events`` logger."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logging.getLogger("catpoint.events")

    def notify(self, status: AlarmStatus) -> None:
        if status == AlarmStatus.ALARM:
            self.log.warning("ALARM: %s", status.description)
        else:
            self.log.info("Alarm status: %s (%s)", status.value, status.description)

    def cat_detected(self, cat_detected: bool) -> None:
        self.log.info("Camera verdict: %s", "cat detected" if cat_detected else "no cat")

    def sensor_status_changed(self) -> None:
        self.log.debug("Sensor status changed")

    def arming_status_changed(self, status: ArmingStatus) -> None:
        self.log.info("Arming status: %s", status.description)


class EventLogListener(StatusListener):
    """Bounded, thread-safe record of recent notifications."""

    def __init__(self, max_events: int = 200):
        self._events: deque[dict[str, Any]] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def _append(self, event_type: str, message: str, **fields: Any) -> None:
        entry = {
            "type": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": message,
            **fields,
        }
        with self._lock:
            self._events.append(entry)

    def notify(self, status: AlarmStatus) -> None:
        self._append("alarm_status", f"Alarm status: {status.description}", alarm_status=status.value)

    def cat_detected(self, cat_detected: bool) -> None:
        message = "Cat detected" if cat_detected else "No cat detected"
        self._append("cat_detected", message, cat_detected=cat_detected)

    def sensor_status_changed(self) -> None:
        self._append("sensor_status", "Sensor status changed")

    def arming_status_changed(self, status: ArmingStatus) -> None:
        self._append("arming_status", f"Arming status: {status.description}", arming_status=status.value)

    def get_events(self, limit: Optional[int] = None) -> list[dict[str, Any]]:
        """Newest last."""
        with self._lock:
            events = list(self._events)
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
