"""
Catpoint Security Service - alarm decision engine

Receives arming commands, sensor activation changes and camera images,
decides the resulting AlarmStatus and forwards every change to the
repository and to status listeners.

Key rules:
1. Disarming forces NO_ALARM
2. Arming (home/away) resets every sensor to inactive before the new
   arming status is stored
3. Sensor changes are ignored while in ALARM; activation escalates
   NO_ALARM → PENDING_ALARM → ALARM, deactivation steps back down
4. A cat seen while ARMED_HOME goes straight to ALARM; otherwise the
   image verdict resets status from the sensor states alone
"""

import logging
import threading
from collections.abc import Iterable
from typing import Any

from ..domain.enums import AlarmStatus, ArmingStatus
from ..domain.models import Sensor
from ..exceptions import InvalidStatusError, SensorNotFoundError
from .image_service import ImageService
from .repository import SecurityRepository
from .status_notifier import StatusListener, StatusNotifier

logger = logging.getLogger(__name__)

CAT_CONFIDENCE_THRESHOLD = 50.0


class SecurityService:
    """Alarm state machine over a SecurityRepository.

    State is never cached: every decision re-reads the repository. Each
    public operation holds one re-entrant lock for its whole duration,
    including listener callbacks.
    """

    def __init__(self, security_repository: SecurityRepository, image_service: ImageService):
        self.security_repository = security_repository
        self.image_service = image_service
        self._notifier = StatusNotifier()
        self._lock = threading.RLock()

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_status_listener(self, listener: StatusListener) -> None:
        with self._lock:
            self._notifier.add(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        with self._lock:
            self._notifier.remove(listener)

    # =========================================================================
    # Commands
    # =========================================================================

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Set the arming status, updating alarm status and sensors as needed."""
        if not isinstance(arming_status, ArmingStatus):
            raise InvalidStatusError(f"Invalid arming status: {arming_status!r}")

        with self._lock:
            if arming_status == ArmingStatus.DISARMED:
                self.set_alarm_status(AlarmStatus.NO_ALARM)
            elif arming_status in (ArmingStatus.ARMED_HOME, ArmingStatus.ARMED_AWAY):
                self._deactivate_all_sensors()

            previous = self.security_repository.get_arming_status()
            self.security_repository.set_arming_status(arming_status)
            logger.info("Arming status %s → %s", previous.value, arming_status.value)
            self._notifier.arming_status_changed(arming_status)

    def set_alarm_status(self, status: AlarmStatus) -> None:
        """Store the alarm status and notify listeners.

        Every alarm status change goes through here.
        """
        if not isinstance(status, AlarmStatus):
            raise InvalidStatusError(f"Invalid alarm status: {status!r}")

        with self._lock:
            previous = self.security_repository.get_alarm_status()
            self.security_repository.set_alarm_status(status)
            logger.info("Alarm status %s → %s", previous.value, status.value)
            self._notifier.alarm_status_changed(status)

    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> None:
        """Change a sensor's activation and update alarm status if necessary.

        The decision uses the stored flag as it was before this call.
        Re-activating an already active sensor escalates like a fresh
        activation.
        """
        with self._lock:
            stored = self.security_repository.get_sensor(sensor.sensor_id)
            if stored is None:
                raise SensorNotFoundError(sensor.sensor_id)
            was_active = stored.active

            if self.security_repository.get_alarm_status() == AlarmStatus.ALARM:
                logger.debug("Sensor %s change ignored for alarm status: already ALARM", sensor.name)
            elif active:
                self._handle_sensor_activated()
            elif was_active:
                self._handle_sensor_deactivated()

            self.security_repository.update_sensor(sensor.model_copy(update={"active": active}))
            sensor.active = active
            self._notifier.sensor_status_changed()

    def process_image(self, current_camera_image: Any) -> bool:
        """Classify a camera image and update alarm status from the verdict.

        Returns the verdict. Classifier failures propagate before any
        state is written.
        """
        with self._lock:
            cat = bool(self.image_service.image_contains_cat(current_camera_image, CAT_CONFIDENCE_THRESHOLD))
            self._cat_detected(cat)
            return cat

    # =========================================================================
    # Transition Rules
    # =========================================================================

    def _handle_sensor_activated(self) -> None:
        if self.security_repository.get_arming_status() == ArmingStatus.DISARMED:
            # no problem if the system is disarmed
            return

        status = self.security_repository.get_alarm_status()
        if status == AlarmStatus.NO_ALARM:
            self.set_alarm_status(AlarmStatus.PENDING_ALARM)
        elif status == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.ALARM)
        else:
            # ALARM stays ALARM
            logger.debug("Sensor activated while %s: unchanged", status.value)

    def _handle_sensor_deactivated(self) -> None:
        status = self.security_repository.get_alarm_status()
        if status == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.NO_ALARM)
        elif status == AlarmStatus.ALARM:
            self.set_alarm_status(AlarmStatus.PENDING_ALARM)
        else:
            # NO_ALARM stays NO_ALARM
            logger.debug("Sensor deactivated while %s: unchanged", status.value)

    def _cat_detected(self, cat: bool) -> None:
        if cat and self.security_repository.get_arming_status() == ArmingStatus.ARMED_HOME:
            logger.warning("Cat detected while armed home")
            self.set_alarm_status(AlarmStatus.ALARM)
        elif any(sensor.active for sensor in self.security_repository.get_sensors()):
            self.set_alarm_status(AlarmStatus.ALARM)
        else:
            self.set_alarm_status(AlarmStatus.NO_ALARM)

        self._notifier.cat_detected(cat)

    def _deactivate_all_sensors(self) -> None:
        for sensor in self.security_repository.get_sensors():
            if sensor.active:
                logger.debug("Resetting sensor %s to inactive on arm", sensor.name)
            self.security_repository.update_sensor(sensor.model_copy(update={"active": False}))
            sensor.active = False

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_alarm_status(self) -> AlarmStatus:
        return self.security_repository.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        return self.security_repository.get_arming_status()

    def get_sensors(self) -> frozenset[Sensor]:
        return frozenset(self.security_repository.get_sensors())

    def get_sensor(self, sensor_id: str) -> Sensor:
        sensor = self.security_repository.get_sensor(sensor_id)
        if sensor is None:
            raise SensorNotFoundError(sensor_id)
        return sensor

    def add_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self.security_repository.add_sensor(sensor)
            logger.info("Added %s sensor %s (%s)", sensor.sensor_type.value, sensor.name, sensor.sensor_id)

    def remove_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self.security_repository.remove_sensor(sensor)
            logger.info("Removed sensor %s (%s)", sensor.name, sensor.sensor_id)

    def remove_all_sensors(self, sensors: Iterable[Sensor]) -> None:
        with self._lock:
            for sensor in list(sensors):
                self.remove_sensor(sensor)
