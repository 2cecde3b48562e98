"""
Security Repository - persistence store for alarm state

Stores implement the contract the engine reads and writes through:
- InMemorySecurityRepository: process-local state, for tests and demos
- JsonFileSecurityRepository: whole state written to a JSON file on every change
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from ..domain.enums import AlarmStatus, ArmingStatus
from ..domain.models import SecurityState, Sensor
from ..exceptions import RepositoryError, SensorNotFoundError

logger = logging.getLogger(__name__)


# =============================================================================
# Repository 抽象基类
# =============================================================================

class SecurityRepository(ABC):
    """Owner of alarm status, arming status and the sensor registry."""

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        pass

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        pass

    @abstractmethod
    def get_sensors(self) -> set[Sensor]:
        """Return the registered sensors. No ordering is implied."""
        pass

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Persist the sensor's current ``active`` flag."""
        pass

    def get_sensor(self, sensor_id: str) -> Optional[Sensor]:
        for sensor in self.get_sensors():
            if sensor.sensor_id == sensor_id:
                return sensor
        return None


# =============================================================================
# In-Memory Repository
# =============================================================================

class InMemorySecurityRepository(SecurityRepository):
    """Keeps state in process memory. Starts at NO_ALARM / DISARMED.

    Every mutation builds the next SecurityState and hands it to
    ``_save()`` first; in-memory fields change only after it returns.
    """

    def __init__(self, state: Optional[SecurityState] = None):
        state = state or SecurityState()
        self._alarm_status = state.alarm_status
        self._arming_status = state.arming_status
        self._sensors: dict[str, Sensor] = {s.sensor_id: s for s in state.sensors}

    def get_alarm_status(self) -> AlarmStatus:
        return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._save(self._next_state(alarm_status=alarm_status))
        self._alarm_status = alarm_status

    def get_arming_status(self) -> ArmingStatus:
        return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._save(self._next_state(arming_status=arming_status))
        self._arming_status = arming_status

    def get_sensors(self) -> set[Sensor]:
        return set(self._sensors.values())

    def get_sensor(self, sensor_id: str) -> Optional[Sensor]:
        return self._sensors.get(sensor_id)

    def add_sensor(self, sensor: Sensor) -> None:
        sensors = {**self._sensors, sensor.sensor_id: sensor}
        self._save(self._next_state(sensors=sorted(sensors.values())))
        self._sensors = sensors

    def remove_sensor(self, sensor: Sensor) -> None:
        # Removing an unknown sensor is a no-op
        if sensor.sensor_id not in self._sensors:
            return
        sensors = {k: v for k, v in self._sensors.items() if k != sensor.sensor_id}
        self._save(self._next_state(sensors=sorted(sensors.values())))
        self._sensors = sensors

    def update_sensor(self, sensor: Sensor) -> None:
        stored = self._sensors.get(sensor.sensor_id)
        if stored is None:
            raise SensorNotFoundError(sensor.sensor_id)
        sensors = {**self._sensors, sensor.sensor_id: stored.model_copy(update={"active": sensor.active})}
        self._save(self._next_state(sensors=sorted(sensors.values())))
        # Registered object keeps its identity
        stored.active = sensor.active

    def snapshot(self) -> SecurityState:
        return SecurityState(
            alarm_status=self._alarm_status,
            arming_status=self._arming_status,
            sensors=sorted(self._sensors.values()),
        )

    def _next_state(self, **changes) -> SecurityState:
        return self.snapshot().model_copy(update=changes)

    def _save(self, state: SecurityState) -> None:
        """Hook for durable subclasses; memory needs no flush."""


# =============================================================================
# JSON File Repository
# =============================================================================

class JsonFileSecurityRepository(InMemorySecurityRepository):
    """
    JSON 文件持久化

    The full SecurityState is rewritten after every mutation. Writes go
    to a temp file in the same directory and are moved into place, so a
    crash never leaves a half-written state file. A failed write leaves
    both the file and the in-memory state as they were.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> SecurityState:
        if not self.path.exists():
            logger.info("No state file at %s, starting from defaults", self.path)
            return SecurityState()
        try:
            state = SecurityState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise RepositoryError(f"Failed to load state from {self.path}: {e}") from e
        logger.info(
            "Loaded state from %s: alarm=%s arming=%s sensors=%d",
            self.path, state.alarm_status.value, state.arming_status.value, len(state.sensors),
        )
        return state

    def _save(self, state: SecurityState) -> None:
        payload = state.model_dump_json(indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".state_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write state to %s: %s", self.path, e)
            raise RepositoryError(f"Failed to write state to {self.path}: {e}") from e
        logger.debug("Saved state to %s", self.path)
