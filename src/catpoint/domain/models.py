"""
Catpoint Core Models

Data models for sensors and the persisted security state.
Uses Pydantic for validation and serialization.
"""

import uuid

from pydantic import BaseModel, Field

from .enums import AlarmStatus, ArmingStatus, SensorType


# =============================================================================
# Sensor Model
# =============================================================================

class Sensor(BaseModel):
    """Binary-state input device monitored while armed.

    Identity is ``sensor_id`` only: two sensors with the same name are
    distinct entries in the registry, and a stored copy of a sensor
    compares equal to the caller's instance.
    """
    sensor_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    sensor_type: SensorType
    active: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sensor):
            return NotImplemented
        return self.sensor_id == other.sensor_id

    def __hash__(self) -> int:
        return hash(self.sensor_id)

    def __lt__(self, other: "Sensor") -> bool:
        return (self.name, self.sensor_id) < (other.name, other.sensor_id)


# =============================================================================
# Persisted State
# =============================================================================

class SecurityState(BaseModel):
    """Snapshot of everything the persistence store owns."""
    alarm_status: AlarmStatus = AlarmStatus.NO_ALARM
    arming_status: ArmingStatus = ArmingStatus.DISARMED
    sensors: list[Sensor] = Field(default_factory=list)
