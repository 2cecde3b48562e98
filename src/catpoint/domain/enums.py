"""
Catpoint Core Enums

This module defines the status enumerations shared by the engine,
the stores and the HTTP layer. Values are the persisted/wire form.
"""

from enum import Enum


# =============================================================================
# Alarm Status
# =============================================================================

class AlarmStatus(str, Enum):
    """Three-level severity of the current security condition."""
    NO_ALARM = "no_alarm"
    PENDING_ALARM = "pending_alarm"
    ALARM = "alarm"

    @property
    def description(self) -> str:
        return _ALARM_DESCRIPTIONS[self]


_ALARM_DESCRIPTIONS = {
    AlarmStatus.NO_ALARM: "Cool and Good",
    AlarmStatus.PENDING_ALARM: "I'm in Danger...",
    AlarmStatus.ALARM: "Awooga!",
}


# =============================================================================
# Arming Status
# =============================================================================

class ArmingStatus(str, Enum):
    """Whether the system is disarmed or armed (home/away)."""
    DISARMED = "disarmed"
    ARMED_HOME = "armed_home"
    ARMED_AWAY = "armed_away"

    @property
    def description(self) -> str:
        return _ARMING_DESCRIPTIONS[self]

    def is_armed(self) -> bool:
        return self != ArmingStatus.DISARMED


_ARMING_DESCRIPTIONS = {
    ArmingStatus.DISARMED: "Disarmed",
    ArmingStatus.ARMED_HOME: "Armed - At Home",
    ArmingStatus.ARMED_AWAY: "Armed - Away",
}


# =============================================================================
# Sensor Type
# =============================================================================

class SensorType(str, Enum):
    """Physical kind of a binary sensor."""
    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"
