"""
Status Notifier - subscriber registry and fan-out

Four notification kinds are delivered synchronously to every current
subscriber: alarm status, cat detection, sensor change, arming status.
Delivery order follows set iteration and carries no meaning.
"""

from abc import ABC, abstractmethod

from ..domain.enums import AlarmStatus, ArmingStatus


class StatusListener(ABC):
    """A component notified whenever the system status changes."""

    @abstractmethod
    def notify(self, status: AlarmStatus) -> None:
        pass

    @abstractmethod
    def cat_detected(self, cat_detected: bool) -> None:
        pass

    @abstractmethod
    def sensor_status_changed(self) -> None:
        pass

    @abstractmethod
    def arming_status_changed(self, status: ArmingStatus) -> None:
        pass


class StatusNotifier:
    """Set of listeners keyed by identity.

    Adding a listener twice keeps one registration; removing an unknown
    listener does nothing. Each dispatch iterates a snapshot, so a listener
    may unsubscribe itself from inside a callback. Listener exceptions
    propagate to the caller.
    """

    def __init__(self):
        self._listeners: set[StatusListener] = set()

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: StatusListener) -> bool:
        return listener in self._listeners

    def add(self, listener: StatusListener) -> None:
        self._listeners.add(listener)

    def remove(self, listener: StatusListener) -> None:
        self._listeners.discard(listener)

    def alarm_status_changed(self, status: AlarmStatus) -> None:
        for listener in list(self._listeners):
            listener.notify(status)

    def cat_detected(self, cat_detected: bool) -> None:
        for listener in list(self._listeners):
            listener.cat_detected(cat_detected)

    def sensor_status_changed(self) -> None:
        for listener in list(self._listeners):
            listener.sensor_status_changed()

    def arming_status_changed(self, status: ArmingStatus) -> None:
        for listener in list(self._listeners):
            listener.arming_status_changed(status)
