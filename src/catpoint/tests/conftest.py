"""Shared fixtures for Catpoint tests"""

from unittest.mock import Mock

import pytest

from catpoint.domain.enums import AlarmStatus, ArmingStatus, SensorType
from catpoint.domain.models import Sensor
from catpoint.services.image_service import ImageService
from catpoint.services.repository import InMemorySecurityRepository
from catpoint.services.security_service import SecurityService
from catpoint.services.status_notifier import StatusListener


class RecordingListener(StatusListener):
    """Records every notification as a (kind, value) tuple."""

    def __init__(self):
        self.calls = []

    def notify(self, status: AlarmStatus) -> None:
        self.calls.append(("alarm", status))

    def cat_detected(self, cat_detected: bool) -> None:
        self.calls.append(("cat", cat_detected))

    def sensor_status_changed(self) -> None:
        self.calls.append(("sensor", None))

    def arming_status_changed(self, status: ArmingStatus) -> None:
        self.calls.append(("arming", status))

    def of_kind(self, kind: str) -> list:
        return [value for k, value in self.calls if k == kind]


@pytest.fixture
def repository():
    return InMemorySecurityRepository()


@pytest.fixture
def image_service():
    service = Mock(spec=ImageService)
    service.image_contains_cat.return_value = False
    return service


@pytest.fixture
def security_service(repository, image_service):
    return SecurityService(repository, image_service)


@pytest.fixture
def sensor(security_service):
    sensor = Sensor(name="Front Door", sensor_type=SensorType.DOOR)
    security_service.add_sensor(sensor)
    return sensor


@pytest.fixture
def listener(security_service):
    listener = RecordingListener()
    security_service.add_status_listener(listener)
    return listener


@pytest.fixture
def make_listener():
    return RecordingListener
