"""
Catpoint Exceptions

Contract violations (bad status value, unknown sensor) and collaborator
failures (store, classifier) are raised to the caller; nothing here is
retried or defaulted by the engine.
"""


class CatpointError(Exception):
    """Base class for all engine errors."""


class InvalidStatusError(CatpointError, ValueError):
    """An alarm or arming value outside its enumerated set."""


class SensorNotFoundError(CatpointError, KeyError):
    """A sensor that is not in the registry was passed to the engine."""

    def __init__(self, sensor_id: str):
        super().__init__(sensor_id)
        self.sensor_id = sensor_id

    def __str__(self) -> str:
        return f"Sensor {self.sensor_id} is not registered"


class RepositoryError(CatpointError):
    """The persistence store could not be read or written."""


class ImageClassificationError(CatpointError):
    """The image classifier failed to produce a verdict."""


class InvalidImageError(CatpointError, ValueError):
    """The submitted image could not be decoded into a frame."""
