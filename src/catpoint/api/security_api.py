"""
Security API - 安防控制接口

REST endpoints that forward panel commands into the SecurityService:
- Arming / alarm status
- Sensor management and activation
- Camera image submission
- Recent status notifications
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from ..domain.enums import AlarmStatus, ArmingStatus, SensorType
from ..domain.models import Sensor
from ..services.listeners import EventLogListener
from ..services.security_service import SecurityService


# Create router
security_router = APIRouter(prefix="/api", tags=["security"])


# =============================================================================
# Request/Response Models
# =============================================================================

class ArmingRequest(BaseModel):
    arming_status: ArmingStatus


class AlarmRequest(BaseModel):
    alarm_status: AlarmStatus


class SensorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    sensor_type: SensorType


class SensorActivation(BaseModel):
    active: bool


class StatusResponse(BaseModel):
    alarm_status: AlarmStatus
    alarm_description: str
    arming_status: ArmingStatus
    arming_description: str
    sensors_total: int
    sensors_active: int


class ImageResponse(BaseModel):
    alarm_status: AlarmStatus
    cat_detected: bool


# =============================================================================
# Service wiring
# =============================================================================

_service: Optional[SecurityService] = None
_event_log: Optional[EventLogListener] = None


def set_service(service: SecurityService, event_log: Optional[EventLogListener] = None):
    """Attach the service instance the endpoints forward to."""
    global _service, _event_log
    _service = service
    _event_log = event_log


def get_service() -> SecurityService:
    if _service is None:
        raise HTTPException(status_code=500, detail="Security service not initialized")
    return _service


def _status_response(service: SecurityService) -> StatusResponse:
    alarm = service.get_alarm_status()
    arming = service.get_arming_status()
    sensors = service.get_sensors()
    return StatusResponse(
        alarm_status=alarm,
        alarm_description=alarm.description,
        arming_status=arming,
        arming_description=arming.description,
        sensors_total=len(sensors),
        sensors_active=sum(1 for s in sensors if s.active),
    )


# =============================================================================
# Status Endpoints
# =============================================================================

@security_router.get("/status", response_model=StatusResponse)
async def get_status():
    """Current alarm and arming status with sensor counts."""
    return _status_response(get_service())


@security_router.post("/arming", response_model=StatusResponse)
async def set_arming(request: ArmingRequest):
    service = get_service()
    await run_in_threadpool(service.set_arming_status, request.arming_status)
    return _status_response(service)


@security_router.post("/alarm", response_model=StatusResponse)
async def set_alarm(request: AlarmRequest):
    """Manually set the alarm status."""
    service = get_service()
    await run_in_threadpool(service.set_alarm_status, request.alarm_status)
    return _status_response(service)


# =============================================================================
# Sensor Endpoints
# =============================================================================

@security_router.get("/sensors")
async def list_sensors():
    """List all sensors, sorted by name."""
    service = get_service()
    return {"sensors": [s.model_dump(mode="json") for s in sorted(service.get_sensors())]}


@security_router.post("/sensors", status_code=201)
async def create_sensor(request: SensorCreate):
    service = get_service()
    sensor = Sensor(name=request.name, sensor_type=request.sensor_type)
    await run_in_threadpool(service.add_sensor, sensor)
    return sensor.model_dump(mode="json")


@security_router.patch("/sensors/{sensor_id}")
async def change_sensor_activation(sensor_id: str, request: SensorActivation):
    """Activate or deactivate a sensor."""
    service = get_service()
    sensor = service.get_sensor(sensor_id)
    await run_in_threadpool(service.change_sensor_activation_status, sensor, request.active)
    return {
        "sensor": sensor.model_dump(mode="json"),
        "alarm_status": service.get_alarm_status().value,
    }


@security_router.delete("/sensors/{sensor_id}")
async def delete_sensor(sensor_id: str):
    service = get_service()
    sensor = service.get_sensor(sensor_id)
    await run_in_threadpool(service.remove_sensor, sensor)
    return {"status": "deleted", "sensor_id": sensor_id}


@security_router.delete("/sensors")
async def delete_all_sensors():
    service = get_service()
    sensors = service.get_sensors()
    await run_in_threadpool(service.remove_all_sensors, sensors)
    return {"status": "deleted", "count": len(sensors)}


# =============================================================================
# Camera Endpoint
# =============================================================================

@security_router.post("/camera/image", response_model=ImageResponse)
async def process_camera_image(request: Request):
    """Submit an encoded camera image (request body) for cat detection."""
    service = get_service()
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Empty image body")

    cat_detected = await run_in_threadpool(service.process_image, body)
    return ImageResponse(alarm_status=service.get_alarm_status(), cat_detected=cat_detected)


# =============================================================================
# Event Log
# =============================================================================

@security_router.get("/events")
async def get_events(limit: int = 50):
    if _event_log is None:
        return {"events": []}
    return {"events": _event_log.get_events(limit)}
