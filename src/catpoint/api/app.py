"""
Catpoint API application

Builds the FastAPI app around an already wired SecurityService and maps
engine exceptions to HTTP status codes.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..exceptions import (
    ImageClassificationError,
    InvalidImageError,
    InvalidStatusError,
    RepositoryError,
    SensorNotFoundError,
)
from ..services.listeners import EventLogListener
from ..services.security_service import SecurityService
from .security_api import security_router, set_service

logger = logging.getLogger(__name__)


def create_app(
    service: SecurityService,
    event_log: Optional[EventLogListener] = None,
) -> FastAPI:
    app = FastAPI(
        title="Catpoint Security",
        description="Arming, sensor and camera control for the Catpoint alarm engine",
        version="1.0.0",
    )
    set_service(service, event_log)
    app.include_router(security_router)

    @app.exception_handler(SensorNotFoundError)
    async def sensor_not_found(request: Request, exc: SensorNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidStatusError)
    async def invalid_status(request: Request, exc: InvalidStatusError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(InvalidImageError)
    async def invalid_image(request: Request, exc: InvalidImageError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ImageClassificationError)
    async def classification_failed(request: Request, exc: ImageClassificationError):
        logger.error("Image classification failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(RepositoryError)
    async def repository_failed(request: Request, exc: RepositoryError):
        logger.error("Repository failure: %s", exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app
