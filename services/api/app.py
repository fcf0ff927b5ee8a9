"""
Video Mapper API - FastAPI Application

Endpoints:
- POST /map - Map a native Brightcove video JSON body to a publication event
- GET /__health - Health document (broker connectivity)
- GET /__gtg - Good-to-go probe
"""

import logging

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from apps.video_mapper.mapper import VideoMapper, context_from_headers, parse_record
from services.api import health
from services.api.errors import map_mapping_error
from utils.config import settings
from utils.errors import MappingError

router = APIRouter()


@router.post("/map")
async def map_video(request: Request) -> Response:
    mapper: VideoMapper = request.app.state.mapper

    record = parse_record(await request.body())
    context = context_from_headers(request.headers)
    event = mapper.map_video(record, context)

    return Response(content=event, media_type="application/json")


def create_app(
    mapper: VideoMapper,
    health_checker: health.HealthChecker,
    logger: logging.Logger,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        mapper: Shared video mapper
        health_checker: Broker connectivity checker behind /__health and /__gtg
        logger: Logger owned by the process entry point
    """
    app_instance = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
    )
    app_instance.state.mapper = mapper
    app_instance.state.health_checker = health_checker

    app_instance.include_router(router)
    app_instance.include_router(health.router)

    @app_instance.exception_handler(MappingError)
    async def mapping_error_handler(request: Request, exc: MappingError):
        logger.warning(
            "Rejected %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            extra={"code": exc.code, "request_id": request.headers.get("X-Request-Id")},
        )
        return map_mapping_error(exc)

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance
