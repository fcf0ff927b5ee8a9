"""
Video Mapper Entry Point

Allows execution via: python -m apps.video_mapper

Runs the Redis consumer and the HTTP API (POST /map, /__health, /__gtg) in one
process. Logging is configured here and handed to every component.

Usage:
    # Consumer + API (default)
    python -m apps.video_mapper

    # For development/testing
    RUN_ONCE=true python -m apps.video_mapper
"""

import asyncio
import sys

import uvicorn

from apps.video_mapper.consumer import VideoMapperConsumer
from apps.video_mapper.mapper import VideoMapper
from apps.video_mapper.publisher import ContentPublisher
from services.api.app import create_app
from services.api.health import HealthChecker
from utils.config import settings
from utils.logging import get_logger, setup_logging


async def main() -> None:
    """Main entry point for the video mapper."""
    setup_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)
    logger = get_logger("apps.video_mapper")

    mapper = VideoMapper(logger=get_logger("apps.video_mapper.mapper"))
    publisher = ContentPublisher(logger=get_logger("apps.video_mapper.publisher"))
    consumer = VideoMapperConsumer(
        mapper=mapper,
        publisher=publisher,
        logger=get_logger("apps.video_mapper.consumer"),
        run_once=settings.RUN_ONCE,
    )

    app = create_app(
        mapper=mapper,
        health_checker=HealthChecker(publisher.ping),
        logger=get_logger("services.api"),
    )
    server = uvicorn.Server(
        uvicorn.Config(app, host=settings.API_HOST, port=settings.API_PORT, log_config=None)
    )

    logger.info("Starting to listen on port [%d]", settings.API_PORT)
    server_task = asyncio.create_task(server.serve())

    try:
        await consumer.start()
    except Exception as e:
        logger.error("Video mapper failed", extra={"error": str(e)}, exc_info=True)
        sys.exit(1)
    finally:
        server.should_exit = True
        await server_task
        await publisher.close()


if __name__ == "__main__":
    asyncio.run(main())
