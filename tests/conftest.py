"""Global test fixtures."""

import logging
from unittest.mock import AsyncMock

import pytest

from apps.video_mapper.mapper import BRIGHTCOVE_ORIGIN, VideoMapper
from apps.video_mapper.publisher import ContentPublisher


@pytest.fixture
def native_video() -> dict:
    """Native Brightcove video record."""
    return {
        "uuid": "abc-1",
        "id": "999",
        "updated_at": "2020-01-01T00:00:00Z",
        "name": "clip.mp4",
        "duration": 12000,
    }


@pytest.fixture
def brightcove_headers() -> dict[str, str]:
    return {
        "Origin-System-Id": BRIGHTCOVE_ORIGIN,
        "X-Request-Id": "req-1",
        "Message-Timestamp": "ts-1",
        "Content-Type": "application/json",
    }


@pytest.fixture
def mapper_logger() -> logging.Logger:
    return logging.getLogger("tests.video_mapper")


@pytest.fixture
def mapper(mapper_logger: logging.Logger) -> VideoMapper:
    return VideoMapper(logger=mapper_logger)


@pytest.fixture
def redis_publisher() -> AsyncMock:
    """Stand-in for utils.mq.RedisPublisher."""
    publisher = AsyncMock()
    publisher.publish = AsyncMock(return_value=1)
    publisher.ping = AsyncMock(return_value=True)
    return publisher


@pytest.fixture
def content_publisher(redis_publisher: AsyncMock, mapper_logger: logging.Logger) -> ContentPublisher:
    return ContentPublisher(
        publisher=redis_publisher,
        channel="CmsPublicationEvents",
        logger=mapper_logger,
    )
