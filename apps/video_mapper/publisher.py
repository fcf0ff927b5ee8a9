"""
Event Publisher for Video Mapper

Publishes mapped publication events to the content channel on Redis Pub/Sub.

Features:
- Redis Pub/Sub integration via production wrapper
- Inbound message headers forwarded verbatim
- Structured logging

Usage:
    from apps.video_mapper.publisher import ContentPublisher

    publisher = ContentPublisher()
    await publisher.publish(headers, event_bytes)
"""

import logging
from typing import Mapping

from utils.config import settings
from utils.mq import RedisPublisher
from utils.schemas import BrokerMessage


class ContentPublisher:
    """Sends publication events to the outbound content channel."""

    def __init__(
        self,
        publisher: RedisPublisher | None = None,
        channel: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.publisher = publisher or RedisPublisher()
        self.channel = channel or settings.REDIS_CHANNEL_CONTENT
        self.logger = logger or logging.getLogger(__name__)

    async def publish(self, headers: Mapping[str, str], event: bytes) -> None:
        """
        Publish a serialized publication event.

        Args:
            headers: Headers of the inbound message, forwarded unchanged
            event: Publication event JSON bytes

        Raises:
            redis.RedisError: If publishing fails after retries
        """
        message = BrokerMessage(headers=dict(headers), body=event.decode("utf-8"))

        receivers = await self.publisher.publish(self.channel, message.model_dump())

        self.logger.info(
            "Published publication event",
            extra={
                "channel": self.channel,
                "request_id": headers.get("X-Request-Id"),
                "receivers": receivers,
            },
        )

    async def ping(self) -> bool:
        return await self.publisher.ping()

    async def close(self) -> None:
        await self.publisher.close()
