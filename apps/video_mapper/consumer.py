"""
Video Mapper Consumer - Redis Pub/Sub Event Handler

Consumes native video publication messages from Redis Pub/Sub, maps the ones
originating from Brightcove and publishes the resulting publication events to
the content channel.

Features:
- Redis Pub/Sub subscription via production wrapper
- Origin filtering on the Origin-System-Id header
- One message at a time, in delivery order
- Graceful shutdown handling (in-flight message is completed)
- Structured logging
"""

import asyncio
import logging
import signal
from typing import Any, Dict

from pydantic import ValidationError

from apps.video_mapper.mapper import (
    BRIGHTCOVE_ORIGIN,
    ORIGIN_HEADER,
    REQUEST_ID_HEADER,
    VideoMapper,
    context_from_headers,
    parse_record,
)
from apps.video_mapper.publisher import ContentPublisher
from utils.config import settings
from utils.errors import MappingError
from utils.mq import RedisSubscriber
from utils.schemas import BrokerMessage


def _raw_header(message: Any, name: str) -> Any:
    headers = message.get("headers") if isinstance(message, dict) else None
    return headers.get(name) if isinstance(headers, dict) else None


class VideoMapperConsumer:
    """
    Consumer for native video messages from Redis Pub/Sub.

    Handles:
    - Redis subscription management
    - Origin filtering and mapping
    - Forwarding publication events to the content channel
    - Signal handling for graceful shutdown
    """

    def __init__(
        self,
        mapper: VideoMapper,
        publisher: ContentPublisher,
        logger: logging.Logger,
        subscriber: RedisSubscriber | None = None,
        run_once: bool = False,
    ) -> None:
        """
        Initialize video mapper consumer.

        Args:
            mapper: Shared video mapper
            publisher: Outbound content channel publisher
            logger: Logger owned by the process entry point
            subscriber: Redis subscriber, created on start() when omitted
            run_once: If True, process one message and exit (for testing)
        """
        self.mapper = mapper
        self.publisher = publisher
        self.logger = logger
        self.subscriber = subscriber
        self.run_once = run_once
        self.shutdown_event = asyncio.Event()
        self._processed_count = 0

        self.logger.info(
            "VideoMapperConsumer initialized",
            extra={
                "run_once": run_once,
                "source_channel": settings.REDIS_CHANNEL_NATIVE,
                "target_channel": self.publisher.channel,
            },
        )

    async def handle_message(self, channel: str, message: Dict[str, Any]) -> None:
        """
        Handle incoming Redis Pub/Sub message.

        Rejected messages are logged and dropped; they never stop the
        subscription loop and are not retried.

        Args:
            channel: Redis channel name
            message: Decoded message payload
        """
        # Origin is read from the raw headers so other systems' traffic is
        # dropped without being validated
        origin = _raw_header(message, ORIGIN_HEADER)
        if origin != BRIGHTCOVE_ORIGIN:
            self.logger.debug(
                "Ignoring message from other origin",
                extra={"channel": channel, "origin": origin},
            )
            return

        try:
            inbound = BrokerMessage.model_validate(message)
        except ValidationError as e:
            self.logger.warning(
                "Invalid broker message",
                extra={"channel": channel, "error": str(e)},
            )
            return

        try:
            event = self.map_message(inbound)
        except MappingError as e:
            self.logger.warning(
                "Mapping error: [%s]",
                e.message,
                extra={
                    "channel": channel,
                    "code": e.code,
                    "request_id": inbound.headers.get(REQUEST_ID_HEADER),
                },
            )
            return

        try:
            await self.publisher.publish(inbound.headers, event)
        except Exception as e:
            self.logger.error(
                "Failed to publish publication event",
                extra={
                    "channel": self.publisher.channel,
                    "request_id": inbound.headers.get(REQUEST_ID_HEADER),
                    "error": str(e),
                },
                exc_info=True,
            )
            return

        self._processed_count += 1

        # Signal shutdown if run_once mode
        if self.run_once:
            self.logger.info("RUN_ONCE mode: signaling shutdown after processing message")
            self.shutdown_event.set()

    def map_message(self, message: BrokerMessage) -> bytes:
        """
        Map a Brightcove broker message to a serialized publication event.

        Raises:
            MappingError: If the body, headers or fields are invalid
        """
        record = parse_record(message.body)
        context = context_from_headers(message.headers)
        return self.mapper.map_video(record, context)

    def setup_signal_handlers(self) -> None:
        """Setup handlers for graceful shutdown on SIGINT/SIGTERM."""

        def signal_handler(signum: int, frame: object) -> None:
            self.logger.info(f"Received signal {signum}, initiating graceful shutdown")
            self.shutdown_event.set()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    async def start(self) -> None:
        """
        Start consumer and process messages until shutdown signal.

        Connects to Redis, subscribes to the native channel, and processes
        messages until graceful shutdown is requested. On shutdown the
        subscriber is stopped and the message being handled, if any, is
        allowed to finish.
        """
        self.setup_signal_handlers()

        self.logger.info("Starting video mapper consumer")

        if self.subscriber is None:
            self.subscriber = RedisSubscriber(channels=[settings.REDIS_CHANNEL_NATIVE])

        try:
            await self.subscriber.connect()
            self.logger.info(
                "Connected to Redis and subscribed to channel",
                extra={"channel": settings.REDIS_CHANNEL_NATIVE},
            )

            subscription_task = asyncio.create_task(
                self.subscriber.subscribe(self.handle_message)
            )
            shutdown_task = asyncio.create_task(self.shutdown_event.wait())

            self.logger.info("Consumer started, waiting for messages...")

            await asyncio.wait(
                [shutdown_task, subscription_task],
                return_when=asyncio.FIRST_COMPLETED,
            )

            self.subscriber.stop()
            shutdown_task.cancel()
            # Let the in-flight message finish; surfaces subscription failures
            await subscription_task

            self.logger.info(
                "Consumer shutdown complete",
                extra={"processed_messages": self._processed_count},
            )

        except Exception as e:
            self.logger.error("Consumer failed", extra={"error": str(e)}, exc_info=True)
            raise

        finally:
            # Graceful cleanup
            if self.subscriber:
                self.subscriber.stop()
                await self.subscriber.close()
                self.logger.info("Redis subscriber connection closed")
