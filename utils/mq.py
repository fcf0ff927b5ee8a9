"""
Broker Channels - {headers, body} messages over Redis Pub/Sub

Every message on a channel, inbound or outbound, is one JSON object:

    {"headers": {"Origin-System-Id": "...", "X-Request-Id": "...", ...}, "body": "<string>"}

(see utils.schemas.BrokerMessage). RedisPublisher encodes and sends such
messages with retries; RedisSubscriber decodes them and hands them to an async
handler strictly one after the other. Connections time out after
REDIS_CONNECT_TIMEOUT / REDIS_SOCKET_TIMEOUT seconds so health probes fail fast
against an unreachable broker.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import orjson
import redis.asyncio as redis
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from utils.config import settings

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str, dict[str, Any]], Awaitable[None]]


def create_client(redis_url: str, socket_timeout: Optional[float] = None) -> redis.Redis:
    """Build a pooled Redis client.

    Args:
        redis_url: Redis connection URL
        socket_timeout: Read/write timeout in seconds, None to block on reads
    """
    return redis.from_url(
        redis_url,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
        socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        socket_timeout=socket_timeout,
        decode_responses=False,  # bytes go straight to orjson
    )


class RedisPublisher:
    """Sends {headers, body} messages to a channel."""

    def __init__(self, redis_url: Optional[str] = None) -> None:
        self.redis_url = redis_url or settings.REDIS_URL
        self.client: Optional[redis.Redis] = None

    async def connect(self) -> None:
        if self.client is None:
            self.client = create_client(self.redis_url, socket_timeout=settings.REDIS_SOCKET_TIMEOUT)

    @retry(
        retry=retry_if_exception_type((redis.RedisError, redis.ConnectionError, redis.TimeoutError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
    )
    async def publish(self, channel: str, message: dict[str, Any]) -> int:
        """Publish a message, retrying broker errors.

        Args:
            channel: Redis channel name
            message: {headers, body} dict, JSON-encoded with orjson

        Returns:
            Number of subscribers that received the message

        Raises:
            redis.RedisError: If publishing fails after retries
        """
        await self.connect()
        return await self.client.publish(channel, orjson.dumps(message))

    async def ping(self) -> bool:
        """True if the broker answered PING within the configured timeouts."""
        await self.connect()
        try:
            return bool(await self.client.ping())
        except redis.RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None


class RedisSubscriber:
    """Receives {headers, body} messages and dispatches them in delivery order."""

    def __init__(self, channels: list[str], redis_url: Optional[str] = None) -> None:
        """Initialize Redis subscriber.

        Args:
            channels: List of channels to subscribe to
            redis_url: Redis connection URL, defaults to settings.REDIS_URL
        """
        self.redis_url = redis_url or settings.REDIS_URL
        self.channels = channels
        self.client: Optional[redis.Redis] = None
        self.pubsub: Optional[redis.client.PubSub] = None
        self._stop_event = asyncio.Event()

    async def connect(self) -> None:
        """Connect and subscribe to the channels."""
        if self.client is None:
            # Idle subscriptions must not time out on reads
            self.client = create_client(self.redis_url)

        self.pubsub = self.client.pubsub()
        await self.pubsub.subscribe(*self.channels)

    async def _next_message(self) -> Optional[tuple[str, Any]]:
        """Poll once; returns (channel, decoded message) or None."""
        message = await asyncio.wait_for(
            self.pubsub.get_message(ignore_subscribe_messages=True),
            timeout=1.0,
        )
        if not message or message["type"] != "message":
            return None

        try:
            return message["channel"].decode("utf-8"), orjson.loads(message["data"])
        except (orjson.JSONDecodeError, UnicodeDecodeError, KeyError) as e:
            logger.warning(
                "Failed to decode message, skipping",
                extra={"error": str(e), "raw_data": message.get("data")},
            )
            return None

    async def subscribe(self, handler: MessageHandler) -> None:
        """Dispatch messages to handler until stop() is called.

        The stop flag is only checked between messages, so a message being
        handled when stop() is called is always completed.

        Args:
            handler: Async callback function(channel, message)
        """
        if self.pubsub is None:
            await self.connect()

        try:
            while not self._stop_event.is_set():
                try:
                    received = await self._next_message()
                    if received is not None:
                        await handler(*received)
                except asyncio.TimeoutError:
                    pass
                except redis.RedisError as e:
                    logger.error("Redis error during subscription", extra={"error": str(e)})
                    await asyncio.sleep(1)

                await asyncio.sleep(0.01)

        except Exception as e:
            logger.error("Subscription loop failed", extra={"error": str(e)})
            raise

    def stop(self) -> None:
        self._stop_event.set()

    async def close(self) -> None:
        """Unsubscribe and close the connection."""
        try:
            if self.pubsub:
                await self.pubsub.unsubscribe(*self.channels)
                await self.pubsub.aclose()
                self.pubsub = None
        finally:
            if self.client:
                await self.client.aclose()
                self.client = None
