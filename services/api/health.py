"""
Health Checks - /__health and /__gtg

Both probes delegate to the broker: the service is healthy and good to go
when Redis answers PING.
"""

import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from utils.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

BrokerCheck = Callable[[], Awaitable[bool]]


class HealthChecker:
    """Runs the broker connectivity check and renders health documents."""

    def __init__(self, broker_check: BrokerCheck) -> None:
        self.broker_check = broker_check

    async def broker_reachable(self) -> bool:
        try:
            return await self.broker_check()
        except Exception as e:
            logger.warning("Broker connectivity check failed: %s", e)
            return False

    async def health(self) -> dict[str, Any]:
        """FT-style health document."""
        reachable = await self.broker_reachable()
        check = {
            "id": "message-queue-reachable",
            "name": "Message queue reachable",
            "ok": reachable,
            "severity": 1,
            "businessImpact": "Videos published in Brightcove will not reach the content platform",
            "technicalSummary": "Checks the Redis broker answers PING. "
            "Native video messages cannot be consumed nor publication events produced without it.",
            "panicGuide": "Check the broker at REDIS_URL is running and reachable from the service.",
            "checkOutput": "OK" if reachable else f"Redis at {settings.REDIS_URL} is unreachable",
        }
        return {
            "schemaVersion": 1,
            "systemCode": settings.APP_NAME,
            "name": settings.APP_NAME,
            "description": settings.APP_DESCRIPTION,
            "checks": [check],
            "ok": reachable,
        }


def _checker(request: Request) -> HealthChecker:
    return request.app.state.health_checker


@router.get("/__health")
async def health(request: Request):
    return await _checker(request).health()


@router.get("/__gtg")
async def gtg(request: Request) -> Response:
    if await _checker(request).broker_reachable():
        return PlainTextResponse("OK")
    return PlainTextResponse("Service unavailable", status_code=503)
