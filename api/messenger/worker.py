"""ARQ background worker: webhook delivery."""

import logging
from typing import Any
from urllib.parse import urlparse

from arq.connections import RedisSettings

from messenger.channels import WireRequest
from messenger.channels.dispatcher import deliver
from messenger.config import settings

logger = logging.getLogger(__name__)


async def deliver_webhook(ctx: dict[str, Any], url: str, content_type: str, body: bytes) -> None:
    """Deliver one queued notification; failures are logged inside deliver()."""
    await deliver(WireRequest(url=url, content_type=content_type, body=body))


def parse_redis_url(url: str) -> RedisSettings:
    parsed = urlparse(url)
    return RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        password=parsed.password or None,
        database=int(parsed.path.lstrip("/") or 0),
    )


class WorkerSettings:
    functions = [deliver_webhook]
    max_tries = 1
    redis_settings = parse_redis_url(settings.redis_url)
