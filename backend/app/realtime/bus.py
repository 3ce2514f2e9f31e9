"""Publish side of the realtime bus.

The socket gateway that fans events out to browsers lives outside this
service; it subscribes to ``notifications:user:*`` on Redis.
"""

from __future__ import annotations

import logging
from typing import Any

from redis.exceptions import RedisError

from app.core.config import settings
from app.utils.json import dumps
from app.utils.redis_client import get_redis_client

logger = logging.getLogger(__name__)

USER_CHANNEL_PREFIX = "notifications:user:"


def bus_enabled() -> bool:
    return bool(settings.REALTIME_ENABLED)


def user_channel(account_id: int) -> str:
    return f"{USER_CHANNEL_PREFIX}{account_id}"


def publish_user_event(account_id: int, envelope: dict[str, Any]) -> bool:
    """Publish ``envelope`` on the account's channel.

    Returns False when the bus is disabled or Redis rejected the publish; the
    in-app notification row is the durable record either way.
    """
    if not bus_enabled():
        return False
    env = dict(envelope)
    env.setdefault("v", 1)
    env.setdefault("accountId", account_id)
    try:
        get_redis_client().publish(user_channel(account_id), dumps(env))
    except RedisError as exc:
        logger.warning("Realtime publish failed for account %s: %s", account_id, exc)
        return False
    return True


__all__ = [
    "bus_enabled",
    "publish_user_event",
    "user_channel",
]
