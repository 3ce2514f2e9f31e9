import logging
import os
from typing import Optional

import redis

from app.core.config import settings

logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


class _NullRedis:
    """No-op Redis client used when Redis is disabled.

    Mirrors the minimal surface used in this codebase so callers can proceed
    without checking whether Redis is configured.
    """

    def publish(self, channel: str, message: str) -> int:
        return 0

    def close(self) -> None:
        return None


def _is_disabled(url: str) -> bool:
    return not url or url.lower() in {"none", "disabled", "false", "0"}


def get_redis_client() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        url = (settings.REDIS_URL or "").strip()
        if _is_disabled(url):
            _redis_client = _NullRedis()  # type: ignore[assignment]
            return _redis_client
        # Conservative socket timeouts so a slow Redis does not stall requests
        conn_to = float(os.getenv("REDIS_CONNECT_TIMEOUT") or 0.5)
        read_to = float(os.getenv("REDIS_SOCKET_TIMEOUT") or 0.5)
        _redis_client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=conn_to,
            socket_timeout=read_to,
        )
    return _redis_client


def close_redis_client() -> None:
    global _redis_client
    if _redis_client is not None:
        _redis_client.close()
        _redis_client = None
