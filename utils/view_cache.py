import logging
import threading
import time
from typing import Any, Optional

from core.config import VIEW_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

# Dashboard payloads keyed by "<scope>:<view>", e.g. "user:user1:summary"
# or "org:org1:active". Entries expire after VIEW_CACHE_TTL_SECONDS and are
# dropped early whenever a write touches their scope.
_response_cache: dict[str, dict[str, Any]] = {}
_cache_lock = threading.Lock()


def user_scope(user_id: str) -> str:
    return f"user:{user_id}"


def org_scope(organization_id: Optional[str]) -> str:
    # None means "all organizations" (admin views)
    return f"org:{organization_id or '*'}"


def get_cached_response(key: str, ttl: Optional[float] = None) -> Optional[Any]:
    ttl = VIEW_CACHE_TTL_SECONDS if ttl is None else ttl
    with _cache_lock:
        entry = _response_cache.get(key)
        if entry is None:
            return None
        if time.monotonic() - entry["timestamp"] > ttl:
            del _response_cache[key]
            return None
        return entry["data"]


def set_cached_response(key: str, data: Any) -> None:
    with _cache_lock:
        _response_cache[key] = {"data": data, "timestamp": time.monotonic()}


def invalidate_scope(scope: str) -> int:
    """Drop every cached view under scope. Returns how many were dropped."""
    prefix = scope + ":"
    with _cache_lock:
        keys = [key for key in _response_cache if key == scope or key.startswith(prefix)]
        for key in keys:
            del _response_cache[key]
    return len(keys)


def invalidate_shift_views(user_id: str, organization_id: Optional[str]) -> None:
    """Signal that a user's shift state changed."""
    dropped = invalidate_scope(user_scope(user_id))
    dropped += invalidate_scope(org_scope(organization_id))
    # Admin views span every organization
    dropped += invalidate_scope(org_scope(None))
    logger.debug(
        "Invalidated %d cached views for user %s / organization %s",
        dropped,
        user_id,
        organization_id,
    )


def clear_cache() -> None:
    with _cache_lock:
        _response_cache.clear()
