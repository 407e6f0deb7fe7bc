"""
Redis cache implementation.
"""
import json
import logging
from typing import Any, Callable, Optional

from django.core.cache import cache
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)


class RedisCache:
    """Redis cache wrapper with JSON serialization and key namespacing."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def _make_key(self, key: str) -> str:
        """Create a cache key with prefix."""
        if self.prefix:
            return f"{self.prefix}:{key}"
        return key

    def get(self, key: str) -> Optional[Any]:
        """Get a value from cache."""
        value = cache.get(self._make_key(key))
        if value is not None and isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value

    def set(self, key: str, value: Any, timeout: int = 300) -> None:
        """Set a value in cache."""
        if isinstance(value, (dict, list)):
            value = json.dumps(value, cls=DjangoJSONEncoder)
        cache.set(self._make_key(key), value, timeout)

    def delete(self, key: str) -> None:
        """Delete a value from cache."""
        cache.delete(self._make_key(key))

    def get_or_set(self, key: str, default_func: Callable[[], Any], timeout: int = 300) -> Any:
        """
        Get from cache or set using default function.

        Cache outages never break the caller; the value is computed directly instead.
        """
        try:
            value = self.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {self._make_key(key)}: {e}")
            return default_func()

        if value is None:
            value = default_func()
            try:
                self.set(key, value, timeout)
            except Exception as e:
                logger.warning(f"Cache write failed for {self._make_key(key)}: {e}")
        return value
