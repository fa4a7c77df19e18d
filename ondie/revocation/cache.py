"""
CRL cache implementations.

The validator only reads from the cache: it never fetches CRLs or writes
entries. Population is the job of whatever owns the cache.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

import redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class OnDieCache:
    """Interface for CRL/certificate byte caches keyed by distribution-point name."""

    def lookup(self, name: str) -> Optional[bytes]:
        """Return the cached bytes for ``name``, or None if nothing is cached."""
        raise NotImplementedError


class InMemoryOnDieCache(OnDieCache):
    """Thread-safe dict-backed cache.
    It is suitable for tests or single-process deployments.
    """

    def __init__(self, entries: Optional[Dict[str, bytes]] = None):
        self._lock = threading.Lock()
        self._entries: Dict[str, bytes] = dict(entries or {})

    def put(self, name: str, data: bytes) -> None:
        with self._lock:
            self._entries[name] = bytes(data)

    def remove(self, name: str) -> None:
        with self._lock:
            self._entries.pop(name, None)

    def lookup(self, name: str) -> Optional[bytes]:
        with self._lock:
            return self._entries.get(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisOnDieCache(OnDieCache):
    """Read-only view over CRL bytes stored in Redis at ``{prefix}:{name}``.

    Connection or protocol errors are logged and reported as a cache miss,
    which the revocation checker treats as an unavailable CRL.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        prefix: str = "ondie:crl",
        client: Optional[redis.Redis] = None,
    ):
        self.url = url
        self.prefix = prefix.rstrip(":")
        self._client = client

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(self.url)
        return self._client

    def _key(self, name: str) -> str:
        return f"{self.prefix}:{name}"

    def lookup(self, name: str) -> Optional[bytes]:
        try:
            raw = self._get_client().get(self._key(name))
        except RedisError as e:
            logger.error("Redis lookup failed for %s: %s", name, e)
            return None
        if raw is None:
            return None
        return bytes(raw)


__all__ = ["OnDieCache", "InMemoryOnDieCache", "RedisOnDieCache"]
