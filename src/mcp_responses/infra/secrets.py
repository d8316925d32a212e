from __future__ import annotations

import asyncio
import os
import time
from typing import Callable, Mapping, Optional

from ..core.ports import SecretProviderPort


ONE_HOUR = 60 * 60
SEVEN_DAYS = 7 * 24 * ONE_HOUR


class EnvSecretProvider:
    """Reads secrets from environment variables.

    `OPENAI-API-KEY` is looked up as `<prefix>OPENAI_API_KEY`. Blank values
    count as absent.
    """

    def __init__(self, *, prefix: str = "", environ: Optional[Mapping[str, str]] = None) -> None:
        self._prefix = prefix
        self._environ = environ

    def env_name(self, name: str) -> str:
        return f"{self._prefix}{name.replace('-', '_').upper()}"

    async def get(self, name: str) -> Optional[str]:
        environ = self._environ if self._environ is not None else os.environ
        value = environ.get(self.env_name(name))
        if value is None or not value.strip():
            return None
        return value


class CachedSecretProvider:
    """TTL cache in front of another secret provider.

    Cache key is the secret name. Absent secrets are not cached so that a
    secret configured later is picked up on the next call.
    """

    def __init__(
        self,
        *,
        inner: SecretProviderPort,
        default_ttl: float = SEVEN_DAYS,
        ttl_overrides: Optional[Mapping[str, float]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._inner = inner
        self._default_ttl = default_ttl
        self._ttl_overrides = dict(ttl_overrides or {})
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def ttl_for(self, name: str) -> float:
        return self._ttl_overrides.get(name, self._default_ttl)

    async def get(self, name: str) -> Optional[str]:
        cached = self._lookup(name)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(name, asyncio.Lock())
        async with lock:
            # Another waiter may have filled the entry.
            cached = self._lookup(name)
            if cached is not None:
                return cached
            value = await self._inner.get(name)
            if value is not None:
                self._entries[name] = (value, self._clock() + self.ttl_for(name))
            return value

    def invalidate(self, name: Optional[str] = None) -> None:
        if name is None:
            self._entries.clear()
        else:
            self._entries.pop(name, None)

    def _lookup(self, name: str) -> Optional[str]:
        entry = self._entries.get(name)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[name]
            return None
        return value
