"""Process-wide cache for the GPS provider bearer token."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from config import GPS_TOKEN_TTL_SECONDS, get_gps_config
from core.clients.gps51 import GpsProviderClient
from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenProvider(Protocol):
    async def get(self) -> str: ...

    def invalidate(self) -> None: ...


@dataclass(frozen=True)
class GpsToken:
    value: str
    expires_at_ms: int

    def is_valid(self, now_ms: int) -> bool:
        return now_ms < self.expires_at_ms


class GpsTokenCache:
    """Single-slot token cache with single-flight login.

    Concurrent callers that find the slot empty or expired wait on one lock;
    the first one logs in and the rest reuse its token.
    """

    def __init__(
        self,
        client: GpsProviderClient | None = None,
        *,
        ttl_seconds: int = GPS_TOKEN_TTL_SECONDS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._client = client
        self._ttl_ms = ttl_seconds * 1000
        self._clock = clock
        self._token: GpsToken | None = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> GpsToken | None:
        return self._token

    def _cached(self) -> str | None:
        if self._token is not None and self._token.is_valid(self._clock()):
            return self._token.value
        return None

    async def get(self) -> str:
        cached = self._cached()
        if cached is not None:
            return cached

        async with self._lock:
            cached = self._cached()
            if cached is not None:
                return cached
            self._token = await self._login()
            return self._token.value

    def invalidate(self) -> None:
        if self._token is not None:
            logger.info("Invalidating cached GPS provider token")
        self._token = None

    async def _login(self) -> GpsToken:
        config = get_gps_config()
        username = config["username"]
        password = config["password"]
        if not username or not password:
            msg = "GPS login failed: provider credentials are not configured"
            raise AuthenticationError(msg)

        if self._client is None:
            self._client = GpsProviderClient()
        data = await self._client.login(
            username,
            password,
            client_id=config["client_id"],
        )

        if data.get("status") != 0 or not data.get("token"):
            cause = data.get("cause") or "Unknown error"
            logger.error("GPS provider login rejected: %s", cause)
            msg = f"GPS login failed: {cause}"
            raise AuthenticationError(msg, {"status": data.get("status")})

        logger.info("Obtained new GPS provider token")
        return GpsToken(
            value=str(data["token"]),
            expires_at_ms=self._clock() + self._ttl_ms,
        )


_token_cache: GpsTokenCache | None = None


def get_token_cache() -> GpsTokenCache:
    global _token_cache
    if _token_cache is None:
        _token_cache = GpsTokenCache()
    return _token_cache


def reset_token_cache(cache: GpsTokenCache | None = None) -> None:
    """Replace the process-wide cache; tests pass a cache with a fake client."""
    global _token_cache
    _token_cache = cache


__all__ = [
    "GpsToken",
    "GpsTokenCache",
    "TokenProvider",
    "get_token_cache",
    "reset_token_cache",
]
