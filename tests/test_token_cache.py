import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.exceptions import AuthenticationError
from gps.token_cache import GpsTokenCache, get_token_cache, reset_token_cache

HOUR_MS = 60 * 60 * 1000


class Clock:
    def __init__(self, now_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


def _client(*responses: dict) -> MagicMock:
    client = MagicMock()
    client.login = AsyncMock(side_effect=list(responses))
    return client


@pytest.mark.asyncio
async def test_token_is_reused_within_validity_window() -> None:
    client = _client({"status": 0, "token": "tok-1"})
    clock = Clock()
    cache = GpsTokenCache(client, clock=clock)

    assert await cache.get() == "tok-1"
    clock.now_ms += 22 * HOUR_MS
    assert await cache.get() == "tok-1"

    client.login.assert_awaited_once_with(
        "fleet@example.com",
        "secret",
        client_id="JournalSync",
    )


@pytest.mark.asyncio
async def test_token_expires_after_23_hours() -> None:
    client = _client({"status": 0, "token": "tok-1"}, {"status": 0, "token": "tok-2"})
    clock = Clock()
    cache = GpsTokenCache(client, clock=clock)

    assert await cache.get() == "tok-1"
    assert cache.token is not None
    assert cache.token.expires_at_ms == clock.now_ms + 23 * HOUR_MS

    clock.now_ms += 23 * HOUR_MS
    assert await cache.get() == "tok-2"
    assert client.login.await_count == 2


@pytest.mark.asyncio
async def test_concurrent_cold_callers_share_one_login() -> None:
    async def slow_login(*args, **kwargs):
        await asyncio.sleep(0)
        return {"status": 0, "token": "tok-1"}

    client = MagicMock()
    client.login = AsyncMock(side_effect=slow_login)
    cache = GpsTokenCache(client, clock=Clock())

    tokens = await asyncio.gather(*(cache.get() for _ in range(5)))

    assert tokens == ["tok-1"] * 5
    assert client.login.await_count == 1


@pytest.mark.asyncio
async def test_invalidate_forces_new_login() -> None:
    client = _client({"status": 0, "token": "tok-1"}, {"status": 0, "token": "tok-2"})
    cache = GpsTokenCache(client, clock=Clock())

    assert await cache.get() == "tok-1"
    cache.invalidate()
    assert cache.token is None
    assert await cache.get() == "tok-2"


@pytest.mark.asyncio
async def test_rejected_login_raises_with_provider_cause() -> None:
    client = _client({"status": 1, "cause": "Bad password"})
    cache = GpsTokenCache(client, clock=Clock())

    with pytest.raises(AuthenticationError) as raised:
        await cache.get()

    assert raised.value.message == "GPS login failed: Bad password"
    assert cache.token is None


@pytest.mark.asyncio
async def test_rejected_login_without_cause_reports_unknown_error() -> None:
    client = _client({"status": 3})
    cache = GpsTokenCache(client, clock=Clock())

    with pytest.raises(AuthenticationError) as raised:
        await cache.get()

    assert raised.value.message == "GPS login failed: Unknown error"


@pytest.mark.asyncio
async def test_missing_credentials_fail_before_any_request(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("GPS_PASSWORD", "")
    client = _client({"status": 0, "token": "tok-1"})
    cache = GpsTokenCache(client, clock=Clock())

    with pytest.raises(AuthenticationError):
        await cache.get()

    client.login.assert_not_awaited()


def test_process_wide_cache_is_shared_until_reset() -> None:
    first = get_token_cache()
    assert get_token_cache() is first

    reset_token_cache()
    assert get_token_cache() is not first

    replacement = GpsTokenCache(_client())
    reset_token_cache(replacement)
    assert get_token_cache() is replacement
