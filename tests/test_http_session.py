import pytest

from core.http.session import SessionState, cleanup_session, get_session


@pytest.mark.asyncio
async def test_session_is_shared_until_cleanup() -> None:
    first = await get_session()

    assert await get_session() is first
    assert first.headers["User-Agent"] == "JournalSync/1.0"

    await cleanup_session()
    assert first.closed
    assert SessionState.session is None


@pytest.mark.asyncio
async def test_session_from_another_process_is_replaced() -> None:
    inherited = await get_session()
    SessionState.session_owner_pid = -1

    fresh = await get_session()

    assert fresh is not inherited
    assert inherited.closed

    await cleanup_session()
