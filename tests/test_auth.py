import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from core.auth import get_current_user, require_admin
from db.models import User, UserRole


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_known_token_resolves_user(beanie_db) -> None:
    await User(email="admin@example.com", role=UserRole.ADMIN, api_token="tok").insert()

    user = await get_current_user(_bearer("tok"))

    assert user.email == "admin@example.com"
    assert await require_admin(user) is user


@pytest.mark.asyncio
async def test_unknown_token_is_rejected(beanie_db) -> None:
    await User(email="admin@example.com", api_token="tok").insert()

    with pytest.raises(HTTPException) as raised:
        await get_current_user(_bearer("other"))

    assert raised.value.status_code == 401
    assert raised.value.detail == "Unauthorized"


@pytest.mark.asyncio
async def test_missing_credentials_are_rejected() -> None:
    with pytest.raises(HTTPException) as raised:
        await get_current_user(None)

    assert raised.value.status_code == 401


@pytest.mark.asyncio
async def test_non_admin_is_rejected(beanie_db) -> None:
    user = User(email="driver@example.com", role=UserRole.USER)

    with pytest.raises(HTTPException) as raised:
        await require_admin(user)

    assert raised.value.status_code == 401
    assert raised.value.detail == "Unauthorized - Admin access required"
