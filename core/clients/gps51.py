"""GPS telemetry provider client (GPS51-style ``webapi`` endpoint)."""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Any

from config import get_gps_config
from core.http.rate_limiting import provider_semaphore
from core.http.request import post_json_text
from core.http.retry import retry_async
from core.http.session import get_session

if TYPE_CHECKING:
    import aiohttp

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """The provider expects the account password as an MD5 hex digest."""
    return hashlib.md5(password.encode("utf-8"), usedforsecurity=False).hexdigest()


class GpsProviderClient:
    """Thin transport for ``POST {base}/webapi?action=...`` calls.

    Returns the decoded JSON body as-is. Interpreting the ``status`` field is
    left to callers, since a non-zero status means different things for
    login and for data queries.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        base_url: str | None = None,
    ) -> None:
        self._session = session
        self._base_url = (base_url or get_gps_config()["base_url"]).rstrip("/")

    @property
    def webapi_url(self) -> str:
        return f"{self._base_url}/webapi"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = await get_session()
        return self._session

    async def call(
        self,
        action: str,
        payload: dict[str, Any] | None = None,
        *,
        token: str | None = None,
    ) -> dict[str, Any]:
        params = {"action": action}
        if token:
            params["token"] = token
        async with provider_semaphore:
            return await self._post(params, payload or {})

    @retry_async(max_retries=2, retry_delay=1.0)
    async def _post(
        self,
        params: dict[str, str],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        session = await self._get_session()
        return await post_json_text(
            self.webapi_url,
            session=session,
            params=params,
            payload=payload,
            service_name=f"GPS provider ({params['action']})",
        )

    async def login(
        self,
        username: str,
        password: str,
        *,
        client_id: str,
    ) -> dict[str, Any]:
        payload = {
            "type": "USER",
            "from": "WEB",
            "username": username,
            "password": hash_password(password),
            "browser": client_id,
        }
        logger.debug("Logging in to GPS provider as %s", username)
        return await self.call("login", payload)


__all__ = ["GpsProviderClient", "hash_password"]
