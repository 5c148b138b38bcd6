"""
Nominatim reverse-geocoding client.

Talks to the public OpenStreetMap Nominatim instance by default, which
requires an identifying User-Agent and at most one request per second.
Pacing is the caller's job; this client only performs single lookups.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from config import get_nominatim_reverse_url, get_nominatim_user_agent
from core.exceptions import ExternalServiceError
from core.http.request import request_json
from core.http.retry import retry_async
from core.http.session import get_session

if TYPE_CHECKING:
    import aiohttp

logger = logging.getLogger(__name__)


class NominatimClient:
    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        self._session = session
        self._reverse_url = get_nominatim_reverse_url()
        self._user_agent = get_nominatim_user_agent()

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    @retry_async(max_retries=2, retry_delay=2.0)
    async def reverse(
        self,
        lat: float,
        lon: float,
        *,
        zoom: int = 18,
    ) -> dict[str, Any] | None:
        params = {
            "format": "json",
            "lat": lat,
            "lon": lon,
            "zoom": zoom,
            "addressdetails": 1,
        }
        session = self._session or await get_session()
        data = await request_json(
            "GET",
            self._reverse_url,
            session=session,
            params=params,
            headers=self._headers(),
            service_name="Nominatim reverse",
            none_on=(404,),
        )
        if data is None:
            return None
        if not isinstance(data, dict):
            msg = "Nominatim reverse error: unexpected response"
            raise ExternalServiceError(msg, {"url": self._reverse_url})
        return data

    async def reverse_address(self, lat: float, lon: float) -> str | None:
        """Return the ``display_name`` for a coordinate, or None when unknown."""
        data = await self.reverse(lat, lon)
        if not data or data.get("error"):
            return None
        display_name = data.get("display_name")
        return display_name or None


__all__ = ["NominatimClient"]
