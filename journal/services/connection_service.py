"""Connectivity check against the GPS provider."""

from __future__ import annotations

import logging
from typing import Any

from config import get_gps_config
from core.clients.gps51 import GpsProviderClient

logger = logging.getLogger(__name__)

DEVICE_SAMPLE_SIZE = 3


def mask_token(token: str, visible: int = 20) -> str:
    if not token:
        return ""
    return f"{token[:visible]}..."


class ConnectionTestService:
    """Logs in with a fresh token and lists devices.

    The cached token is bypassed on purpose so the check reflects the
    configured credentials right now.
    """

    def __init__(self, client: GpsProviderClient | None = None) -> None:
        self._client = client or GpsProviderClient()

    async def test_connection(self) -> dict[str, Any]:
        config = get_gps_config()
        logger.info(
            "Testing GPS connection to %s as %s (password set: %s)",
            config["base_url"],
            config["username"] or "<unset>",
            bool(config["password"]),
        )
        if not config["username"] or not config["password"]:
            return {
                "success": False,
                "error": "Login failed: GPS credentials are not configured",
            }

        login = await self._client.login(
            config["username"],
            config["password"],
            client_id=config["client_id"],
        )
        if login.get("status") != 0 or not login.get("token"):
            cause = login.get("cause") or "Unknown error"
            logger.warning("GPS connection test login failed: %s", cause)
            return {
                "success": False,
                "error": f"Login failed: {cause}",
                "response": login,
            }

        token = str(login["token"])
        devices_data = await self._client.call("querydevices", {}, token=token)
        devices = devices_data.get("devices") or []
        logger.info(
            "GPS connection test succeeded: devices status %s, %d devices",
            devices_data.get("status"),
            len(devices),
        )
        return {
            "success": True,
            "message": "GPS connection successful",
            "login": {"status": login.get("status"), "token": mask_token(token)},
            "devices": {
                "status": devices_data.get("status"),
                "count": len(devices),
                "sample": devices[:DEVICE_SAMPLE_SIZE],
            },
        }


__all__ = ["ConnectionTestService", "mask_token"]
