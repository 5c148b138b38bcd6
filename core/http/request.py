"""
Shared HTTP request helpers for JSON service backends.

Keeps JSON request/response handling and error mapping consistent across
the geocoder and the GPS provider.
"""

from __future__ import annotations

import json as jsonlib
import logging
from typing import TYPE_CHECKING, Any

from core.exceptions import ExternalServiceError, MalformedResponseError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


async def request_json(
    method: str,
    url: str,
    *,
    session: Any,
    params: dict[str, Any] | None = None,
    json: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    expected_status: int | Iterable[int] = 200,
    none_on: Iterable[int] | None = None,
    service_name: str = "Service",
) -> Any | None:
    method_upper = method.upper()
    if isinstance(expected_status, int):
        expected = {expected_status}
    else:
        expected = set(expected_status)
    none_on_set = set(none_on or [])

    if method_upper == "GET":
        request_fn = session.get
    elif method_upper == "POST":
        request_fn = session.post
    else:
        msg = f"{service_name} request error: unsupported method {method_upper}"
        raise ExternalServiceError(msg, {"url": url})

    async with request_fn(url, params=params, json=json, headers=headers) as response:
        if response.status in none_on_set:
            logger.debug("%s returned %s for %s", service_name, response.status, url)
            return None
        if response.status not in expected:
            body = await response.text()
            msg = f"{service_name} error: {response.status}"
            raise ExternalServiceError(
                msg,
                {
                    "status": response.status,
                    "body": body[:200],
                    "url": str(getattr(response, "url", url)),
                },
            )
        return await response.json()


async def post_json_text(
    url: str,
    *,
    session: Any,
    params: dict[str, Any] | None = None,
    payload: dict[str, Any] | None = None,
    service_name: str = "Service",
) -> dict[str, Any]:
    """POST a JSON payload and decode the body leniently.

    Some providers answer errors with HTML or plain text on a 200, so the
    body is read as text and decoded here. Anything that is not a JSON
    object raises MalformedResponseError.
    """
    async with session.post(
        url,
        params=params,
        json=payload or {},
        headers={"Content-Type": "application/json"},
    ) as response:
        text = await response.text()
        status = response.status

    try:
        data = jsonlib.loads(text)
    except (jsonlib.JSONDecodeError, TypeError) as exc:
        msg = f"{service_name} returned a non-JSON response (status {status})"
        raise MalformedResponseError(
            msg,
            {"status": status, "body": (text or "")[:200]},
        ) from exc

    if not isinstance(data, dict):
        msg = f"{service_name} returned an unexpected JSON payload"
        raise MalformedResponseError(
            msg,
            {"status": status, "body": (text or "")[:200]},
        )
    return data
