from __future__ import annotations

from typing import Any

import httpx


async def post_json(
    url: str,
    payload: dict[str, Any],
    headers: dict[str, str] | None = None,
    timeout: float = 10,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """Single POST with no retries. Raises ``httpx.InvalidURL`` or ``httpx.HTTPError``."""
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        request = client.build_request("POST", url, json=payload, headers=headers)
        return await client.send(request)
