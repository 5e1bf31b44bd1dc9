from __future__ import annotations

import httpx

from async_calc.core.logging import get_logger
from async_calc.schemas.calculation import CalculationOutcome
from async_calc.services.http_client import post_json

TOKEN_HEADER = "X-ASYNC-TOKEN"

logger = get_logger()


class CallbackDispatcher:
    """Delivers an outcome to the caller's callback URL, at most once.

    Failures are logged and reported through the return value only; nothing
    is raised and nothing is retried.
    """

    def __init__(
        self,
        token: str,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self.timeout = timeout
        self.transport = transport

    async def send(self, url: str, outcome: CalculationOutcome) -> bool:
        headers = {"Content-Type": "application/json", TOKEN_HEADER: self.token}
        try:
            response = await post_json(
                url,
                outcome.to_payload(),
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            )
        except (httpx.InvalidURL, ValueError) as exc:
            # unencodable payload (inf/nan total) or header value
            logger.warning("callback_build_error", url=url, error=str(exc))
            return False
        except httpx.HTTPError as exc:
            logger.warning("callback_send_error", url=url, error=repr(exc))
            return False

        if response.status_code >= 400:
            logger.warning("callback_rejected", url=url, status_code=response.status_code)
            return False

        logger.info("callback_delivered", url=url, status=outcome.status.value)
        return True
