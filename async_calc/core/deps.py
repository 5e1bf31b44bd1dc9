from __future__ import annotations

from fastapi import Header, Request, status

from async_calc.core.config import get_settings
from async_calc.core.errors import ServiceError
from async_calc.core.security import tokens_match
from async_calc.services.scheduler import TaskScheduler


async def verify_async_token(x_async_token: str | None = Header(default=None)) -> None:
    settings = get_settings()
    if not tokens_match(x_async_token, settings.async_service_token):
        raise ServiceError(status.HTTP_403_FORBIDDEN, "unauthorized")


def get_scheduler(request: Request) -> TaskScheduler:
    return request.app.state.scheduler
