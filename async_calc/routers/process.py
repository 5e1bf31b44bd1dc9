from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError

from async_calc.core.deps import get_scheduler, verify_async_token
from async_calc.core.errors import ServiceError
from async_calc.schemas.calculation import CalculationRequest, ScheduledResponse
from async_calc.services.scheduler import TaskScheduler

router = APIRouter(tags=["process"])


@router.post(
    "/process",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ScheduledResponse,
    dependencies=[Depends(verify_async_token)],
)
async def process(request: Request, scheduler: TaskScheduler = Depends(get_scheduler)):
    # body is parsed here rather than by FastAPI so the token check always runs first
    try:
        payload = CalculationRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        raise ServiceError(status.HTTP_400_BAD_REQUEST, "bad request") from exc

    if payload.missing_required():
        raise ServiceError(status.HTTP_400_BAD_REQUEST, "calculation_id and callback_url are required")

    scheduler.schedule(payload)
    return ScheduledResponse()
