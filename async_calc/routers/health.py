from __future__ import annotations

from fastapi import APIRouter, Depends

from async_calc.core.deps import get_scheduler
from async_calc.schemas.calculation import HealthResponse
from async_calc.services.scheduler import TaskScheduler

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(scheduler: TaskScheduler = Depends(get_scheduler)):
    return HealthResponse(status="ok", in_flight=scheduler.in_flight)
