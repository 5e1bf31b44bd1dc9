from __future__ import annotations

import asyncio
import random

from async_calc.core.config import Settings
from async_calc.core.logging import get_logger
from async_calc.schemas.calculation import CalculationOutcome, CalculationRequest
from async_calc.services.callback import CallbackDispatcher
from async_calc.services.duration import duration_from_date_strings
from async_calc.services.outcome import OutcomeSimulator
from async_calc.services.pricing import calculate

logger = get_logger()


class TaskScheduler:
    """Runs one fire-and-forget task per accepted request.

    Each task sleeps for a random latency, prices the request, draws a
    success or failure outcome and hands it to the dispatcher once.
    Tasks are never awaited by the caller and cannot be cancelled.
    """

    def __init__(
        self,
        dispatcher: CallbackDispatcher,
        rng: random.Random | None = None,
        delay_min_seconds: float = 5,
        delay_max_seconds: float = 10,
        success_probability: float = 0.5,
    ) -> None:
        self.dispatcher = dispatcher
        self.rng = rng or random.Random()
        self.delay_min_seconds = delay_min_seconds
        self.delay_max_seconds = max(delay_max_seconds, delay_min_seconds)
        self.simulator = OutcomeSimulator(self.rng, success_probability)
        # handles are kept only so running tasks are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def schedule(self, request: CalculationRequest) -> None:
        task = asyncio.create_task(self._run(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("task_scheduled", calculation_id=request.calculation_id, in_flight=self.in_flight)

    def pick_delay(self) -> float:
        return self.rng.uniform(self.delay_min_seconds, self.delay_max_seconds)

    async def process(self, request: CalculationRequest) -> CalculationOutcome:
        await asyncio.sleep(self.pick_delay())

        months_override = duration_from_date_strings(request.start_date, request.end_date)
        pricing = calculate(request.services, months_override)
        outcome = self.simulator.decide(pricing)
        logger.info(
            "task_computed",
            calculation_id=request.calculation_id,
            status=outcome.status.value,
            total_cost=pricing.total_cost,
            duration_months=pricing.duration_months,
        )

        await self.dispatcher.send(request.callback_url, outcome)
        return outcome

    async def _run(self, request: CalculationRequest) -> None:
        try:
            await self.process(request)
        except Exception:
            logger.exception("task_crashed", calculation_id=request.calculation_id)


def create_scheduler(settings: Settings, rng: random.Random | None = None) -> TaskScheduler:
    dispatcher = CallbackDispatcher(
        token=settings.async_callback_token,
        timeout=settings.callback_timeout_seconds,
    )
    return TaskScheduler(
        dispatcher,
        rng=rng,
        delay_min_seconds=settings.delay_min_seconds,
        delay_max_seconds=settings.delay_max_seconds,
        success_probability=settings.success_probability,
    )
