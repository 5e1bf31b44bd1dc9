import asyncio
import json

import httpx
import pytest

from async_calc.core.config import Settings
from async_calc.schemas.calculation import CalculationRequest
from async_calc.services.callback import CallbackDispatcher
from async_calc.services.outcome import FAILURE_NOTE, SUCCESS_NOTE
from async_calc.services.scheduler import TaskScheduler, create_scheduler


class ScriptedRandom:
    def __init__(self, draws: list[float]) -> None:
        self.draws = list(draws)
        self.uniform_calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.uniform_calls.append((a, b))
        return a

    def random(self) -> float:
        return self.draws.pop(0)


class Recorder:
    def __init__(self) -> None:
        self.bodies: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(json.loads(request.content))
        return httpx.Response(200)


def make_request(**overrides):
    data = {
        "calculation_id": 7,
        "services": [{"id": 1, "price": 100, "price_type": "monthly", "quantity": 2}],
        "callback_url": "http://caller.test/callback",
    }
    data.update(overrides)
    return CalculationRequest.model_validate_json(json.dumps(data))


def make_scheduler(draws, recorder, delay=0.0):
    dispatcher = CallbackDispatcher(token="t", transport=httpx.MockTransport(recorder))
    return TaskScheduler(
        dispatcher,
        rng=ScriptedRandom(draws),
        delay_min_seconds=delay,
        delay_max_seconds=delay,
    )


async def wait_idle(scheduler: TaskScheduler, timeout: float = 2.0) -> None:
    async def _poll():
        while scheduler.in_flight:
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


@pytest.mark.asyncio
async def test_success_outcome_delivered_once():
    recorder = Recorder()
    scheduler = make_scheduler([0.2], recorder)

    scheduler.schedule(make_request())
    await wait_idle(scheduler)

    assert recorder.bodies == [
        {"status": "success", "total_cost": 2400.0, "duration_months": 12, "note": SUCCESS_NOTE}
    ]


@pytest.mark.asyncio
async def test_failure_outcome_delivered_once():
    recorder = Recorder()
    scheduler = make_scheduler([0.7], recorder)

    scheduler.schedule(make_request())
    await wait_idle(scheduler)

    assert recorder.bodies == [{"status": "failure", "note": FAILURE_NOTE}]


@pytest.mark.asyncio
async def test_dates_override_duration():
    recorder = Recorder()
    scheduler = make_scheduler([0.0], recorder)

    outcome = await scheduler.process(make_request(start_date="2024-01-10", end_date="2024-06-15"))

    assert outcome.duration_months == 6
    assert outcome.total_cost == 100 * 2 * 6
    assert len(recorder.bodies) == 1


@pytest.mark.asyncio
async def test_malformed_dates_fall_back_to_default_duration():
    recorder = Recorder()
    scheduler = make_scheduler([0.0], recorder)

    outcome = await scheduler.process(make_request(start_date="not-a-date", end_date="2024-06-15"))

    assert outcome.duration_months == 12
    assert outcome.total_cost == 2400


@pytest.mark.asyncio
async def test_schedule_returns_before_work_is_done():
    recorder = Recorder()
    scheduler = make_scheduler([0.0], recorder, delay=0.05)

    scheduler.schedule(make_request())

    assert scheduler.in_flight == 1
    assert recorder.bodies == []
    await wait_idle(scheduler)
    assert scheduler.in_flight == 0
    assert len(recorder.bodies) == 1


@pytest.mark.asyncio
async def test_units_run_independently():
    recorder = Recorder()
    scheduler = make_scheduler([0.0, 0.9, 0.0], recorder)

    for calculation_id in (1, 2, 3):
        scheduler.schedule(make_request(calculation_id=calculation_id))
    await wait_idle(scheduler)

    statuses = sorted(body["status"] for body in recorder.bodies)
    assert statuses == ["failure", "success", "success"]


@pytest.mark.asyncio
async def test_delivery_failure_does_not_break_the_task():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    dispatcher = CallbackDispatcher(token="t", transport=httpx.MockTransport(handler))
    scheduler = TaskScheduler(dispatcher, rng=ScriptedRandom([0.0]), delay_min_seconds=0, delay_max_seconds=0)

    outcome = await scheduler.process(make_request())
    assert outcome.status.value == "success"


def test_delay_is_drawn_from_configured_window():
    rng = ScriptedRandom([])
    scheduler = TaskScheduler(CallbackDispatcher(token="t"), rng=rng, delay_min_seconds=5, delay_max_seconds=10)

    assert scheduler.pick_delay() == 5
    assert rng.uniform_calls == [(5, 10)]


def test_create_scheduler_uses_settings():
    settings = Settings(
        ASYNC_CALLBACK_TOKEN="cb",
        ASYNC_DELAY_MIN_SECONDS=1,
        ASYNC_DELAY_MAX_SECONDS=2,
        ASYNC_SUCCESS_PROBABILITY=0.25,
        ASYNC_CALLBACK_TIMEOUT_SECONDS=3,
    )
    scheduler = create_scheduler(settings)

    assert scheduler.dispatcher.token == "cb"
    assert scheduler.dispatcher.timeout == 3
    assert (scheduler.delay_min_seconds, scheduler.delay_max_seconds) == (1, 2)
    assert scheduler.simulator.success_probability == 0.25


@pytest.mark.asyncio
async def test_overflowing_total_still_completes_the_task():
    recorder = Recorder()
    scheduler = make_scheduler([0.0], recorder)
    request = make_request(services=[{"id": 1, "price": 1e308, "price_type": "monthly", "quantity": 2}])

    outcome = await scheduler.process(request)

    assert outcome.total_cost == float("inf")
    assert recorder.bodies == []
