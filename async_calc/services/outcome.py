from __future__ import annotations

import random

from async_calc.models.enums import OutcomeStatus
from async_calc.schemas.calculation import CalculationOutcome
from async_calc.services.pricing import PricingResult

SUCCESS_NOTE = "calculated by async service"
FAILURE_NOTE = "simulated failure"


class OutcomeSimulator:
    def __init__(self, rng: random.Random, success_probability: float = 0.5) -> None:
        self.rng = rng
        self.success_probability = success_probability

    def decide(self, pricing: PricingResult) -> CalculationOutcome:
        if self.rng.random() < self.success_probability:
            return CalculationOutcome(
                status=OutcomeStatus.SUCCESS,
                total_cost=pricing.total_cost,
                duration_months=pricing.duration_months,
                note=SUCCESS_NOTE,
            )
        return CalculationOutcome(status=OutcomeStatus.FAILURE, note=FAILURE_NOTE)
