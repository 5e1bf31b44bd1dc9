from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from async_calc.models.enums import PriceType
from async_calc.schemas.calculation import ServiceItem

DEFAULT_DURATION_MONTHS = 12


@dataclass(frozen=True)
class PricingResult:
    total_cost: float
    duration_months: int


def calculate(items: Iterable[ServiceItem], months_override: int | None = None) -> PricingResult:
    """Total cost of ``items`` and the effective contract duration in months.

    Recurring items are billed over the override when one is given, otherwise
    over the longest duration seen so far (12 months when there is none yet).
    Yearly items bill every started year in full. One-time and unknown price
    types are billed once and do not affect the duration.
    """
    total = 0.0
    duration_months = months_override if months_override and months_override > 0 else 0

    for item in items:
        quantity = max(item.quantity, 1)
        if item.price_type == PriceType.MONTHLY:
            months = duration_months or DEFAULT_DURATION_MONTHS
            total += item.price * quantity * months
            duration_months = max(duration_months, months)
        elif item.price_type == PriceType.YEARLY:
            months = duration_months or DEFAULT_DURATION_MONTHS
            total += item.price * quantity * math.ceil(months / 12)
            duration_months = max(duration_months, months)
        else:
            total += item.price * quantity

    return PricingResult(total_cost=total, duration_months=duration_months or DEFAULT_DURATION_MONTHS)
