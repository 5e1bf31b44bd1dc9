from __future__ import annotations

from enum import Enum


class PriceType(str, Enum):
    ONE_TIME = "one_time"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
