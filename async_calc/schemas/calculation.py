from __future__ import annotations

from pydantic import BaseModel, field_validator, model_validator

from async_calc.models.enums import OutcomeStatus
from async_calc.schemas.common import FrozenSchema, InboundSchema


class ServiceItem(InboundSchema):
    id: int = 0
    price: float = 0.0
    price_type: str = ""
    quantity: int = 0


class CalculationRequest(InboundSchema):
    calculation_id: int = 0
    services: tuple[ServiceItem, ...] = ()
    callback_url: str = ""
    # YYYY-MM-DD; anything else means "no duration override"
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("services", mode="before")
    @classmethod
    def _services_as_tuple(cls, value):
        if isinstance(value, (list, tuple)):
            return tuple(ServiceItem() if item is None else item for item in value)
        return value

    def missing_required(self) -> bool:
        return self.calculation_id == 0 or not self.callback_url


class CalculationOutcome(FrozenSchema):
    status: OutcomeStatus
    total_cost: float | None = None
    duration_months: int | None = None
    note: str | None = None

    @model_validator(mode="after")
    def _check_result_fields(self):
        if self.status == OutcomeStatus.SUCCESS:
            if self.total_cost is None or self.duration_months is None:
                raise ValueError("success outcome requires total_cost and duration_months")
        elif self.total_cost is not None or self.duration_months is not None:
            raise ValueError("failure outcome must not carry total_cost or duration_months")
        return self

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class ScheduledResponse(BaseModel):
    message: str = "scheduled"


class HealthResponse(BaseModel):
    status: str = "ok"
    in_flight: int = 0
