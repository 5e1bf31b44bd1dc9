from async_calc.models.enums import OutcomeStatus, PriceType  # noqa: F401
