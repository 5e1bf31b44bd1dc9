from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class FrozenSchema(BaseModel):
    model_config = ConfigDict(frozen=True)


class InboundSchema(FrozenSchema):
    """Caller-supplied JSON: no type coercion, and ``null`` means the field's zero value."""

    model_config = ConfigDict(frozen=True, strict=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
