"""Structured ideal-customer-profile filter."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

UNBOUNDED_COMPANY_SIZE = 999999


class CompanySizeRange(BaseModel):
    """Inclusive employee headcount bounds."""

    model_config = ConfigDict(frozen=True)

    min: int = 0
    max: int = UNBOUNDED_COMPANY_SIZE

    @model_validator(mode="before")
    @classmethod
    def _order_bounds(cls, values: object) -> object:
        if not isinstance(values, dict):
            return values
        values = dict(values)
        low = values.get("min")
        high = values.get("max")
        if low is None:
            values["min"] = 0
        if high is None:
            values["max"] = UNBOUNDED_COMPANY_SIZE
        if low is None or high is None:
            return values
        try:
            inverted = int(low) > int(high)
        except (TypeError, ValueError):
            return values
        if inverted:
            values["min"], values["max"] = high, low
        return values

    @property
    def is_open_ended(self) -> bool:
        return self.max >= UNBOUNDED_COMPANY_SIZE


class StructuredICP(BaseModel):
    """Normalized targeting filter produced once per pipeline run."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    roles: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    company_size_range: CompanySizeRange = Field(default_factory=CompanySizeRange)
    locations: list[str] = Field(default_factory=list)
    signals: list[str] = Field(default_factory=list)

    @field_validator("roles", "industries", "locations", "signals", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"expected a list of strings, got {type(value).__name__}")
        return [str(item).strip() for item in value if item is not None and str(item).strip()]

    @field_validator("signals")
    @classmethod
    def _lowercase_signals(cls, value: list[str]) -> list[str]:
        return [signal.lower() for signal in value]

    @field_validator("company_size_range", mode="before")
    @classmethod
    def _default_size_range(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def fallback(cls) -> "StructuredICP":
        """Default profile used when the model reply cannot be parsed."""
        return cls(
            roles=["VP of Engineering", "Head of Engineering"],
            industries=["SaaS"],
            company_size_range=CompanySizeRange(min=100, max=1000),
            locations=[],
            signals=["hiring engineers", "recent funding"],
        )
