"""Domain models for sourced and scored leads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, conint
from pydantic.alias_generators import to_camel

APOLLO_ID_PREFIX = "apollo-"


class CandidateLead(BaseModel):
    """A sourced, unscored lead in a provider-agnostic shape."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    title: str = ""
    linkedin_url: str | None = None
    company: str
    company_size: int = 0
    location: str = ""
    industry: str = ""
    tech_stack: list[str] = Field(default_factory=list)
    hiring_signals: list[str] = Field(default_factory=list)
    funding_events: list[str] = Field(default_factory=list)
    company_summary: str = ""

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""

    @property
    def is_primary_provider(self) -> bool:
        return self.id.startswith(APOLLO_ID_PREFIX)


class ScoreComponent(BaseModel):
    """Explainable piece of a fit score."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    factor: str
    reason: str
    points: int


class ScoredLead(CandidateLead):
    """Candidate lead with its ranking output attached."""

    fit_score: conint(ge=0, le=100)  # type: ignore[valid-type]
    research_summary: str
    score_breakdown: list[ScoreComponent] = Field(default_factory=list)
