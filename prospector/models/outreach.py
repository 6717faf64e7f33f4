"""Outreach content, seller profile, and API payload models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from prospector.models.lead import CandidateLead, ScoredLead

MIN_EMAIL_BODY_LENGTH = 200


class LeadSource(str, Enum):
    """Provenance of the leads in a response."""

    PRIMARY_PROVIDER = "primary-provider"
    FALLBACK_SAMPLE = "fallback-sample"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SellerContext(_CamelModel):
    """Who is selling what; drives the email generation prompt."""

    company_name: str
    product_description: str
    value_props: list[str] = Field(default_factory=list)
    sender_name: str
    sender_title: str
    sender_email: str = ""


DEFAULT_SELLER_CONTEXT = SellerContext(
    company_name="DeployFlow",
    product_description=(
        "A unified CI/CD and deployment platform that replaces Jenkins, self-managed GitHub Actions "
        "runners, or Bitbucket Pipelines with managed, auto-scaling pipeline infrastructure."
    ),
    value_props=[
        "Speed: teams cut median build and deploy time by 60% through caching, parallel test runs, "
        "and ephemeral build environments.",
        "Reliability: deployment health checks, automatic rollback on error-rate spikes, and per-PR "
        "preview environments.",
        "Scale without DevOps headcount: pipelines self-tune as teams grow from 5 to 50 engineers.",
        "Observability: pipeline duration, flakiness trends, and DORA metrics out of the box.",
        "Migration ease: 90-minute guided migration from GitHub Actions or Jenkins with a dedicated "
        "onboarding engineer.",
    ],
    sender_name="Alex Rivera",
    sender_title="Account Executive",
    sender_email="alex.rivera@deployflow.io",
)


class GeneratedContent(_CamelModel):
    """Model-written fit explanation and email draft for one lead."""

    fit_explanation: str = ""
    subject: str = ""
    body: str = ""

    def passes_quality_gate(self, lead: CandidateLead) -> bool:
        """Body must be long enough and mention the company or the lead by first name."""
        if len(self.body) < MIN_EMAIL_BODY_LENGTH:
            return False
        body = self.body.lower()
        company = lead.company.strip().lower()
        first_name = lead.first_name.lower()
        return bool((company and company in body) or (first_name and first_name in body))


class PersonalizedEmail(_CamelModel):
    subject: str
    body: str


class EnrichedLead(ScoredLead):
    """Final output unit: scored lead, generated content, and provenance."""

    fit_explanation: str
    personalized_email: PersonalizedEmail
    research_brief: str | None = None
    formatted_summary: str | None = None
    source: LeadSource


class GenerateRequest(_CamelModel):
    icp_description: str
    geography: str | None = None
    company_size: str | None = None
    company_context: SellerContext | None = None


class GenerateResponse(_CamelModel):
    leads: list[EnrichedLead]
    source: LeadSource


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
