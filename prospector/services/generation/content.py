"""Fit explanation and outreach email generation with a quality gate."""

from __future__ import annotations

import logging
from typing import Final

from pydantic import ValidationError

from prospector.clients.llm import TextCompletionClient, parse_json_payload
from prospector.models.icp import StructuredICP
from prospector.models.lead import ScoredLead
from prospector.models.outreach import GeneratedContent, SellerContext
from prospector.observability.metrics import metrics
from prospector.services.generation.prompting import (
    render_email_system_prompt,
    render_icp_json,
    render_lead_profile,
)

logger = logging.getLogger(__name__)

MAX_ATTEMPTS: Final[int] = 2


def build_content_user_prompt(lead: ScoredLead, icp: StructuredICP, research_brief: str | None = None) -> str:
    sections = [
        "## Structured ICP (target profile)",
        render_icp_json(icp),
        "",
        "## Lead profile",
        render_lead_profile(lead),
        f"- Research summary: {lead.research_summary}",
    ]
    if research_brief:
        sections.extend(["", "## Research brief", research_brief.strip()])
    sections.extend(["", "Generate the JSON output now."])
    return "\n".join(sections)


def fallback_content(lead: ScoredLead, seller: SellerContext) -> GeneratedContent:
    """Deterministic draft used when the model reply cannot be parsed."""
    first_name = lead.first_name or "there"
    return GeneratedContent(
        fit_explanation=(
            f"{lead.name} at {lead.company} matches the target profile based on role, company size, "
            "and active hiring signals."
        ),
        subject=f"{lead.company} and your engineering pipeline",
        body=(
            f"Hi {first_name},\n\n"
            f"I'd love to share how {seller.company_name} helps engineering teams like {lead.company}'s "
            "move faster and ship more reliably.\n\n"
            "Would a 15-minute call work this week?\n\n"
            f"{seller.sender_name}\n{seller.sender_title}, {seller.company_name}"
        ),
    )


class ContentGenerator:
    """Generates per-lead content, regenerating once when the email fails the quality gate."""

    def __init__(self, client: TextCompletionClient) -> None:
        self._client = client

    async def generate(
        self,
        lead: ScoredLead,
        icp: StructuredICP,
        seller: SellerContext,
        research_brief: str | None = None,
    ) -> GeneratedContent:
        system_prompt = render_email_system_prompt(seller)
        user_prompt = build_content_user_prompt(lead, icp, research_brief)

        content = GeneratedContent()
        for attempt in range(MAX_ATTEMPTS):
            content = await self._attempt(lead, seller, system_prompt=system_prompt, user_prompt=user_prompt)
            if content.passes_quality_gate(lead):
                break
            if attempt + 1 < MAX_ATTEMPTS:
                logger.warning(
                    "content.quality_gate_failed",
                    extra={"lead_id": lead.id, "attempt": attempt, "body_length": len(content.body)},
                )
                metrics.increment("content.retry")
        return content

    async def _attempt(
        self,
        lead: ScoredLead,
        seller: SellerContext,
        *,
        system_prompt: str,
        user_prompt: str,
    ) -> GeneratedContent:
        reply = await self._client.complete(system_prompt=system_prompt, user_prompt=user_prompt)
        try:
            return GeneratedContent.model_validate(parse_json_payload(reply))
        except (ValueError, ValidationError):
            logger.warning("content.parse_fallback", extra={"lead_id": lead.id})
            metrics.increment("content.parse_fallback")
            return fallback_content(lead, seller)
