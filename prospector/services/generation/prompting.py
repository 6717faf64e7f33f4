"""Loading and rendering of the packaged system prompts."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from string import Template

from prospector.models.icp import StructuredICP
from prospector.models.lead import ScoredLead
from prospector.models.outreach import SellerContext

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    prompt_path = TEMPLATE_DIR / f"{name}.md"
    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt template not found at {prompt_path}")
    return prompt_path.read_text(encoding="utf-8").strip()


def render_email_system_prompt(seller: SellerContext) -> str:
    value_props = "\n".join(f"- {prop}" for prop in seller.value_props) or "- (none provided)"
    return Template(load_prompt("email_generation")).safe_substitute(
        company_name=seller.company_name,
        product_description=seller.product_description,
        value_props=value_props,
        sender_name=seller.sender_name,
        sender_title=seller.sender_title,
    )


def render_icp_json(icp: StructuredICP) -> str:
    return json.dumps(icp.model_dump(), indent=2)


def render_lead_profile(lead: ScoredLead) -> str:
    breakdown = "\n".join(
        f"  - {item.factor}: {item.points} pts ({item.reason})" for item in lead.score_breakdown
    )
    return (
        f"- Name: {lead.name}\n"
        f"- Title: {lead.title}\n"
        f"- Company: {lead.company} ({lead.industry})\n"
        f"- Company size: ~{lead.company_size} employees\n"
        f"- Location: {lead.location}\n"
        f"- Tech stack: {', '.join(lead.tech_stack) or 'Unknown'}\n"
        f"- Hiring signals: {'; '.join(lead.hiring_signals) or 'None found'}\n"
        f"- Funding events: {'; '.join(lead.funding_events) or 'None found'}\n"
        f"- Fit score: {lead.fit_score}/100\n"
        f"- Score breakdown:\n{breakdown or '  - (not available)'}"
    )
