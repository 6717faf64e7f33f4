"""Optional per-lead research calls that feed the email prompt."""

from __future__ import annotations

import logging

from prospector.clients.llm import TextCompletionClient, strip_code_fences
from prospector.models.icp import StructuredICP
from prospector.models.lead import ScoredLead
from prospector.observability.metrics import metrics
from prospector.services.generation.prompting import load_prompt, render_icp_json, render_lead_profile

logger = logging.getLogger(__name__)


class ResearchAssistant:
    """Model-written research brief and readable summary; failures degrade to ``None``."""

    def __init__(self, client: TextCompletionClient) -> None:
        self._client = client

    async def brief(self, lead: ScoredLead, icp: StructuredICP) -> str | None:
        user_prompt = (
            f"## Target profile\n{render_icp_json(icp)}\n\n"
            f"## Contact\n{render_lead_profile(lead)}\n\n"
            f"## Company notes\n{lead.company_summary}\n\n{lead.research_summary}"
        )
        return await self._complete("research_brief", user_prompt, lead=lead)

    async def format_summary(self, lead: ScoredLead) -> str | None:
        return await self._complete("summary_format", lead.research_summary, lead=lead)

    async def _complete(self, prompt_name: str, user_prompt: str, *, lead: ScoredLead) -> str | None:
        try:
            reply = await self._client.complete(system_prompt=load_prompt(prompt_name), user_prompt=user_prompt)
        except Exception as exc:
            logger.warning(
                "research.call_failed",
                extra={"lead_id": lead.id, "prompt": prompt_name, "error": str(exc)[:200]},
            )
            metrics.increment("research.errors", tags={"prompt": prompt_name})
            return None
        text = strip_code_fences(reply)
        return text or None
