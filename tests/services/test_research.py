from __future__ import annotations

import pytest

from prospector.clients.llm import CompletionError
from prospector.services.generation.research import ResearchAssistant
from prospector.services.scoring.engine import LeadScoringEngine
from prospector.services.sourcing.sample_leads import SAMPLE_LEADS
from tests.helpers.completion_stub import StubCompletionClient


@pytest.mark.asyncio
async def test_brief_and_summary_strip_fences(engineering_icp):
    lead = LeadScoringEngine().score_lead(SAMPLE_LEADS[0], engineering_icp)
    client = StubCompletionClient(brief_reply="```\nStackline brief.\n```", summary_reply="  Summary.  ")
    assistant = ResearchAssistant(client)

    assert await assistant.brief(lead, engineering_icp) == "Stackline brief."
    assert await assistant.format_summary(lead) == "Summary."
    assert client.calls[1] == ("summary", lead.research_summary)


@pytest.mark.asyncio
async def test_research_failures_degrade_to_none(engineering_icp):
    lead = LeadScoringEngine().score_lead(SAMPLE_LEADS[0], engineering_icp)
    client = StubCompletionClient(
        fail_kinds={"brief": CompletionError("boom"), "summary": CompletionError("boom")}
    )
    assistant = ResearchAssistant(client)

    assert await assistant.brief(lead, engineering_icp) is None
    assert await assistant.format_summary(lead) is None
