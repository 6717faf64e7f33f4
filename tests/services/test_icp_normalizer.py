from __future__ import annotations

import json

import pytest

from prospector.clients.llm import CompletionError
from prospector.models.icp import StructuredICP
from prospector.services.generation import icp_normalizer
from prospector.services.generation.icp_normalizer import IcpNormalizer, build_icp_user_prompt
from tests.helpers.completion_stub import ICP_REPLY, StubCompletionClient
from tests.helpers.metrics_stub import StubMetrics


def test_user_prompt_appends_filters():
    prompt = build_icp_user_prompt("  Series B SaaS companies  ", "EU", "200-500")

    assert prompt.startswith("Series B SaaS companies")
    assert "Geography filter (from UI): EU" in prompt
    assert "Company size filter (from UI): 200-500 employees" in prompt


def test_user_prompt_ignores_any_geography():
    prompt = build_icp_user_prompt("Series B SaaS companies", "Any", None)

    assert prompt == "Series B SaaS companies"


@pytest.mark.asyncio
async def test_normalize_parses_fenced_json():
    reply = "```json\n" + json.dumps(ICP_REPLY) + "\n```"
    client = StubCompletionClient(icp_reply=reply)

    icp = await IcpNormalizer(client).normalize("VP Eng at Series B SaaS, 100-1000 people", "US", None)

    assert icp.roles == ["VP of Engineering", "Head of Engineering"]
    assert icp.company_size_range.min == 100
    assert icp.company_size_range.max == 1000
    assert icp.signals == ["hiring engineers", "kubernetes", "series b"]
    assert "Geography filter (from UI): US" in client.calls[0][1]


@pytest.mark.asyncio
async def test_normalize_tolerates_prose_and_partial_fields():
    reply = 'Here you go: {"roles": "CTO", "signals": ["Recent Funding"], "companySizeRange": {"min": 500, "max": 50}}'
    client = StubCompletionClient(icp_reply=reply)

    icp = await IcpNormalizer(client).normalize("CTOs at funded startups")

    assert icp.roles == ["CTO"]
    assert icp.industries == []
    assert icp.signals == ["recent funding"]
    assert (icp.company_size_range.min, icp.company_size_range.max) == (50, 500)


@pytest.mark.asyncio
async def test_normalize_falls_back_on_unparseable_reply(monkeypatch):
    stub_metrics = StubMetrics()
    monkeypatch.setattr(icp_normalizer, "metrics", stub_metrics)
    client = StubCompletionClient(icp_reply="I could not understand that ICP, sorry.")

    icp = await IcpNormalizer(client).normalize("Some ICP text here")

    assert icp == StructuredICP.fallback()
    assert stub_metrics.count("icp.parse_fallback") == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [
        '{"roles": 5}',
        '{"signals": true}',
        '{"companySizeRange": {"min": [100], "max": 1000}}',
    ],
)
async def test_normalize_falls_back_on_wrongly_typed_fields(reply):
    client = StubCompletionClient(icp_reply=reply)

    icp = await IcpNormalizer(client).normalize("Some ICP text here")

    assert icp == StructuredICP.fallback()


@pytest.mark.asyncio
async def test_normalize_propagates_provider_failure():
    client = StubCompletionClient(fail_kinds={"icp": CompletionError("OpenAI request failed: boom")})

    with pytest.raises(CompletionError):
        await IcpNormalizer(client).normalize("Some ICP text here")
