from __future__ import annotations

import pytest

from prospector.clients.apollo import ApolloError
from prospector.models.lead import CandidateLead
from prospector.models.outreach import GenerateRequest, LeadSource, SellerContext
from prospector.services import pipeline as pipeline_module
from prospector.services.errors import ConfigurationError, InvalidIcpError, NoLeadsMatchedError
from prospector.services.pipeline import LeadPipeline, PipelineOptions
from prospector.services.sourcing.sample import SampleLeadSource
from tests.helpers.completion_stub import StubCompletionClient
from tests.helpers.metrics_stub import StubMetrics

ICP_TEXT = "VP of Engineering at US Series B SaaS companies, 100-1000 employees, running Kubernetes"


class StubApolloSource:
    """Stands in for ApolloLeadSource with canned candidates or a canned failure."""

    def __init__(self, *, leads: list[CandidateLead] | None = None, error: Exception | None = None) -> None:
        self._leads = leads or []
        self._error = error
        self.calls = 0

    async def fetch(self, icp, max_results: int = 10) -> list[CandidateLead]:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return list(self._leads)


def _apollo_lead(person_id: str, company: str, title: str = "VP of Engineering") -> CandidateLead:
    return CandidateLead(
        id=f"apollo-{person_id}",
        name="Sam Rogers",
        title=title,
        company=company,
        company_size=300,
        location="Denver, CO, United States",
        industry="Computer Software",
        tech_stack=["Kubernetes"],
        company_summary=f"{company} builds software.",
    )


@pytest.mark.asyncio
async def test_sample_run_returns_enriched_leads(completion_stub):
    pipeline = LeadPipeline(completion_client=completion_stub)

    response = await pipeline.run(GenerateRequest(icp_description=ICP_TEXT))

    assert response.source is LeadSource.FALLBACK_SAMPLE
    assert [lead.id for lead in response.leads] == ["lead-001", "lead-005", "lead-002", "lead-004", "lead-003"]
    first = response.leads[0]
    assert first.fit_score == 100
    assert first.source is LeadSource.FALLBACK_SAMPLE
    assert "Sarah" in first.personalized_email.body
    assert first.research_brief
    assert first.formatted_summary
    assert completion_stub.count("icp") == 1
    assert completion_stub.count("content") == 5
    assert completion_stub.count("brief") == 5
    assert completion_stub.count("summary") == 5


@pytest.mark.asyncio
async def test_short_icp_is_rejected_before_any_model_call(completion_stub):
    pipeline = LeadPipeline(completion_client=completion_stub)

    with pytest.raises(InvalidIcpError) as exc_info:
        await pipeline.run(GenerateRequest(icp_description="   short  "))

    assert exc_info.value.status_code == 400
    assert completion_stub.calls == []


@pytest.mark.asyncio
async def test_missing_completion_client_is_a_configuration_error():
    pipeline = LeadPipeline(completion_client=None)

    with pytest.raises(ConfigurationError) as exc_info:
        await pipeline.run(GenerateRequest(icp_description=ICP_TEXT))

    assert exc_info.value.status_code == 500
    assert "OPENAI_API_KEY" in str(exc_info.value)


@pytest.mark.asyncio
async def test_apollo_failure_falls_back_to_sample_leads(completion_stub, monkeypatch):
    stub_metrics = StubMetrics()
    monkeypatch.setattr(pipeline_module, "metrics", stub_metrics)
    apollo = StubApolloSource(error=ApolloError("Apollo people search failed: 500"))
    pipeline = LeadPipeline(completion_client=completion_stub, apollo_source=apollo)
    baseline = LeadPipeline(completion_client=StubCompletionClient())

    response = await pipeline.run(GenerateRequest(icp_description=ICP_TEXT))
    expected = await baseline.run(GenerateRequest(icp_description=ICP_TEXT))

    assert apollo.calls == 1
    assert response.source is LeadSource.FALLBACK_SAMPLE
    assert [lead.id for lead in response.leads] == [lead.id for lead in expected.leads]
    assert stub_metrics.count("pipeline.source_fallback") == 1


@pytest.mark.asyncio
async def test_empty_apollo_result_falls_back_to_sample_leads(completion_stub):
    pipeline = LeadPipeline(completion_client=completion_stub, apollo_source=StubApolloSource(leads=[]))

    response = await pipeline.run(GenerateRequest(icp_description=ICP_TEXT))

    assert response.source is LeadSource.FALLBACK_SAMPLE
    assert response.leads


@pytest.mark.asyncio
async def test_apollo_leads_are_ranked_and_tagged(completion_stub):
    apollo = StubApolloSource(
        leads=[
            _apollo_lead("1", "Quiet Co", title="Office Manager"),
            _apollo_lead("2", "Orbit"),
        ]
    )
    pipeline = LeadPipeline(completion_client=completion_stub, apollo_source=apollo)

    response = await pipeline.run(GenerateRequest(icp_description=ICP_TEXT))

    assert response.source is LeadSource.PRIMARY_PROVIDER
    assert [lead.id for lead in response.leads] == ["apollo-2", "apollo-1"]
    assert all(lead.source is LeadSource.PRIMARY_PROVIDER for lead in response.leads)
    assert response.leads[0].fit_score == 100
    assert response.leads[1].fit_score >= 30


@pytest.mark.asyncio
async def test_no_matching_leads_raises_not_found(completion_stub):
    pipeline = LeadPipeline(
        completion_client=completion_stub,
        sample_source=SampleLeadSource(leads=()),
    )

    with pytest.raises(NoLeadsMatchedError) as exc_info:
        await pipeline.run(GenerateRequest(icp_description=ICP_TEXT))

    assert exc_info.value.status_code == 404
    assert completion_stub.count("content") == 0


@pytest.mark.asyncio
async def test_unparseable_icp_reply_still_produces_deterministic_results():
    first = await LeadPipeline(completion_client=StubCompletionClient(icp_reply="no json")).run(
        GenerateRequest(icp_description=ICP_TEXT)
    )
    second = await LeadPipeline(completion_client=StubCompletionClient(icp_reply="no json")).run(
        GenerateRequest(icp_description=ICP_TEXT)
    )

    assert first.leads
    assert [(lead.id, lead.fit_score) for lead in first.leads] == [
        (lead.id, lead.fit_score) for lead in second.leads
    ]


@pytest.mark.asyncio
async def test_research_can_be_disabled(completion_stub):
    pipeline = LeadPipeline(
        completion_client=completion_stub,
        options=PipelineOptions(research_enabled=False, max_ranked_leads=2),
    )

    response = await pipeline.run(GenerateRequest(icp_description=ICP_TEXT))

    assert len(response.leads) == 2
    assert all(lead.research_brief is None for lead in response.leads)
    assert completion_stub.count("brief") == 0


@pytest.mark.asyncio
async def test_research_failure_does_not_fail_the_run():
    client = StubCompletionClient(fail_kinds={"brief": RuntimeError("boom")})

    response = await LeadPipeline(completion_client=client).run(GenerateRequest(icp_description=ICP_TEXT))

    assert response.leads
    assert all(lead.research_brief is None for lead in response.leads)
    assert all(lead.formatted_summary for lead in response.leads)


@pytest.mark.asyncio
async def test_custom_seller_context_reaches_the_email_prompt():
    seen_prompts: list[str] = []

    class RecordingClient(StubCompletionClient):
        async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
            if self.kind_of(system_prompt) == "content":
                seen_prompts.append(system_prompt)
            return await super().complete(system_prompt=system_prompt, user_prompt=user_prompt)

    seller = SellerContext(
        company_name="ShipIt",
        product_description="Release tooling",
        value_props=["Fewer rollbacks"],
        sender_name="Jo Park",
        sender_title="Founder",
    )
    await LeadPipeline(completion_client=RecordingClient()).run(
        GenerateRequest(icp_description=ICP_TEXT, company_context=seller)
    )

    assert seen_prompts
    assert all("ShipIt" in prompt and "Jo Park" in prompt for prompt in seen_prompts)


@pytest.mark.asyncio
async def test_aclose_closes_completion_client(completion_stub):
    async with LeadPipeline(completion_client=completion_stub):
        pass

    assert completion_stub.closed
