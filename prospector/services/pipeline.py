"""End-to-end run: normalize ICP, source and rank leads, generate outreach per lead."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from prospector.clients.apollo import ApolloClient
from prospector.clients.llm import OpenAICompletionClient, TextCompletionClient
from prospector.config import Settings, settings as default_settings
from prospector.models.icp import StructuredICP
from prospector.models.lead import ScoredLead
from prospector.models.outreach import (
    DEFAULT_SELLER_CONTEXT,
    EnrichedLead,
    GenerateRequest,
    GenerateResponse,
    LeadSource,
    PersonalizedEmail,
    SellerContext,
)
from prospector.observability.metrics import metrics
from prospector.services.errors import ConfigurationError, InvalidIcpError, NoLeadsMatchedError
from prospector.services.generation.content import ContentGenerator
from prospector.services.generation.icp_normalizer import IcpNormalizer
from prospector.services.generation.research import ResearchAssistant
from prospector.services.scoring.engine import LeadScoringEngine
from prospector.services.sourcing.apollo import ApolloLeadSource
from prospector.services.sourcing.sample import SampleLeadSource

logger = logging.getLogger(__name__)

MIN_ICP_LENGTH = 10


@dataclass(frozen=True)
class PipelineOptions:
    """Tunables for one pipeline instance."""

    apollo_fetch_limit: int = 10
    max_ranked_leads: int = 5
    research_enabled: bool = True

    @classmethod
    def from_settings(cls, config: Settings) -> "PipelineOptions":
        return cls(
            apollo_fetch_limit=config.apollo_fetch_limit,
            max_ranked_leads=config.max_ranked_leads,
            research_enabled=config.research_enabled,
        )


class LeadPipeline:
    """Sequences the collaborators and owns the failure-degradation policy."""

    def __init__(
        self,
        *,
        completion_client: TextCompletionClient | None,
        apollo_source: ApolloLeadSource | None = None,
        sample_source: SampleLeadSource | None = None,
        scoring_engine: LeadScoringEngine | None = None,
        options: PipelineOptions | None = None,
        apollo_client: ApolloClient | None = None,
    ) -> None:
        self._completion_client = completion_client
        self._apollo_source = apollo_source
        self._engine = scoring_engine or LeadScoringEngine()
        self._sample_source = sample_source or SampleLeadSource(engine=self._engine)
        self._options = options or PipelineOptions()
        self._apollo_client = apollo_client

    @property
    def apollo_enabled(self) -> bool:
        return self._apollo_source is not None

    async def run(self, request: GenerateRequest) -> GenerateResponse:
        icp_text = (request.icp_description or "").strip()
        if len(icp_text) < MIN_ICP_LENGTH:
            raise InvalidIcpError()
        if self._completion_client is None:
            raise ConfigurationError("Server configuration error: OPENAI_API_KEY is not set.")

        start = time.perf_counter()
        icp = await IcpNormalizer(self._completion_client).normalize(
            icp_text,
            request.geography,
            request.company_size,
        )
        ranked, source = await self._source_leads(icp)
        if not ranked:
            metrics.increment("pipeline.no_leads")
            raise NoLeadsMatchedError()

        seller = request.company_context or DEFAULT_SELLER_CONTEXT
        leads = await asyncio.gather(*(self._enrich_lead(lead, icp, seller, source) for lead in ranked))

        elapsed_ms = (time.perf_counter() - start) * 1000
        metrics.timing("pipeline.latency_ms", elapsed_ms, tags={"source": source.value})
        logger.info(
            "pipeline.complete",
            extra={"source": source.value, "leads": len(leads), "duration_ms": round(elapsed_ms, 2)},
        )
        return GenerateResponse(leads=list(leads), source=source)

    async def _source_leads(self, icp: StructuredICP) -> tuple[list[ScoredLead], LeadSource]:
        limit = self._options.max_ranked_leads
        if self._apollo_source is None:
            return self._sample_source.ranked(icp, limit), LeadSource.FALLBACK_SAMPLE

        try:
            candidates = await self._apollo_source.fetch(icp, self._options.apollo_fetch_limit)
        except Exception as exc:
            logger.error(
                "pipeline.source_fallback",
                extra={"reason": "provider_error", "error": str(exc), "code": getattr(exc, "code", None)},
            )
            metrics.increment("pipeline.source_fallback", tags={"reason": "provider_error"})
            return self._sample_source.ranked(icp, limit), LeadSource.FALLBACK_SAMPLE

        if not candidates:
            logger.warning("pipeline.source_fallback", extra={"reason": "empty_result"})
            metrics.increment("pipeline.source_fallback", tags={"reason": "empty_result"})
            return self._sample_source.ranked(icp, limit), LeadSource.FALLBACK_SAMPLE

        return self._engine.rank(candidates, icp, max_results=limit), LeadSource.PRIMARY_PROVIDER

    async def _enrich_lead(
        self,
        lead: ScoredLead,
        icp: StructuredICP,
        seller: SellerContext,
        source: LeadSource,
    ) -> EnrichedLead:
        client = self._completion_client
        research_brief: str | None = None
        formatted_summary: str | None = None
        if self._options.research_enabled:
            research = ResearchAssistant(client)
            research_brief, formatted_summary = await asyncio.gather(
                research.brief(lead, icp),
                research.format_summary(lead),
            )

        content = await ContentGenerator(client).generate(lead, icp, seller, research_brief)
        return EnrichedLead(
            **lead.model_dump(),
            fit_explanation=content.fit_explanation,
            personalized_email=PersonalizedEmail(subject=content.subject, body=content.body),
            research_brief=research_brief,
            formatted_summary=formatted_summary,
            source=source,
        )

    async def aclose(self) -> None:
        if self._apollo_client is not None:
            await self._apollo_client.aclose()
        close = getattr(self._completion_client, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "LeadPipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def build_pipeline(config: Settings | None = None) -> LeadPipeline:
    """Wire production collaborators from settings."""
    config = config or default_settings
    completion_client: TextCompletionClient | None = None
    if config.openai_api_key:
        completion_client = OpenAICompletionClient(
            config.openai_api_key,
            model=config.llm_model,
            temperature=config.llm_temperature,
            timeout=config.llm_timeout_seconds,
        )

    apollo_client: ApolloClient | None = None
    apollo_source: ApolloLeadSource | None = None
    if config.apollo_enabled:
        apollo_client = ApolloClient(
            config.apollo_api_key or "",
            base_url=config.apollo_base_url,
            timeout=config.apollo_timeout_seconds,
        )
        apollo_source = ApolloLeadSource(apollo_client)

    return LeadPipeline(
        completion_client=completion_client,
        apollo_source=apollo_source,
        options=PipelineOptions.from_settings(config),
        apollo_client=apollo_client,
    )
