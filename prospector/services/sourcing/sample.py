"""Offline lead source backed by the bundled sample set."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from prospector.models.icp import StructuredICP
from prospector.models.lead import CandidateLead, ScoredLead
from prospector.services.scoring.engine import DEFAULT_MAX_RESULTS, LeadScoringEngine
from prospector.services.sourcing.sample_leads import SAMPLE_LEADS

logger = logging.getLogger(__name__)


class SampleLeadSource:
    """Scores the bundled seed leads; no network calls, same output for the same ICP."""

    def __init__(
        self,
        leads: Sequence[CandidateLead] = SAMPLE_LEADS,
        *,
        engine: LeadScoringEngine | None = None,
    ) -> None:
        self._leads = tuple(leads)
        self._engine = engine or LeadScoringEngine()

    def ranked(self, icp: StructuredICP, max_results: int = DEFAULT_MAX_RESULTS) -> list[ScoredLead]:
        ranked = self._engine.rank(self._leads, icp, max_results=max_results)
        logger.info(
            "sample_source.ranked",
            extra={"candidates": len(self._leads), "ranked": len(ranked)},
        )
        return ranked
