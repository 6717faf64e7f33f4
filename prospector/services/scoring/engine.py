"""Deterministic multi-factor fit scoring for candidate leads."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Final

from prospector.models.icp import StructuredICP
from prospector.models.lead import CandidateLead, ScoreComponent, ScoredLead

PROVIDER_BASELINE_BOOST: Final[int] = 30
DEFAULT_MAX_RESULTS: Final[int] = 5

TITLE_KEYWORDS: Final[tuple[str, ...]] = (
    "vp of engineering",
    "vp engineering",
    "head of engineering",
    "head of eng",
    "director of engineering",
    "chief technology officer",
    "cto",
    "engineering manager",
    "staff engineer",
    "principal engineer",
)
GENERIC_INDUSTRY_KEYWORDS: Final[tuple[str, ...]] = ("saas", "software")
US_REGION_ALIASES: Final[frozenset[str]] = frozenset({"us", "united states", "north america"})
US_LOCATION_MARKERS: Final[frozenset[str]] = frozenset(
    {
        "us", "usa", "united states",
        "al", "ak", "az", "ar", "ca", "co", "ct", "dc", "de", "fl", "ga", "hi", "id", "il", "in",
        "ia", "ks", "ky", "la", "me", "md", "ma", "mi", "mn", "ms", "mo", "mt", "ne", "nv", "nh",
        "nj", "nm", "ny", "nc", "nd", "oh", "ok", "or", "pa", "ri", "sc", "sd", "tn", "tx", "ut",
        "vt", "va", "wa", "wv", "wi", "wy",
    }
)
EU_REGION_ALIASES: Final[frozenset[str]] = frozenset({"eu", "europe"})
EU_COUNTRY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b(uk|united kingdom|europe|germany|france|netherlands|sweden|ireland|spain)\b"
)

ScoreResult = tuple[int, str]


def _normalize(value: str | None) -> str:
    return (value or "").lower().strip()


def _location_parts(location: str) -> set[str]:
    return {part.strip() for part in re.split(r"[,/]", location) if part.strip()}


def build_research_summary(lead: CandidateLead) -> str:
    """Flatten a lead's company facts into a single prompt-ready paragraph."""
    return (
        f"Company: {lead.company} ({lead.industry}), ~{lead.company_size} employees, "
        f"located in {lead.location}. "
        f"{lead.company_summary} "
        f"Tech stack: {', '.join(lead.tech_stack)}. "
        f"Currently hiring: {', '.join(lead.hiring_signals)}. "
        f"Funding history: {'; '.join(lead.funding_events)}."
    )


class LeadScoringEngine:
    """Scores candidate leads against a structured ICP without any I/O."""

    def __init__(self, *, provider_boost: int = PROVIDER_BASELINE_BOOST) -> None:
        self._provider_boost = provider_boost
        self._components: tuple[
            tuple[str, Callable[[CandidateLead, StructuredICP], tuple[str, int]]],
            ...,
        ] = (
            ("title", self._title_component),
            ("industry", self._industry_component),
            ("size", self._size_component),
            ("location", self._location_component),
            ("signals", self._signals_component),
        )

    def score(self, lead: CandidateLead, icp: StructuredICP) -> ScoreResult:
        """Return the clamped fit score and the research summary for one lead."""
        total = sum(item.points for item in self.breakdown(lead, icp))
        return _clamp(total, 0, 100), build_research_summary(lead)

    def breakdown(self, lead: CandidateLead, icp: StructuredICP) -> list[ScoreComponent]:
        items: list[ScoreComponent] = []
        for factor, builder in self._components:
            reason, points = builder(lead, icp)
            items.append(ScoreComponent(factor=factor, reason=reason, points=points))
        if lead.is_primary_provider and self._provider_boost:
            items.append(
                ScoreComponent(
                    factor="provider",
                    reason="Pre-filtered by the lead database search",
                    points=self._provider_boost,
                )
            )
        return items

    def score_lead(self, lead: CandidateLead, icp: StructuredICP) -> ScoredLead:
        breakdown = self.breakdown(lead, icp)
        fit_score = _clamp(sum(item.points for item in breakdown), 0, 100)
        return ScoredLead(
            **lead.model_dump(include=set(CandidateLead.model_fields)),
            fit_score=fit_score,
            research_summary=build_research_summary(lead),
            score_breakdown=breakdown,
        )

    def rank(
        self,
        leads: Iterable[CandidateLead],
        icp: StructuredICP,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> list[ScoredLead]:
        """Top-N leads by descending score; ties keep source order, zero scores never surface."""
        scored = [self.score_lead(lead, icp) for lead in leads]
        ranked = sorted(scored, key=lambda item: item.fit_score, reverse=True)
        return [lead for lead in ranked[:max_results] if lead.fit_score > 0]

    @staticmethod
    def _title_component(lead: CandidateLead, icp: StructuredICP) -> tuple[str, int]:
        title = _normalize(lead.title)
        for role in icp.roles:
            normalized_role = _normalize(role)
            if normalized_role and normalized_role in title:
                return f"Title '{lead.title}' matches target role '{role}'", 30
        for keyword in TITLE_KEYWORDS:
            if keyword in title:
                return f"Title '{lead.title}' is an engineering leadership role", 15
        return f"Title '{lead.title}' outside target roles", 0

    @staticmethod
    def _industry_component(lead: CandidateLead, icp: StructuredICP) -> tuple[str, int]:
        industry = _normalize(lead.industry)
        for target in icp.industries:
            normalized_target = _normalize(target)
            if normalized_target and normalized_target in industry:
                return f"Industry '{lead.industry}' matches '{target}'", 20
        if any(keyword in industry for keyword in GENERIC_INDUSTRY_KEYWORDS):
            return f"Industry '{lead.industry}' is software", 10
        return f"Industry '{lead.industry}' outside targets", 0

    @staticmethod
    def _size_component(lead: CandidateLead, icp: StructuredICP) -> tuple[str, int]:
        size_range = icp.company_size_range
        employees = lead.company_size
        if size_range.min <= employees <= size_range.max:
            return f"{employees} employees within {size_range.min}-{size_range.max}", 20
        if size_range.min * 0.8 <= employees <= size_range.max * 1.2:
            return f"{employees} employees near {size_range.min}-{size_range.max}", 10
        return f"{employees} employees outside {size_range.min}-{size_range.max}", 0

    @staticmethod
    def _location_component(lead: CandidateLead, icp: StructuredICP) -> tuple[str, int]:
        if not icp.locations:
            return "No location filter", 10
        location = _normalize(lead.location)
        parts = _location_parts(location)
        for target in icp.locations:
            normalized_target = _normalize(target)
            if normalized_target in ("", "any") or normalized_target in location:
                return f"Location '{lead.location}' matches '{target}'", 10
            if normalized_target in US_REGION_ALIASES and parts & US_LOCATION_MARKERS:
                return f"Location '{lead.location}' is in the US", 10
            if normalized_target in EU_REGION_ALIASES and EU_COUNTRY_PATTERN.search(location):
                return f"Location '{lead.location}' is in Europe", 10
        return f"Location '{lead.location}' outside target regions", 0

    @staticmethod
    def _signals_component(lead: CandidateLead, icp: StructuredICP) -> tuple[str, int]:
        haystack = " ".join(
            [
                *(_normalize(item) for item in lead.hiring_signals),
                *(_normalize(item) for item in lead.funding_events),
                *(_normalize(item) for item in lead.tech_stack),
                _normalize(lead.company_summary),
            ]
        )
        matched = [signal for signal in icp.signals if _normalize(signal) and _normalize(signal) in haystack]
        points = 5 * len(matched)
        if len(lead.hiring_signals) >= 2:
            points += 5
        if lead.funding_events:
            points += 5
        reason = f"Matched signals: {', '.join(matched)}" if matched else "No ICP signals matched"
        return reason, min(points, 20)


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


_DEFAULT_ENGINE = LeadScoringEngine()


def score(lead: CandidateLead, icp: StructuredICP) -> ScoreResult:
    """Module-level shortcut for a single lead."""
    return _DEFAULT_ENGINE.score(lead, icp)


def rank_leads(
    leads: Sequence[CandidateLead],
    icp: StructuredICP,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[ScoredLead]:
    return _DEFAULT_ENGINE.rank(leads, icp, max_results=max_results)
