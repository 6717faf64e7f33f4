"""Two-phase Apollo sourcing: free people search, then paid per-company enrichment.

Phase 1 asks ``/mixed_people/api_search`` for ``2 * max_results`` people matching the
ICP (falling back to ``/mixed_people/search`` when the key is not allowed to use it),
collapses them to one person per company, and phase 2 enriches every unique company
concurrently. An enrichment miss or failure only degrades that one candidate.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Final

from prospector.clients.apollo import (
    API_SEARCH_PATH,
    PEOPLE_SEARCH_PATH,
    ApolloClient,
    ApolloPermissionError,
)
from prospector.models.icp import StructuredICP
from prospector.models.lead import APOLLO_ID_PREFIX, CandidateLead
from prospector.observability.metrics import metrics

logger = logging.getLogger(__name__)

MAX_QUERY_TITLES: Final[int] = 5
EMPLOYEE_RANGE_CEILING: Final[int] = 10000
MAX_TECH_STACK: Final[int] = 8
MAX_FUNDING_EVENTS: Final[int] = 2
MAX_SUMMARY_CHARS: Final[int] = 400
ENGINEERING_SHARE: Final[float] = 0.25
ENGINEERING_ESTIMATE_MIN_EMPLOYEES: Final[int] = 50
DEFAULT_COMPANY_SIZE: Final[int] = 200
DEFAULT_TECH_STACK: Final[tuple[str, ...]] = ("AWS", "GitHub")

LEGAL_SUFFIX_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s+(inc|llc|corp|ltd|co|hq|group)\.?$", re.IGNORECASE)
TECH_ALLOW_LIST: Final[tuple[str, ...]] = (
    "kubernetes", "docker", "github", "gitlab", "jenkins", "circleci", "terraform", "aws", "gcp",
    "azure", "python", "java", "node", "react", "typescript", "go", "rust", "redis", "kafka",
    "postgres", "mysql", "datadog", "sentry", "pagerduty", "jira", "linear",
)
REGION_LOCATIONS: Final[dict[str, tuple[str, ...]]] = {
    "us": ("United States",),
    "united states": ("United States",),
    "north america": ("United States", "Canada"),
    "eu": ("United Kingdom", "Germany", "France", "Netherlands", "Sweden"),
}


@dataclass(frozen=True)
class ApolloPerson:
    """Person record normalized across both search endpoints."""

    id: str
    first_name: str
    last_name: str | None
    title: str | None
    organization_name: str


def person_from_api_search(raw: Mapping[str, Any]) -> ApolloPerson:
    """``api_search`` returns obfuscated last names and a bare organization object."""
    organization = raw.get("organization") or {}
    return ApolloPerson(
        id=str(raw.get("id") or ""),
        first_name=raw.get("first_name") or "",
        last_name=raw.get("last_name_obfuscated"),
        title=raw.get("title"),
        organization_name=(organization.get("name") or "").strip(),
    )


def person_from_people_search(raw: Mapping[str, Any]) -> ApolloPerson:
    """``mixed_people/search`` returns full last names and a richer organization object."""
    organization = raw.get("organization") or {}
    return ApolloPerson(
        id=str(raw.get("id") or ""),
        first_name=raw.get("first_name") or "",
        last_name=raw.get("last_name") or raw.get("last_name_obfuscated"),
        title=raw.get("title"),
        organization_name=(organization.get("name") or raw.get("organization_name") or "").strip(),
    )


def map_locations(locations: Iterable[str]) -> list[str]:
    """Translate ICP geography into Apollo ``organization_locations[]`` values."""
    mapped: list[str] = []
    for location in locations:
        normalized = location.lower().strip()
        if normalized in ("", "any"):
            continue
        mapped.extend(REGION_LOCATIONS.get(normalized, (location,)))
    return mapped


def infer_seniorities(roles: Sequence[str]) -> list[str]:
    role_text = " ".join(roles).lower()
    seniorities: list[str] = []
    if "vp" in role_text or "vice president" in role_text:
        seniorities.append("vp")
    if "head" in role_text or "director" in role_text:
        seniorities.extend(["head", "director"])
    if "cto" in role_text or "chief" in role_text:
        seniorities.append("c_suite")
    return seniorities


def build_people_search_params(icp: StructuredICP, per_page: int) -> list[tuple[str, str]]:
    """Query string shared by both people search endpoints."""
    params: list[tuple[str, str]] = [("person_titles[]", role) for role in icp.roles[:MAX_QUERY_TITLES]]
    params.extend(("person_seniorities[]", seniority) for seniority in infer_seniorities(icp.roles))

    size_range = icp.company_size_range
    size_max = EMPLOYEE_RANGE_CEILING if size_range.is_open_ended else size_range.max
    params.append(("organization_num_employees_ranges[]", f"{size_range.min},{size_max}"))

    params.extend(("organization_locations[]", location) for location in map_locations(icp.locations))
    params.append(("per_page", str(per_page)))
    return params


def derive_company_domain(company_name: str) -> str:
    """Best guess at a company's primary domain, e.g. "Memo Health" -> "memohealth.com"."""
    stripped = LEGAL_SUFFIX_PATTERN.sub("", company_name.lower().strip())
    return re.sub(r"[^a-z0-9]", "", stripped) + ".com"


def dedupe_by_company(people: Iterable[ApolloPerson], max_results: int) -> list[ApolloPerson]:
    """Keep the first person per company, dropping records without a company name."""
    seen: set[str] = set()
    unique: list[ApolloPerson] = []
    for person in people:
        if len(unique) >= max_results:
            break
        company_key = person.organization_name.lower().strip()
        if not company_key or company_key in seen:
            continue
        seen.add(company_key)
        unique.append(person)
    return unique


def _parse_event_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_funding_event(event: Mapping[str, Any]) -> str:
    """Render as "<type> $<amount> led by <first investor> (<Mon YYYY>)", skipping absent parts."""
    text = str(event.get("type") or "Funding round")
    if event.get("amount"):
        text += f" ${event['amount']}"
    investors = str(event.get("investors") or "")
    lead_investor = investors.split(",")[0].strip()
    if lead_investor:
        text += f" led by {lead_investor}"
    event_date = _parse_event_date(event.get("date"))
    if event_date:
        text += f" ({event_date.strftime('%b %Y')})"
    return text


def recent_funding_events(events: Sequence[Mapping[str, Any]]) -> list[str]:
    ordered = sorted(
        events,
        key=lambda event: _parse_event_date(event.get("date")) or date.min,
        reverse=True,
    )
    return [format_funding_event(event) for event in ordered[:MAX_FUNDING_EVENTS]]


def filter_tech_stack(technologies: Iterable[str]) -> list[str]:
    relevant = [tech for tech in technologies if any(keyword in tech.lower() for keyword in TECH_ALLOW_LIST)]
    return relevant[:MAX_TECH_STACK]


def infer_hiring_signals(organization: Mapping[str, Any] | None) -> list[str]:
    """Hiring activity is inferred from funding stage and headcount, never fetched."""
    if not organization:
        return []
    signals: list[str] = []
    stage = organization.get("latest_funding_stage")
    if stage:
        signals.append(f"Recently completed {stage} round, likely scaling engineering team")
    employees = organization.get("estimated_num_employees") or 0
    if employees > ENGINEERING_ESTIMATE_MIN_EMPLOYEES:
        engineers = math.floor(employees * ENGINEERING_SHARE + 0.5)
        signals.append(f"Engineering team at ~{engineers}-person scale (est. 25% of {employees} total)")
    return signals


def map_to_candidate(person: ApolloPerson, organization: Mapping[str, Any] | None) -> CandidateLead:
    """Merge a person record with its (possibly missing) organization enrichment."""
    org = organization or {}
    company = org.get("name") or person.organization_name or "Unknown Company"
    name = f"{person.first_name} {person.last_name}".strip() if person.last_name else person.first_name
    employees = org.get("estimated_num_employees")
    industry = org.get("industry")

    if organization is not None:
        location = ", ".join(part for part in (org.get("city"), org.get("state"), org.get("country")) if part)
    else:
        location = "United States"

    description = (org.get("short_description") or "")[:MAX_SUMMARY_CHARS]
    summary = description or (
        f"{company} is a {industry or 'software'} company with approximately "
        f"{employees or 'unknown'} employees."
    )
    tech_stack = filter_tech_stack(org.get("technology_names") or [])

    return CandidateLead(
        id=f"{APOLLO_ID_PREFIX}{person.id}",
        name=name,
        title=person.title or "Engineering Leader",
        linkedin_url=f"https://linkedin.com/in/search?q={person.first_name}" if person.first_name else None,
        company=company,
        company_size=employees or DEFAULT_COMPANY_SIZE,
        location=location,
        industry=industry or "Software",
        tech_stack=tech_stack or list(DEFAULT_TECH_STACK),
        hiring_signals=infer_hiring_signals(organization),
        funding_events=recent_funding_events(org.get("funding_events") or []),
        company_summary=summary,
    )


class ApolloLeadSource:
    """Produces candidate leads from Apollo for a structured ICP."""

    def __init__(self, client: ApolloClient) -> None:
        self._client = client

    async def fetch(self, icp: StructuredICP, max_results: int = 10) -> list[CandidateLead]:
        """Up to ``max_results`` candidates, one per company; empty when nothing matches."""
        people = await self._search_people(icp, per_page=max_results * 2)
        if not people:
            logger.info("apollo.search_empty", extra={"roles": icp.roles[:MAX_QUERY_TITLES]})
            return []

        unique_people = dedupe_by_company(people, max_results)
        organizations = await asyncio.gather(*(self._enrich(person) for person in unique_people))
        candidates = [
            map_to_candidate(person, organization)
            for person, organization in zip(unique_people, organizations, strict=True)
        ]
        logger.info(
            "apollo.sourced",
            extra={
                "people": len(people),
                "unique_companies": len(unique_people),
                "enriched": sum(1 for organization in organizations if organization),
            },
        )
        return candidates

    async def _search_people(self, icp: StructuredICP, *, per_page: int) -> list[ApolloPerson]:
        params = build_people_search_params(icp, per_page)
        attempts: tuple[tuple[str, Callable[[Mapping[str, Any]], ApolloPerson]], ...] = (
            (API_SEARCH_PATH, person_from_api_search),
            (PEOPLE_SEARCH_PATH, person_from_people_search),
        )
        for index, (endpoint, adapter) in enumerate(attempts):
            try:
                raw_people = await self._client.search_people(params, endpoint=endpoint)
            except ApolloPermissionError:
                if index == len(attempts) - 1:
                    raise
                logger.warning(
                    "apollo.search_forbidden",
                    extra={"endpoint": endpoint, "fallback": attempts[index + 1][0]},
                )
                metrics.increment("apollo.search_fallback", tags={"endpoint": endpoint})
                continue
            return [adapter(raw) for raw in raw_people]
        return []

    async def _enrich(self, person: ApolloPerson) -> dict[str, Any] | None:
        domain = derive_company_domain(person.organization_name)
        try:
            organization = await self._client.enrich_organization(domain)
        except Exception as exc:
            code = getattr(exc, "code", type(exc).__name__)
            logger.warning(
                "apollo.enrich_failed",
                extra={"domain": domain, "code": code, "error": str(exc)},
            )
            metrics.increment("apollo.enrich_errors", tags={"code": code})
            return None
        if organization is None:
            logger.info("apollo.enrich_not_found", extra={"domain": domain})
        return organization
