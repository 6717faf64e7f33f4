"""Free-form ICP text to StructuredICP via the completion model."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from prospector.clients.llm import TextCompletionClient, parse_json_payload
from prospector.models.icp import StructuredICP
from prospector.observability.metrics import metrics
from prospector.services.generation.prompting import load_prompt

logger = logging.getLogger(__name__)


def build_icp_user_prompt(icp_text: str, geography_hint: str | None = None, size_hint: str | None = None) -> str:
    """Append UI filter selections so the model factors them in."""
    content = icp_text.strip()
    if geography_hint and geography_hint.strip().lower() != "any":
        content += f"\n\nGeography filter (from UI): {geography_hint.strip()}"
    if size_hint and size_hint.strip():
        content += f"\nCompany size filter (from UI): {size_hint.strip()} employees"
    return content


class IcpNormalizer:
    """Turns ICP prose into a StructuredICP; a malformed reply yields the default profile."""

    def __init__(self, client: TextCompletionClient, *, system_prompt: str | None = None) -> None:
        self._client = client
        self._system_prompt = system_prompt or load_prompt("icp_normalization")

    async def normalize(
        self,
        icp_text: str,
        geography_hint: str | None = None,
        size_hint: str | None = None,
    ) -> StructuredICP:
        reply = await self._client.complete(
            system_prompt=self._system_prompt,
            user_prompt=build_icp_user_prompt(icp_text, geography_hint, size_hint),
        )
        try:
            return StructuredICP.model_validate(parse_json_payload(reply))
        except (TypeError, ValueError, ValidationError) as exc:
            logger.warning("icp.parse_fallback", extra={"error": str(exc)[:200]})
            metrics.increment("icp.parse_fallback")
            return StructuredICP.fallback()
