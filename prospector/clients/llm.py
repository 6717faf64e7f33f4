"""Text-completion port and its OpenAI implementation."""

from __future__ import annotations

import json
from typing import Any, Protocol

from openai import APIError as OpenAIAPIError
from openai import AsyncOpenAI
from openai import OpenAIError as OpenAIBaseError


class CompletionError(RuntimeError):
    """Raised when the completion provider fails or returns no text."""

    def __init__(self, message: str, code: str = "502_LLM_UPSTREAM") -> None:
        super().__init__(message)
        self.code = code


class TextCompletionClient(Protocol):
    """Minimal contract for a system + user prompt completion."""

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        ...


class OpenAICompletionClient:
    """Thin wrapper around the official OpenAI Responses API."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        temperature: float,
        timeout: float = 60.0,
        max_output_tokens: int = 1024,
    ) -> None:
        if not api_key:
            raise ValueError("OPENAI_API_KEY is required to create a completion client.")
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        try:
            response = await self._client.responses.create(
                model=self._model,
                temperature=self._temperature,
                max_output_tokens=self._max_output_tokens,
                input=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except OpenAIAPIError as exc:
            code = "429_RATE_LIMIT" if getattr(exc, "status_code", 500) == 429 else "502_LLM_UPSTREAM"
            raise CompletionError(f"OpenAI request failed: {getattr(exc, 'message', exc)}", code=code) from exc
        except OpenAIBaseError as exc:
            raise CompletionError(f"OpenAI request failed: {exc}") from exc
        return _extract_response_text(response)

    async def aclose(self) -> None:
        await self._client.close()


def _extract_response_text(response: Any) -> str:
    """Normalize OpenAI responses across SDK versions."""
    output_text = getattr(response, "output_text", None)
    if isinstance(output_text, str) and output_text.strip():
        return output_text.strip()

    text_chunks: list[str] = []
    for item in getattr(response, "output", None) or []:
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "output_text":
                text_chunks.append(getattr(content, "text", ""))
    if text_chunks:
        return "".join(text_chunks).strip()

    raise CompletionError("OpenAI response did not include text output.")


def strip_code_fences(raw_text: str) -> str:
    candidate = raw_text.strip()
    if candidate.startswith("```"):
        candidate = "\n".join(line for line in candidate.splitlines() if not line.strip().startswith("```")).strip()
    return candidate


def parse_json_payload(raw_text: str) -> dict[str, Any]:
    """Best-effort JSON decoding that tolerates code fences or prose."""
    candidate = strip_code_fences(raw_text)
    if candidate.startswith("{") and candidate.endswith("}"):
        payload = json.loads(candidate)
    else:
        start = candidate.find("{")
        end = candidate.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("Response did not contain JSON object.")
        payload = json.loads(candidate[start : end + 1])
    if not isinstance(payload, dict):
        raise ValueError("Response JSON must be an object.")
    return payload
