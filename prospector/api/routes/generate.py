"""API endpoint for the ICP-to-outreach pipeline."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from prospector.config import settings
from prospector.models.outreach import ErrorResponse, GenerateRequest, GenerateResponse
from prospector.services.errors import PipelineError
from prospector.services.pipeline import LeadPipeline, build_pipeline

router = APIRouter()
logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to generate leads and emails."
APOLLO_FAILURE_HINT = "Apollo API error - check your APOLLO_API_KEY and plan permissions."


async def get_pipeline() -> AsyncIterator[LeadPipeline]:
    """Per-request pipeline; its HTTP clients are closed once the response is produced."""
    pipeline = build_pipeline(settings)
    try:
        yield pipeline
    finally:
        await pipeline.aclose()


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_leads(
    payload: GenerateRequest,
    pipeline: LeadPipeline = Depends(get_pipeline),
) -> GenerateResponse | JSONResponse:
    """Source, rank and draft outreach for the leads matching an ICP description."""
    try:
        return await pipeline.run(payload)
    except PipelineError as exc:
        logger.warning("generate.rejected", extra={"code": exc.code})
        return _error_response(exc.status_code, str(exc))
    except Exception as exc:
        logger.exception("generate.unexpected_error")
        message = str(exc) or "An unexpected error occurred."
        is_apollo_error = pipeline.apollo_enabled and "apollo" in message.lower()
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            APOLLO_FAILURE_HINT if is_apollo_error else GENERIC_FAILURE,
            detail=message,
        )


def _error_response(status_code: int, error: str, *, detail: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
