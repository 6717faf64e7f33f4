"""Command-line entrypoint that runs the lead pipeline once and emits the JSON response."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from prospector.config import settings
from prospector.models.outreach import GenerateRequest, GenerateResponse, SellerContext
from prospector.services.errors import PipelineError
from prospector.services.pipeline import build_pipeline

logger = logging.getLogger("prospector.cli")


async def run_once(request: GenerateRequest) -> GenerateResponse:
    async with build_pipeline(settings) as pipeline:
        return await pipeline.run(request)


def load_seller_context(path: Path | None) -> SellerContext | None:
    if path is None:
        return None
    with path.open("r", encoding="utf-8") as infile:
        return SellerContext.model_validate(json.load(infile))


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    """CLI argument parsing."""
    parser = argparse.ArgumentParser(description="Generate ranked leads and outreach drafts for an ICP.")
    parser.add_argument("--icp", required=True, help="Free-form ideal customer profile description.")
    parser.add_argument("--geography", default=None, help="Geography filter, e.g. US, EU, North America.")
    parser.add_argument("--company-size", default=None, help="Company size filter, e.g. 200-500.")
    parser.add_argument(
        "--seller",
        type=Path,
        default=None,
        help="JSON file describing the seller (companyName, productDescription, valueProps, ...).",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write the JSON response here instead of stdout.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint for a single pipeline run."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    args = parse_args(argv if argv is not None else sys.argv[1:])
    request = GenerateRequest(
        icp_description=args.icp,
        geography=args.geography,
        company_size=args.company_size,
        company_context=load_seller_context(args.seller),
    )
    try:
        response = asyncio.run(run_once(request))
    except PipelineError as exc:
        logger.error("Pipeline failed: %s (code=%s)", exc, exc.code)
        return 1
    except Exception as exc:  # pragma: no cover - safety net
        logger.exception("Unexpected error during pipeline run: %s", exc)
        return 1

    rendered = response.model_dump_json(by_alias=True, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(rendered + "\n", encoding="utf-8")
        logger.info("Wrote %s leads to %s.", len(response.leads), args.output)
    else:
        print(rendered)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
