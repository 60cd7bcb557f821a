"""
Run every extractor concurrently and collect the parsed rates.
"""

import asyncio
from typing import Sequence

import structlog

from .core.content_api import ContentApiClient
from .core.models import ParsedRates
from .extractors.base import RateExtractor

logger = structlog.get_logger(__name__)


async def aggregate_rates(
    client: ContentApiClient,
    extractors: Sequence[RateExtractor],
) -> ParsedRates:
    """
    Run extractors concurrently on one shared client.

    Fail-fast: the first FetchError from a primary document propagates
    and the remaining extractors are cancelled and awaited first, so no
    request outlives the shared client. Nothing they parsed is returned.

    Args:
        client: Content API client shared by all extractors
        extractors: Extractors to run

    Returns:
        benefit id -> parsed rates, in extractor order

    Raises:
        FetchError: If any primary document cannot be fetched
    """
    logger.info("aggregation_started", extractors=len(extractors))

    tasks = [asyncio.ensure_future(extractor.extract(client)) for extractor in extractors]
    try:
        results = await asyncio.gather(*tasks)
    except Exception:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    parsed: ParsedRates = {
        extractor.benefit_id: rates for extractor, rates in zip(extractors, results)
    }

    logger.info(
        "aggregation_complete",
        benefits=len(parsed),
        values=sum(len(rates) for rates in parsed.values()),
    )
    return parsed
