"""Concurrent detail fetching and classification for one chunk of stubs."""

import asyncio
import logging
from typing import List, Optional, Sequence

from business_finder.core.errors import DetailFetchError
from business_finder.core.models import BusinessResult, FilterPolicy, PlaceStub, SearchConfig
from business_finder.pipeline.classifier import classify
from business_finder.pipeline.details import fetch_details

logger = logging.getLogger(__name__)


async def _process_stub(
    stub: PlaceStub,
    category: str,
    policy: FilterPolicy,
    config: SearchConfig,
    search_location: Optional[str],
) -> Optional[BusinessResult]:
    try:
        detail = await fetch_details(stub.place_id, config)
    except DetailFetchError as exc:
        logger.warning("Failed to fetch details for %s (%s): %s", stub.name or stub.place_id, category, exc)
        return None

    result = classify(detail, category, policy, place_id=stub.place_id, search_location=search_location)
    if result is None:
        logger.debug("Excluded %s (%s) by website policy", detail.name or stub.place_id, category)
    return result


async def process_batch(
    stubs: Sequence[PlaceStub],
    category: str,
    policy: FilterPolicy,
    config: SearchConfig,
    search_location: Optional[str] = None,
) -> List[BusinessResult]:
    """Fetch and classify every stub of the batch concurrently.

    Stubs without a place id are skipped and a failed detail call only drops
    its own place. Results keep the order of the input stubs.
    """
    pending = []
    for stub in stubs:
        if not stub.place_id:
            logger.debug("Skipping result without place_id: %s", stub)
            continue
        pending.append(_process_stub(stub, category, policy, config, search_location))

    results = await asyncio.gather(*pending)
    return [result for result in results if result is not None]
