"""Paged nearby search for one (scope, category) pair."""

import asyncio
import logging
from typing import List, Optional

import requests

from business_finder.core.categories import is_known_place_type
from business_finder.core.errors import SearchRequestError, SearchTimeoutError
from business_finder.core.models import PlaceStub, SearchConfig, SearchScope
from business_finder.etl.transform import to_place_stub
from business_finder.pipeline.timing import pause
from business_finder.vendors import google_places

logger = logging.getLogger(__name__)


async def search_places(scope: SearchScope, category: str, config: SearchConfig) -> List[PlaceStub]:
    """Collect the stubs of every result page for ``category`` around ``scope``.

    A ``next_page_token`` only becomes valid a short while after it is issued,
    so each follow-up request waits ``config.page_token_delay`` seconds first.
    Any request failure aborts the pagination and raises ``SearchRequestError``.
    """
    place_type = category if is_known_place_type(category) else None
    stubs: List[PlaceStub] = []
    page_token: Optional[str] = None
    processed_pages = 0

    while processed_pages < config.max_pages:
        if page_token:
            await pause(config.page_token_delay)
        try:
            response = await asyncio.to_thread(
                google_places.nearby_search,
                location=scope.center.as_param(),
                radius=scope.radius,
                api_key=config.api_key,
                keyword=category,
                place_type=place_type,
                pagetoken=page_token,
                timeout=config.request_timeout,
            )
        except requests.Timeout as exc:
            raise SearchTimeoutError(category, scope.label, exc) from exc
        except (requests.RequestException, google_places.GooglePlacesError, ValueError) as exc:
            raise SearchRequestError(category, scope.label, exc) from exc

        results = response.get("results") or []
        stubs.extend(to_place_stub(result) for result in results if isinstance(result, dict))
        processed_pages += 1
        logger.debug("Fetched %d %s results on page %d", len(results), category, processed_pages)

        page_token = response.get("next_page_token")
        if not page_token:
            break

    return stubs
