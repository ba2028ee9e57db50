"""Async wrapper resolving a place identifier into a PlaceDetail."""

import asyncio
import logging

import requests

from business_finder.core.errors import DetailFetchError, DetailTimeoutError
from business_finder.core.models import PlaceDetail, SearchConfig
from business_finder.etl.transform import to_place_detail
from business_finder.vendors import google_places

logger = logging.getLogger(__name__)


async def fetch_details(place_id: str, config: SearchConfig) -> PlaceDetail:
    try:
        payload = await asyncio.to_thread(
            google_places.place_details,
            place_id=place_id,
            api_key=config.api_key,
            timeout=config.request_timeout,
        )
    except requests.Timeout as exc:
        raise DetailTimeoutError(place_id, exc) from exc
    except (requests.RequestException, google_places.GooglePlacesError, ValueError) as exc:
        raise DetailFetchError(place_id, exc) from exc
    if not isinstance(payload, dict):
        raise DetailFetchError(place_id, google_places.GooglePlacesError("malformed place details result"))
    logger.debug("Fetched details for %s", place_id)
    return to_place_detail(payload)
