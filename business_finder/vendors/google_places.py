"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Iterable, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"

REQUEST_TIMEOUT = 10
DETAIL_FIELDS = (
    "name",
    "formatted_address",
    "geometry",
    "rating",
    "user_ratings_total",
    "reviews",
    "opening_hours",
    "website",
    "formatted_phone_number",
)


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status


def _check_status(operation: str, payload: Dict[str, Any]) -> None:
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("%s failed: status=%s, error_message=%s", operation, status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or str(status), status=status)


def nearby_search(
    location: str,
    radius: float,
    api_key: str,
    keyword: Optional[str] = None,
    place_type: Optional[str] = None,
    pagetoken: Optional[str] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {"location": location, "radius": radius, "key": api_key}
    if keyword:
        params["keyword"] = keyword
    if place_type:
        params["type"] = place_type
    if pagetoken:
        params["pagetoken"] = pagetoken
    response = _SESSION.get(f"{_BASE_URL}/nearbysearch/json", params=params, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    _check_status("nearby_search", payload)
    return payload


def place_details(
    place_id: str,
    api_key: str,
    fields: Iterable[str] = DETAIL_FIELDS,
    timeout: float = REQUEST_TIMEOUT,
) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": ",".join(fields)}
    response = _SESSION.get(f"{_BASE_URL}/details/json", params=params, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    _check_status("place_details", payload)
    result = payload.get("result") or {}
    if not isinstance(result, dict):
        logger.error("place_details returned a malformed result for %s: %r", place_id, result)
        raise GooglePlacesError("malformed place details result")
    return result
