"""Utilities for transforming Google Places responses into pipeline models."""

import logging
from typing import Any, Dict, List, Optional

from business_finder.core.models import GeoPoint, PlaceDetail, PlaceReview, PlaceStub

logger = logging.getLogger(__name__)


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    try:
        if value is None:
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_location(geometry: Optional[Dict[str, Any]]) -> Optional[GeoPoint]:
    location = (geometry or {}).get("location") or {}
    lat = _safe_float(location.get("lat"))
    lng = _safe_float(location.get("lng"))
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)


def _parse_reviews(raw_reviews: Any) -> List[PlaceReview]:
    reviews: List[PlaceReview] = []
    for raw in raw_reviews or []:
        if not isinstance(raw, dict):
            continue
        reviews.append(
            PlaceReview(
                author_name=_strip_or_none(raw.get("author_name")),
                rating=_safe_float(raw.get("rating")),
                text=_strip_or_none(raw.get("text")),
                time=_safe_int(raw.get("time")),
            )
        )
    return reviews


def to_place_stub(result: Dict[str, Any]) -> PlaceStub:
    return PlaceStub(
        place_id=_strip_or_none(result.get("place_id")),
        name=_strip_or_none(result.get("name")),
    )


def to_place_detail(result: Dict[str, Any]) -> PlaceDetail:
    opening_hours = (result.get("opening_hours") or {}).get("weekday_text") or []
    return PlaceDetail(
        name=_strip_or_none(result.get("name")),
        website=_strip_or_none(result.get("website")),
        formatted_address=_strip_or_none(result.get("formatted_address")),
        formatted_phone_number=_strip_or_none(result.get("formatted_phone_number")),
        rating=_safe_float(result.get("rating")),
        user_ratings_total=_safe_int(result.get("user_ratings_total")),
        location=parse_location(result.get("geometry")),
        opening_hours=[str(line) for line in opening_hours],
        reviews=_parse_reviews(result.get("reviews")),
        raw=result,
    )
