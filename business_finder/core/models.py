"""Core data models shared by the business finder pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lng: float

    def as_param(self) -> str:
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True, slots=True)
class SearchScope:
    """One search area: a center, a radius in meters and an optional label."""

    center: GeoPoint
    radius: float
    label: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ExcludeProperWebsites:
    """Keep only places with no website or a social-media profile as website."""

    social_domains: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class IncludeAll:
    """Keep every named place; social domains only feed the ``has_social_only`` flag."""

    social_domains: Tuple[str, ...] = ()


FilterPolicy = Union[ExcludeProperWebsites, IncludeAll]


@dataclass(slots=True)
class PlaceStub:
    place_id: Optional[str]
    name: Optional[str] = None


@dataclass(slots=True)
class PlaceReview:
    author_name: Optional[str] = None
    rating: Optional[float] = None
    text: Optional[str] = None
    time: Optional[int] = None


@dataclass(slots=True)
class PlaceDetail:
    """Normalized place-details record returned by the Places API."""

    name: Optional[str] = None
    website: Optional[str] = None
    formatted_address: Optional[str] = None
    formatted_phone_number: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    location: Optional[GeoPoint] = None
    opening_hours: List[str] = field(default_factory=list)
    reviews: List[PlaceReview] = field(default_factory=list)
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False)


@dataclass(slots=True)
class BusinessResult:
    """A classified business, tagged with the category query that found it."""

    name: str
    category: str
    has_no_website: bool
    has_social_only: bool
    website: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    rating: Optional[float] = None
    total_ratings: Optional[int] = None
    location: Optional[GeoPoint] = None
    place_id: Optional[str] = None
    search_location: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Per-run settings passed explicitly through the pipeline."""

    api_key: str
    batch_size: int = 5
    batch_delay_ms: int = 200
    max_pages: int = 3
    page_token_delay: float = 2.0
    request_timeout: float = 10.0
    run_timeout: Optional[float] = None


@dataclass(slots=True)
class SearchFailure:
    category: str
    search_location: Optional[str]
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SearchOutcome:
    """Deduplicated results of a run plus the categories that could not be searched."""

    results: List[BusinessResult] = field(default_factory=list)
    failures: List[SearchFailure] = field(default_factory=list)
    elapsed: float = 0.0

    def __iter__(self) -> Iterator[BusinessResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def no_website_count(self) -> int:
        return sum(1 for result in self.results if result.has_no_website)

    @property
    def social_only_count(self) -> int:
        return sum(1 for result in self.results if result.has_social_only)
