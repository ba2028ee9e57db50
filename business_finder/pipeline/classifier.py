"""Website-status classification for fetched places."""

from typing import Iterable, Optional

from business_finder.core.models import BusinessResult, ExcludeProperWebsites, FilterPolicy, IncludeAll, PlaceDetail

MODES = ("no-website", "all")


def build_policy(mode: str, social_domains: Iterable[str]) -> FilterPolicy:
    """Map a CLI/HTTP search mode onto a filter policy."""
    domains = tuple(domain.strip() for domain in social_domains if domain and domain.strip())
    if mode == "no-website":
        return ExcludeProperWebsites(social_domains=domains)
    if mode == "all":
        return IncludeAll(social_domains=domains)
    raise ValueError(f"Unknown search mode: {mode!r}")


def is_social_profile(website: Optional[str], social_domains: Iterable[str]) -> bool:
    """Return True when the website URL points at one of the social-media domains."""
    if not website:
        return False
    lowered = website.lower()
    return any(domain.lower() in lowered for domain in social_domains if domain)


def classify(
    detail: PlaceDetail,
    category: str,
    policy: FilterPolicy,
    place_id: Optional[str] = None,
    search_location: Optional[str] = None,
) -> Optional[BusinessResult]:
    """Turn a place detail into a BusinessResult, or None when the policy excludes it.

    Places without a name are always dropped. Under ``ExcludeProperWebsites`` a
    place with an independent website is dropped; ``IncludeAll`` keeps every
    named place and only reports the website flags.
    """
    name = (detail.name or "").strip()
    if not name:
        return None

    website = (detail.website or "").strip() or None
    has_website = website is not None
    has_social_only = has_website and is_social_profile(website, policy.social_domains)

    if isinstance(policy, ExcludeProperWebsites) and has_website and not has_social_only:
        return None

    return BusinessResult(
        name=name,
        category=category,
        has_no_website=not has_website,
        has_social_only=has_social_only,
        website=website,
        address=detail.formatted_address,
        phone=detail.formatted_phone_number,
        rating=detail.rating,
        total_ratings=detail.user_ratings_total,
        location=detail.location,
        place_id=place_id,
        search_location=search_location,
    )
