"""Console report helpers for search results."""

from typing import Dict, Iterable, List, Optional, Sequence

from business_finder.core.models import BusinessResult, SearchFailure, SearchScope

NO_WEBSITE_MODE = "no-website"
ALL_MODE = "all"


def format_business_type(category: str) -> str:
    """``car_repair`` -> ``Car Repair``."""
    return " ".join(word[:1].upper() + word[1:] for word in category.split("_") if word)


def format_elapsed(seconds: float) -> str:
    elapsed_ms = int(round(seconds * 1000))
    if elapsed_ms < 1000:
        return f"{elapsed_ms}ms"
    if elapsed_ms < 60000:
        return f"{elapsed_ms / 1000:.2f}s"
    minutes, remainder = divmod(elapsed_ms, 60000)
    return f"{minutes}m {remainder / 1000:.1f}s"


def group_by_category(businesses: Iterable[BusinessResult]) -> Dict[str, List[BusinessResult]]:
    grouped: Dict[str, List[BusinessResult]] = {}
    for business in businesses:
        grouped.setdefault(business.category, []).append(business)
    return grouped


def status_label(business: BusinessResult) -> str:
    if business.has_no_website:
        return "No website"
    if business.has_social_only:
        return "Social media only"
    return "Has website"


def star_rating(rating: Optional[float]) -> str:
    if not rating:
        return ""
    return "⭐" * int(round(rating))


def format_search_parameters(scopes: Sequence[SearchScope], categories: Sequence[str]) -> str:
    lines = ["🔍 Search Parameters:"]
    for scope in scopes:
        prefix = f"{scope.label}: " if scope.label else ""
        lines.append(f"Location: {prefix}{scope.center.lat}, {scope.center.lng}")
        lines.append(f"Radius: {scope.radius / 1000:g} km")
    lines.append(f"Business Types: {', '.join(categories)}")
    return "\n".join(lines)


def _business_lines(business: BusinessResult) -> List[str]:
    lines = [f"- {business.name} ({status_label(business)})"]
    if business.search_location:
        lines.append(f"  🗺  {business.search_location}")
    if business.address:
        lines.append(f"  📍 {business.address}")
    if business.phone:
        lines.append(f"  📞 {business.phone}")
    if business.rating:
        lines.append(f"  {star_rating(business.rating)} {business.rating}/5 ({business.total_ratings or 0} reviews)")
    if business.website:
        lines.append(f"  🔗 {business.website}")
    return lines


def format_results(
    businesses: Sequence[BusinessResult],
    mode: str = NO_WEBSITE_MODE,
    elapsed: Optional[float] = None,
    failures: Sequence[SearchFailure] = (),
) -> str:
    """Render the grouped console report for either search mode."""
    subject = "businesses without proper websites" if mode == NO_WEBSITE_MODE else "businesses"
    lines: List[str] = []
    if not businesses:
        lines.append(f"No {subject} found.")
    else:
        lines.append(f"✅ Found {len(businesses)} {subject}:")
        for category, group in group_by_category(businesses).items():
            lines.append("")
            lines.append(f"{format_business_type(category)} ({len(group)}):")
            for business in group:
                lines.extend(_business_lines(business))

        no_website = sum(1 for business in businesses if business.has_no_website)
        social_only = sum(1 for business in businesses if business.has_social_only)
        lines.append("")
        lines.append("📊 Summary:")
        lines.append(f"• Total {subject}: {len(businesses)}")
        lines.append(f"• Businesses with no website: {no_website}")
        lines.append(f"• Businesses with social media only: {social_only}")
        if mode == ALL_MODE:
            lines.append(f"• Businesses with their own website: {len(businesses) - no_website - social_only}")
        if elapsed is not None:
            lines.append(f"• Search completed in: {format_elapsed(elapsed)}")

    if failures:
        lines.append("")
        lines.append("⚠️  Categories that could not be searched:")
        for failure in failures:
            lines.append(f"- {failure.category}: {failure.error}")
    return "\n".join(lines)
