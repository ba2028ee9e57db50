"""Markdown export of search results."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from business_finder.core.models import BusinessResult
from business_finder.reporting.summary import (
    NO_WEBSITE_MODE,
    format_business_type,
    format_elapsed,
    group_by_category,
    star_rating,
    status_label,
)

logger = logging.getLogger(__name__)


def render_markdown(
    businesses: Sequence[BusinessResult],
    elapsed: Optional[float] = None,
    mode: str = NO_WEBSITE_MODE,
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = generated_at or datetime.now()
    title = "Businesses Without Proper Websites" if mode == NO_WEBSITE_MODE else "All Businesses"
    no_website = sum(1 for business in businesses if business.has_no_website)
    social_only = sum(1 for business in businesses if business.has_social_only)

    lines: List[str] = [
        f"# {title}",
        "",
        f"_Generated {generated_at:%Y-%m-%d %H:%M:%S}_",
        "",
        "## Summary",
        "",
        f"- **Total businesses:** {len(businesses)}",
        f"- **No website:** {no_website}",
        f"- **Social media only:** {social_only}",
    ]
    if elapsed is not None:
        lines.append(f"- **Search time:** {format_elapsed(elapsed)}")

    for category, group in group_by_category(businesses).items():
        lines.extend(["", f"## {format_business_type(category)} ({len(group)})", ""])
        for business in group:
            lines.append(f"### {business.name}")
            lines.append("")
            lines.append(f"- **Status:** {status_label(business)}")
            if business.search_location:
                lines.append(f"- **Search location:** {business.search_location}")
            if business.address:
                lines.append(f"- **Address:** {business.address}")
            if business.phone:
                lines.append(f"- **Phone:** {business.phone}")
            if business.rating:
                lines.append(
                    f"- **Rating:** {star_rating(business.rating)} {business.rating}/5 "
                    f"({business.total_ratings or 0} reviews)"
                )
            if business.website:
                lines.append(f"- **Website:** [{business.website}]({business.website})")
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def export_to_markdown(
    businesses: Sequence[BusinessResult],
    elapsed: Optional[float] = None,
    mode: str = NO_WEBSITE_MODE,
    directory: Union[str, Path] = ".",
) -> Path:
    """Write the markdown report to ``business-results-<mode>-<timestamp>.md``."""
    generated_at = datetime.now()
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"business-results-{mode}-{generated_at:%Y%m%d-%H%M%S}.md"
    path.write_text(render_markdown(businesses, elapsed, mode, generated_at), encoding="utf-8")
    logger.info("Exported %d businesses to %s", len(businesses), path)
    return path
