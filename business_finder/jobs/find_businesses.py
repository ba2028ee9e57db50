"""CLI job to find businesses without a proper website."""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from business_finder.core.categories import KNOWN_PLACE_TYPES, LIKELY_CLIENT_TYPES
from business_finder.core.config import get_settings, split_csv
from business_finder.core.errors import ConfigurationError, SearchDeadlineError
from business_finder.core.models import GeoPoint, SearchOutcome, SearchScope
from business_finder.pipeline.classifier import MODES, build_policy
from business_finder.pipeline.orchestrator import find_businesses, find_businesses_multi
from business_finder.reporting.markdown import export_to_markdown
from business_finder.reporting.summary import format_results, format_search_parameters

logger = logging.getLogger(__name__)


def parse_location(value: str, default_radius: Optional[float] = None) -> SearchScope:
    """Parse ``NAME:LAT,LNG[:RADIUS]`` into a labelled SearchScope."""
    parts = value.split(":")
    if len(parts) not in (2, 3) or not parts[0].strip():
        raise ConfigurationError(f"expected NAME:LAT,LNG[:RADIUS], got {value!r}")
    name, coords = parts[0].strip(), parts[1]
    try:
        lat_raw, lng_raw = coords.split(",")
        center = GeoPoint(lat=float(lat_raw), lng=float(lng_raw))
        radius = float(parts[2]) if len(parts) == 3 else default_radius
    except ValueError as exc:
        raise ConfigurationError(f"invalid coordinates or radius in {value!r}") from exc
    if radius is None:
        radius = get_settings().default_radius
    return SearchScope(center=center, radius=radius, label=name)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="business-finder",
        description="Find businesses without a proper website using the Google Places API",
    )
    parser.add_argument("-m", "--mode", choices=MODES, default="no-website", help="Search mode")
    parser.add_argument("--lat", type=float, default=settings.default_lat, help="Latitude for search center")
    parser.add_argument("--lng", type=float, default=settings.default_lng, help="Longitude for search center")
    parser.add_argument(
        "-r", "--radius", type=float, default=settings.default_radius, help="Search radius in meters"
    )
    parser.add_argument(
        "-t",
        "--types",
        dest="business_types",
        default=",".join(settings.business_types),
        help="Comma-separated list of business types (e.g. 'car_repair,restaurant')",
    )
    parser.add_argument(
        "--location",
        dest="locations",
        action="append",
        default=[],
        metavar="NAME:LAT,LNG[:RADIUS]",
        help="Named search location; repeat to search several locations (radius defaults to --radius)",
    )
    parser.add_argument("--api-key", dest="api_key", default=settings.google_api_key, help="Google Maps API key")
    parser.add_argument(
        "--social-domains",
        dest="social_domains",
        default=",".join(settings.social_media_domains),
        help="Comma-separated social media domains counted as 'social media only'",
    )
    parser.add_argument(
        "--batch-size",
        dest="batch_size",
        type=int,
        default=settings.batch_size,
        help="Number of place details fetched concurrently",
    )
    parser.add_argument(
        "--batch-delay",
        dest="batch_delay",
        type=int,
        default=settings.batch_delay_ms,
        help="Delay in milliseconds between batches",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Overall run deadline in seconds")
    parser.add_argument(
        "-e", "--export", action="store_true", default=settings.export_results, help="Export results to Markdown"
    )
    parser.add_argument("--export-dir", dest="export_dir", default=".", help="Directory for the Markdown export")
    parser.add_argument("--list-types", dest="list_types", action="store_true", help="List known business types")
    return parser


def run_find_businesses(args: argparse.Namespace) -> SearchOutcome:
    settings = get_settings()
    categories = list(split_csv(args.business_types))
    policy = build_policy(args.mode, split_csv(args.social_domains))
    config = settings.to_search_config(
        api_key=args.api_key,
        batch_size=args.batch_size,
        batch_delay_ms=args.batch_delay,
        run_timeout=args.timeout,
    )

    if args.locations:
        scopes: List[SearchScope] = [parse_location(raw, args.radius) for raw in args.locations]
        print(format_search_parameters(scopes, categories))
        outcome = find_businesses_multi(scopes, categories, policy, config)
    else:
        scope = SearchScope(center=GeoPoint(lat=args.lat, lng=args.lng), radius=args.radius)
        print(format_search_parameters([scope], categories))
        outcome = find_businesses(scope, categories, policy, config)

    print()
    print(format_results(outcome.results, mode=args.mode, elapsed=outcome.elapsed, failures=outcome.failures))

    if args.export and outcome.results:
        path = export_to_markdown(outcome.results, outcome.elapsed, args.mode, args.export_dir)
        print(f"\nResults exported to {path}")
    return outcome


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    raw_args = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not raw_args:
        print("No command-line arguments provided. Displaying help:\n")
        parser.print_help()
        return

    args = parser.parse_args(raw_args)
    if args.list_types:
        print("Suggested business types: " + ", ".join(LIKELY_CLIENT_TYPES))
        print("Known business types: " + ", ".join(sorted(KNOWN_PLACE_TYPES)))
        return

    try:
        run_find_businesses(args)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except SearchDeadlineError as exc:
        logger.error("Search stopped: %s", exc)
        print()
        print(format_results(exc.partial, mode=args.mode))
        raise SystemExit(1) from exc
    except Exception as exc:  # noqa: BLE001
        logger.error("Error running search: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
