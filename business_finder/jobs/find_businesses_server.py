"""HTTP entrypoint that runs business searches (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from business_finder.core.categories import KNOWN_PLACE_TYPES, LIKELY_CLIENT_TYPES
from business_finder.core.config import get_settings, split_csv
from business_finder.core.errors import ConfigurationError, SearchDeadlineError
from business_finder.core.models import GeoPoint, SearchOutcome, SearchScope
from business_finder.pipeline.classifier import MODES, build_policy
from business_finder.pipeline.orchestrator import find_businesses, find_businesses_multi

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)


class PayloadError(ValueError):
    """Raised when the request body cannot be turned into a search."""


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; only reads settings."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": getattr(settings, "worker_port", None),
                "api_key_configured": bool(settings.google_api_key),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/categories")
def categories() -> Any:
    return jsonify({"data": {"suggested": list(LIKELY_CLIENT_TYPES), "known": sorted(KNOWN_PLACE_TYPES)}}), 200


@app.post("/search")
def run_search() -> Any:
    """
    Run a business search and return the classified results.
    Single area: lat, lng, radius. Several areas: locations=[{name, lat, lng, radius}].
    Optional: business_types (list or comma string), mode, social_media_domains,
    batch_size, batch_delay, timeout.
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    settings = get_settings()

    try:
        mode = str(payload.get("mode", "no-website"))
        if mode not in MODES:
            raise PayloadError(f"mode must be one of: {', '.join(MODES)}")
        categories = _as_list(payload.get("business_types")) or list(settings.business_types)
        domains = _as_list(payload.get("social_media_domains")) or list(settings.social_media_domains)
        config = settings.to_search_config(
            batch_size=_optional_int(payload, "batch_size"),
            batch_delay_ms=_optional_int(payload, "batch_delay"),
            run_timeout=_optional_float(payload, "timeout"),
        )
        scopes = _parse_scopes(payload, settings.default_radius)
    except PayloadError as exc:
        return jsonify({"error": str(exc)}), 400

    policy = build_policy(mode, domains)
    logger.info("Running %s search for %s over %d location(s)", mode, categories, len(scopes or [None]))

    try:
        if scopes is None:
            radius = _optional_float(payload, "radius")
            scope = SearchScope(
                center=GeoPoint(lat=_required_float(payload, "lat"), lng=_required_float(payload, "lng")),
                radius=settings.default_radius if radius is None else radius,
            )
            outcome = find_businesses(scope, categories, policy, config)
        else:
            outcome = find_businesses_multi(scopes, categories, policy, config)
    except (PayloadError, ConfigurationError) as exc:
        return jsonify({"error": str(exc)}), 400
    except SearchDeadlineError as exc:
        logger.warning("Search deadline exceeded: %s", exc)
        return jsonify({"error": str(exc), "data": {"results": [r.to_dict() for r in exc.partial]}}), 504
    except Exception as exc:  # noqa: BLE001
        logger.exception("Search failed: %s", exc)
        return jsonify({"error": "search failed"}), 500

    return jsonify({"data": _outcome_payload(outcome)}), 200


# ---------- Internals ----------


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return list(split_csv(value))
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    raise PayloadError("expected a list or a comma-separated string")


def _optional_float(payload: Dict[str, Any], name: str) -> Optional[float]:
    raw = payload.get(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise PayloadError(f"{name} must be numeric") from None


def _required_float(payload: Dict[str, Any], name: str) -> float:
    value = _optional_float(payload, name)
    if value is None:
        raise PayloadError(f"missing field: {name}")
    return value


def _optional_int(payload: Dict[str, Any], name: str) -> Optional[int]:
    raw = payload.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise PayloadError(f"{name} must be an integer") from None


def _parse_scopes(payload: Dict[str, Any], default_radius: float) -> Optional[List[SearchScope]]:
    locations = payload.get("locations")
    if locations is None:
        return None
    if not isinstance(locations, list) or not locations:
        raise PayloadError("locations must be a non-empty list")

    scopes: List[SearchScope] = []
    for entry in locations:
        if not isinstance(entry, dict):
            raise PayloadError("each location must be an object with lat and lng")
        radius = _optional_float(entry, "radius")
        scopes.append(
            SearchScope(
                center=GeoPoint(lat=_required_float(entry, "lat"), lng=_required_float(entry, "lng")),
                radius=default_radius if radius is None else radius,
                label=(str(entry["name"]).strip() or None) if entry.get("name") else None,
            )
        )
    return scopes


def _outcome_payload(outcome: SearchOutcome) -> Dict[str, Any]:
    return {
        "results": [result.to_dict() for result in outcome.results],
        "failures": [failure.to_dict() for failure in outcome.failures],
        "summary": {
            "total": len(outcome.results),
            "no_website": outcome.no_website_count,
            "social_only": outcome.social_only_count,
            "elapsed_seconds": round(outcome.elapsed, 3),
        },
    }


def main() -> None:
    """Cloud Run injects PORT; fall back to the configured worker port locally."""
    port = int(os.getenv("PORT") or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
