"""Search orchestration across categories and locations."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Iterable, List, Optional, Sequence, Set, Union

from business_finder.core.errors import ConfigurationError, SearchDeadlineError, SearchRequestError
from business_finder.core.models import (
    BusinessResult,
    FilterPolicy,
    SearchConfig,
    SearchFailure,
    SearchOutcome,
    SearchScope,
)
from business_finder.pipeline.batch import process_batch
from business_finder.pipeline.paginator import search_places
from business_finder.pipeline.timing import pause

logger = logging.getLogger(__name__)

Categories = Union[str, Iterable[str]]


class ResultCollector:
    """Single owner of the run's results; deduplicates by place id, first seen wins."""

    def __init__(self) -> None:
        self._results: List[BusinessResult] = []
        self._failures: List[SearchFailure] = []
        self._seen: Set[str] = set()
        self._lock = asyncio.Lock()

    async def add(self, results: Iterable[BusinessResult]) -> int:
        added = 0
        async with self._lock:
            for result in results:
                if result.place_id:
                    if result.place_id in self._seen:
                        continue
                    self._seen.add(result.place_id)
                self._results.append(result)
                added += 1
        return added

    async def record_failure(self, failure: SearchFailure) -> None:
        async with self._lock:
            self._failures.append(failure)

    @property
    def results(self) -> List[BusinessResult]:
        return list(self._results)

    @property
    def failures(self) -> List[SearchFailure]:
        return list(self._failures)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _validate_scope(scope: SearchScope) -> None:
    center = scope.center
    if center is None or not _is_number(center.lat) or not _is_number(center.lng):
        raise ConfigurationError("Location with valid lat and lng is required.")
    if not -90 <= center.lat <= 90 or not -180 <= center.lng <= 180:
        raise ConfigurationError(f"Coordinates out of range: {center.lat}, {center.lng}")
    if not _is_number(scope.radius) or scope.radius <= 0:
        raise ConfigurationError("Search radius must be a positive number.")


def validate_search(scopes: Sequence[SearchScope], categories: Categories, config: SearchConfig) -> List[str]:
    """Check the whole run before any network call; return the cleaned category list."""
    if not config.api_key:
        raise ConfigurationError("Google Maps API key is required. Set GOOGLE_API_KEY in .env or pass --api-key.")
    if not scopes:
        raise ConfigurationError("At least one search location is required.")
    for scope in scopes:
        _validate_scope(scope)

    if isinstance(categories, str):
        categories = [categories]
    cleaned = list(dict.fromkeys(c.strip() for c in categories or [] if c and c.strip()))
    if not cleaned:
        raise ConfigurationError("At least one business type is required.")

    if not isinstance(config.batch_size, int) or config.batch_size < 1:
        raise ConfigurationError("Batch size must be a positive integer.")
    if not _is_number(config.batch_delay_ms) or config.batch_delay_ms < 0:
        raise ConfigurationError("Batch delay must be a non-negative number of milliseconds.")
    return cleaned


async def _search_category(
    scope: SearchScope,
    category: str,
    policy: FilterPolicy,
    config: SearchConfig,
    collector: ResultCollector,
    search_location: Optional[str],
) -> None:
    try:
        stubs = await search_places(scope, category, config)
    except SearchRequestError as exc:
        logger.error("Error processing place type %s: %s", category, exc)
        await collector.record_failure(SearchFailure(category, search_location, str(exc)))
        return

    if not stubs:
        logger.info("No %s places found in the area.", category)
        return

    logger.info("Found %d %s places. Checking details...", len(stubs), category)
    batch_size = config.batch_size
    for start in range(0, len(stubs), batch_size):
        chunk = stubs[start : start + batch_size]
        results = await process_batch(chunk, category, policy, config, search_location=search_location)
        added = await collector.add(results)
        logger.debug("Batch %d of %s kept %d/%d results", start // batch_size + 1, category, added, len(results))

        if start + batch_size < len(stubs):
            await pause(config.batch_delay_ms / 1000)


async def _run(
    scopes: Sequence[SearchScope],
    categories: Categories,
    policy: FilterPolicy,
    config: SearchConfig,
    tag_location: bool,
) -> SearchOutcome:
    cleaned = validate_search(scopes, categories, config)
    started = time.monotonic()
    collector = ResultCollector()

    for scope in scopes:
        logger.info(
            "Searching %s within %.1f km of %s for: %s",
            scope.label or "area",
            scope.radius / 1000,
            scope.center.as_param(),
            ", ".join(cleaned),
        )

    try:
        async with asyncio.timeout(config.run_timeout):
            async with asyncio.TaskGroup() as group:
                for scope in scopes:
                    search_location = (scope.label or scope.center.as_param()) if tag_location else None
                    for category in cleaned:
                        group.create_task(
                            _search_category(scope, category, policy, config, collector, search_location)
                        )
    except TimeoutError as exc:
        raise SearchDeadlineError(config.run_timeout, collector.results) from exc

    outcome = SearchOutcome(
        results=collector.results,
        failures=collector.failures,
        elapsed=time.monotonic() - started,
    )
    logger.info(
        "Completed run: results=%d failures=%d elapsed=%.2fs",
        len(outcome.results),
        len(outcome.failures),
        outcome.elapsed,
    )
    return outcome


async def search(
    scope: SearchScope,
    categories: Categories,
    policy: FilterPolicy,
    config: SearchConfig,
) -> SearchOutcome:
    """Search one area for every category concurrently."""
    return await _run([scope], categories, policy, config, tag_location=False)


async def search_multi(
    scopes: Sequence[SearchScope],
    categories: Categories,
    policy: FilterPolicy,
    config: SearchConfig,
) -> SearchOutcome:
    """Search several areas concurrently, tagging each result with its area label.

    Areas without a label are tagged with their ``lat,lng`` center.
    """
    return await _run(list(scopes), categories, policy, config, tag_location=True)


def find_businesses(
    scope: SearchScope,
    categories: Categories,
    policy: FilterPolicy,
    config: SearchConfig,
) -> SearchOutcome:
    return asyncio.run(search(scope, categories, policy, config))


def find_businesses_multi(
    scopes: Sequence[SearchScope],
    categories: Categories,
    policy: FilterPolicy,
    config: SearchConfig,
) -> SearchOutcome:
    return asyncio.run(search_multi(scopes, categories, policy, config))
