import sys
import threading
import time
from pathlib import Path

import pytest

# Ensure `business_finder` is importable when running pytest from the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from business_finder.core.models import SearchConfig  # noqa: E402
from business_finder.vendors import google_places  # noqa: E402


class FakePlaces:
    """In-memory stand-in for the two Places API calls.

    ``pages`` maps a category keyword to a list of pages; each page is a list
    of raw result dicts. Every page but the last carries a next_page_token.
    ``details`` maps a place id to a raw details dict or an exception to raise.
    """

    def __init__(self):
        self.pages = {}
        self.details = {}
        self.search_calls = []
        self.detail_calls = []
        self.search_errors = {}
        self.always_paginate = False
        self.detail_latency = 0.0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def nearby_search(self, location, radius, api_key, keyword=None, place_type=None, pagetoken=None, timeout=None):
        with self._lock:
            self.search_calls.append(
                {"location": location, "radius": radius, "keyword": keyword, "type": place_type, "pagetoken": pagetoken}
            )
        if keyword in self.search_errors:
            raise self.search_errors[keyword]

        pages = self.pages.get(keyword, [[]])
        index = int(pagetoken.split("-")[-1]) if pagetoken else 0
        results = pages[index] if index < len(pages) else []
        payload = {"status": "OK" if results else "ZERO_RESULTS", "results": results}
        if self.always_paginate or index + 1 < len(pages):
            payload["next_page_token"] = f"{keyword}-{index + 1}"
        return payload

    def place_details(self, place_id, api_key, fields=google_places.DETAIL_FIELDS, timeout=None):
        with self._lock:
            self.detail_calls.append(place_id)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.detail_latency:
                time.sleep(self.detail_latency)
            value = self.details.get(place_id, {"name": f"Place {place_id}"})
            if isinstance(value, BaseException):
                raise value
            return value
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def fake_places(monkeypatch):
    fake = FakePlaces()
    monkeypatch.setattr(google_places, "nearby_search", fake.nearby_search)
    monkeypatch.setattr(google_places, "place_details", fake.place_details)
    return fake


@pytest.fixture
def search_config():
    return SearchConfig(api_key="test-key", batch_size=5, batch_delay_ms=0, page_token_delay=0)
