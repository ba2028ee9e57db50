import pytest

from business_finder.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_nearby_search_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "results": [], "next_page_token": "tok"})
    payload = google_places.nearby_search("49.82,19.03", 20000, "key", keyword="car_repair", place_type="car_repair")
    assert payload["next_page_token"] == "tok"
    url, params, timeout = patch_session.calls[0]
    assert "nearbysearch" in url
    assert params["location"] == "49.82,19.03"
    assert params["radius"] == 20000
    assert params["keyword"] == "car_repair"
    assert params["type"] == "car_repair"
    assert "pagetoken" not in params
    assert timeout == 10


def test_nearby_search_sends_page_token_and_omits_unknown_type(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "results": []})
    google_places.nearby_search("1,2", 500, "key", keyword="vegan bakery", pagetoken="next", timeout=3)
    _, params, timeout = patch_session.calls[0]
    assert params["pagetoken"] == "next"
    assert "type" not in params
    assert timeout == 3


def test_nearby_search_zero_results_is_not_an_error(patch_session):
    patch_session.response = DummyResponse(payload={"status": "ZERO_RESULTS", "results": []})
    assert google_places.nearby_search("1,2", 500, "key", keyword="zoo")["results"] == []


def test_nearby_search_error_status(patch_session):
    patch_session.response = DummyResponse(payload={"status": "INVALID_REQUEST", "error_message": "bad"})
    with pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.nearby_search("1,2", 500, "key", keyword="zoo")
    assert excinfo.value.status == "INVALID_REQUEST"
    assert str(excinfo.value) == "bad"


def test_place_details_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "result": {"name": "Acme"}})
    result = google_places.place_details("pid", "key")
    assert result["name"] == "Acme"
    _, params, _ = patch_session.calls[0]
    assert params["place_id"] == "pid"
    assert params["fields"].split(",") == list(google_places.DETAIL_FIELDS)


def test_place_details_error(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OVER_QUERY_LIMIT", "error_message": "limit"})
    with pytest.raises(google_places.GooglePlacesError):
        google_places.place_details("pid", "key")


def test_place_details_null_result_is_empty(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "result": None})
    assert google_places.place_details("pid", "key") == {}


def test_place_details_malformed_result(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "result": ["not", "a", "dict"]})
    with pytest.raises(google_places.GooglePlacesError):
        google_places.place_details("pid", "key")
