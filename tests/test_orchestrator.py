from dataclasses import replace

import pytest

from business_finder.core.errors import ConfigurationError, SearchDeadlineError
from business_finder.core.models import (
    BusinessResult,
    ExcludeProperWebsites,
    GeoPoint,
    IncludeAll,
    SearchScope,
)
from business_finder.pipeline import orchestrator
from business_finder.vendors import google_places

SCOPE = SearchScope(center=GeoPoint(49.82, 19.03), radius=20000)
NO_WEBSITE = ExcludeProperWebsites(social_domains=("facebook.com",))


def _seed_scenario_a(fake_places):
    fake_places.pages["car_repair"] = [[{"place_id": f"p{i}", "name": f"Garage {i}"} for i in range(1, 8)]]
    for place_id in ("p1", "p2", "p3"):
        fake_places.details[place_id] = {"name": f"No Site {place_id}"}
    for place_id in ("p4", "p5"):
        fake_places.details[place_id] = {"name": f"Social {place_id}", "website": f"https://facebook.com/{place_id}"}
    for place_id in ("p6", "p7"):
        fake_places.details[place_id] = {"name": f"Own {place_id}", "website": f"https://{place_id}.example"}


@pytest.mark.asyncio
async def test_no_website_policy_keeps_no_site_and_social_only(fake_places, search_config):
    _seed_scenario_a(fake_places)

    outcome = await orchestrator.search(SCOPE, ["car_repair"], NO_WEBSITE, search_config)

    assert len(outcome) == 5
    assert {r.place_id for r in outcome} == {"p1", "p2", "p3", "p4", "p5"}
    assert all(r.category == "car_repair" for r in outcome)
    assert outcome.no_website_count == 3
    assert outcome.social_only_count == 2
    assert all(r.search_location is None for r in outcome)
    assert outcome.failures == []


@pytest.mark.asyncio
async def test_include_all_policy_keeps_everything(fake_places, search_config):
    _seed_scenario_a(fake_places)

    outcome = await orchestrator.search(SCOPE, ["car_repair"], IncludeAll(("facebook.com",)), search_config)

    flags = {r.place_id: (r.has_no_website, r.has_social_only) for r in outcome}
    assert len(flags) == 7
    assert flags["p1"] == (True, False)
    assert flags["p4"] == (False, True)
    assert flags["p6"] == (False, False)


@pytest.mark.asyncio
async def test_results_follow_upstream_and_batch_order_within_category(fake_places, search_config):
    _seed_scenario_a(fake_places)
    config = replace(search_config, batch_size=2)

    outcome = await orchestrator.search(SCOPE, ["car_repair"], NO_WEBSITE, config)

    assert [r.place_id for r in outcome] == ["p1", "p2", "p3", "p4", "p5"]


@pytest.mark.asyncio
async def test_duplicate_place_across_categories_is_kept_once(fake_places, search_config):
    fake_places.pages["restaurant"] = [[{"place_id": "X"}, {"place_id": "R"}]]
    fake_places.pages["cafe"] = [[{"place_id": "X"}, {"place_id": "C"}]]
    fake_places.details["X"] = {"name": "Shared"}

    outcome = await orchestrator.search(SCOPE, ["restaurant", "cafe"], NO_WEBSITE, search_config)

    shared = [r for r in outcome if r.place_id == "X"]
    assert len(shared) == 1
    assert shared[0].category in {"restaurant", "cafe"}
    assert {r.place_id for r in outcome} == {"X", "R", "C"}
    assert fake_places.detail_calls.count("X") == 2


@pytest.mark.asyncio
async def test_invalid_radius_fails_before_any_request(fake_places, search_config):
    scope = SearchScope(center=GeoPoint(49.82, 19.03), radius=-5)

    with pytest.raises(ConfigurationError):
        await orchestrator.search(scope, ["car_repair"], NO_WEBSITE, search_config)

    assert fake_places.search_calls == []
    assert fake_places.detail_calls == []


@pytest.mark.parametrize(
    "scopes,categories,overrides",
    [
        ([SCOPE], ["cafe"], {"api_key": ""}),
        ([SCOPE], [], {}),
        ([SCOPE], [" ", ""], {}),
        ([], ["cafe"], {}),
        ([SearchScope(GeoPoint(float("nan"), 19.0), 100)], ["cafe"], {}),
        ([SearchScope(GeoPoint(91.0, 19.0), 100)], ["cafe"], {}),
        ([SearchScope(GeoPoint(49.0, 19.0), 0)], ["cafe"], {}),
        ([SCOPE], ["cafe"], {"batch_size": 0}),
        ([SCOPE], ["cafe"], {"batch_delay_ms": -1}),
    ],
)
def test_validate_search_rejects_bad_input(search_config, scopes, categories, overrides):
    with pytest.raises(ConfigurationError):
        orchestrator.validate_search(scopes, categories, replace(search_config, **overrides))


def test_validate_search_cleans_categories(search_config):
    assert orchestrator.validate_search([SCOPE], [" cafe", "bar", "cafe", ""], search_config) == ["cafe", "bar"]
    assert orchestrator.validate_search([SCOPE], "gym", search_config) == ["gym"]


@pytest.mark.asyncio
async def test_in_flight_detail_calls_never_exceed_batch_size(fake_places, search_config):
    fake_places.pages["cafe"] = [[{"place_id": str(i)} for i in range(12)]]
    fake_places.detail_latency = 0.02
    config = replace(search_config, batch_size=3)

    outcome = await orchestrator.search(SCOPE, ["cafe"], IncludeAll(), config)

    assert len(outcome) == 12
    assert 1 <= fake_places.max_in_flight <= 3


@pytest.mark.asyncio
async def test_batch_delay_between_chunks_only(fake_places, search_config, monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(orchestrator, "pause", fake_sleep)
    fake_places.pages["cafe"] = [[{"place_id": str(i)} for i in range(7)]]
    config = replace(search_config, batch_size=3, batch_delay_ms=200)

    await orchestrator.search(SCOPE, ["cafe"], IncludeAll(), config)

    assert delays == [0.2, 0.2]


@pytest.mark.asyncio
async def test_failed_category_is_reported_without_stopping_others(fake_places, search_config):
    fake_places.pages["restaurant"] = [[{"place_id": "R1"}]]
    fake_places.search_errors["cafe"] = google_places.GooglePlacesError("denied", status="REQUEST_DENIED")

    outcome = await orchestrator.search(SCOPE, ["restaurant", "cafe"], NO_WEBSITE, search_config)

    assert [r.place_id for r in outcome] == ["R1"]
    assert len(outcome.failures) == 1
    assert outcome.failures[0].category == "cafe"
    assert "denied" in outcome.failures[0].error


@pytest.mark.asyncio
async def test_zero_matches_is_an_empty_result(fake_places, search_config):
    outcome = await orchestrator.search(SCOPE, ["zoo"], NO_WEBSITE, search_config)
    assert outcome.results == []
    assert outcome.failures == []


@pytest.mark.asyncio
async def test_search_multi_tags_and_dedups_across_locations(fake_places, search_config):
    fake_places.pages["bakery"] = [[{"place_id": "A"}, {"place_id": "B"}]]
    scopes = [
        SearchScope(GeoPoint(52.23, 21.01), 15000, label="Warsaw"),
        SearchScope(GeoPoint(50.06, 19.94), 10000, label="Krakow"),
    ]

    outcome = await orchestrator.search_multi(scopes, ["bakery"], NO_WEBSITE, search_config)

    assert sorted(r.place_id for r in outcome) == ["A", "B"]
    assert {r.search_location for r in outcome} <= {"Warsaw", "Krakow"}
    assert {call["location"] for call in fake_places.search_calls} == {"52.23,21.01", "50.06,19.94"}


@pytest.mark.asyncio
async def test_search_multi_labels_unnamed_location_with_center(fake_places, search_config):
    fake_places.pages["bakery"] = [[{"place_id": "A"}]]

    outcome = await orchestrator.search_multi(
        [SearchScope(GeoPoint(50.0, 20.0), 1000)], ["bakery"], NO_WEBSITE, search_config
    )

    assert outcome.results[0].search_location == "50.0,20.0"


@pytest.mark.asyncio
async def test_run_deadline_before_first_batch_has_no_partial_results(fake_places, search_config):
    fake_places.pages["cafe"] = [[{"place_id": str(i)} for i in range(3)]]
    fake_places.detail_latency = 0.3
    config = replace(search_config, run_timeout=0.05)

    with pytest.raises(SearchDeadlineError) as excinfo:
        await orchestrator.search(SCOPE, ["cafe"], IncludeAll(), config)

    assert excinfo.value.partial == []


@pytest.mark.asyncio
async def test_run_deadline_keeps_batches_completed_in_time(fake_places, search_config):
    fake_places.pages["cafe"] = [[{"place_id": str(i)} for i in range(6)]]
    config = replace(search_config, batch_size=2, batch_delay_ms=300, run_timeout=0.2)

    with pytest.raises(SearchDeadlineError) as excinfo:
        await orchestrator.search(SCOPE, ["cafe"], IncludeAll(), config)

    assert [r.place_id for r in excinfo.value.partial] == ["0", "1"]
    assert excinfo.value.timeout == 0.2


@pytest.mark.asyncio
async def test_null_details_result_does_not_abort_run(fake_places, search_config):
    fake_places.pages["cafe"] = [[{"place_id": "bad"}, {"place_id": "good"}]]
    fake_places.details["bad"] = None

    outcome = await orchestrator.search(SCOPE, ["cafe"], IncludeAll(), search_config)

    assert [r.place_id for r in outcome] == ["good"]
    assert outcome.failures == []


@pytest.mark.asyncio
async def test_collector_dedups_by_place_id_but_keeps_anonymous_results():
    collector = orchestrator.ResultCollector()
    first = BusinessResult("A", "cafe", True, False, place_id="X")
    second = BusinessResult("B", "bar", True, False, place_id="X")
    anonymous = BusinessResult("C", "bar", True, False)

    assert await collector.add([first, anonymous]) == 2
    assert await collector.add([second, first, anonymous]) == 1

    assert [r.name for r in collector.results] == ["A", "C", "C"]


def test_find_businesses_runs_event_loop(fake_places, search_config):
    fake_places.pages["cafe"] = [[{"place_id": "1"}]]

    outcome = orchestrator.find_businesses(SCOPE, ["cafe"], NO_WEBSITE, search_config)

    assert [r.place_id for r in outcome] == ["1"]
