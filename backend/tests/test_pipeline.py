from __future__ import annotations

import asyncio

import pytest

from config import Configuration
from models import CandidatePlace, Coordinates, FilterPreferences, TransitRouteSummary, TravelProxies
from services.candidate_search import CandidateLoad
from services.enrichment import ENRICHMENT_UNAVAILABLE_NOTICE, ROUTES_KEY_MISSING_NOTICE, EpochGuard
from services.pipeline import rank, recommend


ORIGIN = Coordinates(lat=37.77, lng=-122.42)
PREFS = FilterPreferences(max_walk_minutes=10)
ONE_SEAT = TransitRouteSummary(
    total_minutes=8,
    in_vehicle_minutes=5,
    wait_minutes=1,
    access_walk_minutes=1,
    transfer_walk_minutes=0,
    egress_walk_minutes=1,
    transfer_count=0,
    transit_leg_count=1,
)


def _place(pid: str, lat: float, rating: float = 4.0, walk: float = 8, source: str = "live") -> CandidatePlace:
    return CandidatePlace(
        id=pid,
        name=pid,
        category="restaurant",
        location=Coordinates(lat=lat, lng=0.0),
        travel=TravelProxies(walk_minutes=walk, transit_minutes=10, drive_minutes=9),
        rating=rating,
        source=source,  # type: ignore[arg-type]
    )


class StubClient:
    def __init__(self, fail_lat=None) -> None:
        self.fail_lat = fail_lat

    async def fetch_transit_summary_async(self, origin, destination, *, departure_time=None):
        if destination.lat == self.fail_lat:
            raise RuntimeError("boom")
        return ONE_SEAT


def test_rank_mixes_enriched_and_baseline_candidates() -> None:
    cfg = Configuration(routes_api_key="k", places_top_k=10)
    places = [_place("a", 1.0, rating=4.9), _place("b", 2.0, rating=4.8), _place("c", 3.0, rating=3.0)]

    result = asyncio.run(rank(ORIGIN, places, PREFS, 2, cfg=cfg, client=StubClient(fail_lat=2.0)))

    modes = {item.place.id: item.score.mode for item in result.ranked}
    assert modes == {"a": "detailed", "b": "baseline", "c": "baseline"}
    assert result.enrichment_notice == "Transit detail enrichment available for 1/2 top candidates."
    assert result.ranked[0].place.id == "a"


def test_rank_without_routes_key_reports_notice() -> None:
    result = asyncio.run(rank(ORIGIN, [_place("a", 1.0)], PREFS, 3, cfg=Configuration()))
    assert result.enrichment_notice == ROUTES_KEY_MISSING_NOTICE
    assert result.ranked[0].score.mode == "baseline"


def test_rank_full_coverage_has_no_notice() -> None:
    cfg = Configuration(routes_api_key="k")
    result = asyncio.run(rank(ORIGIN, [_place("a", 1.0)], PREFS, 3, cfg=cfg, client=StubClient()))
    assert result.enrichment_notice is None


def test_rank_degrades_when_orchestration_breaks(monkeypatch) -> None:
    async def explode(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr("services.pipeline.enrich_with_transit", explode)
    cfg = Configuration(routes_api_key="k")
    result = asyncio.run(rank(ORIGIN, [_place("a", 1.0)], PREFS, 3, cfg=cfg, client=StubClient()))
    assert result.enrichment_notice == ENRICHMENT_UNAVAILABLE_NOTICE
    assert len(result.ranked) == 1


def test_rank_rejects_malformed_preferences() -> None:
    with pytest.raises(ValueError):
        asyncio.run(rank(ORIGIN, [], {"max_walk_minutes": 10}, 3, cfg=Configuration()))  # type: ignore[arg-type]


def test_rank_respects_top_k_and_walk_filter() -> None:
    cfg = Configuration(places_top_k=3)
    places = [_place(f"p{i}", float(i)) for i in range(6)] + [_place("far", 9.0, walk=21)]
    result = asyncio.run(rank(ORIGIN, places, PREFS, 0, cfg=cfg))
    assert len(result.ranked) == 3
    assert "far" not in {item.place.id for item in result.ranked}


def test_recommend_skips_enrichment_for_mock_data() -> None:
    def loader(cfg, origin, prefs):
        return CandidateLoad(places=[_place("m", 1.0, source="mock")], source="mock", notice="Places API key missing; showing mock results.")

    cfg = Configuration(routes_api_key="k")
    result = asyncio.run(recommend(cfg, ORIGIN, PREFS, loader=loader, client=StubClient()))
    assert result.source == "mock"
    assert result.enrichment_notice is None
    assert result.places_notice == "Places API key missing; showing mock results."
    assert result.ranked[0].score.mode == "baseline"


def test_newer_invocation_supersedes_older_one() -> None:
    guard = EpochGuard()
    cfg = Configuration(routes_api_key="k")

    class SlowClient:
        def __init__(self, delay: float) -> None:
            self.delay = delay

        async def fetch_transit_summary_async(self, origin, destination, *, departure_time=None):
            await asyncio.sleep(self.delay)
            return ONE_SEAT

    def loader(cfg, origin, prefs):
        return CandidateLoad(places=[_place("a", 1.0)], source="live")

    async def run_both():
        older = asyncio.create_task(recommend(cfg, ORIGIN, PREFS, guard=guard, loader=loader, client=SlowClient(0.2)))
        await asyncio.sleep(0.05)
        newer = await recommend(cfg, ORIGIN, PREFS, guard=guard, loader=loader, client=SlowClient(0.0))
        return await older, newer

    older, newer = asyncio.run(run_both())
    assert older.superseded is True
    assert older.ranked[0].score.mode == "baseline"
    assert newer.superseded is False
    assert newer.ranked[0].score.mode == "detailed"
