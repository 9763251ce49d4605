from models import (
    CandidatePlace,
    Coordinates,
    FilterPreferences,
    RankedPlace,
    RankResult,
    ScoreBreakdown,
    TransitPathMetrics,
    TravelProxies,
)
from services.report import build_report, filter_summary, trip_breakdown


def _place(path=None, rating=4.5):
    return CandidatePlace(
        id="p1",
        name="Orange Line Cafe",
        category="cafe",
        location=Coordinates(lat=37.776, lng=-122.417),
        travel=TravelProxies(walk_minutes=10, transit_minutes=8, drive_minutes=6),
        rating=rating,
        transit_path=path,
    )


def test_trip_breakdown_without_path_uses_estimates():
    trip = trip_breakdown(_place())
    assert trip.has_detailed_path is False
    assert trip.total_minutes == 18
    assert trip.transfer_count is None
    assert trip.sequence == "Estimated 18m total"
    assert "unavailable" in trip.message


def test_trip_breakdown_with_path():
    path = TransitPathMetrics(
        total_minutes=28,
        wait_minutes=2,
        access_walk_minutes=5,
        transfer_walk_minutes=2,
        egress_walk_minutes=3,
        transit_leg_count=2,
    )
    trip = trip_breakdown(_place(path))
    assert trip.walk_minutes_total == 10
    # ride time derived from total minus walking and waiting
    assert trip.transit_minutes == 16
    assert trip.transfer_count == 1
    assert trip.sequence == "5m walk -> 16m transit -> 3m walk"
    assert trip.message == "Includes about 2m transfer walking between transit legs."


def test_filter_summary():
    prefs = FilterPreferences(live_mode=False, when="later", time_window="next_120", walk_vs_transit="balanced")
    assert filter_summary(prefs) == "Plan · Restaurants & cafes · Next 2 hours · Balanced · Max walk 10 min"


def test_build_report_basic():
    score = ScoreBreakdown(closish_score=22.0, mode="baseline", components={})
    result = RankResult(
        ranked=[RankedPlace(place=_place(), score=score)],
        enrichment_notice="Transit detail enrichment available for 1/2 top candidates.",
        source="live",
    )
    md = build_report(FilterPreferences(), result)
    assert "Orange Line Cafe" in md
    assert "score 22" in md
    assert "Live data" in md
    assert "> Transit detail enrichment available for 1/2 top candidates." in md
    assert "4.5★" in md


def test_build_report_empty():
    md = build_report(FilterPreferences(), RankResult(ranked=[]))
    assert "No places found for these filters yet." in md
