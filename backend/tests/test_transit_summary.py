from __future__ import annotations

from services.transit_summary import (
    RouteStep,
    parse_duration_seconds,
    primary_route,
    summarize_route,
    summarize_steps,
    to_minutes,
)


def _steps(*pairs):
    return [RouteStep(mode=mode, seconds=seconds) for mode, seconds in pairs]


def test_no_transit_steps_gives_no_summary() -> None:
    steps = _steps(("WALK", 300), ("WALK", 120))
    assert summarize_steps(steps, 420) is None
    assert summarize_steps([], 0) is None


def test_two_leg_route_breakdown() -> None:
    steps = _steps(("WALK", 300), ("TRANSIT", 600), ("WALK", 120), ("TRANSIT", 400), ("WALK", 180))
    summary = summarize_steps(steps, 1700)
    assert summary is not None
    assert summary.access_walk_minutes == 5
    assert summary.transfer_walk_minutes == 2
    assert summary.egress_walk_minutes == 3
    assert summary.in_vehicle_minutes == 17
    assert summary.transfer_count == 1
    assert summary.transit_leg_count == 2
    # 1700 - 1000 - 600 = 100s of waiting
    assert summary.wait_minutes == 2
    assert summary.total_minutes == 28


def test_single_leg_has_no_transfers() -> None:
    summary = summarize_steps(_steps(("TRANSIT", 900)), 900)
    assert summary is not None
    assert summary.transfer_count == 0
    assert summary.transit_leg_count == 1
    assert summary.access_walk_minutes == 0
    assert summary.wait_minutes == 0


def test_wait_never_negative() -> None:
    summary = summarize_steps(_steps(("WALK", 600), ("TRANSIT", 600)), 300)
    assert summary is not None
    assert summary.wait_minutes == 0


def test_to_minutes_never_collapses_nonzero() -> None:
    assert to_minutes(0) == 0
    assert to_minutes(-5) == 0
    assert to_minutes(1) == 1
    assert to_minutes(29) == 1
    assert to_minutes(90) == 2
    assert to_minutes(150) == 3
    assert to_minutes(1000) == 17


def test_parse_duration_seconds() -> None:
    assert parse_duration_seconds("600s") == 600
    assert parse_duration_seconds("42") == 42
    assert parse_duration_seconds(12) == 12
    assert parse_duration_seconds(None) is None
    assert parse_duration_seconds("") is None
    assert parse_duration_seconds("ten minutes") is None


def test_summarize_route_flattens_legs_and_prefers_static_duration() -> None:
    route = {
        "duration": "1700s",
        "legs": [
            {
                "steps": [
                    {"travelMode": "WALK", "staticDuration": "300s", "duration": "999s"},
                    {"travelMode": "transit", "staticDuration": "600s"},
                ]
            },
            {
                "steps": [
                    {"travelMode": "WALK", "duration": "120s"},
                    {"travelMode": "TRANSIT", "staticDuration": "400s"},
                    {"travelMode": "WALK", "staticDuration": "180s"},
                ]
            },
        ],
    }
    summary = summarize_route(route)
    assert summary is not None
    assert summary.access_walk_minutes == 5
    assert summary.transfer_walk_minutes == 2
    assert summary.transit_leg_count == 2


def test_unparseable_durations_count_as_zero() -> None:
    route = {
        "duration": "900s",
        "legs": [
            {
                "steps": [
                    {"travelMode": "WALK", "staticDuration": "garbage"},
                    {"travelMode": "TRANSIT", "staticDuration": "600s"},
                ]
            }
        ],
    }
    summary = summarize_route(route)
    assert summary is not None
    assert summary.access_walk_minutes == 0
    assert summary.in_vehicle_minutes == 10
    assert summary.wait_minutes == 5


def test_missing_route_duration_falls_back_to_step_sum() -> None:
    route = {"legs": [{"steps": [{"travelMode": "WALK", "duration": "60s"}, {"travelMode": "TRANSIT", "duration": "540s"}]}]}
    summary = summarize_route(route)
    assert summary is not None
    assert summary.total_minutes == 10
    assert summary.wait_minutes == 0


def test_route_without_steps_or_transit() -> None:
    assert summarize_route({"duration": "600s", "legs": []}) is None
    assert summarize_route({"duration": "600s", "legs": [{"steps": [{"travelMode": "WALK", "duration": "600s"}]}]}) is None


def test_primary_route_handles_empty_payloads() -> None:
    assert primary_route({}) is None
    assert primary_route({"routes": []}) is None
    assert primary_route(None) is None
    assert primary_route({"routes": [{"duration": "1s"}, {"duration": "2s"}]}) == {"duration": "1s"}
