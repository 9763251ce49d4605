from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from models import TransitRouteSummary
from utils import round_half_up


@dataclass(frozen=True)
class RouteStep:
    mode: str
    seconds: float


def parse_duration_seconds(value: Any) -> Optional[float]:
    """Parse a Routes API duration such as ``"600s"``.

    Returns None for missing or unparseable values; callers treat that as zero.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("s"):
        text = text[:-1]
    try:
        seconds = float(text)
    except ValueError:
        return None
    if seconds != seconds or seconds in (float("inf"), float("-inf")):
        return None
    return seconds


def to_minutes(seconds: float) -> int:
    # a nonzero segment never collapses to zero minutes
    if seconds <= 0:
        return 0
    return max(1, round_half_up(seconds / 60.0))


def summarize_steps(steps: Sequence[RouteStep], route_seconds: float) -> Optional[TransitRouteSummary]:
    """Split a transit route into access/transfer/egress walk, ride and wait time."""
    transit_indices = [idx for idx, step in enumerate(steps) if step.mode == "TRANSIT"]
    if not transit_indices:
        return None

    first = transit_indices[0]
    last = transit_indices[-1]

    access_walk = 0.0
    transfer_walk = 0.0
    egress_walk = 0.0
    in_vehicle = 0.0

    for idx, step in enumerate(steps):
        if step.mode == "TRANSIT":
            in_vehicle += step.seconds
            continue
        if step.mode != "WALK":
            continue
        if idx < first:
            access_walk += step.seconds
        elif idx > last:
            egress_walk += step.seconds
        else:
            transfer_walk += step.seconds

    walk = access_walk + transfer_walk + egress_walk
    wait = max(route_seconds - in_vehicle - walk, 0.0)

    return TransitRouteSummary(
        total_minutes=to_minutes(route_seconds),
        in_vehicle_minutes=to_minutes(in_vehicle),
        wait_minutes=to_minutes(wait),
        access_walk_minutes=to_minutes(access_walk),
        transfer_walk_minutes=to_minutes(transfer_walk),
        egress_walk_minutes=to_minutes(egress_walk),
        transfer_count=max(len(transit_indices) - 1, 0),
        transit_leg_count=len(transit_indices),
    )


def _flatten_steps(route: dict) -> List[RouteStep]:
    steps: list[RouteStep] = []
    for leg in route.get("legs") or []:
        if not isinstance(leg, dict):
            continue
        for raw in leg.get("steps") or []:
            if not isinstance(raw, dict):
                continue
            mode = str(raw.get("travelMode") or "").upper()
            duration = raw.get("staticDuration")
            if duration is None:
                duration = raw.get("duration")
            steps.append(RouteStep(mode=mode, seconds=parse_duration_seconds(duration) or 0.0))
    return steps


def summarize_route(route: dict) -> Optional[TransitRouteSummary]:
    """Summarize one ``routes[]`` entry of a computeRoutes response."""
    steps = _flatten_steps(route)
    if not steps:
        return None

    route_seconds = parse_duration_seconds(route.get("duration"))
    if route_seconds is None:
        route_seconds = sum(step.seconds for step in steps)
    if route_seconds <= 0:
        return None

    return summarize_steps(steps, route_seconds)


def primary_route(payload: Any) -> Optional[dict]:
    if not isinstance(payload, dict):
        return None
    for route in payload.get("routes") or []:
        if isinstance(route, dict):
            return route
    return None
