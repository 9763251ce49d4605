from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from models import CandidatePlace, FilterPreferences, RankResult


WALK_VS_TRANSIT_LABELS = {
    "favor_transit": "Favor transit",
    "balanced": "Balanced",
    "prefer_walk": "Prefer walk",
}
TIME_WINDOW_LABELS = {
    "next_30": "Next 30 min",
    "next_60": "Next 60 min",
    "next_120": "Next 2 hours",
}
PLACE_TYPE_LABELS = {
    "restaurants": "Restaurants & cafes",
    "cafes": "Cafes",
    "bars": "Bars",
    "parks": "Parks",
}
NO_PATH_MESSAGE = "Detailed transit path is unavailable for this place. Showing estimated totals."


@dataclass(frozen=True)
class TripBreakdown:
    total_minutes: float
    transit_minutes: float
    walk_minutes_total: float
    access_walk_minutes: float
    egress_walk_minutes: float
    transfer_count: Optional[int]
    has_detailed_path: bool
    message: Optional[str] = None

    @property
    def sequence(self) -> str:
        if not self.has_detailed_path:
            return f"Estimated {_fmt(self.total_minutes)}m total"
        return (
            f"{_fmt(self.access_walk_minutes)}m walk -> {_fmt(self.transit_minutes)}m transit "
            f"-> {_fmt(self.egress_walk_minutes)}m walk"
        )


def _fmt(value: float) -> str:
    return f"{value:.0f}"


def trip_breakdown(place: CandidatePlace) -> TripBreakdown:
    path = place.transit_path
    if path is None:
        return TripBreakdown(
            total_minutes=place.travel.transit_minutes + place.travel.walk_minutes,
            transit_minutes=place.travel.transit_minutes,
            walk_minutes_total=place.travel.walk_minutes,
            access_walk_minutes=0,
            egress_walk_minutes=0,
            transfer_count=None,
            has_detailed_path=False,
            message=NO_PATH_MESSAGE,
        )

    walk_total = path.total_walk_minutes
    wait = path.wait_minutes or 0
    total = path.total_minutes if path.total_minutes is not None else place.travel.transit_minutes
    ride = path.in_vehicle_minutes
    if ride is None:
        ride = max(0, total - walk_total - wait)
    transfer_walk = path.transfer_walk_minutes or 0
    message = None
    if transfer_walk > 0:
        message = f"Includes about {_fmt(transfer_walk)}m transfer walking between transit legs."

    return TripBreakdown(
        total_minutes=total,
        transit_minutes=ride,
        walk_minutes_total=walk_total,
        access_walk_minutes=path.access_walk_minutes or 0,
        egress_walk_minutes=path.egress_walk_minutes or 0,
        transfer_count=path.effective_transfer_count,
        has_detailed_path=True,
        message=message,
    )


def filter_summary(prefs: FilterPreferences) -> str:
    time_label = "Now" if prefs.when == "now" else TIME_WINDOW_LABELS[prefs.time_window]
    return " · ".join(
        [
            "Live" if prefs.live_mode else "Plan",
            PLACE_TYPE_LABELS[prefs.place_type],
            time_label,
            WALK_VS_TRANSIT_LABELS[prefs.walk_vs_transit],
            f"Max walk {prefs.max_walk_minutes} min",
        ]
    )


def build_report(prefs: FilterPreferences, result: RankResult) -> str:
    header = [
        "## Nearby, ranked by closish score",
        "",
        f"- Filters: {filter_summary(prefs)}",
        f"- Data: {'Live data' if result.source == 'live' else 'Mock data'}",
    ]
    for notice in (result.places_notice, result.enrichment_notice):
        if notice:
            header.append(f"> {notice}")
    header.append("")

    if not result.ranked:
        header.append("No places found for these filters yet.")
        return "\n".join(header)

    lines: List[str] = []
    for idx, item in enumerate(result.ranked, start=1):
        place = item.place
        trip = trip_breakdown(place)
        rating = f"{place.rating:.1f}★" if place.rating is not None else "No rating"
        chips = [f"walk {_fmt(trip.walk_minutes_total)}m", f"transit {_fmt(trip.transit_minutes)}m"]
        if trip.transfer_count is not None:
            chips.append(f"{trip.transfer_count} transfer{'' if trip.transfer_count == 1 else 's'}")
        chips.append(place.source)

        lines.append(f"### {idx}. {place.name}")
        lines.append(
            f"- {place.category.capitalize()} · score {item.score.closish_score:.0f} · "
            f"{_fmt(trip.total_minutes)}m total · {rating}"
        )
        lines.append(f"- {' · '.join(chips)}")
        lines.append(f"- Trip: {trip.sequence}")
        if trip.message:
            lines.append(f"- Note: {trip.message}")
        lines.append("")

    return "\n".join(header + lines).rstrip() + "\n"
