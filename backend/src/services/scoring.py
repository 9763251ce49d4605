"""Closish score: reward transit advantage, penalize long walks, add desirability.

The weights and bounds below are hand-tuned; keep them as they are.
"""

from __future__ import annotations

from models import CandidatePlace, FilterPreferences, ScoreBreakdown, TransitPathMetrics
from utils import clamp


PREFERENCE_TILT = {"favor_transit": 1.0, "balanced": 0.8, "prefer_walk": 0.6}
WHEN_LATER_TILT = {"next_30": 0.98, "next_60": 0.96, "next_120": 0.94}
DEFAULT_RATING = 4.0
DETAILED_BASE = 35.0


def preference_tilt(prefs: FilterPreferences) -> float:
    return PREFERENCE_TILT[prefs.walk_vs_transit]


def mode_tilt(prefs: FilterPreferences) -> float:
    return 1.0 if prefs.live_mode else 0.95


def when_tilt(prefs: FilterPreferences) -> float:
    if prefs.when == "now":
        return 1.0
    return WHEN_LATER_TILT[prefs.time_window]


def combined_tilt(prefs: FilterPreferences) -> float:
    return preference_tilt(prefs) * mode_tilt(prefs) * when_tilt(prefs)


def desirability(rating: float | None) -> float:
    value = DEFAULT_RATING if rating is None else rating
    return clamp((value - 3.5) * 10, 0, 20)


def one_seat_bonus(transfer_count: int) -> float:
    if transfer_count == 0:
        return 8.0
    if transfer_count == 1:
        return 2.0
    return 0.0


def score_baseline(place: CandidatePlace, prefs: FilterPreferences) -> ScoreBreakdown:
    travel = place.travel
    transit_bias = clamp((travel.drive_minutes - travel.transit_minutes) * 4, 0, 40)
    walk_penalty = clamp((travel.walk_minutes - prefs.max_walk_minutes) * 2, -20, 0)
    desire = desirability(place.rating)

    score = clamp(transit_bias * combined_tilt(prefs) + walk_penalty + desire, 0, 100)
    return ScoreBreakdown(
        closish_score=score,
        mode="baseline",
        components={
            "transit_bias": transit_bias,
            "walk_penalty": walk_penalty,
            "desirability": desire,
        },
    )


def score_detailed(place: CandidatePlace, path: TransitPathMetrics, prefs: FilterPreferences) -> ScoreBreakdown:
    transfers = path.effective_transfer_count
    total_transit = path.total_minutes if path.total_minutes is not None else place.travel.transit_minutes

    walk_penalty = clamp((path.total_walk_minutes - prefs.max_walk_minutes) * 2.2, -20, 0)
    transfer_penalty = clamp(transfers * 8, 0, 30)
    wait_penalty = clamp((path.wait_minutes or 0) * 0.7, 0, 20)
    transit_time_penalty = clamp((total_transit - 40) * 0.25, 0, 10)
    bonus = one_seat_bonus(transfers)
    transit_bias = clamp((place.travel.drive_minutes - total_transit) * 2.5, -10, 25)
    desire = desirability(place.rating)

    transit_ease = (
        transit_bias + bonus - transfer_penalty - wait_penalty - transit_time_penalty
    ) * combined_tilt(prefs)
    score = clamp(DETAILED_BASE + transit_ease + walk_penalty + desire, 0, 100)
    return ScoreBreakdown(
        closish_score=score,
        mode="detailed",
        components={
            "transit_bias": transit_bias,
            "walk_penalty": walk_penalty,
            "desirability": desire,
            "transfer_penalty": transfer_penalty,
            "wait_penalty": wait_penalty,
            "transit_time_penalty": transit_time_penalty,
            "one_seat_bonus": bonus,
            "transit_ease": transit_ease,
        },
    )


def score_place(place: CandidatePlace, prefs: FilterPreferences) -> ScoreBreakdown:
    if place.transit_path is None:
        return score_baseline(place, prefs)
    return score_detailed(place, place.transit_path, prefs)
