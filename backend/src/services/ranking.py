from __future__ import annotations

from typing import List

from models import CandidatePlace, FilterPreferences, RankedPlace
from services.scoring import score_place


WALK_SLACK_MINUTES = 10
DEFAULT_TOP_K = 10


def admit(place: CandidatePlace, prefs: FilterPreferences) -> bool:
    return place.travel.walk_minutes <= prefs.max_walk_minutes + WALK_SLACK_MINUTES


def rank_candidates(
    places: List[CandidatePlace],
    prefs: FilterPreferences,
    *,
    max_results: int = DEFAULT_TOP_K,
) -> List[RankedPlace]:
    max_results = max(0, max_results)
    scored = [RankedPlace(place=place, score=score_place(place, prefs)) for place in places if admit(place, prefs)]
    # list.sort is stable, equal scores keep input order
    scored.sort(key=lambda r: r.score.closish_score, reverse=True)
    return scored[:max_results]
