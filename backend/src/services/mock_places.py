from __future__ import annotations

from typing import List, Optional

from models import CandidatePlace, Coordinates, TravelProxies


MOCK_PLACES: List[CandidatePlace] = [
    CandidatePlace(
        id="p1",
        name="Orange Line Cafe",
        category="cafe",
        location=Coordinates(lat=37.776, lng=-122.417),
        rating=4.5,
        travel=TravelProxies(walk_minutes=10, transit_minutes=8, drive_minutes=6),
        source="mock",
    ),
    CandidatePlace(
        id="p2",
        name="Strong Towns Park",
        category="park",
        location=Coordinates(lat=37.78, lng=-122.412),
        rating=4.2,
        travel=TravelProxies(walk_minutes=14, transit_minutes=9, drive_minutes=8),
        source="mock",
    ),
    CandidatePlace(
        id="p3",
        name="Not Just Bikes Bar",
        category="bar",
        location=Coordinates(lat=37.772, lng=-122.423),
        rating=4.7,
        travel=TravelProxies(walk_minutes=18, transit_minutes=12, drive_minutes=10),
        source="mock",
    ),
    CandidatePlace(
        id="p4",
        name="Market Street Eats",
        category="restaurant",
        location=Coordinates(lat=37.785, lng=-122.418),
        rating=4.3,
        travel=TravelProxies(walk_minutes=12, transit_minutes=10, drive_minutes=7),
        source="mock",
    ),
]


def fetch_mock_places(origin: Optional[Coordinates] = None, category: Optional[str] = None) -> List[CandidatePlace]:
    """Static catalog; the origin is ignored."""
    if category:
        return [p for p in MOCK_PLACES if p.category == category]
    return list(MOCK_PLACES)
