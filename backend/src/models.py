"""Data models for the closish ranker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, get_args


PlaceCategory = Literal["restaurant", "cafe", "bar", "park"]
PlaceType = Literal["restaurants", "cafes", "bars", "parks"]
PlaceSource = Literal["mock", "live"]
PathSource = Literal["routes_api", "graph"]
WalkVsTransit = Literal["favor_transit", "balanced", "prefer_walk"]
WhenOption = Literal["now", "later"]
TimeWindow = Literal["next_30", "next_60", "next_120"]
ScoreMode = Literal["baseline", "detailed"]

PLACE_TYPE_TO_CATEGORY: Dict[str, str] = {
    "restaurants": "restaurant",
    "cafes": "cafe",
    "bars": "bar",
    "parks": "park",
}


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class TravelProxies:
    walk_minutes: float
    transit_minutes: float
    drive_minutes: float

    def __post_init__(self) -> None:
        for name in ("walk_minutes", "transit_minutes", "drive_minutes"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class TransitRouteSummary:
    total_minutes: int
    in_vehicle_minutes: int
    wait_minutes: int
    access_walk_minutes: int
    transfer_walk_minutes: int
    egress_walk_minutes: int
    transfer_count: int
    transit_leg_count: int


@dataclass(frozen=True)
class TransitPathMetrics:
    source: PathSource = "routes_api"
    total_minutes: Optional[float] = None
    in_vehicle_minutes: Optional[float] = None
    wait_minutes: Optional[float] = None
    access_walk_minutes: Optional[float] = None
    transfer_walk_minutes: Optional[float] = None
    egress_walk_minutes: Optional[float] = None
    transfer_count: Optional[int] = None
    transit_leg_count: Optional[int] = None

    @classmethod
    def from_summary(cls, summary: TransitRouteSummary, source: PathSource = "routes_api") -> "TransitPathMetrics":
        return cls(
            source=source,
            total_minutes=summary.total_minutes,
            in_vehicle_minutes=summary.in_vehicle_minutes,
            wait_minutes=summary.wait_minutes,
            access_walk_minutes=summary.access_walk_minutes,
            transfer_walk_minutes=summary.transfer_walk_minutes,
            egress_walk_minutes=summary.egress_walk_minutes,
            transfer_count=summary.transfer_count,
            transit_leg_count=summary.transit_leg_count,
        )

    @property
    def effective_transfer_count(self) -> int:
        if self.transfer_count is not None:
            return self.transfer_count
        legs = self.transit_leg_count if self.transit_leg_count is not None else 1
        return max(legs - 1, 0)

    @property
    def total_walk_minutes(self) -> float:
        return (
            (self.access_walk_minutes or 0)
            + (self.transfer_walk_minutes or 0)
            + (self.egress_walk_minutes or 0)
        )


@dataclass(frozen=True)
class CandidatePlace:
    id: str
    name: str
    category: PlaceCategory
    location: Coordinates
    travel: TravelProxies
    rating: Optional[float] = None
    transit_path: Optional[TransitPathMetrics] = None
    source: PlaceSource = "mock"


@dataclass(frozen=True)
class FilterPreferences:
    max_walk_minutes: int = 10
    walk_vs_transit: WalkVsTransit = "favor_transit"
    live_mode: bool = True
    when: WhenOption = "now"
    time_window: TimeWindow = "next_60"
    place_type: PlaceType = "restaurants"

    def __post_init__(self) -> None:
        if isinstance(self.max_walk_minutes, bool) or not isinstance(self.max_walk_minutes, int):
            raise ValueError("max_walk_minutes must be an integer")
        if self.max_walk_minutes <= 0:
            raise ValueError("max_walk_minutes must be positive")
        if not isinstance(self.live_mode, bool):
            raise ValueError("live_mode must be a boolean")
        for name, literal in (
            ("walk_vs_transit", WalkVsTransit),
            ("when", WhenOption),
            ("time_window", TimeWindow),
            ("place_type", PlaceType),
        ):
            value = getattr(self, name)
            if value not in get_args(literal):
                raise ValueError(f"invalid {name}: {value!r}")

    @property
    def category(self) -> str:
        return PLACE_TYPE_TO_CATEGORY[self.place_type]


@dataclass(frozen=True)
class ScoreBreakdown:
    closish_score: float
    mode: ScoreMode
    components: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class RankedPlace:
    place: CandidatePlace
    score: ScoreBreakdown


@dataclass
class RankResult:
    ranked: List[RankedPlace]
    enrichment_notice: Optional[str] = None
    source: PlaceSource = "mock"
    places_notice: Optional[str] = None
    superseded: bool = False
