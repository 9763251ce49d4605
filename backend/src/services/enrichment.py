from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from loguru import logger

from config import Configuration, ConfigurationError
from models import CandidatePlace, Coordinates, TransitPathMetrics, TransitRouteSummary
from services.routes import RoutesClient


ROUTES_KEY_MISSING_NOTICE = "Routes API key missing; showing baseline trip estimates."
ENRICHMENT_UNAVAILABLE_NOTICE = (
    "Transit detail enrichment is unavailable right now; showing baseline trip estimates."
)
TIMEOUT_ERROR = "timeout"


class EpochGuard:
    """Generation counter; a batch may only merge while its epoch is current."""

    def __init__(self) -> None:
        self._epoch = 0

    @property
    def current(self) -> int:
        return self._epoch

    def advance(self) -> int:
        self._epoch += 1
        return self._epoch

    def is_current(self, epoch: int) -> bool:
        return epoch == self._epoch


@dataclass
class EnrichmentOutcome:
    places: List[CandidatePlace]
    enriched_count: int = 0
    attempted_count: int = 0
    failed_count: int = 0
    timed_out_count: int = 0
    notice: Optional[str] = None
    superseded: bool = False


@dataclass(frozen=True)
class _FetchResult:
    place_id: str
    summary: Optional[TransitRouteSummary]
    error: Optional[str] = None


def coverage_notice(enriched: int, attempted: int) -> Optional[str]:
    if enriched >= attempted:
        return None
    return f"Transit detail enrichment available for {enriched}/{attempted} top candidates."


def prioritize(places: List[CandidatePlace]) -> List[CandidatePlace]:
    """Highest rating first, then the quickest baseline transit estimate."""
    return sorted(places, key=lambda p: (-(p.rating or 0.0), p.travel.transit_minutes))


def attach_transit_path(place: CandidatePlace, summary: TransitRouteSummary) -> CandidatePlace:
    return replace(
        place,
        travel=replace(place.travel, transit_minutes=summary.total_minutes),
        transit_path=TransitPathMetrics.from_summary(summary),
    )


async def _fetch_one(
    client: RoutesClient,
    origin: Coordinates,
    place: CandidatePlace,
    *,
    deadline: float,
    departure_time: Optional[str],
) -> _FetchResult:
    try:
        summary = await asyncio.wait_for(
            client.fetch_transit_summary_async(origin, place.location, departure_time=departure_time),
            timeout=deadline,
        )
    except asyncio.TimeoutError:
        logger.warning("Transit enrichment timed out for {} after {}s", place.id, deadline)
        return _FetchResult(place_id=place.id, summary=None, error=TIMEOUT_ERROR)
    except Exception as exc:
        logger.warning("Transit enrichment failed for {}: {}", place.id, exc)
        return _FetchResult(place_id=place.id, summary=None, error=str(exc))
    return _FetchResult(place_id=place.id, summary=summary)


async def enrich_with_transit(
    cfg: Configuration,
    origin: Coordinates,
    places: List[CandidatePlace],
    *,
    max_places: Optional[int] = None,
    client: Optional[RoutesClient] = None,
    guard: Optional[EpochGuard] = None,
    epoch: Optional[int] = None,
    departure_time: Optional[str] = None,
) -> EnrichmentOutcome:
    """Attach detailed transit metrics to the top-priority candidates.

    All lookups run concurrently and fail independently: a candidate whose
    lookup errors, times out or finds no transit path keeps its baseline
    proxies. The returned list preserves the input order.
    """
    budget = cfg.transit_enrich_top_n if max_places is None else max_places
    limit = min(max(budget, 0), len(places))
    if limit == 0:
        return EnrichmentOutcome(places=list(places))

    if client is None:
        try:
            client = RoutesClient(cfg)
        except ConfigurationError as exc:
            logger.info("Skipping transit enrichment: {}", exc)
            return EnrichmentOutcome(places=list(places), attempted_count=limit, notice=ROUTES_KEY_MISSING_NOTICE)

    targets = prioritize(places)[:limit]
    logger.debug("Enriching {} of {} candidates with transit detail", limit, len(places))

    results = await asyncio.gather(
        *(
            _fetch_one(client, origin, place, deadline=cfg.routes_deadline_sec, departure_time=departure_time)
            for place in targets
        )
    )

    if guard is not None and epoch is not None and not guard.is_current(epoch):
        logger.debug("Discarding enrichment batch for stale epoch {} (current {})", epoch, guard.current)
        return EnrichmentOutcome(places=list(places), attempted_count=limit, superseded=True)

    summary_by_id: Dict[str, TransitRouteSummary] = {
        result.place_id: result.summary for result in results if result.summary is not None
    }
    merged = [
        attach_transit_path(place, summary_by_id[place.id]) if place.id in summary_by_id else place
        for place in places
    ]
    enriched = len(summary_by_id)
    errors = [result.error for result in results if result.error is not None]
    return EnrichmentOutcome(
        places=merged,
        enriched_count=enriched,
        attempted_count=limit,
        failed_count=len(errors),
        timed_out_count=errors.count(TIMEOUT_ERROR),
        notice=coverage_notice(enriched, limit),
    )
