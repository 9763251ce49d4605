from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

from loguru import logger

from config import Configuration
from models import CandidatePlace, Coordinates, FilterPreferences, RankResult
from services.candidate_search import CandidateLoad, load_candidates
from services.enrichment import (
    ENRICHMENT_UNAVAILABLE_NOTICE,
    EnrichmentOutcome,
    EpochGuard,
    enrich_with_transit,
)
from services.ranking import rank_candidates
from services.routes import RoutesClient


async def rank(
    origin: Coordinates,
    raw_candidates: List[CandidatePlace],
    preferences: FilterPreferences,
    enrichment_budget: Optional[int] = None,
    *,
    cfg: Configuration,
    client: Optional[RoutesClient] = None,
    guard: Optional[EpochGuard] = None,
    epoch: Optional[int] = None,
    enrich: bool = True,
) -> RankResult:
    """Enrich the top candidates with transit detail, then score and rank all of them."""
    if not isinstance(preferences, FilterPreferences):
        raise ValueError("preferences must be a FilterPreferences instance")
    if guard is not None and epoch is None:
        epoch = guard.advance()

    candidates = list(raw_candidates)
    if enrich:
        try:
            outcome = await enrich_with_transit(
                cfg,
                origin,
                candidates,
                max_places=enrichment_budget,
                client=client,
                guard=guard,
                epoch=epoch,
            )
        except Exception as exc:
            logger.warning("Transit enrichment failed; using baseline scoring: {}", exc)
            outcome = EnrichmentOutcome(places=candidates, notice=ENRICHMENT_UNAVAILABLE_NOTICE)
    else:
        outcome = EnrichmentOutcome(places=candidates)

    superseded = outcome.superseded or (
        guard is not None and epoch is not None and not guard.is_current(epoch)
    )
    ranked = rank_candidates(outcome.places, preferences, max_results=cfg.places_top_k)

    logger.info(
        "ranked candidates={} admitted_top={} enriched={}/{} failed={} timed_out={} superseded={}",
        len(candidates),
        len(ranked),
        outcome.enriched_count,
        outcome.attempted_count,
        outcome.failed_count,
        outcome.timed_out_count,
        superseded,
    )
    return RankResult(
        ranked=ranked,
        enrichment_notice=outcome.notice,
        superseded=superseded,
    )


async def recommend(
    cfg: Configuration,
    origin: Coordinates,
    preferences: FilterPreferences,
    *,
    enrichment_budget: Optional[int] = None,
    guard: Optional[EpochGuard] = None,
    client: Optional[RoutesClient] = None,
    loader: Callable[..., CandidateLoad] = load_candidates,
) -> RankResult:
    """Load candidates for ``origin`` and rank them; the newest call on ``guard`` wins."""
    if not isinstance(preferences, FilterPreferences):
        raise ValueError("preferences must be a FilterPreferences instance")
    epoch = guard.advance() if guard is not None else None

    load = await asyncio.to_thread(loader, cfg, origin, preferences)
    result = await rank(
        origin,
        load.places,
        preferences,
        enrichment_budget,
        cfg=cfg,
        client=client,
        guard=guard,
        epoch=epoch,
        enrich=load.source == "live",
    )
    result.source = load.source  # type: ignore[assignment]
    result.places_notice = load.notice
    return result
