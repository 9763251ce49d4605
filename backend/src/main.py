from __future__ import annotations

from typing import Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from models import CandidatePlace, Coordinates, FilterPreferences, RankedPlace
from services.pipeline import recommend
from services.report import build_report, trip_breakdown
from services.session import session_manager


load_dotenv()

app = FastAPI(title="Closish Ranker")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class OriginPayload(BaseModel):
    lat: float
    lng: float


class PreferencesPayload(BaseModel):
    max_walk_minutes: int = 10
    walk_vs_transit: str = "favor_transit"
    live_mode: bool = True
    when: str = "now"
    time_window: str = "next_60"
    place_type: str = "restaurants"


class RankRequest(BaseModel):
    origin: OriginPayload
    preferences: PreferencesPayload = Field(default_factory=PreferencesPayload)
    session_id: Optional[str] = Field(None, description="Client session; newer requests supersede older ones")
    enrichment_budget: Optional[int] = Field(None, description="Max candidates to enrich with transit detail")


class TransitPathPayload(BaseModel):
    source: str
    total_minutes: Optional[float] = None
    in_vehicle_minutes: Optional[float] = None
    wait_minutes: Optional[float] = None
    access_walk_minutes: Optional[float] = None
    transfer_walk_minutes: Optional[float] = None
    egress_walk_minutes: Optional[float] = None
    transfer_count: Optional[int] = None
    transit_leg_count: Optional[int] = None


class PlacePayload(BaseModel):
    id: str
    name: str
    category: str
    lat: float
    lng: float
    rating: Optional[float] = None
    walk_minutes: float
    transit_minutes: float
    drive_minutes: float
    transit_path: Optional[TransitPathPayload] = None
    source: str


class RankedPayload(BaseModel):
    place: PlacePayload
    closish_score: float
    score_mode: str
    components: Dict[str, float] = {}
    trip_sequence: str
    trip_note: Optional[str] = None


class RankResponse(BaseModel):
    ranked: List[RankedPayload]
    enrichment_notice: Optional[str] = None
    places_notice: Optional[str] = None
    source: str
    superseded: bool = False
    report_markdown: str


def to_payload(p: CandidatePlace) -> PlacePayload:
    path = None
    if p.transit_path is not None:
        tp = p.transit_path
        path = TransitPathPayload(
            source=tp.source,
            total_minutes=tp.total_minutes,
            in_vehicle_minutes=tp.in_vehicle_minutes,
            wait_minutes=tp.wait_minutes,
            access_walk_minutes=tp.access_walk_minutes,
            transfer_walk_minutes=tp.transfer_walk_minutes,
            egress_walk_minutes=tp.egress_walk_minutes,
            transfer_count=tp.transfer_count,
            transit_leg_count=tp.transit_leg_count,
        )
    return PlacePayload(
        id=p.id,
        name=p.name,
        category=p.category,
        lat=p.location.lat,
        lng=p.location.lng,
        rating=p.rating,
        walk_minutes=p.travel.walk_minutes,
        transit_minutes=p.travel.transit_minutes,
        drive_minutes=p.travel.drive_minutes,
        transit_path=path,
        source=p.source,
    )


def to_ranked_payload(item: RankedPlace) -> RankedPayload:
    trip = trip_breakdown(item.place)
    return RankedPayload(
        place=to_payload(item.place),
        closish_score=round(item.score.closish_score, 2),
        score_mode=item.score.mode,
        components={k: round(v, 3) for k, v in item.score.components.items()},
        trip_sequence=trip.sequence,
        trip_note=trip.message,
    )


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {
        "status": "ok",
        "places_configured": cfg.is_places_configured,
        "routes_configured": cfg.is_routes_configured,
    }


@app.post("/rank", response_model=RankResponse)
async def rank_nearby(req: RankRequest) -> RankResponse:
    try:
        prefs = FilterPreferences(**req.preferences.model_dump())
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        cfg = Configuration.from_env()
        origin = Coordinates(lat=req.origin.lat, lng=req.origin.lng)
        guard = session_manager.guard_for(req.session_id) if req.session_id else None
        result = await recommend(
            cfg,
            origin,
            prefs,
            enrichment_budget=req.enrichment_budget,
            guard=guard,
        )
        md = build_report(prefs, result)
    except Exception as exc:
        logger.exception("ranking failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")

    return RankResponse(
        ranked=[to_ranked_payload(item) for item in result.ranked],
        enrichment_notice=result.enrichment_notice,
        places_notice=result.places_notice,
        source=result.source,
        superseded=result.superseded,
        report_markdown=md,
    )


@app.delete("/sessions/{session_id}")
def reset_session(session_id: str) -> dict:
    session_manager.reset(session_id)
    return {"status": "ok", "session_id": session_id}
