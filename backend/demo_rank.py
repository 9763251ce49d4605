from __future__ import annotations

import argparse
import asyncio

from dotenv import load_dotenv

from config import Configuration
from models import Coordinates, FilterPreferences
from services.pipeline import recommend
from services.report import build_report


async def main(lat: float, lng: float, place_type: str, budget: int | None) -> None:
    cfg = Configuration.from_env()
    print("=== Config ===")
    print(cfg.log_summary())
    print()

    prefs = FilterPreferences(place_type=place_type)
    result = await recommend(cfg, Coordinates(lat=lat, lng=lng), prefs, enrichment_budget=budget)

    print(f"=== Ranked {len(result.ranked)} places ({result.source}) ===")
    for i, item in enumerate(result.ranked, 1):
        print(f"{i}. {item.place.name} (Score: {item.score.closish_score:.1f}, {item.score.mode})")
        print(f"   Components: {item.score.components}")
    print()
    print(build_report(prefs, result))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rank nearby places from the command line")
    parser.add_argument("--lat", type=float, default=37.7749)
    parser.add_argument("--lng", type=float, default=-122.4194)
    parser.add_argument("--type", dest="place_type", default="restaurants")
    parser.add_argument("--budget", type=int, default=None)
    args = parser.parse_args()
    load_dotenv()
    asyncio.run(main(args.lat, args.lng, args.place_type, args.budget))
