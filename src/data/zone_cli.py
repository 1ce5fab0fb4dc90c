"""CLI for ranking zones from a JSON snapshot of the factor tables.

Usage:
    python -m src.data.zone_cli snapshot.json --ethnicity korean --top 10
    python -m src.data.zone_cli snapshot.json --weight demographic=100 --weight crime=0
    python -m src.data.zone_cli snapshot.json --gender female --age 25 34 --rent 1500 3000
    python -m src.data.zone_cli snapshot.json --ethnicity korean --gender female --demographic-weights 0.7 0.3 0 0
"""

import argparse
import asyncio
import logging
import math

from src.config import settings
from src.data.loader import ZoneDataUnavailableError
from src.data.search import ZoneSearchService
from src.data.snapshot import SnapshotZoneSource
from src.engine.thresholds import match_band
from src.models.scoring import (
    TIME_PERIODS,
    CompositionFilter,
    DemographicWeights,
    RankingRequest,
    RankingResult,
)


def parse_weight(text: str) -> tuple[str, float]:
    key, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected factor=percent, got {text!r}")
    try:
        return key.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"weight for {key!r} is not a number: {value!r}")


def print_result(result: RankingResult) -> None:
    print(f"\n{'=' * 72}")
    print(f"  Top {result.top_zones_returned} of {result.total_zones_found} zones "
          f"(top {result.top_percent:g}%)")
    print(f"{'=' * 72}")
    weights = ", ".join(f"{k}={v:.0%}" for k, v in result.weights.as_dict().items() if v)
    print(f"  Weights: {weights or 'none'}")
    if result.percentages.unresolved_tokens:
        print(f"  Unresolved: {', '.join(result.percentages.unresolved_tokens)}")
    print()

    for rank, zone in enumerate(result.zones, start=1):
        if zone.demographic_match_pct is not None:
            band = match_band(zone.demographic_match_pct / 100).value
            match = f"{zone.demographic_match_pct:5.1f}% ({band})"
        else:
            match = "    -"
        rent = f"${zone.avg_rent:,.0f}" if zone.avg_rent is not None else "n/a"
        flag = " *" if zone.overcounting_detected else ""
        print(f"  {rank:>3}. {zone.geoid}  {zone.custom_score:5.1f}  match {match}  rent {rent:>8}{flag}")
        print(f"       {zone.display_name}")
        if zone.crime is not None:
            print(f"       incidents {zone.crime.trend_direction} ({zone.crime.trend_change}%)", end="")
        if zone.foot_traffic is not None:
            print(f"  pedestrians {zone.foot_traffic.trend_direction} ({zone.foot_traffic.trend_change}%)", end="")
        print()
    print()


async def main() -> None:
    parser = argparse.ArgumentParser(description="Zone ranking CLI")
    parser.add_argument("snapshot", help="JSON file with zones, ethnicity, demographics, income and trend tables")
    parser.add_argument("--weight", type=parse_weight, action="append", default=[],
                        help="Factor weight as factor=percent (repeatable)")
    parser.add_argument("--ethnicity", action="append", default=[], help="Ethnicity name or column id (repeatable)")
    parser.add_argument("--gender", action="append", default=[], choices=["male", "female"])
    parser.add_argument("--age", type=float, nargs=2, metavar=("MIN", "MAX"), help="Age range")
    parser.add_argument("--income", type=float, nargs=2, metavar=("MIN", "MAX"), help="Household income range")
    parser.add_argument("--rent", type=float, nargs=2, metavar=("MIN", "MAX"), help="Average rent range")
    parser.add_argument("--demographic-weights", type=float, nargs=4,
                        metavar=("ETHNICITY", "GENDER", "AGE", "INCOME"),
                        help="Blend the composition sub-factors with these 0-1 weights")
    parser.add_argument("--top", type=float, default=10, help="Top percentage to keep (default: 10)")
    parser.add_argument("--periods", nargs="+", choices=TIME_PERIODS, default=list(TIME_PERIODS),
                        help="Pedestrian time periods")
    parser.add_argument("--predictions", action="store_true",
                        help="Score every zone from the current prediction year")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(level="DEBUG" if args.verbose else settings.log_level)

    if not 0 < args.top <= 100:
        parser.error("--top must be in (0, 100]")

    demographic_weights = None
    if args.demographic_weights:
        if not all(0 <= w <= 1 for w in args.demographic_weights):
            parser.error("--demographic-weights values must be in [0, 1]")
        demographic_weights = DemographicWeights(*args.demographic_weights)

    request = RankingRequest(
        weights=tuple(args.weight),
        composition=CompositionFilter(
            ethnicities=tuple(args.ethnicity),
            genders=tuple(args.gender),
            age_range=tuple(args.age) if args.age else None,
            income_range=tuple(args.income) if args.income else None,
        ),
        demographic_weights=demographic_weights,
        rent_range=tuple(args.rent) if args.rent else (0, math.inf),
        top_percent=args.top,
        time_periods=tuple(args.periods),
    )

    service = ZoneSearchService(
        SnapshotZoneSource.from_json(args.snapshot),
        rank_with_predictions=args.predictions or None,
    )
    try:
        result = await service.search(request)
    except ZoneDataUnavailableError as e:
        parser.exit(1, f"error: {e}\n")
    print_result(result)


if __name__ == "__main__":
    asyncio.run(main())
