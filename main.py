#!/usr/bin/env python
"""
FloodSense command line.

Usage:
    python main.py analyze 7.06 125.60
    python main.py analyze 7.06 125.60 --seed 42 --json
    python main.py factor 7.06 125.60 rainfall
    python main.py info
    python main.py areas
"""

import argparse
import json
import logging
import sys

from core.config import Settings
from core.errors import FloodSenseError, OutOfBoundsError
from core.service import create_service
from loaders.geo_factors import FACTOR_NAMES

log = logging.getLogger("floodsense")

RISK_BAR = {
    "Low": ".",
    "Moderate": ":",
    "High": "%",
    "Very High": "#",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Davao City flood susceptibility (RF + XGBoost stacking)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible factor extraction")
    parser.add_argument("--boundary", choices=["polygon", "rectangle", "none"], default=None,
                        help="Boundary check used before analysis")
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of a summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze flood risk for a location")
    analyze.add_argument("latitude", type=float)
    analyze.add_argument("longitude", type=float)

    factor = sub.add_parser("factor", help="Show a single conditioning factor")
    factor.add_argument("latitude", type=float)
    factor.add_argument("longitude", type=float)
    factor.add_argument("name", choices=FACTOR_NAMES)

    sub.add_parser("info", help="Model information")
    sub.add_parser("areas", help="Known flood-prone areas")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.seed is not None:
        settings.seed = args.seed
    if args.boundary is not None:
        settings.boundary_mode = args.boundary
    if args.verbose:
        settings.log_level = "DEBUG"
    return settings


def print_analysis(record: dict) -> None:
    loc = record["location"]
    pred = record["prediction"]
    factors = record["factors"]

    print(f"\n=== FLOOD SUSCEPTIBILITY @ {loc['latitude']:.5f}, {loc['longitude']:.5f} ===")
    print(f"Risk Level : {pred['riskLevel']} {RISK_BAR[pred['riskLevel']] * 10}")
    print(f"Probability: {pred['probability'] * 100:.1f}%")
    print(f"Confidence : {pred['confidence'] * 100:.1f}%")
    print(f"  Random Forest: {pred['rfProbability'] * 100:.1f}% (weight {pred['ensembleWeight']['rf']})")
    print(f"  XGBoost      : {pred['xgbProbability'] * 100:.1f}% (weight {pred['ensembleWeight']['xgb']})")

    print("\nConditioning factors:")
    for name, value in factors.items():
        if isinstance(value, float):
            print(f"  {name:18s} {value:10.2f}")
        else:
            print(f"  {name:18s} {value:>10s}")

    print("\nKey risk factors:")
    if not record["factorImportance"]:
        print("  (none flagged)")
    for item in record["factorImportance"]:
        print(f"  {item['icon']} [{item['risk']:8s}] {item['factor']}: {item['message']}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s │ %(name)-20s │ %(levelname)-8s │ %(message)s',
        datefmt='%H:%M:%S',
        handlers=[
            logging.StreamHandler()
        ]
    )

    service = create_service(settings)

    try:
        if args.command == "analyze":
            record = service.analyze_location(args.latitude, args.longitude).to_dict()
            if args.json:
                print(json.dumps(record, indent=2, ensure_ascii=False))
            else:
                print_analysis(record)
        elif args.command == "factor":
            print(json.dumps(service.get_factor_details(args.latitude, args.longitude, args.name), indent=2))
        elif args.command == "info":
            print(json.dumps(service.get_model_info(), indent=2))
        elif args.command == "areas":
            print(json.dumps(service.get_flood_prone_areas(), indent=2))
    except OutOfBoundsError as e:
        log.error(str(e))
        return 2
    except FloodSenseError as e:
        log.error(f"Analysis failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
