#!/usr/bin/env python3
"""Build the exclusion mask overlay for a set of drawn zones."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from zone_mask import MaskConfig, ZoneStore, ZoneType, build_mask_with_timing, filter_zones
from zone_mask.contracts import FALLBACK_HOLE_PUNCH, FALLBACK_NONE, ZONE_CONFIGS, iter_features

logger = logging.getLogger("build_exclusion_mask")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the world-minus-zones exclusion mask as GeoJSON"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--zones", help="Path to a GeoJSON FeatureCollection of zones")
    source.add_argument("--store", help="Path to a zone store JSON document")
    parser.add_argument(
        "--zone-type",
        choices=[t.value for t in ZoneType],
        default=None,
        help="Only use zones of this type",
    )
    parser.add_argument(
        "--out", default=None, help="Output GeoJSON path (default: stdout)"
    )
    parser.add_argument(
        "--previous-fingerprint",
        default=None,
        help="Fingerprint of the last build, to report whether zones changed",
    )
    parser.add_argument(
        "--fallback",
        choices=[FALLBACK_HOLE_PUNCH, FALLBACK_NONE],
        default=FALLBACK_HOLE_PUNCH,
        help="What to emit when the polygon difference fails",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def _load_zones(args: argparse.Namespace):
    if args.store:
        return ZoneStore(Path(args.store)).load()
    path = Path(args.zones)
    if not path.is_file():
        raise FileNotFoundError(f"Zones file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        zones = _load_zones(args)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read zones: %s", exc)
        return 2

    if args.zone_type:
        zone_type = ZoneType(args.zone_type)
        zones = filter_zones(zones, zone_type)
        logger.info("Using %s features only", ZONE_CONFIGS[zone_type].label)

    result = build_mask_with_timing(
        zones,
        args.previous_fingerprint,
        MaskConfig(fallback=args.fallback),
    )
    payload = json.dumps(result.exclusion, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote exclusion mask to %s", out_path)
    else:
        print(payload)

    regions = len(result.exclusion["features"]) if result.exclusion else 0
    print(f"Zones: {len(iter_features(zones))}", file=sys.stderr)
    print(f"Regions: {regions}", file=sys.stderr)
    print(f"Fingerprint: {result.fingerprint}", file=sys.stderr)
    print(f"Changed: {str(result.changed).lower()}", file=sys.stderr)
    print(f"Duration: {result.duration_ms:.2f}ms", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
