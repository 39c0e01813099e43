"""
Pipeline: Build the city-grain EV table.

Reads the vehicle and ZIP geo tables (src/configs/sources.py), keeps vehicles in
the target state with positive base MSRP and electric range, left-joins ZIP
coordinates on zip_code and aggregates by city.
Output: city, city_ev_count, average_base_msrp, average_electric_range, lat, long.
"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.configs.report import TARGET_STATE
from src.table_builder.builder import build_city_table

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Build city-grain EV table (count, mean MSRP, mean range, lat/long)")
    parser.add_argument(
        "--output",
        type=str,
        default="data/processed_data/city_aggregate.csv",
        help="Output CSV path",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Project root (default: script parent)",
    )
    parser.add_argument("--vehicles", type=str, default=None, help="Vehicle CSV path override")
    parser.add_argument("--geo", type=str, default=None, help="ZIP geo CSV path override")
    parser.add_argument(
        "--state",
        type=str,
        default=TARGET_STATE,
        help=f"Jurisdiction to keep (default: {TARGET_STATE})",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress table head prints (only show INFO logs)",
    )
    args = parser.parse_args()

    base_path = Path(args.base_path) if args.base_path else project_root
    output_path = base_path / args.output
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print("Building city table from vehicles + zip_geo...")
    df = build_city_table(
        base_path,
        vehicles_path=args.vehicles,
        geo_path=args.geo,
        target_state=args.state,
    )
    if not args.quiet:
        print(f"\n--- city_table (head) ---\n{df.head()}\n")
    df.to_csv(output_path, index=False)
    print(f"Saved {len(df)} rows to {output_path}")


if __name__ == "__main__":
    main()
    sys.exit(0)
