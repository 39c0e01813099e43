"""
Pipeline: Full EV city report.

Runs load → clean → join → aggregate → correlate, then writes to the output directory:
- figure_1..6 PNGs (density map, three histograms, two trend scatters)
- city_aggregate.csv
- correlation_coefficients.csv (one row, 4 decimals)
- report.md (narrative with the "Correlation Coefficients" table)
"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.configs.report import (
    AGGREGATE_FILE,
    CORRELATION_FILE,
    DEFAULT_OUTPUT_DIR,
    OUTLINE_PATH,
    REPORT_FILE,
    TARGET_STATE,
)
from src.report.figures import render_figures
from src.report.narrative import build_report_text, render_report
from src.table_builder.builder import run_pipeline
from src.table_builder.reader import resolve_path

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

_verbose = True


def main():
    global _verbose
    parser = argparse.ArgumentParser(description="Render the EV-by-city report (figures, tables, narrative).")
    parser.add_argument(
        "--output-dir",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Project root (default: script parent parent)",
    )
    parser.add_argument("--vehicles", type=str, default=None, help="Vehicle CSV path override")
    parser.add_argument("--geo", type=str, default=None, help="ZIP geo CSV path override")
    parser.add_argument(
        "--outline",
        type=str,
        default=OUTLINE_PATH,
        help=f"Region boundary file for the density map (default: {OUTLINE_PATH})",
    )
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
    _verbose = not args.quiet

    base_path = Path(args.base_path) if args.base_path else project_root
    output_dir = resolve_path(args.output_dir, base_path)
    output_dir.mkdir(parents=True, exist_ok=True)

    ctx = run_pipeline(
        base_path,
        vehicles_path=args.vehicles,
        geo_path=args.geo,
        target_state=args.state,
    )
    if _verbose:
        print(f"\n--- city_table (head) ---\n{ctx.city_table.head()}\n")
        print(f"\n--- {ctx.correlations.attrs['caption']} ---\n{ctx.correlations.to_string(index=False)}\n")

    ctx.city_table.to_csv(output_dir / AGGREGATE_FILE, index=False)
    ctx.correlations.to_csv(output_dir / CORRELATION_FILE, index=False)
    logger.info(f"Saved {AGGREGATE_FILE} and {CORRELATION_FILE} to {output_dir}")

    figures = render_figures(
        ctx.vehicles,
        ctx.city_table,
        output_dir,
        outline_path=resolve_path(args.outline, base_path) if args.outline else None,
    )

    text = build_report_text(ctx.city_table, ctx.correlations, ctx.notes, figures, ctx.target_state)
    report_path = render_report(text, output_dir / REPORT_FILE)
    print(f"Saved report with {len(figures)} figures to {report_path}")


if __name__ == "__main__":
    main()
    sys.exit(0)
