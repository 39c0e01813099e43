import argparse
import json
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.raw_table_inspector.inspector import inspect_sources
from src.report.narrative import dataframe_to_markdown


def inspect_to_markdown(results: dict) -> str:
    blocks = []
    for name, value in results.items():
        blocks.append(f"## {name}")
        if isinstance(value, str):
            blocks.append(f"`{value}`")
        else:
            blocks.append(dataframe_to_markdown(value))
    return "\n\n".join(blocks)


def results_to_json(results: dict) -> dict:
    """Convert inspection results to a JSON-serializable dict."""
    out = {}
    for name, value in results.items():
        if isinstance(value, str):
            out[name] = {"error": value}
        else:
            out[name] = json.loads(value.to_json(orient="records"))
    return out


def main():
    parser = argparse.ArgumentParser(
        description="Inspect the raw vehicle and ZIP geo tables and report dtypes and missing values."
    )
    parser.add_argument(
        "--vehicles",
        type=str,
        default=None,
        help="Vehicle CSV path (default: SOURCES['vehicles']['path'])",
    )
    parser.add_argument(
        "--geo",
        type=str,
        default=None,
        help="ZIP geo CSV path (default: SOURCES['zip_geo']['path'])",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="",
        help="Output file path. Use .json for JSON or .md for markdown; if empty, print to stdout.",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Project root for resolving relative paths (default: script's parent parent).",
    )
    args = parser.parse_args()

    base_path = Path(args.base_path) if args.base_path else project_root
    paths = {}
    if args.vehicles:
        paths["vehicles"] = args.vehicles
    if args.geo:
        paths["zip_geo"] = args.geo

    results = inspect_sources(base_path=base_path, paths=paths)
    as_json = args.out.lower().endswith(".json") if args.out else False

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        if as_json:
            out_path.write_text(json.dumps(results_to_json(results), indent=2), encoding="utf-8")
        else:
            out_path.write_text(inspect_to_markdown(results), encoding="utf-8")
        print(f"Wrote dtype report to: {out_path}")
    else:
        print(inspect_to_markdown(results))


if __name__ == "__main__":
    main()
