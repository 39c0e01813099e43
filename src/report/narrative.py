"""
Markdown narrative for the EV city report: dataset sizes, top cities, the
captioned correlation table and a plain-language reading of each coefficient.
"""

import math
from pathlib import Path

import pandas as pd

from src.configs.report import CORRELATION_CAPTION, FIGURES, TOP_N_CITIES

FIGURE_TITLES = {
    "city_density_map": "EV registrations by city",
    "city_count_hist": "Distribution of EV count per city",
    "base_msrp_hist": "Distribution of base MSRP",
    "electric_range_hist": "Distribution of electric range",
    "msrp_vs_count": "Average base MSRP vs EV count per city",
    "range_vs_count": "Average electric range vs EV count per city",
}


def dataframe_to_markdown(df: pd.DataFrame) -> str:
    """Format a DataFrame as a markdown table without requiring tabulate."""
    rows = [list(df.columns)]
    for _, r in df.iterrows():
        rows.append([str(x) for x in r])
    ncols = len(rows[0])
    widths = [max(len(str(rows[i][j])) for i in range(len(rows))) for j in range(ncols)]
    lines = []
    for i, row in enumerate(rows):
        line = "| " + " | ".join(str(x).ljust(widths[j]) for j, x in enumerate(row)) + " |"
        lines.append(line)
        if i == 0:
            sep = "| " + " | ".join(":" + "-" * max(2, w) for w in widths) + " |"
            lines.append(sep)
    return "\n".join(lines)


def describe_correlation(r: float) -> str:
    """Plain-language strength and direction of a Pearson coefficient."""
    if r is None or math.isnan(r):
        return "undefined (fewer than two cities, or a constant variable)"
    size = abs(r)
    if size < 0.1:
        return "negligible"
    if size < 0.3:
        strength = "weak"
    elif size < 0.5:
        strength = "moderate"
    else:
        strength = "strong"
    direction = "positive" if r > 0 else "negative"
    return f"{strength} {direction}"


def correlation_section(correlations: pd.DataFrame) -> str:
    caption = correlations.attrs.get("caption", CORRELATION_CAPTION)
    lines = [f"**{caption}**", "", dataframe_to_markdown(correlations), ""]
    for label, r in correlations.iloc[0].items():
        lines.append(f"- `{label}` = {r}: {describe_correlation(float(r))} relationship.")
    return "\n".join(lines)


def _top_cities(city_table: pd.DataFrame, top_n: int) -> pd.DataFrame:
    top = city_table.head(top_n)[["city", "city_ev_count", "average_base_msrp", "average_electric_range"]].copy()
    top["average_base_msrp"] = top["average_base_msrp"].round(0)
    top["average_electric_range"] = top["average_electric_range"].round(1)
    return top


def build_report_text(
    city_table: pd.DataFrame,
    correlations: pd.DataFrame,
    notes: dict,
    figures: dict[str, Path],
    target_state: str,
    top_n: int = TOP_N_CITIES,
) -> str:
    """Assemble the markdown report.

    figures maps figure keys to saved paths; links use the file name only, so
    the figures are expected next to the report.
    """
    sections = [f"# Electric Vehicles by City ({target_state})", ""]

    sections += [
        "## Data",
        "",
        f"- Vehicle records read: {notes.get('raw_vehicle_rows', 'n/a')}",
        f"- Records kept after cleaning (state == {target_state}, base MSRP > 0, electric range > 0): "
        f"{notes.get('clean_vehicle_rows', 'n/a')}",
        f"- Records without ZIP coordinates: {notes.get('unmatched_rows', 'n/a')}",
        f"- Cities: {notes.get('city_count', len(city_table))}",
        "",
    ]

    total = int(city_table["city_ev_count"].sum())
    if len(city_table):
        leader = city_table.iloc[0]
        share = 100.0 * leader["city_ev_count"] / total if total else 0.0
        sections += [
            "## Where the vehicles are",
            "",
            f"{leader['city']} leads with {int(leader['city_ev_count'])} vehicles, "
            f"{share:.1f}% of the {total} cleaned registrations. "
            f"The top {min(top_n, len(city_table))} cities:",
            "",
            dataframe_to_markdown(_top_cities(city_table, top_n)),
            "",
        ]

    sections += ["## Price, range and adoption", "", correlation_section(correlations), ""]

    if figures:
        sections += ["## Figures", ""]
        for key in FIGURES:
            if key not in figures:
                continue
            sections.append(f"![{FIGURE_TITLES[key]}]({Path(figures[key]).name})")
            sections.append("")

    return "\n".join(sections)


def render_report(text: str, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    return output_path
