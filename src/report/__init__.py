"""Report rendering: figures and markdown narrative."""

from src.report.figures import render_figures, load_outline
from src.report.narrative import build_report_text, render_report, describe_correlation

__all__ = [
    "render_figures",
    "load_outline",
    "build_report_text",
    "render_report",
    "describe_correlation",
]
