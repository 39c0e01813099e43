"""Table builder: reader and pipeline stages for the city-level EV table."""

from src.table_builder.reader import read, parse_zip_codes, read_file, resolve_path
from src.table_builder.builder import (
    PipelineContext,
    clean_vehicles,
    clean_geo,
    join_geo,
    aggregate_by_city,
    build_city_table,
    run_pipeline,
)

__all__ = [
    "read",
    "parse_zip_codes",
    "read_file",
    "resolve_path",
    "PipelineContext",
    "clean_vehicles",
    "clean_geo",
    "join_geo",
    "aggregate_by_city",
    "build_city_table",
    "run_pipeline",
]
