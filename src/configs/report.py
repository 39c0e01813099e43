"""Report constants: jurisdiction, plot clamps, output names."""

TARGET_STATE = "WA"

# Optional boundary file (shapefile / GeoJSON / gpkg) drawn under the density map
OUTLINE_PATH = "data/raw_data/boundaries/wa_state_outline.geojson"

DEFAULT_OUTPUT_DIR = "data/report"

# Histogram / scatter domains
BASE_MSRP_RANGE = (0, 200000)
AVERAGE_MSRP_XLIM = (30000, 110000)
CITY_COUNT_YLIM = (0, 200)
HIST_BINS = 30

# Scale applied to city_ev_count for map marker area (points^2)
MARKER_SCALE = 0.5

FIGSIZE = (10, 6)
MAP_FIGSIZE = (12, 8)
DPI = 150

FIGURES = {
    "city_density_map": "figure_1_city_density_map.png",
    "city_count_hist": "figure_2_city_ev_count_hist.png",
    "base_msrp_hist": "figure_3_base_msrp_hist.png",
    "electric_range_hist": "figure_4_electric_range_hist.png",
    "msrp_vs_count": "figure_5_average_msrp_vs_count.png",
    "range_vs_count": "figure_6_average_range_vs_count.png",
}

CORRELATION_CAPTION = "Correlation Coefficients"
CORRELATION_DECIMALS = 4
CORRELATION_FILE = "correlation_coefficients.csv"
AGGREGATE_FILE = "city_aggregate.csv"
REPORT_FILE = "report.md"

# Top cities listed in the narrative
TOP_N_CITIES = 10
