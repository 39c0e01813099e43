"""
Source configuration for the vehicle registration and ZIP geocoordinate tables.

Canonical keys (aligned across tables):
- zip_code: integer postal code (5-digit ZIP parsed to int)
- city: city name as registered
- state: 2-letter state code

Grain: vehicle | zip
- vehicle: one row per registered vehicle; join key = zip_code
- zip: one row per ZIP code; join key = zip_code (must be unique)
"""

SOURCES = {
    # ---- Vehicle registrations (e.g. WA Electric Vehicle Population Data) ----
    "vehicles": {
        "grain": "vehicle",
        "path": "data/raw_data/ev_population/electric_vehicle_population.csv",
        "format": "csv",
        "keys": {
            "zip_code": "zip_code",
        },
        "value_columns": {
            "city": "city",
            "state": "state",
            "base_msrp": "base_msrp",
            "electric_range": "electric_range",
        },
        # Canonical types after rename; zip_code goes through parse_zip_codes
        "dtypes": {
            "zip_code": "zip",
            "city": "string",
            "state": "string",
            "base_msrp": "float64",
            "electric_range": "float64",
        },
        # Unreported price / range are recorded as 0 in the registration data
        "positive": ["base_msrp", "electric_range"],
        "filters": {"state": "WA"},
    },
    # ---- ZIP geocoordinates (e.g. simplemaps uszips.csv) ----
    "zip_geo": {
        "grain": "zip",
        "path": "data/raw_data/zip_geo/uszips.csv",
        "format": "csv",
        "keys": {
            "zip_code": "zip",
        },
        "value_columns": {
            "lat": "lat",
            "long": "lng",
        },
        "dtypes": {
            "zip_code": "zip",
            "lat": "float64",
            "long": "float64",
        },
    },
}
