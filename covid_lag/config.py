"""
Configuration constants for the COVID lag model dashboard.
"""

import os
from pathlib import Path
from typing import Dict, List, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
STATES_SOURCE: str = (
    "https://raw.githubusercontent.com/nytimes/covid-19-data/master/us-states.csv"
)
NATIONAL_SOURCE: str = (
    "https://raw.githubusercontent.com/nytimes/covid-19-data/master/us.csv"
)
VACCINATION_SOURCE: str = (
    "https://raw.githubusercontent.com/govex/COVID-19/master/data_tables/"
    "vaccine_data/us_data/time_series/vaccine_data_us_timeline.csv"
)
# Socrata endpoint; the default page size is far below the full history.
HOSPITALIZATION_SOURCE: str = (
    "https://healthdata.gov/resource/g62h-syeh.json?$limit=50000"
)
REQUEST_TIMEOUT: int = 60

# Static tables live next to the page assets served by `server.py`.
STATIC_DIR: Path = Path(
    os.getenv("COVID_LAG_STATIC_DIR", Path(__file__).resolve().parent.parent / "static")
)
ABBREVIATION_MAP_FILE: str = "stateAbbreviationMap.json"
POPULATION_TABLE_FILE: str = "rawPopData.json"

# Only the combined figure across all vaccine manufacturers is used.
VACCINE_TYPE_ALL: str = "All"

# ======================================================
#  MODEL CONSTANTS
# ======================================================
REFERENCE_YEAR: int = 2019
NATIONAL_REGION: str = "United States"
PER_CAPITA_BASE: int = 100_000

# ======================================================
#  UI DEFAULTS
# ======================================================
DEFAULT_REGION: str = NATIONAL_REGION
DEFAULT_START_DATE: str = "2020-01-01"

DEFAULT_SMOOTHING_DAYS: int = 7
DEFAULT_DEATH_LAG_DAYS: int = 18
DEFAULT_HOSPITALIZATION_LAG_DAYS: int = 9
DEFAULT_MORTALITY: float = 0.5
DEFAULT_MISSED_CASE_MULTIPLIER: float = 3.0
DEFAULT_HOSPITALIZATION_FACTOR: float = 5.0

# (input id, label, min, max, step)
SLIDER_OPTIONS: List[Tuple[str, str, float, float, float]] = [
    ("smoothing_days", "Moving average days", 1, 30, 1),
    ("hospitalization_days", "Case to hospital days", 0, 30, 1),
    ("days", "Case to death days", 0, 30, 1),
    ("mortality", "Mortality", 0.01, 5.0, 0.01),
    ("missed_case_multiplier", "Missed case multiplier", 1.0, 10.0, 0.1),
    ("hospitalization_factor", "Hospitalization factor", 1.0, 10.0, 0.1),
]

# ======================================================
#  CHART STYLE
# ======================================================
COLOR_VACCINATED: str = "#4f8b7d"
COLOR_DEATHS: str = "#999999"
COLOR_HOSPITALIZATIONS: str = "#9999ff"
COLOR_VACCINES: str = "rgba(0, 0, 255, 0.33)"
COLOR_CASES: str = "#ee8888"

CHART_TITLES: Dict[str, str] = {
    "cases-chart": "Cases, implied cases from deaths and hospitalizations (per 100k)",
    "deaths-chart": "Deaths per 100k (lagged)",
    "hospital-chart": "Hospitalized per 100k (lagged)",
    "vaccinated-chart": "Percent vaccinated (first dose)",
    "vaccinations-chart": "First doses per 100k per day",
}
