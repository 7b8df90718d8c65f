"""
Handles downloading the raw COVID-19 feeds and the static lookup tables.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd
import requests

from .config import (
    ABBREVIATION_MAP_FILE,
    HOSPITALIZATION_SOURCE,
    NATIONAL_SOURCE,
    POPULATION_TABLE_FILE,
    REQUEST_TIMEOUT,
    STATES_SOURCE,
    STATIC_DIR,
    VACCINATION_SOURCE,
)
from .normalize import (
    list_regions,
    normalize_hospitalizations,
    normalize_national,
    normalize_states,
    normalize_vaccinations,
)
from .population import build_population_index
from .series import SourceBundle

logger = logging.getLogger(__name__)


def _read_csv(url: str) -> pd.DataFrame:
    logger.info("Fetching %s", url)
    df = pd.read_csv(url, dtype=str, keep_default_na=False)
    logger.info("-> %d rows", len(df))
    return df


def fetch_state_data(url: str = STATES_SOURCE) -> pd.DataFrame:
    """Fetch the NYT per-state cumulative table."""
    return _read_csv(url)


def fetch_national_data(url: str = NATIONAL_SOURCE) -> pd.DataFrame:
    """Fetch the NYT national cumulative table (the reference date axis)."""
    return _read_csv(url)


def fetch_vaccination_data(url: str = VACCINATION_SOURCE) -> pd.DataFrame:
    """Fetch the govex vaccine administration timeline."""
    return _read_csv(url)


def fetch_hospitalization_data(
    url: str = HOSPITALIZATION_SOURCE, timeout: int = REQUEST_TIMEOUT
) -> List[Dict[str, object]]:
    """Fetch the healthdata.gov hospital capacity records as decoded JSON."""
    logger.info("Fetching %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    records = response.json()
    logger.info("-> %d records", len(records))
    return records


def load_abbreviation_map(path: str | Path | None = None) -> Dict[str, str]:
    """Load the region abbreviation → full name map from JSON."""
    path = Path(path) if path is not None else STATIC_DIR / ABBREVIATION_MAP_FILE
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def load_population_table(path: str | Path | None = None) -> pd.DataFrame:
    """Load the multi-year population table (a JSON list of records)."""
    path = Path(path) if path is not None else STATIC_DIR / POPULATION_TABLE_FILE
    if not path.exists():
        raise FileNotFoundError(
            f"Population table not found at {path}. Place {POPULATION_TABLE_FILE} "
            "(a JSON list of records with 'Year', 'State' and 'Total Population') "
            "in the static directory, or point COVID_LAG_STATIC_DIR at a directory "
            "that holds it."
        )
    with open(path, encoding="utf-8") as fh:
        return pd.DataFrame(json.load(fh))


def fetch_all_sources() -> SourceBundle:
    """Main entry point: fetch, normalize and bundle every source.

    All four feeds are required.  Network errors propagate and an empty
    feed raises ``ValueError``; there is no partial-dataset mode.
    """
    logger.info("Beginning data collection")
    abbreviations = load_abbreviation_map()

    states = normalize_states(fetch_state_data())
    vaccinations = normalize_vaccinations(fetch_vaccination_data())
    hospitalizations = normalize_hospitalizations(
        fetch_hospitalization_data(), abbreviations
    )
    national = normalize_national(fetch_national_data())

    for name, df in (
        ("state", states),
        ("vaccination", vaccinations),
        ("hospitalization", hospitalizations),
        ("national", national),
    ):
        if df.empty:
            raise ValueError(f"The {name} source returned no usable rows.")

    population = build_population_index(load_population_table())
    return SourceBundle(
        states=states,
        vaccinations=vaccinations,
        hospitalizations=hospitalizations,
        national=national,
        population=population,
        regions=list_regions(states),
    )
