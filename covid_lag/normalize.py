"""Normalize the raw COVID-19 feeds into a shared record shape.

Each of the four sources arrives with its own column names.  The
functions here convert them into frames addressed the same way:

* ``region`` - the full region name as used by the NYT state data.
* ``date`` - the parsed calendar date (``NaT`` when unparseable).
* ``raw_date`` - the original ``YYYY-MM-DD`` string.  This is the join key
  used downstream; string equality avoids any timezone or precision
  surprises from comparing timestamps.

Numeric fields are coerced with ``errors="coerce"`` so that a bad value
becomes ``NaN`` instead of aborting the batch.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping

import pandas as pd

from .config import NATIONAL_REGION, VACCINE_TYPE_ALL

# Module-level logger
logger = logging.getLogger(__name__)

DATE_FORMAT: str = "%Y-%m-%d"

STATE_COLUMNS: List[str] = [
    "region",
    "date",
    "raw_date",
    "cumulative_cases",
    "cumulative_deaths",
]
VACCINATION_COLUMNS: List[str] = [
    "region",
    "date",
    "raw_date",
    "cumulative_doses",
    "cumulative_stage_one",
    "cumulative_stage_two",
]
HOSPITALIZATION_COLUMNS: List[str] = [
    "region",
    "date",
    "raw_date",
    "hospitalizations",
]
NATIONAL_COLUMNS: List[str] = STATE_COLUMNS


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def _parse_dates(raw_dates: pd.Series) -> pd.Series:
    return pd.to_datetime(raw_dates, format=DATE_FORMAT, errors="coerce")


def _to_number(values: pd.Series) -> pd.Series:
    return pd.to_numeric(values, errors="coerce").astype(float)


def map_region_names(codes: pd.Series, abbreviations: Mapping[str, str]) -> pd.Series:
    """Translate region abbreviations into full region names.

    The mapping is partial: a code with no entry in ``abbreviations``
    becomes missing (``NaN``).  Callers are expected to drop those rows
    rather than invent a region for them.

    Parameters
    ----------
    codes : pd.Series
        Region abbreviations such as ``"NY"``.
    abbreviations : Mapping[str, str]
        Abbreviation → full name lookup, e.g. ``{"NY": "New York"}``.

    Returns
    -------
    pd.Series
        Full region names aligned with ``codes``.
    """
    return codes.map(dict(abbreviations))


def list_regions(states: pd.DataFrame) -> List[str]:
    """Return the sorted, de-duplicated region names of the state frame."""
    return sorted(states["region"].dropna().unique().tolist())


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------


def normalize_states(raw: pd.DataFrame) -> pd.DataFrame:
    """Normalize the NYT per-state cumulative cases/deaths table.

    Parameters
    ----------
    raw : pd.DataFrame
        Table with at least ``date``, ``state``, ``cases`` and ``deaths``.

    Returns
    -------
    pd.DataFrame
        Frame with :data:`STATE_COLUMNS`.
    """
    ensure_columns(raw, ["date", "state", "cases", "deaths"])
    raw_date = raw["date"].astype(str)
    df = pd.DataFrame(
        {
            "region": raw["state"].astype(str),
            "date": _parse_dates(raw_date),
            "raw_date": raw_date,
            "cumulative_cases": _to_number(raw["cases"]),
            "cumulative_deaths": _to_number(raw["deaths"]),
        }
    )
    return df.reset_index(drop=True)


def normalize_vaccinations(raw: pd.DataFrame) -> pd.DataFrame:
    """Normalize the govex vaccine timeline.

    Only rows where ``Vaccine_Type`` is ``"All"`` are kept; the other rows
    break the same totals down by manufacturer.
    """
    ensure_columns(
        raw,
        [
            "Date",
            "Province_State",
            "Vaccine_Type",
            "Doses_admin",
            "Stage_One_Doses",
            "Stage_Two_Doses",
        ],
    )
    raw = raw[raw["Vaccine_Type"] == VACCINE_TYPE_ALL]
    raw_date = raw["Date"].astype(str)
    df = pd.DataFrame(
        {
            "region": raw["Province_State"].astype(str),
            "date": _parse_dates(raw_date),
            "raw_date": raw_date,
            "cumulative_doses": _to_number(raw["Doses_admin"]),
            "cumulative_stage_one": _to_number(raw["Stage_One_Doses"]),
            "cumulative_stage_two": _to_number(raw["Stage_Two_Doses"]),
        }
    )
    return df.reset_index(drop=True)


def normalize_hospitalizations(
    raw_records: Iterable[Dict[str, object]],
    abbreviations: Mapping[str, str],
) -> pd.DataFrame:
    """Normalize the healthdata.gov hospital capacity records.

    The feed labels regions with two-letter abbreviations and carries
    full ISO timestamps.  Abbreviations are translated with
    :func:`map_region_names`; records whose abbreviation is not in the
    map are discarded entirely so no partially keyed record reaches the
    join stage.

    Parameters
    ----------
    raw_records : Iterable[Dict[str, object]]
        Decoded JSON records with ``date``, ``state`` and
        ``inpatient_beds_used_covid``.
    abbreviations : Mapping[str, str]
        Abbreviation → full region name lookup.

    Returns
    -------
    pd.DataFrame
        Frame with :data:`HOSPITALIZATION_COLUMNS`.
    """
    raw = pd.DataFrame(list(raw_records))
    if raw.empty:
        return pd.DataFrame(columns=HOSPITALIZATION_COLUMNS)
    ensure_columns(raw, ["date", "state", "inpatient_beds_used_covid"])

    raw_date = raw["date"].astype(str).str.slice(0, 10)
    df = pd.DataFrame(
        {
            "region": map_region_names(raw["state"], abbreviations),
            "date": _parse_dates(raw_date),
            "raw_date": raw_date,
            "hospitalizations": _to_number(raw["inpatient_beds_used_covid"]),
        }
    )

    unmapped = df["region"].isna()
    if unmapped.any():
        logger.info(
            "Dropping %d hospitalization records with unknown region codes: %s",
            int(unmapped.sum()),
            sorted(raw.loc[unmapped, "state"].astype(str).unique()),
        )
    return df.loc[~unmapped].reset_index(drop=True)


def normalize_national(raw: pd.DataFrame) -> pd.DataFrame:
    """Normalize the NYT national cumulative cases/deaths table.

    The national table defines the reference date axis for every regional
    series, so its row order is preserved.
    """
    ensure_columns(raw, ["date", "cases", "deaths"])
    raw_date = raw["date"].astype(str)
    df = pd.DataFrame(
        {
            "region": NATIONAL_REGION,
            "date": _parse_dates(raw_date),
            "raw_date": raw_date,
            "cumulative_cases": _to_number(raw["cases"]),
            "cumulative_deaths": _to_number(raw["deaths"]),
        }
    )
    return df.reset_index(drop=True)
