"""Build per-region cumulative series on the national date axis.

Every regional series is re-indexed onto the *reference axis*: the
ordered dates of the national cases/deaths table.  This guarantees that
all regions share one identical date axis regardless of how sparse their
own records are.  Joins are left joins on the ``raw_date`` string key;
source records dated outside the axis are dropped and days without a
record from a source contribute zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np
import pandas as pd

from .config import NATIONAL_REGION

logger = logging.getLogger(__name__)

CUMULATIVE_COLUMNS: List[str] = [
    "date",
    "raw_date",
    "cumulative_cases",
    "cumulative_deaths",
    "cumulative_stage_one",
    "cumulative_stage_two",
    "hospitalizations",
]


@dataclass(frozen=True, eq=False)
class SourceBundle:
    """The normalized inputs every series is derived from.

    All four frames come out of :mod:`covid_lag.normalize`; ``national``
    doubles as the reference date axis.
    """

    states: pd.DataFrame
    vaccinations: pd.DataFrame
    hospitalizations: pd.DataFrame
    national: pd.DataFrame
    population: Dict[str, int]
    regions: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Join helpers
# ---------------------------------------------------------------------------


def reference_axis(national: pd.DataFrame) -> pd.DataFrame:
    """Return the ``date``/``raw_date`` axis of the national reference."""
    return national[["date", "raw_date"]].reset_index(drop=True)


def _overwrite(axis_keys: pd.Series, records: pd.DataFrame, column: str) -> np.ndarray:
    """Align one region's values to the axis, last record per day winning.

    Days with no record get 0; a record whose value failed to parse keeps
    its ``NaN``.
    """
    if records.empty:
        return np.zeros(len(axis_keys))
    values = (
        records.drop_duplicates("raw_date", keep="last")
        .set_index("raw_date")[column]
        .astype(float)
    )
    present = axis_keys.isin(values.index).to_numpy()
    aligned = values.reindex(axis_keys).to_numpy()
    return np.where(present, aligned, 0.0)


def _accumulate(axis_keys: pd.Series, records: pd.DataFrame, column: str) -> np.ndarray:
    """Sum every region's values per day onto the axis; missing values add 0."""
    if records.empty:
        return np.zeros(len(axis_keys))
    totals = records.groupby("raw_date")[column].sum(min_count=0).astype(float)
    return totals.reindex(axis_keys, fill_value=0.0).to_numpy()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_regional_series(region: str, sources: SourceBundle) -> pd.DataFrame:
    """Build the cumulative-only series for one region.

    Parameters
    ----------
    region : str
        A state name or ``config.NATIONAL_REGION``.
    sources : SourceBundle
        Normalized source frames.

    Returns
    -------
    pd.DataFrame
        One row per reference-axis day with :data:`CUMULATIVE_COLUMNS`.
        For a state, cases/deaths, vaccine stages and hospitalizations are
        overwritten from that state's records.  For the national region,
        cases/deaths come from the national table itself while vaccine
        stages and hospitalizations are summed across all regions, since
        the national table carries neither.
    """
    axis = reference_axis(sources.national)
    keys = axis["raw_date"]

    series = axis.copy()
    if region == NATIONAL_REGION:
        national = sources.national.reset_index(drop=True)
        series["cumulative_cases"] = national["cumulative_cases"].astype(float)
        series["cumulative_deaths"] = national["cumulative_deaths"].astype(float)
        series["cumulative_stage_one"] = _accumulate(
            keys, sources.vaccinations, "cumulative_stage_one"
        )
        series["cumulative_stage_two"] = _accumulate(
            keys, sources.vaccinations, "cumulative_stage_two"
        )
        series["hospitalizations"] = _accumulate(
            keys, sources.hospitalizations, "hospitalizations"
        )
        return series[CUMULATIVE_COLUMNS]

    states = sources.states[sources.states["region"] == region]
    vaccinations = sources.vaccinations[sources.vaccinations["region"] == region]
    hospitalizations = sources.hospitalizations[
        sources.hospitalizations["region"] == region
    ]
    series["cumulative_cases"] = _overwrite(keys, states, "cumulative_cases")
    series["cumulative_deaths"] = _overwrite(keys, states, "cumulative_deaths")
    series["cumulative_stage_one"] = _overwrite(
        keys, vaccinations, "cumulative_stage_one"
    )
    series["cumulative_stage_two"] = _overwrite(
        keys, vaccinations, "cumulative_stage_two"
    )
    series["hospitalizations"] = _overwrite(keys, hospitalizations, "hospitalizations")
    return series[CUMULATIVE_COLUMNS]


def build_all_series(sources: SourceBundle) -> Dict[str, pd.DataFrame]:
    """Build cumulative series for the national region and every state."""
    snapshots = {
        region: build_regional_series(region, sources)
        for region in [NATIONAL_REGION, *sources.regions]
    }
    logger.info(
        "Built %d regional series over %d reference days",
        len(snapshots),
        len(sources.national),
    )
    return snapshots
