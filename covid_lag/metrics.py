"""Derived metrics: smoothing, lag shifts, multipliers and percentages.

The model is a deliberately simple illustrative heuristic:

* Reported cases are scaled up by a *missed case multiplier*.
* Deaths reported today are assumed to stem from cases ``days`` earlier,
  so the smoothed death curve is shifted back onto the case timeline.
  Dividing by an assumed mortality rate turns it into an implied case
  curve.
* Hospital occupancy is shifted the same way by ``hospitalization_days``
  and scaled by a *hospitalization factor*.

Missing values are ``NaN`` and propagate through every formula so that
charts show gaps rather than zeros.  Percentages are never clamped; with
large multipliers ``percent_infected`` (and therefore ``percent_immune``)
can exceed 100.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import pandas as pd

from .config import (
    DEFAULT_DEATH_LAG_DAYS,
    DEFAULT_HOSPITALIZATION_FACTOR,
    DEFAULT_HOSPITALIZATION_LAG_DAYS,
    DEFAULT_MISSED_CASE_MULTIPLIER,
    DEFAULT_MORTALITY,
    DEFAULT_SMOOTHING_DAYS,
    PER_CAPITA_BASE,
)
from .normalize import ensure_columns
from .series import CUMULATIVE_COLUMNS

logger = logging.getLogger(__name__)

DERIVED_COLUMNS: List[str] = [
    *CUMULATIVE_COLUMNS,
    "daily_cases",
    "daily_deaths",
    "daily_vaccines",
    "cases",
    "deaths",
    "vaccines",
    "hospital",
    "cases_per_100k",
    "deaths_per_100k",
    "hospital_per_100k",
    "vaccines_per_100k",
    "deaths_per_100k_scaled",
    "hospital_per_100k_scaled",
    "percent_vaccinated",
    "percent_infected",
    "percent_deaths",
    "percent_immune",
]


@dataclass(frozen=True)
class ModelParameters:
    """Immutable set of model parameters applied to every region.

    Attributes
    ----------
    smoothing_days : int
        Rolling-average window, at least 1.
    days : int
        Case-to-death lag in days.
    hospitalization_days : int
        Case-to-hospitalization lag in days.
    mortality : float
        Assumed infection fatality rate, in percent.
    missed_case_multiplier : float
        Ratio of true infections to reported cases.
    hospitalization_factor : float
        Scale applied to lagged hospital occupancy.
    """

    smoothing_days: int = DEFAULT_SMOOTHING_DAYS
    days: int = DEFAULT_DEATH_LAG_DAYS
    hospitalization_days: int = DEFAULT_HOSPITALIZATION_LAG_DAYS
    mortality: float = DEFAULT_MORTALITY
    missed_case_multiplier: float = DEFAULT_MISSED_CASE_MULTIPLIER
    hospitalization_factor: float = DEFAULT_HOSPITALIZATION_FACTOR

    def __post_init__(self) -> None:
        for name in ("smoothing_days", "days", "hospitalization_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {value!r}")
        if self.smoothing_days < 1:
            raise ValueError("smoothing_days must be at least 1.")
        if self.days < 0 or self.hospitalization_days < 0:
            raise ValueError("Lag days cannot be negative.")
        if not self.mortality > 0:
            raise ValueError("mortality must be greater than 0.")
        if self.missed_case_multiplier < 1 or self.hospitalization_factor < 1:
            raise ValueError("Multipliers must be at least 1.")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def value_at(series: pd.Series, offset: int) -> pd.Series:
    """Bounds-checked positional accessor.

    Entry ``i`` of the result holds ``series[i + offset]``, or ``NaN`` when
    ``i + offset`` falls outside the series.  Negative offsets look back,
    positive offsets look ahead.
    """
    return series.astype(float).shift(-offset)


def per_100k(values: pd.Series, population: float) -> pd.Series:
    """Normalize ``values`` to a rate per 100,000 people."""
    return PER_CAPITA_BASE * values / population


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def derive_metrics(
    cumulative: pd.DataFrame,
    params: ModelParameters,
    population: float,
) -> pd.DataFrame:
    """Derive all display metrics from a cumulative-only regional series.

    The input frame is left untouched; a new frame is returned.

    Parameters
    ----------
    cumulative : pd.DataFrame
        Output of :func:`covid_lag.series.build_regional_series`.
    params : ModelParameters
        Smoothing, lag and scaling parameters.
    population : float
        Population of the region the series belongs to.

    Returns
    -------
    pd.DataFrame
        Frame with :data:`DERIVED_COLUMNS`, one row per input row.
    """
    ensure_columns(cumulative, CUMULATIVE_COLUMNS)
    df = cumulative[CUMULATIVE_COLUMNS].reset_index(drop=True).copy()
    window = params.smoothing_days

    cumulative_cases = df["cumulative_cases"].astype(float)
    cumulative_deaths = df["cumulative_deaths"].astype(float)
    cumulative_stage_one = df["cumulative_stage_one"].astype(float)
    hospitalizations = df["hospitalizations"].astype(float)

    # 1. Daily deltas; the first day has no predecessor to subtract.
    df["daily_cases"] = cumulative_cases.diff()
    df["daily_deaths"] = cumulative_deaths.diff()
    df["daily_vaccines"] = cumulative_stage_one.diff()
    if len(df):
        df.loc[0, "daily_cases"] = cumulative_cases.iloc[0]
        df.loc[0, "daily_deaths"] = cumulative_deaths.iloc[0]
        df.loc[0, "daily_vaccines"] = 0.0

    # 2. Average daily rate over the trailing window, from cumulative
    #    differences.  Hospital occupancy is a point-in-time count, so it
    #    gets a plain trailing moving average instead.
    cases = (cumulative_cases - value_at(cumulative_cases, -window)) / window
    deaths = (cumulative_deaths - value_at(cumulative_deaths, -window)) / window
    vaccines = (cumulative_stage_one - value_at(cumulative_stage_one, -window)) / window
    hospital_total = 0.0
    for j in range(window):
        hospital_total = hospital_total + value_at(hospitalizations, -j)
    hospital = hospital_total / window

    # 3. Vaccination rate is not lagged or scaled.
    df["vaccines"] = vaccines
    df["vaccines_per_100k"] = per_100k(vaccines, population)

    # 4. Multiplier, lag and scaling.
    cases = cases * params.missed_case_multiplier
    deaths = value_at(deaths, params.days)
    hospital = value_at(hospital, params.hospitalization_days)

    df["cases"] = cases
    df["deaths"] = deaths
    df["hospital"] = hospital
    df["cases_per_100k"] = per_100k(cases, population)
    df["deaths_per_100k"] = per_100k(deaths, population)
    df["hospital_per_100k"] = per_100k(hospital, population)
    df["deaths_per_100k_scaled"] = df["deaths_per_100k"] * 100 / params.mortality
    df["hospital_per_100k_scaled"] = (
        df["hospital_per_100k"] * params.hospitalization_factor
    )

    # 5. Cumulative percentages, independent of smoothing and lag.
    percent_vaccinated = 100 * cumulative_stage_one / population
    percent_infected = (
        100 * cumulative_cases * params.missed_case_multiplier / population
    )
    df["percent_vaccinated"] = percent_vaccinated
    df["percent_infected"] = percent_infected
    df["percent_deaths"] = 100 * cumulative_deaths / population
    df["percent_immune"] = (
        percent_vaccinated
        + percent_infected
        - percent_vaccinated * percent_infected / 100
    )

    return df[DERIVED_COLUMNS]
