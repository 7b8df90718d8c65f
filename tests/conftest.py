import pandas as pd
import pytest

from covid_lag.normalize import (
    list_regions,
    normalize_hospitalizations,
    normalize_national,
    normalize_states,
    normalize_vaccinations,
)
from covid_lag.population import build_population_index
from covid_lag.series import SourceBundle

DAYS = ["2021-01-01", "2021-01-02", "2021-01-03", "2021-01-04", "2021-01-05"]


@pytest.fixture
def abbreviations():
    return {"NY": "New York", "CA": "California"}


@pytest.fixture
def raw_national():
    return pd.DataFrame(
        {
            "date": DAYS,
            "cases": ["100", "150", "230", "300", "400"],
            "deaths": ["1", "2", "4", "6", "9"],
        }
    )


@pytest.fixture
def raw_states():
    rows = [
        (day, "New York", cases, deaths)
        for day, cases, deaths in zip(
            DAYS, ["10", "20", "40", "70", "110"], ["0", "1", "1", "2", "4"]
        )
    ]
    rows += [
        ("2021-01-02", "California", "5", "0"),
        ("2021-01-03", "California", "9", "1"),
        # Outside the national axis.
        ("2021-02-01", "California", "99", "9"),
    ]
    return pd.DataFrame(rows, columns=["date", "state", "cases", "deaths"])


@pytest.fixture
def raw_vaccinations():
    columns = [
        "Date",
        "Province_State",
        "Vaccine_Type",
        "Doses_admin",
        "Stage_One_Doses",
        "Stage_Two_Doses",
    ]
    rows = [
        ("2021-01-03", "New York", "All", "110", "100", "10"),
        ("2021-01-04", "New York", "All", "270", "250", "20"),
        ("2021-01-05", "New York", "All", "450", "400", "50"),
        ("2021-01-05", "New York", "Moderna", "999", "999", "999"),
        ("2021-01-04", "California", "All", "30", "30", ""),
    ]
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture
def raw_hospitalizations():
    return [
        {"date": "2021-01-04T00:00:00.000", "state": "NY", "inpatient_beds_used_covid": "7"},
        {"date": "2021-01-05T00:00:00.000", "state": "NY", "inpatient_beds_used_covid": "9"},
        {"date": "2021-01-05T00:00:00.000", "state": "CA", "inpatient_beds_used_covid": "3"},
        {"date": "2021-01-05T00:00:00.000", "state": "ZZ", "inpatient_beds_used_covid": "50"},
    ]


@pytest.fixture
def population_table():
    return pd.DataFrame(
        {
            "Year": [2018, 2018, 2019, "2019"],
            "State": ["New York", "California", "New York", "California"],
            "Total Population": [990000, 2990000, 1000000, 3000000],
        }
    )


@pytest.fixture
def sources(
    raw_states,
    raw_vaccinations,
    raw_hospitalizations,
    raw_national,
    abbreviations,
    population_table,
):
    states = normalize_states(raw_states)
    return SourceBundle(
        states=states,
        vaccinations=normalize_vaccinations(raw_vaccinations),
        hospitalizations=normalize_hospitalizations(raw_hospitalizations, abbreviations),
        national=normalize_national(raw_national),
        population=build_population_index(population_table),
        regions=list_regions(states),
    )


def make_cumulative(cases, deaths=None, stage_one=None, hospitalizations=None):
    """Hand-built cumulative series over ``len(cases)`` consecutive days."""
    n = len(cases)
    days = pd.date_range("2021-01-01", periods=n, freq="D")
    return pd.DataFrame(
        {
            "date": days,
            "raw_date": days.strftime("%Y-%m-%d"),
            "cumulative_cases": [float(v) for v in cases],
            "cumulative_deaths": [float(v) for v in (deaths or [0] * n)],
            "cumulative_stage_one": [float(v) for v in (stage_one or [0] * n)],
            "cumulative_stage_two": [0.0] * n,
            "hospitalizations": [float(v) for v in (hospitalizations or [0] * n)],
        }
    )


@pytest.fixture
def cumulative_factory():
    return make_cumulative
