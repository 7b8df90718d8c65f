import math

import numpy as np
import pandas as pd

from covid_lag.config import NATIONAL_REGION
from covid_lag.series import (
    CUMULATIVE_COLUMNS,
    SourceBundle,
    build_all_series,
    build_regional_series,
    reference_axis,
)


def test_every_region_shares_the_reference_axis(sources):
    axis = reference_axis(sources.national)

    for region, series in build_all_series(sources).items():
        assert list(series.columns) == CUMULATIVE_COLUMNS, region
        assert series["raw_date"].tolist() == axis["raw_date"].tolist(), region
        assert series["date"].tolist() == axis["date"].tolist(), region


def test_state_values_overwrite_on_matching_days(sources):
    series = build_regional_series("New York", sources)

    assert series["cumulative_cases"].tolist() == [10, 20, 40, 70, 110]
    assert series["cumulative_deaths"].tolist() == [0, 1, 1, 2, 4]
    assert series["cumulative_stage_one"].tolist() == [0, 0, 100, 250, 400]
    assert series["cumulative_stage_two"].tolist() == [0, 0, 10, 20, 50]


def test_sparse_region_fills_zero_and_drops_out_of_axis_records(sources):
    series = build_regional_series("California", sources)

    assert len(series) == 5
    assert series["cumulative_cases"].tolist() == [0, 5, 9, 0, 0]
    assert 99 not in series["cumulative_cases"].tolist()


def test_partial_hospital_reports_default_to_zero(sources):
    series = build_regional_series("New York", sources)

    assert series["hospitalizations"].tolist() == [0, 0, 0, 7, 9]
    assert series["hospitalizations"].notna().all()


def test_present_but_unparseable_value_stays_nan(sources):
    series = build_regional_series("California", sources)

    assert math.isnan(series.loc[3, "cumulative_stage_two"])
    assert series.loc[3, "cumulative_stage_one"] == 30


def test_national_sums_vaccinations_and_hospitalizations(sources):
    series = build_regional_series(NATIONAL_REGION, sources)

    assert series["cumulative_cases"].tolist() == [100, 150, 230, 300, 400]
    assert series["cumulative_deaths"].tolist() == [1, 2, 4, 6, 9]
    assert series["cumulative_stage_one"].tolist() == [0, 0, 100, 280, 400]
    assert series["cumulative_stage_two"].tolist() == [0, 0, 10, 20, 50]
    assert series["hospitalizations"].tolist() == [0, 0, 0, 7, 12]


def test_duplicate_records_last_one_wins(sources):
    extra = pd.DataFrame(
        {
            "region": ["New York"],
            "date": [pd.Timestamp("2021-01-05")],
            "raw_date": ["2021-01-05"],
            "hospitalizations": [11.0],
        }
    )
    bundle = SourceBundle(
        states=sources.states,
        vaccinations=sources.vaccinations,
        hospitalizations=pd.concat([sources.hospitalizations, extra], ignore_index=True),
        national=sources.national,
        population=sources.population,
        regions=sources.regions,
    )

    series = build_regional_series("New York", bundle)

    assert series.loc[4, "hospitalizations"] == 11.0


def test_region_without_any_records_is_all_zero(sources):
    series = build_regional_series("Nowhere", sources)

    assert len(series) == len(sources.national)
    numeric = series[CUMULATIVE_COLUMNS[2:]].to_numpy()
    assert np.array_equal(numeric, np.zeros_like(numeric))
