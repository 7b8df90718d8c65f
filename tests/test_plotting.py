import math

import pytest

from covid_lag.metrics import ModelParameters, derive_metrics
from covid_lag.plotting import CHART_SLOTS, create_chart


@pytest.fixture
def derived(cumulative_factory):
    cumulative = cumulative_factory(
        [10, 20, 40, 70, 110],
        deaths=[0, 1, 2, 4, 6],
        stage_one=[0, 0, 10, 20, 40],
        hospitalizations=[1, 2, 3, 4, 5],
    )
    return derive_metrics(cumulative, ModelParameters(smoothing_days=2, days=1), 100000)


def test_all_five_slots_exist():
    assert list(CHART_SLOTS) == [
        "cases-chart",
        "deaths-chart",
        "hospital-chart",
        "vaccinated-chart",
        "vaccinations-chart",
    ]


@pytest.mark.parametrize(
    "slot, columns",
    [
        ("cases-chart", ["deaths_per_100k_scaled", "cases_per_100k", "hospital_per_100k_scaled"]),
        ("deaths-chart", ["deaths_per_100k"]),
        ("hospital-chart", ["hospital_per_100k"]),
        ("vaccinated-chart", ["percent_vaccinated"]),
        ("vaccinations-chart", ["vaccines_per_100k"]),
    ],
)
def test_slot_traces_follow_derived_columns(derived, slot, columns):
    fig = create_chart(slot, derived)

    assert len(fig.data) == len(columns)
    for trace, column in zip(fig.data, columns):
        assert trace.connectgaps is False
        assert list(trace.y) == pytest.approx(derived[column].tolist(), nan_ok=True)


def test_missing_values_stay_gaps(derived):
    fig = create_chart("cases-chart", derived)

    cases = fig.data[1].y
    assert math.isnan(cases[0])


def test_vaccinated_chart_is_percent_scale(derived):
    fig = create_chart("vaccinated-chart", derived)

    assert tuple(fig.layout.yaxis.range) == (0, 100)


def test_unknown_slot():
    with pytest.raises(KeyError):
        create_chart("pie-chart", None)
