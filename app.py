import logging

import pandas as pd
from shiny import reactive
from shiny.express import input, ui
from shinywidgets import render_plotly

# Import organized modules
from covid_lag.config import (
    DEFAULT_DEATH_LAG_DAYS,
    DEFAULT_HOSPITALIZATION_FACTOR,
    DEFAULT_HOSPITALIZATION_LAG_DAYS,
    DEFAULT_MISSED_CASE_MULTIPLIER,
    DEFAULT_MORTALITY,
    DEFAULT_REGION,
    DEFAULT_SMOOTHING_DAYS,
    DEFAULT_START_DATE,
    SLIDER_OPTIONS,
)
from covid_lag.controller import PARAMETER_TYPES, RecomputeController
from covid_lag.data_manager import load_sources
from covid_lag.plotting import create_chart

logging.basicConfig(level=logging.INFO)

SLIDER_DEFAULTS = {
    "smoothing_days": DEFAULT_SMOOTHING_DAYS,
    "hospitalization_days": DEFAULT_HOSPITALIZATION_LAG_DAYS,
    "days": DEFAULT_DEATH_LAG_DAYS,
    "mortality": DEFAULT_MORTALITY,
    "missed_case_multiplier": DEFAULT_MISSED_CASE_MULTIPLIER,
    "hospitalization_factor": DEFAULT_HOSPITALIZATION_FACTOR,
}

# ======================================================
#  REACTIVE STATE
# ======================================================
# Load once on startup; values stay in-memory until app restart.
controller = RecomputeController(load_sources())
visible_series = reactive.Value(controller.visible_series())
controller.on_render = visible_series.set


def _bind_parameter(name: str) -> None:
    """Forward changes of input ``name`` to the controller."""
    cast = PARAMETER_TYPES[name]

    @reactive.effect
    @reactive.event(input[name], ignore_init=True)
    def _update():
        value = input[name]()
        if value is None:
            return
        if name == "start_date":
            value = value.isoformat()
        controller.set_parameter(name, cast(value))


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(
    title="COVID-19 cases, deaths and hospitalizations with lag model",
    fillable=False,
    fillable_mobile=True,
    full_width=True,
    id="page",
    lang="en",
)

with ui.sidebar(open="always", position="right"):
    ui.input_select(
        "region",
        "Region",
        controller.regions,
        selected=DEFAULT_REGION,
    )
    ui.input_date("start_date", "Start date", value=DEFAULT_START_DATE)

    for input_id, label, minimum, maximum, step in SLIDER_OPTIONS:
        ui.input_slider(
            input_id,
            label,
            min=minimum,
            max=maximum,
            value=SLIDER_DEFAULTS[input_id],
            step=step,
        )

    ui.input_action_button(
        "reset_filters",
        "Reset parameters",
        class_="btn-primary mt-3",
    )

for parameter in PARAMETER_TYPES:
    _bind_parameter(parameter)


@reactive.effect
@reactive.event(input.reset_filters)
def _reset_filters():
    ui.update_select("region", selected=DEFAULT_REGION)
    ui.update_date("start_date", value=DEFAULT_START_DATE)
    for input_id, value in SLIDER_DEFAULTS.items():
        ui.update_slider(input_id, value=value)


def _current() -> pd.DataFrame:
    return visible_series.get()


with ui.card():

    @render_plotly
    def cases_chart():
        return create_chart("cases-chart", _current())


with ui.card():

    @render_plotly
    def deaths_chart():
        return create_chart("deaths-chart", _current())


with ui.card():

    @render_plotly
    def hospital_chart():
        return create_chart("hospital-chart", _current())


with ui.card():

    @render_plotly
    def vaccinated_chart():
        return create_chart("vaccinated-chart", _current())


with ui.card():

    @render_plotly
    def vaccinations_chart():
        return create_chart("vaccinations-chart", _current())
