from typing import Callable, Dict, List, Tuple

import pandas as pd
import plotly.graph_objects as go

from .config import (
    CHART_TITLES,
    COLOR_CASES,
    COLOR_DEATHS,
    COLOR_HOSPITALIZATIONS,
    COLOR_VACCINATED,
    COLOR_VACCINES,
)


# ============================================================
# Configuration / constants
# ============================================================

# (column, legend name, color)
Line = Tuple[str, str, str]

HOVER_TEMPLATE = "%{x|%Y-%m-%d}<br>%{y:,.1f}<extra>%{fullData.name}</extra>"
CHART_HEIGHT = 300


# ============================================================
# Helper functions
# ============================================================


def _line_chart(
    df: pd.DataFrame,
    slot: str,
    lines: List[Line],
    *,
    y_range: Tuple[float, float] | None = None,
) -> go.Figure:
    """
    Draw one or more lines against ``date`` with a rule at y=0.

    NaN values are left as gaps rather than bridged.
    """
    fig = go.Figure()
    for column, name, color in lines:
        fig.add_trace(
            go.Scatter(
                x=df["date"],
                y=df[column],
                mode="lines",
                name=name,
                line=dict(width=2, color=color),
                connectgaps=False,
                hovertemplate=HOVER_TEMPLATE,
            )
        )

    fig.add_hline(y=0, line_width=1, line_color="black")
    fig.update_yaxes(rangemode="tozero")
    if y_range is not None:
        fig.update_yaxes(range=list(y_range))

    fig.update_layout(
        title=CHART_TITLES[slot],
        height=CHART_HEIGHT,
        showlegend=len(lines) > 1,
        legend=dict(orientation="h", x=0.5, y=1.02, xanchor="center", yanchor="bottom"),
        margin=dict(t=60, l=50, r=30, b=40),
        plot_bgcolor="#f5f7fb",
    )
    return fig


# ============================================================
# Chart slots
# ============================================================


def create_cases_chart(df: pd.DataFrame) -> go.Figure:
    """Cases next to the case curves implied by deaths and hospitalizations."""
    return _line_chart(
        df,
        "cases-chart",
        [
            ("deaths_per_100k_scaled", "Implied by deaths", COLOR_DEATHS),
            ("cases_per_100k", "Cases", COLOR_CASES),
            ("hospital_per_100k_scaled", "Implied by hospitalizations", COLOR_HOSPITALIZATIONS),
        ],
    )


def create_deaths_chart(df: pd.DataFrame) -> go.Figure:
    return _line_chart(
        df, "deaths-chart", [("deaths_per_100k", "Deaths", COLOR_DEATHS)]
    )


def create_hospital_chart(df: pd.DataFrame) -> go.Figure:
    return _line_chart(
        df,
        "hospital-chart",
        [("hospital_per_100k", "Hospitalized", COLOR_HOSPITALIZATIONS)],
    )


def create_vaccinated_chart(df: pd.DataFrame) -> go.Figure:
    return _line_chart(
        df,
        "vaccinated-chart",
        [("percent_vaccinated", "Vaccinated", COLOR_VACCINATED)],
        y_range=(0, 100),
    )


def create_vaccinations_chart(df: pd.DataFrame) -> go.Figure:
    return _line_chart(
        df,
        "vaccinations-chart",
        [("vaccines_per_100k", "First doses", COLOR_VACCINES)],
    )


CHART_SLOTS: Dict[str, Callable[[pd.DataFrame], go.Figure]] = {
    "cases-chart": create_cases_chart,
    "deaths-chart": create_deaths_chart,
    "hospital-chart": create_hospital_chart,
    "vaccinated-chart": create_vaccinated_chart,
    "vaccinations-chart": create_vaccinations_chart,
}


def create_chart(slot: str, df: pd.DataFrame) -> go.Figure:
    """Build the figure for a named chart slot."""
    try:
        builder = CHART_SLOTS[slot]
    except KeyError:
        raise KeyError(f"Unknown chart slot: {slot!r}") from None
    return builder(df)
