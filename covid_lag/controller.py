"""Recompute controller: owns parameters, the series cache and re-rendering.

The controller is the only writer of the region → derived-series cache.
Model parameters are global, so a change to any of them drops the whole
cache and rebuilds every region from the cumulative snapshots.  View
changes (region, start date) reuse cached series and only compute a
region that has not been derived yet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Callable, Dict, List, Optional

import pandas as pd

from .config import DEFAULT_REGION, DEFAULT_START_DATE, NATIONAL_REGION
from .metrics import ModelParameters, derive_metrics
from .series import SourceBundle, build_all_series

logger = logging.getLogger(__name__)

RenderCallback = Callable[[pd.DataFrame], None]

PARAMETER_TYPES: Dict[str, type] = {
    "region": str,
    "start_date": str,
    "smoothing_days": int,
    "days": int,
    "hospitalization_days": int,
    "mortality": float,
    "missed_case_multiplier": float,
    "hospitalization_factor": float,
}

MODEL_PARAMETERS = frozenset(f.name for f in fields(ModelParameters))


@dataclass(frozen=True)
class ViewState:
    """Which region is shown and from which date onwards."""

    region: str = DEFAULT_REGION
    start_date: str = DEFAULT_START_DATE

    def __post_init__(self) -> None:
        if pd.isna(pd.to_datetime(self.start_date, errors="coerce")):
            raise ValueError(f"Invalid start date: {self.start_date!r}")

    @property
    def start(self) -> pd.Timestamp:
        return pd.Timestamp(self.start_date)


def check_parameter_type(name: str, value: object) -> object:
    """Validate ``value`` against the declared type of parameter ``name``.

    Integers are accepted for float parameters.  Booleans are rejected
    everywhere even though ``bool`` subclasses ``int``.

    Returns
    -------
    object
        The value, converted to ``float`` for float parameters.
    """
    if name not in PARAMETER_TYPES:
        raise KeyError(f"Unknown parameter: {name!r}")
    expected = PARAMETER_TYPES[name]
    if isinstance(value, bool):
        raise TypeError(f"{name} expects {expected.__name__}, got bool")
    if expected is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, expected):
        raise TypeError(
            f"{name} expects {expected.__name__}, got {type(value).__name__}"
        )
    return value


class RecomputeController:
    """Keep derived series in sync with the current parameter set.

    Parameters
    ----------
    sources : SourceBundle
        Fully loaded, normalized sources.  All four feeds must be present.
    on_render : callable, optional
        Called with the visible series after every change.
    params : ModelParameters, optional
        Initial model parameters; defaults from ``config``.
    view : ViewState, optional
        Initial region and start date; defaults from ``config``.
    """

    def __init__(
        self,
        sources: SourceBundle,
        on_render: Optional[RenderCallback] = None,
        params: Optional[ModelParameters] = None,
        view: Optional[ViewState] = None,
    ) -> None:
        self.sources = sources
        self.on_render = on_render
        self.params = params or ModelParameters()
        self.view = view or ViewState()
        self.regions: List[str] = [NATIONAL_REGION, *sources.regions]
        self._check_region(self.view.region)

        self._snapshots = build_all_series(sources)
        self._cache: Dict[str, pd.DataFrame] = {}
        self.recompute()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def _check_region(self, region: str) -> None:
        if region not in self.regions:
            raise ValueError(f"Unknown region: {region!r}")

    def _derive(self, region: str) -> pd.DataFrame:
        population = self.sources.population.get(region)
        if population is None:
            logger.warning("No population for %s; per-capita values will be NaN", region)
            population = float("nan")
        return derive_metrics(self._snapshots[region], self.params, population)

    def recompute(self) -> Dict[str, pd.DataFrame]:
        """Rebuild the derived series of every region for the current parameters."""
        logger.debug("Recomputing %d regions with %s", len(self.regions), self.params)
        self._cache = {region: self._derive(region) for region in self.regions}
        return self._cache

    def series(self, region: Optional[str] = None) -> pd.DataFrame:
        """Return the derived series for ``region`` (default: current region)."""
        region = region or self.view.region
        self._check_region(region)
        if region not in self._cache:
            self._cache[region] = self._derive(region)
        return self._cache[region]

    def visible_series(self) -> pd.DataFrame:
        """Current region's series limited to dates on or after the start date."""
        df = self.series()
        return df.loc[df["date"] >= self.view.start].reset_index(drop=True)

    # ------------------------------------------------------------------
    # Parameter updates
    # ------------------------------------------------------------------

    def set_parameter(self, name: str, value: object) -> pd.DataFrame:
        """Update one parameter, recompute as needed and re-render.

        Parameters
        ----------
        name : str
            One of :data:`PARAMETER_TYPES`.
        value : object
            New value of the declared type.

        Returns
        -------
        pd.DataFrame
            The visible series handed to the render callback.
        """
        value = check_parameter_type(name, value)

        if name in MODEL_PARAMETERS:
            params = replace(self.params, **{name: value})
            if params != self.params:
                self.params = params
                self._cache = {}
                self.recompute()
        else:
            if name == "region":
                self._check_region(value)
            self.view = replace(self.view, **{name: value})

        logger.info("Parameter %s set to %r", name, value)
        return self.render()

    def render(self) -> pd.DataFrame:
        """Hand the visible series to the render callback, if any."""
        visible = self.visible_series()
        if self.on_render is not None:
            self.on_render(visible)
        return visible
