"""Region → population lookup used for per-capita normalization."""

from __future__ import annotations

import logging
from typing import Dict

import pandas as pd

from .config import NATIONAL_REGION, REFERENCE_YEAR
from .normalize import ensure_columns

logger = logging.getLogger(__name__)


def build_population_index(
    table: pd.DataFrame,
    year: int = REFERENCE_YEAR,
    national_region: str = NATIONAL_REGION,
) -> Dict[str, int]:
    """Build the population index for a single reference year.

    The national entry is the exact sum of the filtered per-region rows,
    so a "national" per-100k figure is always consistent with the sum of
    its regions.  No externally published national total is consulted.

    Parameters
    ----------
    table : pd.DataFrame
        Population table with ``Year``, ``State`` and ``Total Population``
        columns, one row per region and year.
    year : int, optional
        Reference year to keep.  Defaults to ``config.REFERENCE_YEAR``.
    national_region : str, optional
        Name of the synthetic aggregate entry.

    Returns
    -------
    Dict[str, int]
        Mapping of region name to population, including ``national_region``.
    """
    ensure_columns(table, ["Year", "State", "Total Population"])
    years = pd.to_numeric(table["Year"], errors="coerce")
    filtered = table.loc[years == year]
    if filtered.empty:
        raise ValueError(f"Population table has no rows for year {year}.")

    populations = pd.to_numeric(filtered["Total Population"], errors="coerce")
    index: Dict[str, int] = {}
    for region, population in zip(filtered["State"].astype(str), populations):
        if pd.isna(population):
            logger.warning("No usable %d population for %s; skipping", year, region)
            continue
        index[region] = int(population)

    index[national_region] = sum(index.values())
    logger.info(
        "Population index built for %d regions (%s total: %s)",
        len(index) - 1,
        national_region,
        index[national_region],
    )
    return index
