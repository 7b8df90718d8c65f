"""Data manager for loading the normalized sources once per process.

Fetching the four feeds takes a while, so the normalized bundle is kept
in memory for the lifetime of the process.  Nothing is written to disk:
every process start fetches the feeds again, so a restart always picks
up the latest published data.  Derived series are not held here; they
depend on the interactive parameters and are owned by the controller.
"""

import logging
from functools import lru_cache

from . import fetch
from .series import SourceBundle

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _fetch_sources() -> SourceBundle:
    """Runs the network fetch and normalization."""
    logger.info("Fetching source data - this may take a while...")
    return fetch.fetch_all_sources()


def load_sources(force_refresh: bool = False) -> SourceBundle:
    """
    Return the normalized sources, fetching them on first use in this process.

    Parameters
    ----------
    force_refresh : bool, optional
        If ``True``, discard the in-memory bundle and fetch the feeds again.

    Returns
    -------
    SourceBundle
        Normalized sources, population index and region list.
    """
    if force_refresh:
        _fetch_sources.cache_clear()
    return _fetch_sources()
