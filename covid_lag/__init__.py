"""covid_lag package initializer.

This package contains the data pipeline behind the Shiny dashboard:
source fetching and normalization, the population index, regional series
construction, derived lag/multiplier metrics, the recompute controller and
plotting helpers.  A small static file server is included as well.  See
individual module docstrings for details.
"""
