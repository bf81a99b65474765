"""
COVID-19 Country Ranking Module

Top-N selection over the per-country snapshot.
"""

import logging
from typing import Dict

import pandas as pd

try:
    # Relative import (when used as module)
    from .config.constants import DEFAULT_TOP_N, RANKING_METRICS
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import DEFAULT_TOP_N, RANKING_METRICS

# Configure logging
logger = logging.getLogger(__name__)


def top_n(df: pd.DataFrame, metric: str, n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    """
    Select the n rows with the largest value of a metric.

    Rows are returned in descending order; ties keep their input order.

    Args:
        df: Table to rank
        metric: Column to rank by
        n: Number of rows to return (fewer if the table is shorter)

    Returns:
        New DataFrame with at most n rows

    Raises:
        KeyError: If metric is not a column of df
        ValueError: If n is negative
    """
    if metric not in df.columns:
        raise KeyError(f"Cannot rank by unknown column: {metric}")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    ranked = df.sort_values(metric, ascending=False, kind="mergesort", na_position="last")
    return ranked.head(n).reset_index(drop=True)


def rank_countries(snapshot: pd.DataFrame, n: int = DEFAULT_TOP_N) -> Dict[str, pd.DataFrame]:
    """
    Build the top-n tables by total cases, total deaths, and deaths per million.

    Returns:
        Dictionary mapping metric name to its top-n table
    """
    rankings = {metric: top_n(snapshot, metric, n) for metric in RANKING_METRICS}

    for metric, table in rankings.items():
        if len(table):
            logger.info(f"Top country by {metric}: {table.iloc[0]['country']}")

    return rankings
