"""
COVID-19 Data Aggregation Module

This module turns the merged location-level records into country totals:
rows without positive case counts are dropped, provinces/states are summed into
national figures per date, and the snapshot for the latest date is extracted.

Snapshot policy: a single global latest date is used for every country. A country
that did not report on that date is left out of the snapshot.
"""

from typing import Tuple

import pandas as pd

try:
    # Relative import (when used as module)
    from .config.logging_config import get_logger
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)


def filter_positive_cases(df: pd.DataFrame) -> pd.DataFrame:
    """
    Drop records with no positive case count.

    Zero rows before a location's first case and negative corrections carry no
    information for this analysis.

    Args:
        df: Merged records with a 'cases' column

    Returns:
        DataFrame containing only rows with cases > 0
    """
    df_filtered = df[df["cases"] > 0].copy()

    logger.info(
        f"Filtered non-positive case rows: {len(df)} -> {len(df_filtered)} "
        f"(removed {len(df) - len(df_filtered)})"
    )

    return df_filtered


def aggregate_by_country(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sum cases and deaths over sub-regions for each country and date.

    Missing deaths count as zero.

    Args:
        df: Filtered records with country, date, cases, deaths

    Returns:
        DataFrame with one row per (country, date): country, date, cases, deaths
    """
    aggregated = (
        df[["country", "date", "cases", "deaths"]]
        .fillna({"cases": 0, "deaths": 0})
        .groupby(["country", "date"], as_index=False)[["cases", "deaths"]]
        .sum()
        .sort_values(["country", "date"])
        .reset_index(drop=True)
    )

    logger.info(
        f"Aggregated to {len(aggregated)} country-days across "
        f"{aggregated['country'].nunique()} countries"
    )

    return aggregated


def find_latest_date(df: pd.DataFrame) -> pd.Timestamp:
    """
    Find the most recent date present in the aggregated data.

    Raises:
        ValueError: If there are no rows to take a date from
    """
    if df.empty:
        raise ValueError("Cannot determine latest date from an empty dataset")

    return df["date"].max()


def extract_latest_snapshot(df: pd.DataFrame, latest_date: pd.Timestamp) -> pd.DataFrame:
    """
    Select the per-country totals reported on the given date.

    Args:
        df: Country daily aggregates
        latest_date: Date to take the snapshot at (normally find_latest_date(df))

    Returns:
        DataFrame with one row per country reporting on latest_date
    """
    snapshot = df[df["date"] == latest_date].reset_index(drop=True)

    missing = df["country"].nunique() - snapshot["country"].nunique()
    if missing:
        logger.info(f"{missing} countries have no data on {latest_date} and are not in the snapshot")

    logger.info(f"Snapshot for {latest_date}: {len(snapshot)} countries")

    return snapshot


def aggregate_all(merged_df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Timestamp]:
    """
    Run filter, group-sum, and snapshot extraction.

    Returns:
        Tuple of (daily_aggregates, snapshot, latest_date)
    """
    daily = aggregate_by_country(filter_positive_cases(merged_df))
    latest_date = find_latest_date(daily)
    snapshot = extract_latest_snapshot(daily, latest_date)

    return daily, snapshot, latest_date
