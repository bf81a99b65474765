"""
COVID-19 Data Merging Module

This module joins the long-form cases and deaths tables into one record set keyed
by location and date. The join is anchored on the cases table: every case
observation is kept, and a missing deaths observation shows up as NaN.
"""

import logging

import pandas as pd

try:
    # Relative import (when used as module)
    from .config.constants import FEED_DATE_FORMAT, JOIN_KEY
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import FEED_DATE_FORMAT, JOIN_KEY

# Configure logging
logger = logging.getLogger(__name__)


def parse_dates(df: pd.DataFrame, date_format: str = FEED_DATE_FORMAT) -> pd.DataFrame:
    """
    Convert the date strings captured from column headers into datetimes.

    Args:
        df: DataFrame with a string 'date' column
        date_format: Expected format of the feed's date headers

    Returns:
        Copy of the DataFrame with 'date' as datetime64

    Raises:
        ValueError: If any date does not match the feed format
    """
    df_parsed = df.copy()

    try:
        df_parsed["date"] = pd.to_datetime(df_parsed["date"], format=date_format)
    except ValueError as e:
        logger.error(f"Unparseable date in source feed (expected {date_format}): {e}")
        raise

    return df_parsed


def merge_observations(cases_long: pd.DataFrame, deaths_long: pd.DataFrame) -> pd.DataFrame:
    """
    Left-join deaths onto cases by location and date, then parse dates.

    Args:
        cases_long: Long cases table (province, country, lat, long, date, cases)
        deaths_long: Long deaths table (province, country, lat, long, date, deaths)

    Returns:
        DataFrame with columns province, country, lat, long, date, cases, deaths;
        one row per case observation

    Raises:
        pandas.errors.MergeError: If the deaths table has duplicate location/date keys
    """
    logger.info("Starting cases/deaths merge...")

    merged_df = pd.merge(
        cases_long,
        deaths_long[JOIN_KEY + ["deaths"]],
        on=JOIN_KEY,
        how="left",
        validate="many_to_one",
    )

    unmatched = merged_df["deaths"].isna().sum()
    if unmatched:
        logger.info(f"{unmatched} case observations have no matching deaths value")

    merged_df = parse_dates(merged_df)

    logger.info(
        f"Merge completed: {len(merged_df)} records, "
        f"dates {merged_df['date'].min()} to {merged_df['date'].max()}"
    )

    return merged_df
