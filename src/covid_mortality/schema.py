"""
COVID-19 Mortality Analysis - Source Feed Schema

Explicit description of the three source tables and the checks run once at
load time. A table that does not match its schema is rejected immediately
instead of flowing downstream as malformed values.
"""

from typing import List

import pandas as pd

try:
    # Relative import (when used as module)
    from .config.constants import (
        LOOKUP_COLUMNS,
        REQUIRED_LOOKUP_COLUMNS,
        TIME_SERIES_ID_COLUMNS,
    )
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import (
        LOOKUP_COLUMNS,
        REQUIRED_LOOKUP_COLUMNS,
        TIME_SERIES_ID_COLUMNS,
    )


class SchemaValidationError(ValueError):
    """Raised when a source table does not have the documented column layout."""


def get_date_columns(df: pd.DataFrame) -> List[str]:
    """Return the date columns of a wide time series table (everything after the ids)."""
    return [col for col in df.columns if col not in TIME_SERIES_ID_COLUMNS]


def validate_time_series_frame(df: pd.DataFrame, source: str) -> List[str]:
    """
    Check a raw wide time series table against the feed layout.

    The first four columns must be the identifying columns in feed order,
    followed by at least one numeric date column.

    Args:
        df: Raw table as fetched
        source: Name of the table for error messages

    Returns:
        List of date column headers

    Raises:
        SchemaValidationError: If the layout does not match
    """
    expected_ids = list(TIME_SERIES_ID_COLUMNS)
    actual_ids = [str(col) for col in df.columns[: len(expected_ids)]]

    if actual_ids != expected_ids:
        raise SchemaValidationError(
            f"{source}: expected leading columns {expected_ids}, got {actual_ids}"
        )

    date_columns = get_date_columns(df)
    if not date_columns:
        raise SchemaValidationError(f"{source}: no date columns after identifier columns")

    non_numeric = [col for col in date_columns if not pd.api.types.is_numeric_dtype(df[col])]
    if non_numeric:
        raise SchemaValidationError(
            f"{source}: non-numeric values in date columns {non_numeric[:5]}"
        )

    return date_columns


def validate_lookup_frame(df: pd.DataFrame, source: str = "population lookup") -> None:
    """
    Check the population lookup table has the columns the pipeline joins on.

    Raises:
        SchemaValidationError: If a required column is missing or Population is not numeric
    """
    missing = [col for col in REQUIRED_LOOKUP_COLUMNS if col not in df.columns]
    if missing:
        raise SchemaValidationError(f"{source}: missing required columns {missing}")

    if not pd.api.types.is_numeric_dtype(df["Population"]):
        raise SchemaValidationError(f"{source}: Population column is not numeric")


def rename_lookup_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep the lookup columns the pipeline uses, under project column names."""
    available = [col for col in LOOKUP_COLUMNS if col in df.columns]
    return df[available].rename(columns=LOOKUP_COLUMNS)
