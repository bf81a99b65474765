"""
COVID-19 Data Loading Module

This module handles fetching the three source tables from the JHU CSSE repository:
- Global confirmed cases time series (wide CSV, one column per date)
- Global deaths time series (same layout)
- UID/ISO/FIPS lookup table carrying population per location

Tables are validated against the feed schema once, here, and returned untransformed
apart from renaming the identifying columns.
"""

import io
from typing import Tuple

import pandas as pd
import requests

try:
    # Relative import (when used as module)
    from .config.constants import (
        CONFIRMED_CSV_URL,
        DEATHS_CSV_URL,
        DEFAULT_TIMEOUT_SECONDS,
        LOOKUP_CSV_URL,
        TIME_SERIES_ID_COLUMNS,
    )
    from .config.logging_config import get_logger
    from .schema import (
        SchemaValidationError,
        rename_lookup_columns,
        validate_lookup_frame,
        validate_time_series_frame,
    )
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import (
        CONFIRMED_CSV_URL,
        DEATHS_CSV_URL,
        DEFAULT_TIMEOUT_SECONDS,
        LOOKUP_CSV_URL,
        TIME_SERIES_ID_COLUMNS,
    )
    from covid_mortality.config.logging_config import get_logger
    from covid_mortality.schema import (
        SchemaValidationError,
        rename_lookup_columns,
        validate_lookup_frame,
        validate_time_series_frame,
    )

# Configure logging
logger = get_logger(__name__)


def fetch_csv(url: str, timeout: int = DEFAULT_TIMEOUT_SECONDS) -> pd.DataFrame:
    """
    Download a CSV resource and parse it into a DataFrame.

    A single blocking request; failures are not retried.

    Args:
        url: Location of the CSV file
        timeout: Request timeout in seconds

    Returns:
        Parsed DataFrame

    Raises:
        requests.RequestException: If the download fails
        pd.errors.ParserError: If CSV parsing fails
    """
    try:
        logger.info(f"Fetching {url}")

        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        df = pd.read_csv(io.StringIO(response.text))
        logger.info(f"Fetched {df.shape[0]} rows, {df.shape[1]} columns")
        return df

    except requests.RequestException as e:
        logger.error(f"Failed to download {url}: {e}")
        raise
    except pd.errors.ParserError as e:
        logger.error(f"Failed to parse CSV from {url}: {e}")
        raise


def load_time_series(
    url: str, metric: str, timeout: int = DEFAULT_TIMEOUT_SECONDS
) -> pd.DataFrame:
    """
    Load one wide time series table (confirmed cases or deaths).

    Args:
        url: URL of the time series CSV
        metric: Metric name the table carries, used for logging and errors
        timeout: Request timeout in seconds

    Returns:
        Wide DataFrame with columns province, country, lat, long, then one
        column per date header

    Raises:
        SchemaValidationError: If the table does not match the feed layout
    """
    raw = fetch_csv(url, timeout=timeout)

    try:
        date_columns = validate_time_series_frame(raw, source=f"{metric} time series")
    except SchemaValidationError as e:
        logger.error(f"Schema check failed: {e}")
        raise

    df = raw.rename(columns=TIME_SERIES_ID_COLUMNS)
    logger.info(
        f"Loaded {metric} time series: {len(df)} locations, {len(date_columns)} dates "
        f"({date_columns[0]} to {date_columns[-1]})"
    )
    return df


def load_population_lookup(
    url: str = LOOKUP_CSV_URL, timeout: int = DEFAULT_TIMEOUT_SECONDS
) -> pd.DataFrame:
    """
    Load the location/population lookup table.

    Args:
        url: URL of the lookup CSV
        timeout: Request timeout in seconds

    Returns:
        DataFrame with columns country, population (and province when present)
    """
    raw = fetch_csv(url, timeout=timeout)

    try:
        validate_lookup_frame(raw)
    except SchemaValidationError as e:
        logger.error(f"Schema check failed: {e}")
        raise

    df = rename_lookup_columns(raw)
    logger.info(
        f"Loaded population lookup: {len(df)} rows, {df['country'].nunique()} countries"
    )
    return df


def load_all_data(
    confirmed_url: str = CONFIRMED_CSV_URL,
    deaths_url: str = DEATHS_CSV_URL,
    lookup_url: str = LOOKUP_CSV_URL,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """
    Load the confirmed cases, deaths, and population lookup tables.

    Returns:
        Tuple of (cases_wide, deaths_wide, population_lookup)
    """
    logger.info("Starting data loading process...")

    cases_wide = load_time_series(confirmed_url, "cases")
    deaths_wide = load_time_series(deaths_url, "deaths")
    population = load_population_lookup(lookup_url)

    logger.info("Data loading completed successfully!")

    return cases_wide, deaths_wide, population


if __name__ == "__main__":
    cases, deaths, lookup = load_all_data()

    print("\n=== Confirmed Cases Sample ===")
    print(cases.iloc[:5, :8])

    print("\n=== Deaths Sample ===")
    print(deaths.iloc[:5, :8])

    print("\n=== Population Lookup Sample ===")
    print(lookup.head())
