"""
COVID-19 Data Reshaping Module

Converts the wide time series tables (one column per date) into long tables with
one row per location and date. The value column is named after the metric so the
cases and deaths tables can be joined side by side.
"""

import logging
from typing import Tuple

import pandas as pd

try:
    # Relative import (when used as module)
    from .config.constants import LOCATION_KEY
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import LOCATION_KEY

# Configure logging
logger = logging.getLogger(__name__)


def reshape_to_long(wide_df: pd.DataFrame, metric: str) -> pd.DataFrame:
    """
    Melt a wide time series table into long form.

    Every non-identifier column becomes one row per original row, with the
    column header kept as the date string and the cell as the metric value.
    Nothing is dropped or deduplicated; empty cells stay as NaN.

    Args:
        wide_df: Table with province, country, lat, long followed by date columns
        metric: Name for the value column ('cases' or 'deaths')

    Returns:
        Long DataFrame with columns province, country, lat, long, date, <metric>
    """
    date_columns = [col for col in wide_df.columns if col not in LOCATION_KEY]

    long_df = wide_df.melt(
        id_vars=LOCATION_KEY,
        value_vars=date_columns,
        var_name="date",
        value_name=metric,
    )
    long_df["date"] = long_df["date"].astype(str)

    logger.info(
        f"Reshaped {metric}: {len(wide_df)} locations x {len(date_columns)} dates "
        f"-> {len(long_df)} rows"
    )

    return long_df


def reshape_all(
    cases_wide: pd.DataFrame, deaths_wide: pd.DataFrame
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Reshape both source tables.

    Returns:
        Tuple of (cases_long, deaths_long)
    """
    return reshape_to_long(cases_wide, "cases"), reshape_to_long(deaths_wide, "deaths")
