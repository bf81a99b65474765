"""
COVID-19 Rate Normalization Module

Attaches population to the per-country snapshot and computes deaths per million.

The lookup table can list several rows for one country (territories, provinces,
states). The largest population among them is taken as the national figure. This
is an approximation and can be wrong for countries whose territory rows overlap.
"""

import pandas as pd

try:
    # Relative import (when used as module)
    from .config.constants import PER_MILLION
    from .config.logging_config import get_logger
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import PER_MILLION
    from covid_mortality.config.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)


def resolve_population(lookup_df: pd.DataFrame) -> pd.DataFrame:
    """
    Reduce the lookup table to one population figure per country.

    Args:
        lookup_df: Lookup rows with country and population columns

    Returns:
        DataFrame with columns country, population (max over the country's rows)
    """
    population = lookup_df.groupby("country", as_index=False)["population"].max()

    logger.info(f"Resolved population for {len(population)} countries from {len(lookup_df)} rows")

    return population


def attach_population(snapshot: pd.DataFrame, population: pd.DataFrame) -> pd.DataFrame:
    """
    Join population onto the snapshot by exact country name.

    Countries without a lookup entry get NaN population.
    """
    return pd.merge(snapshot, population[["country", "population"]], on="country", how="left")


def compute_deaths_per_million(df: pd.DataFrame) -> pd.DataFrame:
    """
    Compute deaths per million for rows with a usable population.

    Rows with missing or non-positive population are dropped.

    Args:
        df: Snapshot with deaths and population columns

    Returns:
        Copy of the valid rows with a deaths_per_million column
    """
    valid = df["population"].notna() & (df["population"] > 0)

    excluded = df.loc[~valid, "country"].tolist()
    if excluded:
        logger.warning(
            f"Excluding {len(excluded)} countries without valid population: {sorted(excluded)}"
        )

    df_rates = df[valid].copy()
    df_rates["deaths_per_million"] = PER_MILLION * df_rates["deaths"] / df_rates["population"]

    return df_rates.reset_index(drop=True)


def normalize_rates(snapshot: pd.DataFrame, lookup_df: pd.DataFrame) -> pd.DataFrame:
    """
    Attach population to the snapshot and compute deaths per million.

    Args:
        snapshot: Country totals at the latest date
        lookup_df: Population lookup table

    Returns:
        DataFrame with country, date, cases, deaths, population, deaths_per_million
    """
    population = resolve_population(lookup_df)
    df_rates = compute_deaths_per_million(attach_population(snapshot, population))

    logger.info(f"Computed deaths per million for {len(df_rates)} countries")

    return df_rates
