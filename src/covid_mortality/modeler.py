"""
COVID-19 Mortality Regression Module

Fits two ordinary least squares models of death rate on case count across countries:

- Raw model:  deaths_per_million ~ cases / 1,000,000
- Log model:  log10(deaths_per_million + 1) ~ log10(cases)

The +1 offset keeps the logarithm defined for countries with zero deaths. Each fit
reports intercept, slope, the two-sided p-value of the slope (H0: slope = 0), and R².
The two fits are independent of each other.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

import numpy as np
import pandas as pd
from scipy import stats

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

# Minimum number of countries for a fit with a defined slope
MIN_OBSERVATIONS = 2


class DegenerateRegressionError(ValueError):
    """Raised when the input cannot support a linear fit."""


@dataclass(frozen=True)
class RegressionResult:
    """Fit statistics of a simple linear regression."""

    name: str
    intercept: float
    slope: float
    p_value: float
    r_squared: float
    n_obs: int

    def to_dict(self) -> Dict:
        return asdict(self)


def prepare_model_input(snapshot: pd.DataFrame) -> pd.DataFrame:
    """
    Restrict the snapshot to rows usable by both models and add the predictors.

    Args:
        snapshot: Country snapshot with cases and deaths_per_million

    Returns:
        DataFrame with extra columns cases_millions, log_cases, log_deaths_per_million
    """
    model_df = snapshot[
        (snapshot["cases"] > 0) & snapshot["deaths_per_million"].notna()
    ].copy()

    model_df["cases_millions"] = model_df["cases"] / PER_MILLION
    model_df["log_cases"] = np.log10(model_df["cases"])
    model_df["log_deaths_per_million"] = np.log10(model_df["deaths_per_million"] + 1)

    return model_df.reset_index(drop=True)


def fit_linear(x, y, name: str = "linear") -> RegressionResult:
    """
    Fit y = intercept + slope * x by ordinary least squares.

    Args:
        x: Predictor values
        y: Response values
        name: Label for the result

    Returns:
        RegressionResult for the fit

    Raises:
        DegenerateRegressionError: With fewer than two points, a constant predictor,
            or a fit that yields NaN statistics
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if len(x) != len(y):
        raise ValueError(f"x and y lengths differ: {len(x)} != {len(y)}")

    if len(x) < MIN_OBSERVATIONS:
        raise DegenerateRegressionError(
            f"{name}: need at least {MIN_OBSERVATIONS} observations, got {len(x)}"
        )

    if np.ptp(x) == 0:
        raise DegenerateRegressionError(f"{name}: predictor has zero variance")

    fit = stats.linregress(x, y)

    result = RegressionResult(
        name=name,
        intercept=float(fit.intercept),
        slope=float(fit.slope),
        p_value=float(fit.pvalue),
        r_squared=float(fit.rvalue**2),
        n_obs=len(x),
    )

    if any(np.isnan([result.intercept, result.slope, result.p_value, result.r_squared])):
        raise DegenerateRegressionError(f"{name}: fit produced NaN statistics ({result})")

    logger.info(
        f"{name} model: intercept={result.intercept:.4f}, slope={result.slope:.4f}, "
        f"p={result.p_value:.3g}, R²={result.r_squared:.4f} (n={result.n_obs})"
    )

    return result


def fit_raw_model(model_df: pd.DataFrame) -> RegressionResult:
    """Deaths per million against cases in millions."""
    return fit_linear(model_df["cases_millions"], model_df["deaths_per_million"], name="raw")


def fit_log_model(model_df: pd.DataFrame) -> RegressionResult:
    """log10(deaths per million + 1) against log10(cases)."""
    return fit_linear(model_df["log_cases"], model_df["log_deaths_per_million"], name="log")


def fit_models(snapshot: pd.DataFrame) -> Tuple[RegressionResult, RegressionResult]:
    """
    Fit the raw-scale and log-scale models on the country snapshot.

    Returns:
        Tuple of (raw_result, log_result)
    """
    model_df = prepare_model_input(snapshot)
    logger.info(f"Fitting regression models on {len(model_df)} countries")

    return fit_raw_model(model_df), fit_log_model(model_df)
