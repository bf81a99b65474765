"""
COVID-19 Mortality Analysis Pipeline

Runs the full analysis in a fixed order:
load -> reshape -> merge -> aggregate -> normalize rates -> rank + model.

The result is an AnalysisResults object holding the three top-N tables, the full
per-country snapshot, and both regression fits. Plotting and reporting consume it.
"""

import argparse
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

try:
    # Relative import (when used as module)
    from .config.constants import (
        CONFIRMED_CSV_URL,
        DEATHS_CSV_URL,
        DEFAULT_OUTPUT_DIR,
        DEFAULT_TOP_N,
        LOG_LEVEL,
        LOOKUP_CSV_URL,
    )
    from .config.logging_config import configure_logging, get_logger
    from .data_aggregator import aggregate_all
    from .data_loader import load_all_data
    from .data_merger import merge_observations
    from .data_reshaper import reshape_all
    from .modeler import RegressionResult, fit_models
    from .ranker import rank_countries
    from .rate_normalizer import normalize_rates
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import (
        CONFIRMED_CSV_URL,
        DEATHS_CSV_URL,
        DEFAULT_OUTPUT_DIR,
        DEFAULT_TOP_N,
        LOG_LEVEL,
        LOOKUP_CSV_URL,
    )
    from covid_mortality.config.logging_config import configure_logging, get_logger
    from covid_mortality.data_aggregator import aggregate_all
    from covid_mortality.data_loader import load_all_data
    from covid_mortality.data_merger import merge_observations
    from covid_mortality.data_reshaper import reshape_all
    from covid_mortality.modeler import RegressionResult, fit_models
    from covid_mortality.ranker import rank_countries
    from covid_mortality.rate_normalizer import normalize_rates

# Configure logging
logger = get_logger(__name__)


@dataclass(frozen=True)
class AnalysisResults:
    """Outputs of one pipeline run."""

    latest_date: pd.Timestamp
    daily_aggregates: pd.DataFrame
    snapshot: pd.DataFrame
    top_by_cases: pd.DataFrame
    top_by_deaths: pd.DataFrame
    top_by_deaths_per_million: pd.DataFrame
    raw_model: RegressionResult
    log_model: RegressionResult


def run_analysis(
    cases_wide: pd.DataFrame,
    deaths_wide: pd.DataFrame,
    lookup_df: pd.DataFrame,
    top_n: int = DEFAULT_TOP_N,
) -> AnalysisResults:
    """
    Run every stage after loading on already-fetched tables.

    Args:
        cases_wide: Confirmed cases time series (wide, identifier columns renamed)
        deaths_wide: Deaths time series (same layout)
        lookup_df: Population lookup with country and population columns
        top_n: Size of each ranking table

    Returns:
        AnalysisResults for the run
    """
    cases_long, deaths_long = reshape_all(cases_wide, deaths_wide)
    merged = merge_observations(cases_long, deaths_long)

    daily, snapshot, latest_date = aggregate_all(merged)
    snapshot = normalize_rates(snapshot, lookup_df)

    rankings = rank_countries(snapshot, top_n)
    raw_model, log_model = fit_models(snapshot)

    return AnalysisResults(
        latest_date=latest_date,
        daily_aggregates=daily,
        snapshot=snapshot,
        top_by_cases=rankings["cases"],
        top_by_deaths=rankings["deaths"],
        top_by_deaths_per_million=rankings["deaths_per_million"],
        raw_model=raw_model,
        log_model=log_model,
    )


def run_pipeline(
    confirmed_url: str = CONFIRMED_CSV_URL,
    deaths_url: str = DEATHS_CSV_URL,
    lookup_url: str = LOOKUP_CSV_URL,
    top_n: int = DEFAULT_TOP_N,
) -> AnalysisResults:
    """Fetch the source tables and run the full analysis."""
    logger.info("Starting COVID-19 mortality analysis pipeline...")

    cases_wide, deaths_wide, lookup_df = load_all_data(confirmed_url, deaths_url, lookup_url)
    results = run_analysis(cases_wide, deaths_wide, lookup_df, top_n=top_n)

    logger.info(f"Pipeline completed: {len(results.snapshot)} countries as of {results.latest_date}")

    return results


def summarize_results(results: AnalysisResults) -> Dict:
    """
    Build a JSON-serializable summary of a run.

    Args:
        results: Pipeline outputs

    Returns:
        Dictionary with the snapshot date, country count, top countries, and model statistics
    """
    return {
        "generated_at": datetime.now().isoformat(),
        "latest_date": results.latest_date.strftime("%Y-%m-%d"),
        "countries_in_snapshot": int(len(results.snapshot)),
        "top_countries": {
            "cases": results.top_by_cases["country"].tolist(),
            "deaths": results.top_by_deaths["country"].tolist(),
            "deaths_per_million": results.top_by_deaths_per_million["country"].tolist(),
        },
        "models": {
            "raw": results.raw_model.to_dict(),
            "log": results.log_model.to_dict(),
        },
    }


def export_results(results: AnalysisResults, output_dir: str = DEFAULT_OUTPUT_DIR) -> Dict[str, str]:
    """
    Write the output tables as CSV and the summary as JSON.

    Args:
        results: Pipeline outputs
        output_dir: Directory to write into (created if missing)

    Returns:
        Dictionary mapping output name to file path
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    tables = {
        "snapshot": results.snapshot,
        "top_by_cases": results.top_by_cases,
        "top_by_deaths": results.top_by_deaths,
        "top_by_deaths_per_million": results.top_by_deaths_per_million,
    }

    paths = {}
    for name, table in tables.items():
        path = out / f"{name}.csv"
        table.to_csv(path, index=False)
        paths[name] = str(path)

    summary_path = out / "regression_results.json"
    summary_path.write_text(json.dumps(summarize_results(results), indent=2), encoding="utf-8")
    paths["summary"] = str(summary_path)

    logger.info(f"Exported {len(paths)} files to {out}")

    return paths


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Relate COVID-19 case counts to deaths per million across countries."
    )
    parser.add_argument("--output-dir", default=DEFAULT_OUTPUT_DIR, help="Directory for outputs")
    parser.add_argument("--top-n", type=int, default=DEFAULT_TOP_N, help="Size of ranking tables")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level")
    parser.add_argument("--plots", action="store_true", help="Also render static PNG plots")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> None:
    args = parse_args(argv)
    configure_logging(level=args.log_level)

    results = run_pipeline(top_n=args.top_n)
    export_results(results, args.output_dir)

    if args.plots:
        from covid_mortality.visualizer import generate_all_visualizations

        generate_all_visualizations(results, args.output_dir)

    print(f"\n=== Snapshot date: {results.latest_date:%Y-%m-%d} ===")
    print(f"Countries analysed: {len(results.snapshot)}")
    for model in (results.raw_model, results.log_model):
        print(
            f"{model.name:>4} model: intercept={model.intercept:.4f} slope={model.slope:.4f} "
            f"p={model.p_value:.3g} R²={model.r_squared:.4f}"
        )


if __name__ == "__main__":
    main()
