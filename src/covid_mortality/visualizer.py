"""
COVID-19 Mortality Visualization Module

Static plots of the pipeline outputs: the three top-10 rankings and the two
regression fits drawn over the per-country snapshot.
"""

import logging
import warnings
from pathlib import Path
from typing import Dict

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

try:
    # Relative import (when used as module)
    from .config.constants import COLORS, DEFAULT_DPI, DEFAULT_FIGURE_SIZE, DEFAULT_OUTPUT_DIR
    from .modeler import RegressionResult, prepare_model_input
except ImportError:
    # Absolute import (when run directly)
    from covid_mortality.config.constants import (
        COLORS,
        DEFAULT_DPI,
        DEFAULT_FIGURE_SIZE,
        DEFAULT_OUTPUT_DIR,
    )
    from covid_mortality.modeler import RegressionResult, prepare_model_input

# Configure logging
logger = logging.getLogger(__name__)

# Set style for publication-quality plots
plt.style.use("seaborn-v0_8")
sns.set_palette("husl")
warnings.filterwarnings("ignore", category=FutureWarning)


def setup_plot_style():
    """Set up consistent styling for all plots."""
    plt.rcParams.update(
        {
            "figure.figsize": DEFAULT_FIGURE_SIZE,
            "font.size": 11,
            "axes.titlesize": 14,
            "axes.labelsize": 12,
            "xtick.labelsize": 10,
            "ytick.labelsize": 10,
            "legend.fontsize": 10,
            "figure.titlesize": 16,
            "savefig.dpi": DEFAULT_DPI,
            "savefig.bbox": "tight",
        }
    )


def _ranking_panel(ax, table: pd.DataFrame, metric: str, label: str, color: str, scale=1.0):
    y_pos = np.arange(len(table))
    values = table[metric] / scale
    bars = ax.barh(y_pos, values, color=color, alpha=0.8)

    ax.set_yticks(y_pos)
    ax.set_yticklabels(table["country"])
    ax.invert_yaxis()
    ax.set_xlabel(label)
    ax.set_title(f"Top {len(table)} Countries by {label}", fontweight="bold")
    ax.grid(axis="x", alpha=0.3)

    for bar in bars:
        width = bar.get_width()
        ax.text(
            width,
            bar.get_y() + bar.get_height() / 2,
            f" {width:,.1f}",
            ha="left",
            va="center",
            fontsize=9,
        )


def create_rankings_plot(
    top_by_cases: pd.DataFrame,
    top_by_deaths: pd.DataFrame,
    top_by_deaths_per_million: pd.DataFrame,
    output_dir: str = DEFAULT_OUTPUT_DIR,
) -> str:
    """
    Create horizontal bar charts for the three ranking tables.

    Returns:
        Path to saved plot file
    """
    setup_plot_style()

    fig, (ax1, ax2, ax3) = plt.subplots(1, 3, figsize=(20, 8))

    _ranking_panel(ax1, top_by_cases, "cases", "Cases (Millions)", COLORS["primary"], 1e6)
    _ranking_panel(ax2, top_by_deaths, "deaths", "Deaths (Thousands)", COLORS["secondary"], 1e3)
    _ranking_panel(
        ax3, top_by_deaths_per_million, "deaths_per_million", "Deaths per Million", COLORS["accent"]
    )

    plt.tight_layout()

    output_path = Path(output_dir) / "top_countries.png"
    plt.savefig(output_path, dpi=DEFAULT_DPI, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"Created rankings plot: {output_path}")
    return str(output_path)


def create_regression_plot(
    snapshot: pd.DataFrame,
    raw_model: RegressionResult,
    log_model: RegressionResult,
    output_dir: str = DEFAULT_OUTPUT_DIR,
) -> str:
    """
    Scatter deaths per million against cases with both fitted lines.

    Args:
        snapshot: Per-country snapshot with deaths_per_million
        raw_model: Raw-scale fit
        log_model: Log-scale fit
        output_dir: Directory to save the plot

    Returns:
        Path to saved plot file
    """
    setup_plot_style()

    model_df = prepare_model_input(snapshot)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 7))

    panels = [
        (ax1, raw_model, "cases_millions", "deaths_per_million", "Cases (Millions)",
         "Deaths per Million", COLORS["primary"]),
        (ax2, log_model, "log_cases", "log_deaths_per_million", "log10(Cases)",
         "log10(Deaths per Million + 1)", COLORS["secondary"]),
    ]

    for ax, model, x_col, y_col, x_label, y_label, color in panels:
        ax.scatter(model_df[x_col], model_df[y_col], s=40, alpha=0.6, color=color)

        x_line = np.linspace(model_df[x_col].min(), model_df[x_col].max(), 100)
        ax.plot(x_line, model.intercept + model.slope * x_line, color=COLORS["info"], linewidth=2)

        ax.set_xlabel(x_label)
        ax.set_ylabel(y_label)
        ax.set_title(f"{model.name.title()} Model", fontweight="bold")
        ax.grid(alpha=0.3)

        stats_text = (
            f"slope = {model.slope:.3f}\nintercept = {model.intercept:.3f}\n"
            f"p = {model.p_value:.3g}\nR² = {model.r_squared:.3f}\nn = {model.n_obs}"
        )
        ax.text(
            0.02,
            0.98,
            stats_text,
            transform=ax.transAxes,
            verticalalignment="top",
            bbox=dict(boxstyle="round", facecolor="lightyellow", alpha=0.8),
            fontsize=9,
        )

    plt.tight_layout()

    output_path = Path(output_dir) / "regression_fits.png"
    plt.savefig(output_path, dpi=DEFAULT_DPI, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"Created regression plot: {output_path}")
    return str(output_path)


def generate_all_visualizations(results, output_dir: str = DEFAULT_OUTPUT_DIR) -> Dict[str, str]:
    """
    Generate all static visualizations from a pipeline run.

    Args:
        results: AnalysisResults from the pipeline
        output_dir: Directory to save plots

    Returns:
        Dictionary mapping plot names to file paths
    """
    Path(output_dir).mkdir(parents=True, exist_ok=True)

    logger.info("Generating visualizations...")

    plot_paths = {
        "rankings": create_rankings_plot(
            results.top_by_cases,
            results.top_by_deaths,
            results.top_by_deaths_per_million,
            output_dir,
        ),
        "regression": create_regression_plot(
            results.snapshot, results.raw_model, results.log_model, output_dir
        ),
    }

    logger.info(f"Successfully generated {len(plot_paths)} visualizations")

    return plot_paths
