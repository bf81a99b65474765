"""
COVID-19 Mortality Analysis Dashboard

Interactive Streamlit application for exploring the per-country snapshot built from
the JHU CSSE time series: top-10 rankings, the full snapshot table, and the raw and
log-scale regressions of deaths per million on case counts.
"""

import logging
import os
import sys
from datetime import datetime

import numpy as np
import plotly.express as px
import streamlit as st

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from covid_mortality.modeler import prepare_model_input
from covid_mortality.pipeline import run_pipeline, summarize_results
from covid_mortality.ranker import top_n

# Configure page
st.set_page_config(
    page_title="COVID-19 Mortality Analysis",
    page_icon="🦠",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Configure logging to suppress verbose output
logging.getLogger().setLevel(logging.WARNING)

RANKING_LABELS = {
    "Total Cases": "cases",
    "Total Deaths": "deaths",
    "Deaths per Million": "deaths_per_million",
}


@st.cache_data
def load_results():
    """Run the pipeline once and cache the results."""
    try:
        with st.spinner("Loading JHU CSSE data and fitting models..."):
            results = run_pipeline()
        return results, True
    except Exception as e:
        st.error(f"Failed to load data: {str(e)}")
        return None, False


def create_overview_metrics(results):
    """Create overview metrics for the dashboard."""
    snapshot = results.snapshot
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric(label="Countries", value=f"{len(snapshot):,}")
    with col2:
        st.metric(label="Total Cases", value=f"{snapshot['cases'].sum():,.0f}")
    with col3:
        st.metric(label="Total Deaths", value=f"{snapshot['deaths'].sum():,.0f}")
    with col4:
        st.metric(
            label="Median Deaths per Million",
            value=f"{snapshot['deaths_per_million'].median():,.1f}",
        )


def create_ranking_chart(snapshot, label, n):
    """Create a horizontal bar chart of the top countries by one metric."""
    metric = RANKING_LABELS[label]
    table = top_n(snapshot, metric, n)

    fig = px.bar(
        table,
        x=metric,
        y="country",
        orientation="h",
        title=f"Top {n} Countries by {label}",
        labels={metric: label, "country": "Country"},
        color=metric,
        color_continuous_scale="Reds",
    )
    fig.update_layout(height=max(400, n * 30), yaxis={"categoryorder": "total ascending"})
    st.plotly_chart(fig, use_container_width=True)


def create_regression_chart(snapshot, model, log_scale):
    """Scatter plot of the model input with the fitted line."""
    model_df = prepare_model_input(snapshot)

    if log_scale:
        x_col, y_col = "log_cases", "log_deaths_per_million"
        labels = {x_col: "log10(Cases)", y_col: "log10(Deaths per Million + 1)"}
    else:
        x_col, y_col = "cases_millions", "deaths_per_million"
        labels = {x_col: "Cases (Millions)", y_col: "Deaths per Million"}

    fig = px.scatter(
        model_df,
        x=x_col,
        y=y_col,
        hover_name="country",
        labels=labels,
        title=f"{model.name.title()} model: R² = {model.r_squared:.3f}, p = {model.p_value:.3g}",
    )

    x_line = np.linspace(model_df[x_col].min(), model_df[x_col].max(), 100)
    fig.add_scatter(
        x=x_line,
        y=model.intercept + model.slope * x_line,
        mode="lines",
        name="OLS fit",
    )
    fig.update_layout(height=500)
    st.plotly_chart(fig, use_container_width=True)


def main():
    """Main dashboard application."""
    st.title("🦠 COVID-19 Cases vs Mortality")

    results, success = load_results()

    if not success or results is None:
        st.error("Failed to load data. Please check your internet connection and try again.")
        return

    st.info(
        f"📅 **Snapshot date:** {results.latest_date:%B %d, %Y}. Countries that did not "
        "report on this date are not included."
    )

    st.sidebar.header("🔍 Options")
    n = st.sidebar.slider("Number of countries:", 5, 25, 10)

    st.header("📈 Overview")
    create_overview_metrics(results)

    tab1, tab2, tab3 = st.tabs(["🏆 Rankings", "📉 Regression", "📋 Snapshot Data"])

    with tab1:
        label = st.selectbox("Select Metric:", list(RANKING_LABELS), key="ranking_metric")
        create_ranking_chart(results.snapshot, label, n)

    with tab2:
        col1, col2 = st.columns(2)
        with col1:
            create_regression_chart(results.snapshot, results.raw_model, log_scale=False)
        with col2:
            create_regression_chart(results.snapshot, results.log_model, log_scale=True)

        st.json(summarize_results(results)["models"])

    with tab3:
        st.dataframe(results.snapshot, use_container_width=True)

        csv = results.snapshot.to_csv(index=False)
        st.download_button(
            label="📥 Download Snapshot as CSV",
            data=csv,
            file_name=f"covid_mortality_snapshot_{datetime.now().strftime('%Y%m%d')}.csv",
            mime="text/csv",
        )

    st.markdown("---")
    st.markdown(
        "**Data Source:** [JHU CSSE COVID-19 Data](https://github.com/CSSEGISandData/COVID-19)"
    )


if __name__ == "__main__":
    main()
