"""
COVID-19 Mortality Analysis - Configuration Constants

Centralized configuration and constants for the entire project.
This module contains the data source URLs, the fixed column layout of the
source feed, analysis parameters, and plotting/logging defaults used across
the pipeline modules.
"""

# Data source URLs (JHU CSSE COVID-19 repository)
JHU_BASE_URL = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/csse_covid_19_data"
)
CONFIRMED_CSV_URL = (
    f"{JHU_BASE_URL}/csse_covid_19_time_series/time_series_covid19_confirmed_global.csv"
)
DEATHS_CSV_URL = f"{JHU_BASE_URL}/csse_covid_19_time_series/time_series_covid19_deaths_global.csv"
LOOKUP_CSV_URL = f"{JHU_BASE_URL}/UID_ISO_FIPS_LookUp_Table.csv"

# Identifying columns of the wide time series tables, in feed order,
# mapped to the names used throughout the project
TIME_SERIES_ID_COLUMNS = {
    "Province/State": "province",
    "Country/Region": "country",
    "Lat": "lat",
    "Long": "long",
}

# Population lookup columns we rely on, mapped to project names
LOOKUP_COLUMNS = {
    "Province_State": "province",
    "Country_Region": "country",
    "Population": "population",
}
REQUIRED_LOOKUP_COLUMNS = ["Country_Region", "Population"]

# Date headers in the time series feed look like 1/22/20
FEED_DATE_FORMAT = "%m/%d/%y"

LOCATION_KEY = ["province", "country", "lat", "long"]
JOIN_KEY = LOCATION_KEY + ["date"]

# Analysis parameters
PER_MILLION = 1_000_000
DEFAULT_TOP_N = 10
RANKING_METRICS = ["cases", "deaths", "deaths_per_million"]
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_OUTPUT_DIR = "outputs"

# Visualization constants
DEFAULT_FIGURE_SIZE = (12, 8)
DEFAULT_DPI = 300

# Color palette for consistent styling
COLORS = {
    "primary": "#2E86AB",
    "secondary": "#A23B72",
    "accent": "#F18F01",
    "success": "#C73E1D",
    "warning": "#F4A261",
    "info": "#264653",
}

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = "INFO"
