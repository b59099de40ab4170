from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path


class Settings:
    """Central location for configuration constants."""

    PROJECT_ROOT = Path(__file__).resolve().parents[1]
    DATA_DIR = PROJECT_ROOT / "data"
    DATA_FILE = DATA_DIR / "NYPD_Shooting_Incident_Data__Historic_.csv"
    DATASET_URL = "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD"
    REQUEST_TIMEOUT = 60
    CACHE_TTL = timedelta(minutes=15)

    WINDOW_START = date(2020, 1, 1)
    WINDOW_INCLUSIVE = False
    # The published report mapped "true" to 0 and "false" to 1.
    INVERT_MURDER_FLAG = False

    REPORT_DIR = PROJECT_ROOT / "analysis"
    FIGURES_DIR = REPORT_DIR / "figures"
    REPORT_FILE = REPORT_DIR / "shooting_report.md"
    SUMMARY_FILE = REPORT_DIR / "shooting_summary.json"


settings = Settings()
