from __future__ import annotations

from typing import Dict, Optional

import pandas as pd

from .normalization import Region, cast_region

COUNT_COLUMNS = ["incident_count", "murder_count"]
TOTAL_COLUMNS = [
    "region",
    "days_with_incidents",
    "incident_count",
    "murder_count",
    "mean_daily_incidents",
    "max_daily_incidents",
    "murder_share",
]


def region_series(daily_region: pd.DataFrame, region: Region) -> pd.DataFrame:
    """Return the rows of a single region, ordered by date."""
    mask = daily_region["region"] == region.value
    return daily_region.loc[mask].sort_values("occurrence_date").reset_index(drop=True)


def region_totals(daily_region: pd.DataFrame) -> pd.DataFrame:
    if daily_region.empty:
        return pd.DataFrame(columns=TOTAL_COLUMNS)
    totals = (
        daily_region.groupby("region", observed=True)
        .agg(
            days_with_incidents=("incident_count", "count"),
            incident_count=("incident_count", "sum"),
            murder_count=("murder_count", "sum"),
            mean_daily_incidents=("incident_count", "mean"),
            max_daily_incidents=("incident_count", "max"),
        )
        .reset_index()
    )
    totals["murder_share"] = (totals["murder_count"] / totals["incident_count"]).round(4)
    totals["mean_daily_incidents"] = totals["mean_daily_incidents"].round(2)
    totals["region"] = totals["region"].astype(str)
    return totals


def describe_counts(frame: pd.DataFrame) -> Dict[str, Dict[str, float]]:
    if frame.empty:
        return {}
    described = frame[COUNT_COLUMNS].describe()
    return {
        column: {stat: float(value) for stat, value in described[column].items()}
        for column in COUNT_COLUMNS
    }


def build_time_series(
    daily_region: pd.DataFrame,
    freq: str = "W",
    region: Optional[str] = None,
) -> pd.DataFrame:
    data = daily_region
    if region is not None:
        data = region_series(daily_region, cast_region(region))
    if data.empty:
        return pd.DataFrame(columns=["period", *COUNT_COLUMNS])

    series = (
        data.groupby(pd.Grouper(key="occurrence_date", freq=freq))[COUNT_COLUMNS]
        .sum()
        .reset_index()
        .rename(columns={"occurrence_date": "period"})
    )
    series["period"] = series["period"].dt.strftime("%Y-%m-%d")
    return series
