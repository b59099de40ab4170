from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

import pandas as pd

from .normalization import REGION_DTYPE, Region

SUMMARY_COLUMNS = ["occurrence_date", "region", "incident_count", "murder_count"]
DAILY_COLUMNS = ["occurrence_date", "incident_count", "murder_count"]


@dataclass(frozen=True)
class DateWindow:
    """Lower-bounded date filter. Exclusive by default: the bound date itself is dropped."""

    after: date
    inclusive: bool = False

    def contains(self, dates: pd.Series) -> pd.Series:
        bound = pd.Timestamp(self.after)
        if self.inclusive:
            return dates >= bound
        return dates > bound


@dataclass(frozen=True)
class DailyRegionSummary:
    occurrence_date: date
    region: Optional[Region]
    incident_count: int
    murder_count: int

    def __post_init__(self) -> None:
        if self.incident_count < 1:
            raise ValueError(f"incident_count must be at least 1, got {self.incident_count}")
        if not 0 <= self.murder_count <= self.incident_count:
            raise ValueError(
                f"murder_count {self.murder_count} outside 0..{self.incident_count}"
            )


def _empty_summary(columns: List[str]) -> pd.DataFrame:
    data = {
        "occurrence_date": pd.Series(dtype="datetime64[ns]"),
        "region": pd.Series(dtype=REGION_DTYPE),
        "incident_count": pd.Series(dtype=int),
        "murder_count": pd.Series(dtype=int),
    }
    return pd.DataFrame({col: data[col] for col in columns})


def _count(incidents: pd.DataFrame, keys: List[str], columns: List[str]) -> pd.DataFrame:
    if incidents.empty:
        return _empty_summary(columns)
    grouped = (
        incidents.groupby(keys, observed=True)["is_murder"]
        .agg(incident_count="count", murder_count="sum")
        .reset_index()
        .sort_values(keys)
        .reset_index(drop=True)
    )
    grouped["incident_count"] = grouped["incident_count"].astype(int)
    grouped["murder_count"] = grouped["murder_count"].astype(int)
    return grouped[columns]


def filter_window(incidents: pd.DataFrame, window: Optional[DateWindow]) -> pd.DataFrame:
    if window is None:
        return incidents
    return incidents.loc[window.contains(incidents["occurrence_date"])]


def aggregate(incidents: pd.DataFrame, window: Optional[DateWindow] = None) -> pd.DataFrame:
    """One row per observed (date, region), ordered by date then canonical region order."""
    scoped = filter_window(incidents, window)
    return _count(scoped, ["occurrence_date", "region"], SUMMARY_COLUMNS)


def aggregate_daily(incidents: pd.DataFrame) -> pd.DataFrame:
    return _count(incidents, ["occurrence_date"], DAILY_COLUMNS)


def to_summaries(frame: pd.DataFrame) -> List[DailyRegionSummary]:
    has_region = "region" in frame.columns
    return [
        DailyRegionSummary(
            occurrence_date=row.occurrence_date.date(),
            region=Region(row.region) if has_region else None,
            incident_count=int(row.incident_count),
            murder_count=int(row.murder_count),
        )
        for row in frame.itertuples(index=False)
    ]
