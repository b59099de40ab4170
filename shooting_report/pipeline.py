from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from .aggregations import DateWindow, aggregate, aggregate_daily
from .config import settings
from .data_loader import ShootingDataRepository
from .normalization import normalize
from .projection import project
from .validation import ValidationReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    incidents: pd.DataFrame
    daily_region: pd.DataFrame
    daily: pd.DataFrame
    report: ValidationReport
    window: DateWindow


def default_window() -> DateWindow:
    return DateWindow(after=settings.WINDOW_START, inclusive=settings.WINDOW_INCLUSIVE)


def prepare_incidents(
    raw: pd.DataFrame, invert_murder_flag: bool = False
) -> Tuple[pd.DataFrame, ValidationReport]:
    projection = project(raw)
    normalization = normalize(projection.frame, invert_murder_flag=invert_murder_flag)
    return normalization.frame, projection.report.merge(normalization.report)


def run_pipeline(
    repository: Optional[ShootingDataRepository] = None,
    window: Optional[DateWindow] = None,
    invert_murder_flag: Optional[bool] = None,
) -> PipelineResult:
    """Load, project, normalize and aggregate the incident table.

    Raises ``SourceUnavailable`` when the raw table cannot be loaded. Record
    level failures are collected in the returned report and logged once the
    batch has finished.
    """
    repository = repository or ShootingDataRepository()
    window = window or default_window()
    if invert_murder_flag is None:
        invert_murder_flag = settings.INVERT_MURDER_FLAG

    raw = repository.load()
    incidents, report = prepare_incidents(raw, invert_murder_flag=invert_murder_flag)
    daily_region = aggregate(incidents, window)
    daily = aggregate_daily(incidents)
    logger.info(
        "Aggregated %d incidents into %d date/region rows after %s and %d daily rows overall",
        len(incidents),
        len(daily_region),
        window.after.isoformat(),
        len(daily),
    )
    report.log_summary(logger)
    return PipelineResult(
        incidents=incidents,
        daily_region=daily_region,
        daily=daily,
        report=report,
        window=window,
    )
