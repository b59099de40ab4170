from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd

from .errors import SchemaViolation
from .validation import ValidationReport

logger = logging.getLogger(__name__)

SOURCE_COLUMNS: Dict[str, str] = {
    "OCCUR_DATE": "occurrence_date",
    "BORO": "region",
    "STATISTICAL_MURDER_FLAG": "is_murder",
}
PROJECTED_COLUMNS = list(SOURCE_COLUMNS.values())


@dataclass
class ProjectionResult:
    frame: pd.DataFrame
    report: ValidationReport


def _is_missing(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))


def project(raw: pd.DataFrame) -> ProjectionResult:
    """Select and rename the three source fields, dropping rows that lack any of them."""
    report = ValidationReport()
    missing_columns = [col for col in SOURCE_COLUMNS if col not in raw.columns]
    if missing_columns:
        logger.error("Source table is missing required columns: %s", ", ".join(missing_columns))
        for index in raw.index:
            report.add(SchemaViolation(missing_columns[0], None, f"column {missing_columns[0]} is absent"), row=index)
        return ProjectionResult(frame=pd.DataFrame(columns=PROJECTED_COLUMNS), report=report)

    selected = raw[list(SOURCE_COLUMNS)].rename(columns=SOURCE_COLUMNS)
    missing = pd.DataFrame(
        {col: selected[col].map(_is_missing).astype(bool) for col in PROJECTED_COLUMNS},
        index=selected.index,
    )
    incomplete = missing.any(axis=1)

    reverse = {new: old for old, new in SOURCE_COLUMNS.items()}
    for index, flags in missing.loc[incomplete].iterrows():
        first_missing = flags.idxmax()
        report.add(SchemaViolation(reverse[first_missing], None), row=index)

    return ProjectionResult(frame=selected.loc[~incomplete].copy(), report=report)
