from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, List

import numpy as np
import pandas as pd
from pandas.api.types import CategoricalDtype

from .errors import CategoryViolation, DateParseError, RecordError, SchemaViolation
from .validation import ValidationReport

logger = logging.getLogger(__name__)

DATE_FORMAT = "%m/%d/%Y"


class Region(str, Enum):
    BRONX = "BRONX"
    BROOKLYN = "BROOKLYN"
    MANHATTAN = "MANHATTAN"
    QUEENS = "QUEENS"
    STATEN_ISLAND = "STATEN ISLAND"


REGION_ORDER = [region.value for region in Region]
REGION_DTYPE = CategoricalDtype(categories=REGION_ORDER, ordered=True)

# Murder flag truth table. Anything not listed is a schema violation.
TRUE_TOKENS = frozenset({"true", "t", "y", "yes", "1"})
FALSE_TOKENS = frozenset({"false", "f", "n", "no", "0"})


@dataclass(frozen=True)
class IncidentRecord:
    occurrence_date: date
    region: Region
    is_murder: bool


@dataclass
class NormalizationResult:
    frame: pd.DataFrame
    report: ValidationReport


def cast_region(value: Any) -> Region:
    if isinstance(value, Region):
        return value
    text = " ".join(str(value).split()).upper()
    try:
        return Region(text)
    except ValueError:
        raise CategoryViolation("BORO", value) from None


def parse_occurrence_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        raise DateParseError("OCCUR_DATE", value) from None


def recode_murder_flag(value: Any, invert: bool = False) -> bool:
    """Map the source murder flag to ``True`` when the incident was ruled a murder.

    ``invert=True`` reproduces the published report, which recoded "true" as 0
    and "false" as 1.
    """
    if isinstance(value, (bool, np.bool_)):
        flag = bool(value)
    else:
        token = str(value).strip().lower()
        if token in TRUE_TOKENS:
            flag = True
        elif token in FALSE_TOKENS:
            flag = False
        else:
            raise SchemaViolation("STATISTICAL_MURDER_FLAG", value)
    return not flag if invert else flag


def normalize_record(
    occurrence_date: Any, region: Any, is_murder: Any, invert_murder_flag: bool = False
) -> IncidentRecord:
    return IncidentRecord(
        occurrence_date=parse_occurrence_date(occurrence_date),
        region=cast_region(region),
        is_murder=recode_murder_flag(is_murder, invert=invert_murder_flag),
    )


def incidents_frame(records: List[IncidentRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "occurrence_date": pd.to_datetime(
                pd.Series([record.occurrence_date for record in records], dtype=object)
            ),
            "region": pd.Series([record.region.value for record in records], dtype=REGION_DTYPE),
            "is_murder": pd.Series([record.is_murder for record in records], dtype=bool),
        }
    )


def normalize(projected: pd.DataFrame, invert_murder_flag: bool = False) -> NormalizationResult:
    if invert_murder_flag:
        logger.warning("Murder flag recoding is inverted: 'true' counts as not a murder")

    report = ValidationReport()
    records: List[IncidentRecord] = []
    for row in projected.itertuples():
        try:
            record = normalize_record(
                row.occurrence_date, row.region, row.is_murder, invert_murder_flag=invert_murder_flag
            )
        except RecordError as exc:
            report.add(exc, row=row.Index)
            continue
        records.append(record)

    logger.info("Normalized %d of %d projected rows", len(records), len(projected))
    return NormalizationResult(frame=incidents_frame(records), report=report)
