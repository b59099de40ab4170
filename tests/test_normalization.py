from datetime import date, datetime

import pandas as pd
import pytest

from shooting_report.errors import CategoryViolation, DateParseError, SchemaViolation
from shooting_report.normalization import (
    REGION_ORDER,
    Region,
    cast_region,
    normalize,
    normalize_record,
    parse_occurrence_date,
    recode_murder_flag,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, True),
        (False, False),
        ("true", True),
        ("TRUE", True),
        (" Y ", True),
        ("1", True),
        ("false", False),
        ("False", False),
        ("N", False),
        ("0", False),
    ],
)
def test_murder_flag_truth_table(value, expected):
    assert recode_murder_flag(value) is expected


def test_murder_flag_inversion_reproduces_published_mapping():
    assert recode_murder_flag("true", invert=True) is False
    assert recode_murder_flag("false", invert=True) is True


def test_murder_flag_rejects_unknown_token():
    with pytest.raises(SchemaViolation) as excinfo:
        recode_murder_flag("maybe")
    assert excinfo.value.field == "STATISTICAL_MURDER_FLAG"


def test_parse_occurrence_date_month_first():
    assert parse_occurrence_date("01/02/2020") == date(2020, 1, 2)
    assert parse_occurrence_date(datetime(2020, 5, 6, 12, 30)) == date(2020, 5, 6)


@pytest.mark.parametrize("value", ["2020-01-02", "13/01/2020", "02/30/2020", "", "not a date"])
def test_parse_occurrence_date_rejects_malformed(value):
    with pytest.raises(DateParseError):
        parse_occurrence_date(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("BRONX", Region.BRONX),
        (" brooklyn ", Region.BROOKLYN),
        ("Staten  Island", Region.STATEN_ISLAND),
        ("Manhattan\t", Region.MANHATTAN),
    ],
)
def test_cast_region_normalizes_case_and_whitespace(value, expected):
    assert cast_region(value) is expected


def test_cast_region_is_closed():
    with pytest.raises(CategoryViolation) as excinfo:
        cast_region("UNKNOWN_BORO")
    assert excinfo.value.value == "UNKNOWN_BORO"


def test_normalize_record_checks_date_first():
    with pytest.raises(DateParseError):
        normalize_record("2020/01/01", "NOWHERE", "maybe")


def test_normalize_drops_and_counts_violations():
    projected = pd.DataFrame(
        {
            "occurrence_date": ["01/02/2020", "03/05/2021", "bad", "01/03/2020"],
            "region": ["BRONX", "UNKNOWN_BORO", "QUEENS", "queens"],
            "is_murder": ["true", "false", "false", "unknown"],
        }
    )
    result = normalize(projected)

    assert len(result.frame) == 1
    assert result.report.count(CategoryViolation) == 1
    assert result.report.count(DateParseError) == 1
    assert result.report.count(SchemaViolation) == 1
    assert [issue.row for issue in result.report.issues] == [1, 2, 3]

    row = result.frame.iloc[0]
    assert row["occurrence_date"] == pd.Timestamp("2020-01-02")
    assert row["region"] == "BRONX"
    assert bool(row["is_murder"]) is True


def test_normalize_frame_types():
    projected = pd.DataFrame(
        {
            "occurrence_date": ["01/02/2020", "01/02/2020"],
            "region": ["STATEN ISLAND", "bronx"],
            "is_murder": ["false", "true"],
        }
    )
    frame = normalize(projected).frame

    assert str(frame["occurrence_date"].dtype).startswith("datetime64")
    assert list(frame["region"].cat.categories) == REGION_ORDER
    assert frame["region"].cat.ordered
    assert frame["is_murder"].dtype == bool


def test_normalize_empty_input():
    projected = pd.DataFrame(columns=["occurrence_date", "region", "is_murder"])
    result = normalize(projected)
    assert result.frame.empty
    assert result.report.total == 0
