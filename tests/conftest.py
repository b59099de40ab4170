from pathlib import Path
from typing import Dict, List

import pandas as pd
import pytest

HEADER = ["INCIDENT_KEY", "OCCUR_DATE", "OCCUR_TIME", "BORO", "PRECINCT", "STATISTICAL_MURDER_FLAG"]


def raw_frame(rows: List[Dict[str, str]]) -> pd.DataFrame:
    """Build a raw table shaped like the provider's CSV from short row dicts."""
    records = [
        {
            "INCIDENT_KEY": str(100000 + i),
            "OCCUR_DATE": row.get("date"),
            "OCCUR_TIME": "21:30:00",
            "BORO": row.get("region"),
            "PRECINCT": "44",
            "STATISTICAL_MURDER_FLAG": row.get("murder"),
        }
        for i, row in enumerate(rows)
    ]
    return pd.DataFrame(records, columns=HEADER)


def write_csv(path: Path, rows: List[Dict[str, str]]) -> Path:
    raw_frame(rows).to_csv(path, index=False)
    return path


@pytest.fixture
def sample_rows() -> List[Dict[str, str]]:
    rows = []
    # Twelve days around the window bound with a noisy murder share.
    for day in range(1, 13):
        incidents = 2 + day % 4
        for n in range(incidents):
            rows.append(
                {
                    "date": f"01/{day:02d}/2020",
                    "region": ["BRONX", "BROOKLYN", "Queens ", "STATEN ISLAND", "MANHATTAN"][(day + n) % 5],
                    "murder": "true" if (n + day) % 3 == 0 else "false",
                }
            )
    rows.append({"date": "12/31/2019", "region": "QUEENS", "murder": "false"})
    rows.append({"date": "03/05/2021", "region": "UNKNOWN_BORO", "murder": "false"})
    rows.append({"date": "2021-03-05", "region": "BRONX", "murder": "true"})
    rows.append({"date": "03/06/2021", "region": None, "murder": "true"})
    return rows


@pytest.fixture
def sample_csv(tmp_path, sample_rows) -> Path:
    return write_csv(tmp_path / "shootings.csv", sample_rows)
