from __future__ import annotations

from pathlib import Path
from typing import List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from .analytics import region_series  # noqa: E402
from .normalization import Region  # noqa: E402


def _slug(region: Region) -> str:
    return region.value.lower().replace(" ", "_")


def plot_region_trend(daily_region: pd.DataFrame, region: Region, output_dir: Path) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    subset = region_series(daily_region, region)

    fig, ax = plt.subplots(figsize=(12, 5))
    ax.plot(subset["occurrence_date"], subset["incident_count"], label="Shooting incidents")
    ax.plot(subset["occurrence_date"], subset["murder_count"], label="Murders", color="firebrick")
    ax.set_title(f"Daily shootings in {region.value.title()}")
    ax.set_xlabel("Date")
    ax.set_ylabel("Count")
    ax.legend()
    fig.tight_layout()

    path = output_dir / f"{_slug(region)}_daily.png"
    fig.savefig(path)
    plt.close(fig)
    return path


def plot_region_trends(daily_region: pd.DataFrame, output_dir: Path) -> List[Path]:
    return [plot_region_trend(daily_region, region, output_dir) for region in Region]


def plot_regression(predictions: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    ordered = predictions.sort_values("incident_count")

    fig, ax = plt.subplots(figsize=(8, 6))
    ax.scatter(ordered["incident_count"], ordered["murder_count"], s=12, alpha=0.5, label="Actual")
    ax.plot(
        ordered["incident_count"],
        ordered["predicted_murder_count"],
        color="firebrick",
        linewidth=2,
        label="OLS prediction",
    )
    ax.set_title("Daily murders vs. daily shooting incidents")
    ax.set_xlabel("Incidents per day")
    ax.set_ylabel("Murders per day")
    ax.legend()
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path
