from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd
import statsmodels.formula.api as smf
from sklearn.metrics import mean_absolute_error, r2_score

FORMULA = "murder_count ~ incident_count"


@dataclass
class MurderRegression:
    intercept: float
    slope: float
    metrics: Dict[str, float]
    predictions: pd.DataFrame
    results: Any

    def summary_text(self) -> str:
        return self.results.summary().as_text()


def fit_murder_regression(daily: pd.DataFrame) -> MurderRegression:
    """Fit daily murders against daily incidents with ordinary least squares."""
    if len(daily) < 2:
        raise ValueError("At least two daily rows are required to fit the regression")

    data = daily[["occurrence_date", "incident_count", "murder_count"]].astype(
        {"incident_count": float, "murder_count": float}
    )
    fitted = smf.ols(FORMULA, data=data).fit()

    predictions = daily.copy()
    predictions["predicted_murder_count"] = fitted.predict(data)
    metrics = {
        "r2": float(r2_score(data["murder_count"], predictions["predicted_murder_count"])),
        "mae": float(mean_absolute_error(data["murder_count"], predictions["predicted_murder_count"])),
        "n_obs": float(fitted.nobs),
    }
    return MurderRegression(
        intercept=float(fitted.params["Intercept"]),
        slope=float(fitted.params["incident_count"]),
        metrics=metrics,
        predictions=predictions,
        results=fitted,
    )
