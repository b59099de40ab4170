from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Optional

import pandas as pd
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .analytics import build_time_series, describe_counts, region_series, region_totals
from .data_loader import ShootingDataRepository
from .errors import CategoryViolation, SourceUnavailable
from .modeling import FORMULA, MurderRegression, fit_murder_regression
from .normalization import cast_region
from .pipeline import PipelineResult, run_pipeline

app = FastAPI(
    title="NYC Shooting Incident Report API",
    version="1.0.0",
    description="Daily shooting and murder counts by borough from the NYPD historic dataset.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

repository = ShootingDataRepository()


# Keyed on the repository load time so an expired raw table rebuilds both.
@lru_cache(maxsize=1)
def _pipeline_cache(loaded_at: Optional[datetime]) -> PipelineResult:
    return run_pipeline(repository)


@lru_cache(maxsize=1)
def _regression_cache(loaded_at: Optional[datetime]) -> MurderRegression:
    return fit_murder_regression(_pipeline_cache(loaded_at).daily)


def _pipeline() -> PipelineResult:
    try:
        repository.load()
        return _pipeline_cache(repository.loaded_at)
    except SourceUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))


def _records(frame: pd.DataFrame) -> List[Dict[str, object]]:
    payload = frame.copy()
    payload["occurrence_date"] = payload["occurrence_date"].dt.strftime("%Y-%m-%d")
    if "region" in payload.columns:
        payload["region"] = payload["region"].astype(str)
    return payload.to_dict(orient="records")


@app.get("/health")
def healthcheck() -> Dict[str, object]:
    result = _pipeline()
    incidents = result.incidents
    earliest = incidents["occurrence_date"].min() if not incidents.empty else None
    latest = incidents["occurrence_date"].max() if not incidents.empty else None
    return {
        "status": "ok",
        "records": len(incidents),
        "rejected": result.report.total,
        "earliest": earliest.date().isoformat() if earliest is not None else None,
        "latest": latest.date().isoformat() if latest is not None else None,
    }


@app.get("/summary/daily-region")
def summary_daily_region(
    region: Optional[str] = Query(None, description="Borough name, e.g. BRONX or Staten Island."),
    limit: Optional[int] = Query(None, ge=1, le=5000, description="Number of trailing rows to return."),
) -> Dict[str, object]:
    result = _pipeline()
    frame = result.daily_region
    if region is not None:
        try:
            frame = region_series(frame, cast_region(region))
        except CategoryViolation as exc:
            raise HTTPException(status_code=400, detail=str(exc))
    if limit:
        frame = frame.tail(limit)
    return {"window_after": result.window.after.isoformat(), "values": _records(frame)}


@app.get("/summary/daily")
def summary_daily(
    limit: Optional[int] = Query(None, ge=1, le=10000, description="Number of trailing rows to return."),
) -> Dict[str, object]:
    frame = _pipeline().daily
    if limit:
        frame = frame.tail(limit)
    return {"values": _records(frame)}


@app.get("/summary/regions")
def summary_regions() -> Dict[str, object]:
    result = _pipeline()
    return {
        "window_after": result.window.after.isoformat(),
        "totals": region_totals(result.daily_region).to_dict(orient="records"),
        "describe": describe_counts(result.daily_region),
    }


@app.get("/timeseries")
def timeseries(
    freq: str = Query("W", description="Pandas frequency code. D=day, W=week."),
    region: Optional[str] = Query(None, description="Optional borough filter."),
):
    result = _pipeline()
    try:
        frame = build_time_series(result.daily_region, freq=freq, region=region)
    except CategoryViolation as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid frequency '{freq}': {exc}")
    return frame.to_dict(orient="records")


@app.get("/validation")
def validation(sample_size: int = Query(5, ge=0, le=100)) -> Dict[str, object]:
    return _pipeline().report.as_dict(sample_size=sample_size)


@app.get("/ml/ols")
def ols_regression() -> Dict[str, object]:
    _pipeline()
    try:
        result = _regression_cache(repository.loaded_at)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    summary_lines = result.summary_text().splitlines()
    trimmed_summary = "\n".join(summary_lines[:20])
    return {
        "formula": FORMULA,
        "intercept": result.intercept,
        "slope": result.slope,
        "metrics": result.metrics,
        "model_summary": trimmed_summary,
    }


@app.post("/cache/refresh")
def refresh_cache() -> Dict[str, str]:
    try:
        repository.refresh()
    except SourceUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    _pipeline_cache.cache_clear()
    _regression_cache.cache_clear()
    return {"status": "refreshed"}
