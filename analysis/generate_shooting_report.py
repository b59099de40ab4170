from __future__ import annotations

import json
import logging
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from shooting_report.analytics import describe_counts, region_totals
from shooting_report.config import settings
from shooting_report.data_loader import ShootingDataRepository
from shooting_report.errors import SourceUnavailable
from shooting_report.modeling import FORMULA, fit_murder_regression
from shooting_report.pipeline import run_pipeline
from shooting_report.plotting import plot_region_trends, plot_regression

logger = logging.getLogger("shooting_report.generate")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    repo = ShootingDataRepository(local_copy=str(settings.DATA_FILE))
    try:
        result = run_pipeline(repo)
    except SourceUnavailable as exc:
        logger.error("Aborting report: %s", exc)
        raise SystemExit(1)

    daily_region = result.daily_region
    totals = region_totals(daily_region)
    try:
        regression = fit_murder_regression(result.daily)
    except ValueError as exc:
        logger.warning("Skipping regression: %s", exc)
        regression = None

    figure_paths = plot_region_trends(daily_region, settings.FIGURES_DIR)
    if regression is not None:
        figure_paths.append(
            plot_regression(regression.predictions, settings.FIGURES_DIR / "murders_vs_incidents.png")
        )

    window_label = result.window.after.isoformat()
    comparator = "on or after" if result.window.inclusive else "after"
    incidents = result.incidents
    coverage = "no valid incidents"
    if not incidents.empty:
        coverage = (
            f"{incidents['occurrence_date'].min():%Y-%m-%d} - {incidents['occurrence_date'].max():%Y-%m-%d}"
        )
    report_lines = [
        "# NYC Shooting Incidents - Borough Report",
        "",
        f"- Valid incidents: **{len(incidents):,}**",
        f"- Coverage: **{coverage}**",
        f"- Window: incidents {comparator} **{window_label}**",
        f"- Rejected records: **{result.report.total:,}**",
        "",
        f"## Boroughs ({comparator} {window_label})",
    ]
    for row in totals.itertuples(index=False):
        report_lines.append(
            f"- {row.region.title()}: {int(row.incident_count):,} incidents, "
            f"{int(row.murder_count):,} murders ({row.murder_share * 100:.1f}%), "
            f"peak {int(row.max_daily_incidents)} incidents in a day"
        )

    report_lines.append("")
    report_lines.append("## Data quality")
    for kind, count in result.report.counts().items():
        report_lines.append(f"- {kind}: {count:,}")
    if settings.INVERT_MURDER_FLAG:
        report_lines.append("- Murder flag recoded with the inverted mapping of the published report.")

    report_lines.append("")
    report_lines.append("## Murders as a function of incidents (all years)")
    report_lines.append(f"- Model: `{FORMULA}`")
    if regression is None:
        report_lines.append("- Not fitted: fewer than two days with valid incidents.")
    else:
        report_lines.append(
            f"- murders = {regression.intercept:.3f} + {regression.slope:.3f} x incidents "
            f"(R^2 {regression.metrics['r2']:.3f}, MAE {regression.metrics['mae']:.3f})"
        )

    report_lines.append("")
    report_lines.append("## Figures")
    for path in figure_paths:
        report_lines.append(f"- ![{path.stem}]({path.relative_to(settings.REPORT_DIR).as_posix()})")

    settings.REPORT_FILE.parent.mkdir(parents=True, exist_ok=True)
    settings.REPORT_FILE.write_text("\n".join(report_lines))

    summary_payload = {
        "window_after": window_label,
        "window_inclusive": result.window.inclusive,
        "region_totals": totals.to_dict(orient="records"),
        "daily_region_describe": describe_counts(daily_region),
        "daily_describe": describe_counts(result.daily),
        "validation": result.report.as_dict(),
        "regression": None,
    }
    if regression is not None:
        summary_payload["regression"] = {
            "formula": FORMULA,
            "intercept": regression.intercept,
            "slope": regression.slope,
            "metrics": regression.metrics,
        }
    settings.SUMMARY_FILE.write_text(json.dumps(summary_payload, indent=2, default=str))
    logger.info("Wrote %s and %s", settings.REPORT_FILE, settings.SUMMARY_FILE)


if __name__ == "__main__":
    main()
