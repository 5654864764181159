from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List

import pandas as pd

from .aggregate import (
    aggregate_age_pairs,
    aggregate_boroughs,
    aggregate_monthly_outcomes,
    extract_map_points,
)
from .config import (
    AGE_PAIRS_FILE,
    BOROUGH_FILE,
    DATA_URL,
    DEFAULT_OUTPUT_DIR,
    HTTP_TIMEOUT,
    MAP_POINTS_FILE,
    METRICS_FILE,
    MONTHLY_FILE,
    SAMPLE_COLUMNS,
    SUMMARY_FILE,
    PipelineConfig,
)
from .errors import ShootingEDAError
from .loader import load_incidents
from .normalize import normalize_incidents
from .plots import run_figures
from .report import (
    build_summary_markdown,
    compute_insights,
    compute_quality_metrics,
    print_table_summary,
    save_json,
    summarize_schema,
)

log = logging.getLogger(__name__)

AGGREGATE_FILES = {
    "age_pairs": AGE_PAIRS_FILE,
    "boroughs": BOROUGH_FILE,
    "monthly": MONTHLY_FILE,
    "map_points": MAP_POINTS_FILE,
}


def build_aggregates(df: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    return {
        "age_pairs": aggregate_age_pairs(df),
        "boroughs": aggregate_boroughs(df),
        "monthly": aggregate_monthly_outcomes(df),
        "map_points": extract_map_points(df),
    }


def save_aggregates(aggregates: Dict[str, pd.DataFrame], data_dir: Path) -> Dict[str, str]:
    data_dir.mkdir(parents=True, exist_ok=True)
    paths: Dict[str, str] = {}
    for name, frame in aggregates.items():
        path = data_dir / AGGREGATE_FILES[name]
        frame.to_parquet(path, index=False)
        log.info("    %s: %s rows", path.name, f"{len(frame):,}")
        paths[name] = str(path)
    return paths


def run_pipeline(config: PipelineConfig) -> Dict[str, object]:
    output_dir = Path(config.output_dir)

    log.info("Step 1: load %s", config.source)
    raw_df = load_incidents(config.source, limit=config.limit, timeout=config.timeout)

    log.info("Step 2: normalize")
    normalized = normalize_incidents(raw_df, strict_dates=config.strict_dates)
    incidents = normalized.table
    if normalized.excluded_dates:
        print(f"Excluded {normalized.excluded_dates:,} row(s) with an unparseable occurrence date")
    print_table_summary(incidents)

    log.info("Step 3: aggregate")
    aggregates = build_aggregates(incidents)
    data_files = save_aggregates(aggregates, config.data_dir)

    log.info("Step 4: figures and report")
    figures = run_figures(aggregates, config.figures_dir)
    metrics = compute_quality_metrics(incidents, normalized)
    insights = compute_insights(aggregates)
    schema_profile = summarize_schema(incidents, SAMPLE_COLUMNS)
    payload = metrics | {
        "figures": figures,
        "aggregates": data_files,
        "insights": insights,
        "schema": schema_profile,
    }
    save_json(payload, output_dir / METRICS_FILE)
    summary = build_summary_markdown(metrics, insights, figures | data_files)
    (output_dir / SUMMARY_FILE).write_text(summary, encoding="utf-8")
    log.info("Report written to %s", output_dir / SUMMARY_FILE)
    return payload


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the NYPD shooting incidents EDA report.")
    parser.add_argument(
        "--source",
        type=str,
        default=DATA_URL,
        help="CSV URL or local path (defaults to the NYC Open Data export).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory for aggregates, figures and the summary.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Optional row limit for debugging.",
    )
    parser.add_argument(
        "--strict-dates",
        action="store_true",
        help="Abort on the first unparseable OCCUR_DATE instead of excluding the row.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=HTTP_TIMEOUT,
        help="HTTP timeout in seconds.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = PipelineConfig(
        source=args.source,
        output_dir=args.output_dir,
        limit=args.limit,
        strict_dates=args.strict_dates,
        timeout=args.timeout,
    )
    try:
        run_pipeline(config)
    except ShootingEDAError as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
