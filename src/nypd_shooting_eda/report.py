"""Dataset profile, headline insights and the Markdown commentary for a run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd
from pandas.api import types as ptypes
from pandas.api.types import CategoricalDtype

from .config import BOROUGH_COLUMN, DATE_COLUMN, MURDER_COLUMN
from .normalize import NormalizedIncidents


def summarize_schema(df: pd.DataFrame, sample_columns: List[str] | None = None) -> Dict[str, object]:
    schema_profile: Dict[str, object] = {}
    schema_profile["rows"] = int(len(df))
    schema_profile["columns"] = int(df.shape[1])
    schema_profile["memory_mb"] = round(float(df.memory_usage(deep=True).sum() / 1_000_000), 2)
    schema_profile["column_types"] = {col: str(dtype) for col, dtype in df.dtypes.items()}

    schema_profile["numeric_columns"] = df.select_dtypes(include=[np.number]).columns.tolist()
    schema_profile["categorical_columns"] = [
        col
        for col, dtype in df.dtypes.items()
        if isinstance(dtype, CategoricalDtype) or ptypes.is_string_dtype(dtype)
    ]
    schema_profile["datetime_columns"] = df.select_dtypes(include=["datetime64[ns]", "datetime64"]).columns.tolist()
    schema_profile["boolean_columns"] = df.select_dtypes(include=["bool", "boolean"]).columns.tolist()

    preview_cols = [col for col in (sample_columns or []) if col in df.columns]
    if not preview_cols:
        preview_cols = df.columns[:6].tolist()
    sample_df = df[preview_cols].head(5).astype(str)
    schema_profile["sample_columns"] = preview_cols
    schema_profile["sample_rows"] = sample_df.to_dict(orient="records")
    return schema_profile


def compute_quality_metrics(df: pd.DataFrame, normalized: NormalizedIncidents) -> Dict[str, object]:
    missing = df.isna().mean().sort_values(ascending=False).round(4).to_dict()
    borough_counts = df[BOROUGH_COLUMN].value_counts()
    top_boroughs = {str(k): int(v) for k, v in borough_counts[borough_counts > 0].head(5).items()}
    murder_share = df[MURDER_COLUMN].mean()
    metrics = {
        "records": int(len(df)),
        "excluded_dates": normalized.excluded_dates,
        "unrecognized_murder_flags": normalized.unrecognized_flags,
        "date_min": str(df[DATE_COLUMN].min().date()) if len(df) else None,
        "date_max": str(df[DATE_COLUMN].max().date()) if len(df) else None,
        "murder_share": None if pd.isna(murder_share) else round(float(murder_share), 4),
        "missing_fraction": missing,
        "top_boroughs": top_boroughs,
    }
    return metrics


def compute_insights(aggregates: Dict[str, pd.DataFrame]) -> Dict[str, object]:
    insights: Dict[str, object] = {}

    boroughs = aggregates["boroughs"]
    if not boroughs.empty:
        top = boroughs.loc[boroughs["incidents"].idxmax()]
        low = boroughs.loc[boroughs["incidents"].idxmin()]
        insights["borough_peak"] = {
            "name": top["borough"],
            "share": round(float(top["percent"]), 1),
            "min_name": low["borough"],
            "min_share": round(float(low["percent"]), 1),
        }

    pairs = aggregates["age_pairs"]
    if not pairs.empty:
        top_pair = pairs.loc[pairs["incidents"].idxmax()]
        insights["age_pair_peak"] = {
            "perpetrator": str(top_pair["perp_age_group"]),
            "victim": str(top_pair["vic_age_group"]),
            "incidents": int(top_pair["incidents"]),
            "share": round(float(top_pair["incidents"] / pairs["incidents"].sum()), 4),
        }

    monthly = aggregates["monthly"]
    if not monthly.empty:
        totals = monthly.groupby("month")["incidents"].sum()
        insights["monthly_peak"] = {
            "month": totals.idxmax().strftime("%Y-%m"),
            "incidents": int(totals.max()),
            "median": float(totals.median()),
        }
        yearly = (
            monthly.assign(year=monthly["month"].dt.year)
            .pivot_table(index="year", columns="outcome", values="incidents", aggfunc="sum", fill_value=0)
        )
        yearly_total = yearly.sum(axis=1)
        murders = yearly["murders"] if "murders" in yearly.columns else pd.Series(0, index=yearly.index)
        insights["yearly"] = [
            {
                "year": int(year),
                "incidents": int(yearly_total[year]),
                "murder_share": round(float(murders[year] / yearly_total[year]), 4),
            }
            for year in yearly.index
        ]
    return insights


def format_toplist(counter: Dict[str, int]) -> str:
    items = [f"{k} ({v:,})" for k, v in counter.items()]
    return ", ".join(items)


def describe_missing(missing_fraction: Dict[str, float]) -> str:
    ordered = sorted(missing_fraction.items(), key=lambda kv: kv[1], reverse=True)
    bullets = [
        f"- `{col}` missing {share:.1%}"
        for col, share in ordered
        if share > 0
    ]
    if not bullets:
        return "- No missing data detected."
    return "\n".join(bullets)


def _describe_trend(yearly: List[Dict[str, object]]) -> str:
    if len(yearly) < 2:
        return "- Not enough years of data to describe a trend."
    first, last = yearly[0], yearly[-1]
    peak = max(yearly, key=lambda item: item["incidents"])
    change = (last["incidents"] - first["incidents"]) / first["incidents"] if first["incidents"] else 0.0
    return "\n".join(
        [
            f"- Annual shootings moved from {first['incidents']:,} in {first['year']} to {last['incidents']:,} in {last['year']} ({change:+.1%}).",
            f"- The busiest year was {peak['year']} with {peak['incidents']:,} incidents.",
            f"- Murders made up {first['murder_share']:.1%} of shootings in {first['year']} and {last['murder_share']:.1%} in {last['year']}.",
        ]
    )


def build_summary_markdown(
    metrics: Dict[str, object],
    insights: Dict[str, object],
    outputs: Dict[str, str],
) -> str:
    md_lines = [
        "# NYPD Shooting Incidents — Exploratory Analysis",
        "",
        "## Dataset Snapshot",
        f"- **Incidents analysed:** {metrics['records']:,}",
        f"- **Temporal coverage:** {metrics['date_min']} to {metrics['date_max']}",
        f"- **Rows excluded for unparseable dates:** {metrics['excluded_dates']:,}",
        f"- **Most affected boroughs:** {format_toplist(metrics['top_boroughs'])}",
    ]
    if metrics.get("murder_share") is not None:
        md_lines.append(f"- **Share of shootings recorded as murders:** {metrics['murder_share']:.1%}")
    md_lines += ["", "## Data Quality Watchlist", describe_missing(metrics["missing_fraction"]), ""]

    md_lines.append("## Highlights")
    borough = insights.get("borough_peak")
    if borough:
        line = f"- {borough['name']} accounts for {borough['share']:.1f}% of shootings"
        if borough["min_name"] != borough["name"]:
            line += f", against {borough['min_share']:.1f}% in {borough['min_name']}"
        md_lines.append(line + ".")
    pair = insights.get("age_pair_peak")
    if pair:
        md_lines.append(
            f"- Where both ages are known, the most common pairing is a {pair['perpetrator']} perpetrator "
            f"and a {pair['victim']} victim ({pair['incidents']:,} incidents, {pair['share']:.1%})."
        )
    monthly = insights.get("monthly_peak")
    if monthly:
        md_lines.append(
            f"- The worst month was {monthly['month']} with {monthly['incidents']:,} shootings; "
            f"the median month saw {monthly['median']:,.0f}."
        )
    md_lines += ["", "## Trend", _describe_trend(insights.get("yearly", [])), ""]

    md_lines.append("## Files Generated")
    md_lines += [f"- {name.replace('_', ' ').capitalize()}: `{path}`" for name, path in outputs.items()]
    return "\n".join(md_lines)


def column_overview(df: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "dtype": df.dtypes.astype(str),
            "non_null": df.notna().sum(),
            "missing": df.isna().sum(),
            "unique": df.nunique(dropna=True),
        }
    )


def print_table_summary(df: pd.DataFrame) -> pd.DataFrame:
    overview = column_overview(df)
    print(f"Normalized incidents: {len(df):,} rows x {df.shape[1]} columns")
    print(overview.to_string())
    print()
    print(df.head().to_string(index=False))
    return overview


def save_json(payload: Dict[str, object], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, default=str))
