from __future__ import annotations

import pandas as pd
from pandas.api.types import CategoricalDtype

from .config import (
    AGE_BUCKETS,
    BOROUGH_COLUMN,
    DATE_COLUMN,
    LATITUDE_COLUMN,
    LONGITUDE_COLUMN,
    MURDER_COLUMN,
    OUTCOME_LABELS,
    PERP_AGE_COLUMN,
    VIC_AGE_COLUMN,
)

AGE_BUCKET_DTYPE = CategoricalDtype(AGE_BUCKETS, ordered=True)


def aggregate_age_pairs(df: pd.DataFrame) -> pd.DataFrame:
    """Incident counts per (perpetrator, victim) canonical age bucket.

    Non-canonical groups (UNKNOWN, (null), ...) are left out of this view.
    Pairs with no incidents are absent rather than zero-filled.
    """
    perp = df[PERP_AGE_COLUMN].astype(str)
    vic = df[VIC_AGE_COLUMN].astype(str)
    canonical = perp.isin(AGE_BUCKETS) & vic.isin(AGE_BUCKETS)
    pairs = pd.DataFrame(
        {
            "perp_age_group": perp[canonical].astype(AGE_BUCKET_DTYPE),
            "vic_age_group": vic[canonical].astype(AGE_BUCKET_DTYPE),
        }
    )
    counts = (
        pairs.groupby(["perp_age_group", "vic_age_group"], observed=True)
        .size()
        .reset_index(name="incidents")
        .sort_values(["perp_age_group", "vic_age_group"])
        .reset_index(drop=True)
    )
    return counts


def aggregate_boroughs(df: pd.DataFrame) -> pd.DataFrame:
    """Per-borough counts, percentage share and pie label position.

    Boroughs are listed in descending alphabetical order before the running
    sum, which fixes each wedge's angle on the pie chart.
    """
    counts = df[BOROUGH_COLUMN].dropna().astype(str).value_counts()
    boroughs = (
        counts.rename_axis("borough")
        .reset_index(name="incidents")
        .sort_values("borough", ascending=False)
        .reset_index(drop=True)
    )
    total = boroughs["incidents"].sum()
    boroughs["percent"] = boroughs["incidents"] / total * 100 if total else 0.0
    boroughs["label_position"] = boroughs["percent"].cumsum() - boroughs["percent"] / 2
    return boroughs


def aggregate_monthly_outcomes(df: pd.DataFrame) -> pd.DataFrame:
    flagged = df.loc[df[MURDER_COLUMN].notna()]
    frame = pd.DataFrame(
        {
            "month": flagged[DATE_COLUMN].dt.to_period("M").dt.to_timestamp(),
            "murder": flagged[MURDER_COLUMN].astype(bool),
        }
    )
    monthly = (
        frame.groupby(["month", "murder"])
        .size()
        .reset_index(name="incidents")
    )
    monthly["outcome"] = monthly["murder"].map(OUTCOME_LABELS)
    monthly = (
        monthly.sort_values(["month", "outcome"])
        .loc[:, ["month", "outcome", "incidents"]]
        .reset_index(drop=True)
    )
    return monthly


def extract_map_points(df: pd.DataFrame) -> pd.DataFrame:
    located = df.dropna(subset=[LATITUDE_COLUMN, LONGITUDE_COLUMN])
    points = pd.DataFrame(
        {
            "latitude": located[LATITUDE_COLUMN].astype(float),
            "longitude": located[LONGITUDE_COLUMN].astype(float),
            "borough": located[BOROUGH_COLUMN],
            "murder": located[MURDER_COLUMN],
        }
    )
    return points.reset_index(drop=True)
