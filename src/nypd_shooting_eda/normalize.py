"""Type coercion, categorical recoding and column pruning for the raw incident table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd
from pandas.api import types as ptypes
from pandas.api.types import CategoricalDtype

from .config import (
    CATEGORICAL_LEVELS,
    DATE_COLUMN,
    DATE_FORMAT,
    DROP_COLUMNS,
    FALSE_TOKENS,
    MURDER_COLUMN,
    TRUE_TOKENS,
)
from .errors import ValidationError

log = logging.getLogger(__name__)


@dataclass
class NormalizedIncidents:
    table: pd.DataFrame
    excluded_dates: int = 0
    unrecognized_flags: int = 0


def normalize_strings(series: pd.Series) -> pd.Series:
    cleaned = series.astype(str).str.strip()
    cleaned = cleaned.where(series.notna(), np.nan)
    return cleaned.replace({"": np.nan})


def open_world_dtype(series: pd.Series, known: Iterable[str]) -> CategoricalDtype:
    """Known levels first, then every other observed (or already declared) level, sorted."""
    known = list(known)
    seen = set(series.dropna().astype(str).unique())
    if isinstance(series.dtype, CategoricalDtype):
        seen.update(str(level) for level in series.cat.categories)
    extra = sorted(seen.difference(known))
    return CategoricalDtype(categories=known + extra)


def recode_categorical(series: pd.Series, known: Iterable[str]) -> pd.Series:
    if not isinstance(series.dtype, CategoricalDtype):
        series = normalize_strings(series)
    return series.astype(open_world_dtype(series, known))


def recode_murder_flag(series: pd.Series) -> tuple[pd.Series, int]:
    if ptypes.is_bool_dtype(series):
        return series.astype("boolean"), 0

    lowered = series.astype(str).str.strip().str.lower()
    flag = pd.Series(pd.NA, index=series.index, dtype="boolean")
    flag = flag.mask(lowered.isin(TRUE_TOKENS), True)
    flag = flag.mask(lowered.isin(FALSE_TOKENS), False)
    unrecognized = int((flag.isna() & series.notna()).sum())
    return flag, unrecognized


def parse_occurrence_dates(series: pd.Series) -> pd.Series:
    if ptypes.is_datetime64_any_dtype(series):
        return series
    parsed = pd.to_datetime(
        series.astype(str).str.strip(),
        format=DATE_FORMAT,
        errors="coerce",
    )
    return parsed.astype("datetime64[ns]")


def normalize_incidents(df: pd.DataFrame, *, strict_dates: bool = False) -> NormalizedIncidents:
    """Return a typed copy of ``df`` with out-of-scope columns dropped.

    Rows with an unparseable ``OCCUR_DATE`` are excluded and counted, or
    raise ``ValidationError`` when ``strict_dates`` is set. Running this on
    its own output returns an identical table.
    """
    df = df.drop(columns=[col for col in DROP_COLUMNS if col in df.columns])

    dates = parse_occurrence_dates(df[DATE_COLUMN])
    invalid = dates.isna()
    excluded = int(invalid.sum())
    if excluded and strict_dates:
        first_bad = df.loc[invalid, DATE_COLUMN].iloc[0]
        raise ValidationError(
            f"{excluded:,} row(s) have an unparseable {DATE_COLUMN}; first value: {first_bad!r}"
        )
    if excluded:
        log.warning("Excluded %s row(s) with unparseable %s", f"{excluded:,}", DATE_COLUMN)

    df = df.loc[~invalid].copy()
    df[DATE_COLUMN] = dates.loc[~invalid]

    for column, known in CATEGORICAL_LEVELS.items():
        if column in df.columns:
            df[column] = recode_categorical(df[column], known)

    df[MURDER_COLUMN], unrecognized = recode_murder_flag(df[MURDER_COLUMN])
    if unrecognized:
        log.warning("%s row(s) have an unrecognized %s value", f"{unrecognized:,}", MURDER_COLUMN)

    df = df.reset_index(drop=True)
    return NormalizedIncidents(table=df, excluded_dates=excluded, unrecognized_flags=unrecognized)
