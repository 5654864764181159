from __future__ import annotations

import pandas as pd
import pytest

from nypd_shooting_eda.config import AGE_BUCKETS, BOROUGHS, DROP_COLUMNS
from nypd_shooting_eda.errors import ValidationError
from nypd_shooting_eda.normalize import normalize_incidents


def test_date_is_parsed(make_raw):
    result = normalize_incidents(make_raw([{"OCCUR_DATE": "01/15/2020"}]))

    assert result.table.loc[0, "OCCUR_DATE"] == pd.Timestamp("2020-01-15")
    assert str(result.table["OCCUR_DATE"].dtype) == "datetime64[ns]"
    assert result.excluded_dates == 0


def test_malformed_date_excluded_and_counted(make_raw):
    good = [{"OCCUR_DATE": "01/15/2020"}, {"OCCUR_DATE": "02/01/2021"}]
    baseline = normalize_incidents(make_raw(good))
    result = normalize_incidents(make_raw(good + [{"OCCUR_DATE": "13/45/2020"}]))

    assert result.excluded_dates == baseline.excluded_dates + 1
    assert len(result.table) == 2
    assert result.table["OCCUR_DATE"].notna().all()


def test_missing_date_excluded(make_raw):
    result = normalize_incidents(make_raw([{"OCCUR_DATE": None}, {}]))

    assert result.excluded_dates == 1
    assert len(result.table) == 1


def test_strict_dates_raise(make_raw):
    raw = make_raw([{}, {"OCCUR_DATE": "13/45/2020"}])

    with pytest.raises(ValidationError, match="13/45/2020"):
        normalize_incidents(raw, strict_dates=True)


def test_idempotent(raw_incidents):
    once = normalize_incidents(raw_incidents)
    twice = normalize_incidents(once.table)

    pd.testing.assert_frame_equal(once.table, twice.table)
    assert twice.excluded_dates == 0


def test_out_of_scope_columns_dropped(raw_incidents):
    table = normalize_incidents(raw_incidents).table

    assert not set(DROP_COLUMNS) & set(table.columns)
    assert set(table.columns) == set(raw_incidents.columns) - set(DROP_COLUMNS)


def test_input_not_mutated(raw_incidents):
    before = raw_incidents.copy()

    normalize_incidents(raw_incidents)

    pd.testing.assert_frame_equal(raw_incidents, before)


def test_unrecognized_levels_are_kept(make_raw):
    raw = make_raw(
        [
            {"PERP_AGE_GROUP": "(null)", "BORO": "BROOKLYN"},
            {"PERP_AGE_GROUP": " 1020 ", "BORO": "BRONX"},
            {"PERP_AGE_GROUP": None},
        ]
    )

    table = normalize_incidents(raw).table
    perp = table["PERP_AGE_GROUP"]

    assert isinstance(perp.dtype, pd.CategoricalDtype)
    assert list(perp.cat.categories[: len(AGE_BUCKETS)]) == AGE_BUCKETS
    assert {"(null)", "1020"} <= set(perp.cat.categories)
    assert perp.iloc[1] == "1020"
    assert pd.isna(perp.iloc[2])
    assert list(table["BORO"].cat.categories) == BOROUGHS


def test_murder_flag_tokens(make_raw):
    raw = make_raw(
        [
            {"STATISTICAL_MURDER_FLAG": "true"},
            {"STATISTICAL_MURDER_FLAG": "false"},
            {"STATISTICAL_MURDER_FLAG": "Y"},
            {"STATISTICAL_MURDER_FLAG": "maybe"},
        ]
    )

    result = normalize_incidents(raw)
    flags = result.table["STATISTICAL_MURDER_FLAG"]

    assert str(flags.dtype) == "boolean"
    assert flags.iloc[:3].tolist() == [True, False, True]
    assert pd.isna(flags.iloc[3])
    assert result.unrecognized_flags == 1


def test_murder_flag_already_boolean(make_raw):
    raw = make_raw([{}, {}])
    raw["STATISTICAL_MURDER_FLAG"] = [True, False]

    flags = normalize_incidents(raw).table["STATISTICAL_MURDER_FLAG"]

    assert flags.tolist() == [True, False]
