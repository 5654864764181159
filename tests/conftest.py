from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

RAW_COLUMNS = [
    "INCIDENT_KEY",
    "OCCUR_DATE",
    "OCCUR_TIME",
    "BORO",
    "LOC_OF_OCCUR_DESC",
    "PRECINCT",
    "JURISDICTION_CODE",
    "LOC_CLASSFCTN_DESC",
    "LOCATION_DESC",
    "STATISTICAL_MURDER_FLAG",
    "PERP_AGE_GROUP",
    "PERP_SEX",
    "PERP_RACE",
    "VIC_AGE_GROUP",
    "VIC_SEX",
    "VIC_RACE",
    "X_COORD_CD",
    "Y_COORD_CD",
    "Latitude",
    "Longitude",
    "Lon_Lat",
]


def _record(key: int, **overrides) -> dict:
    record = {
        "INCIDENT_KEY": key,
        "OCCUR_DATE": "01/15/2020",
        "OCCUR_TIME": "21:30:00",
        "BORO": "BROOKLYN",
        "LOC_OF_OCCUR_DESC": "OUTSIDE",
        "PRECINCT": 75,
        "JURISDICTION_CODE": 0,
        "LOC_CLASSFCTN_DESC": "STREET",
        "LOCATION_DESC": "MULTI DWELL - PUBLIC HOUS",
        "STATISTICAL_MURDER_FLAG": "false",
        "PERP_AGE_GROUP": "18-24",
        "PERP_SEX": "M",
        "PERP_RACE": "BLACK",
        "VIC_AGE_GROUP": "25-44",
        "VIC_SEX": "M",
        "VIC_RACE": "BLACK",
        "X_COORD_CD": 1015000.0,
        "Y_COORD_CD": 182000.0,
        "Latitude": 40.66,
        "Longitude": -73.89,
        "Lon_Lat": "POINT (-73.89 40.66)",
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_raw():
    """Build a raw incident frame from per-row overrides of a default record."""

    def _make(rows: list[dict]) -> pd.DataFrame:
        return pd.DataFrame([_record(idx + 1, **row) for idx, row in enumerate(rows)], columns=RAW_COLUMNS)

    return _make


@pytest.fixture
def raw_incidents(make_raw) -> pd.DataFrame:
    boroughs = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"]
    ages = ["<18", "18-24", "25-44", "45-64", "65+", "UNKNOWN", "(null)"]
    rows = []
    for idx in range(60):
        month = idx % 12 + 1
        year = 2020 + (idx // 30)
        rows.append(
            {
                "OCCUR_DATE": f"{month:02d}/{idx % 27 + 1:02d}/{year}",
                "BORO": boroughs[idx % len(boroughs)],
                "STATISTICAL_MURDER_FLAG": "true" if idx % 4 == 0 else "false",
                "PERP_AGE_GROUP": ages[idx % len(ages)],
                "VIC_AGE_GROUP": ages[(idx + 2) % 5],
                "Latitude": None if idx % 10 == 0 else 40.6 + (idx % 7) * 0.03,
                "Longitude": None if idx % 10 == 0 else -74.0 + (idx % 5) * 0.05,
            }
        )
    rows.append({"OCCUR_DATE": "13/45/2020"})
    return make_raw(rows)


@pytest.fixture
def incidents_csv(tmp_path, raw_incidents):
    path = tmp_path / "shootings.csv"
    raw_incidents.to_csv(path, index=False)
    return path
