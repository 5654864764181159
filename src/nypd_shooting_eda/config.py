from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

DATA_URL = "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD"
DEFAULT_OUTPUT_DIR = Path("reports")
HTTP_TIMEOUT = 120.0

DATE_COLUMN = "OCCUR_DATE"
DATE_FORMAT = "%m/%d/%Y"
BOROUGH_COLUMN = "BORO"
MURDER_COLUMN = "STATISTICAL_MURDER_FLAG"
PERP_AGE_COLUMN = "PERP_AGE_GROUP"
VIC_AGE_COLUMN = "VIC_AGE_GROUP"
LATITUDE_COLUMN = "Latitude"
LONGITUDE_COLUMN = "Longitude"

AGE_BUCKETS = ["<18", "18-24", "25-44", "45-64", "65+"]
BOROUGHS = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"]
SEXES = ["F", "M", "U"]
RACES = [
    "AMERICAN INDIAN/ALASKAN NATIVE",
    "ASIAN / PACIFIC ISLANDER",
    "BLACK",
    "BLACK HISPANIC",
    "WHITE",
    "WHITE HISPANIC",
    "UNKNOWN",
]

# Known levels per categorical column; observed values outside these lists
# are appended as extra levels.
CATEGORICAL_LEVELS: Dict[str, List[str]] = {
    BOROUGH_COLUMN: BOROUGHS,
    PERP_AGE_COLUMN: AGE_BUCKETS + ["UNKNOWN"],
    "PERP_SEX": SEXES,
    "PERP_RACE": RACES,
    VIC_AGE_COLUMN: AGE_BUCKETS + ["UNKNOWN"],
    "VIC_SEX": SEXES,
    "VIC_RACE": RACES,
}

TRUE_TOKENS = {"true", "t", "y", "yes", "1"}
FALSE_TOKENS = {"false", "f", "n", "no", "0"}

DROP_COLUMNS = [
    "X_COORD_CD",
    "Y_COORD_CD",
    "Lon_Lat",
    "PRECINCT",
    "JURISDICTION_CODE",
    "LOCATION_DESC",
]

REQUIRED_COLUMNS = [DATE_COLUMN, MURDER_COLUMN, *CATEGORICAL_LEVELS, LATITUDE_COLUMN, LONGITUDE_COLUMN]

OUTCOME_LABELS = {True: "murders", False: "other shootings"}

SAMPLE_COLUMNS = [
    "INCIDENT_KEY",
    DATE_COLUMN,
    BOROUGH_COLUMN,
    MURDER_COLUMN,
    PERP_AGE_COLUMN,
    VIC_AGE_COLUMN,
]

AGE_PAIRS_FILE = "age_pair_counts.parquet"
BOROUGH_FILE = "borough_shares.parquet"
MONTHLY_FILE = "monthly_outcomes.parquet"
MAP_POINTS_FILE = "map_points.parquet"
METRICS_FILE = "inspection_metrics.json"
SUMMARY_FILE = "eda_summary.md"


@dataclass
class PipelineConfig:
    source: str = DATA_URL
    output_dir: Path = field(default_factory=lambda: DEFAULT_OUTPUT_DIR)
    limit: int | None = None
    strict_dates: bool = False
    timeout: float = HTTP_TIMEOUT

    @property
    def data_dir(self) -> Path:
        return Path(self.output_dir) / "data"

    @property
    def figures_dir(self) -> Path:
        return Path(self.output_dir) / "figures"
