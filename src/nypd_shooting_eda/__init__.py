"""Exploratory analysis of the NYPD Shooting Incident (Historic) dataset."""

from .aggregate import (
    aggregate_age_pairs,
    aggregate_boroughs,
    aggregate_monthly_outcomes,
    extract_map_points,
)
from .errors import ParseError, RetrievalError, ShootingEDAError, ValidationError
from .loader import load_incidents
from .normalize import NormalizedIncidents, normalize_incidents

__version__ = "0.1.0"
