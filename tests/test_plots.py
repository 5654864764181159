from __future__ import annotations

from pathlib import Path

import pandas as pd

from nypd_shooting_eda.normalize import normalize_incidents
from nypd_shooting_eda.pipeline import build_aggregates
from nypd_shooting_eda.plots import plot_borough_pie, plot_monthly_linear_trend, run_figures


def test_run_figures_writes_every_chart(raw_incidents, tmp_path):
    aggregates = build_aggregates(normalize_incidents(raw_incidents).table)

    outputs = run_figures(aggregates, tmp_path / "figures")

    assert set(outputs) == {
        "age_pair_bubbles",
        "incident_map",
        "borough_share_pie",
        "monthly_linear_trend",
        "monthly_smoothed_trend",
    }
    for path in outputs.values():
        assert Path(path).exists()


def test_empty_aggregates_still_render(tmp_path):
    boroughs = pd.DataFrame(columns=["borough", "incidents", "percent", "label_position"])
    monthly = pd.DataFrame(
        {"month": pd.Series(dtype="datetime64[ns]"), "outcome": pd.Series(dtype=str), "incidents": pd.Series(dtype=int)}
    )

    assert plot_borough_pie(boroughs, tmp_path).exists()
    assert plot_monthly_linear_trend(monthly, tmp_path).exists()
