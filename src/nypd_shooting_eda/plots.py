from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict

import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib import pyplot as plt

from .config import AGE_BUCKETS
from .trends import fit_linear_trend, fit_smoothed_trend

log = logging.getLogger(__name__)

PALETTE = {
    "navy": "#0B1F3A",
    "gold": "#F1B434",
    "teal": "#1AAAE6",
    "crimson": "#C43F3A",
    "slate": "#233348",
}
OUTCOME_COLORS = {
    "murders": PALETTE["crimson"],
    "other shootings": PALETTE["teal"],
}


def configure_matplotlib() -> None:
    sns.set_theme(style="whitegrid", context="talk")
    plt.rcParams.update({"axes.spines.right": False, "axes.spines.top": False})


def _save(fig, figures_dir: Path, filename: str) -> Path:
    figures_dir.mkdir(parents=True, exist_ok=True)
    path = figures_dir / filename
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    log.debug("Wrote %s", path)
    return path


def plot_age_pair_bubbles(pairs: pd.DataFrame, figures_dir: Path) -> Path:
    fig, ax = plt.subplots(figsize=(10, 8))
    if not pairs.empty:
        sns.scatterplot(
            x=pairs["vic_age_group"].cat.codes,
            y=pairs["perp_age_group"].cat.codes,
            size=pairs["incidents"],
            sizes=(40, 2000),
            color=PALETTE["gold"],
            edgecolor=PALETTE["navy"],
            alpha=0.8,
            legend="brief",
            ax=ax,
        )
        if ax.get_legend() is not None:
            sns.move_legend(ax, "upper left", bbox_to_anchor=(1.02, 1), title="Incidents", frameon=False)
    ticks = np.arange(len(AGE_BUCKETS))
    ax.set_xticks(ticks, AGE_BUCKETS)
    ax.set_yticks(ticks, AGE_BUCKETS)
    ax.set_xlim(-0.6, len(AGE_BUCKETS) - 0.4)
    ax.set_ylim(-0.6, len(AGE_BUCKETS) - 0.4)
    ax.set_xlabel("Victim age group")
    ax.set_ylabel("Perpetrator age group")
    ax.set_title("Shootings by Perpetrator and Victim Age")
    return _save(fig, figures_dir, "age_pair_bubbles.png")


def plot_incident_map(points: pd.DataFrame, figures_dir: Path) -> Path:
    fig, ax = plt.subplots(figsize=(10, 10))
    if not points.empty:
        sns.scatterplot(
            data=points,
            x="longitude",
            y="latitude",
            hue="borough",
            s=6,
            alpha=0.35,
            linewidth=0,
            ax=ax,
        )
        murders = points[points["murder"].fillna(False).astype(bool)]
        ax.scatter(
            murders["longitude"],
            murders["latitude"],
            s=8,
            marker="x",
            color=PALETTE["crimson"],
            alpha=0.6,
        )
        if ax.get_legend() is not None:
            sns.move_legend(ax, "upper left", markerscale=3, frameon=False, fontsize="small")
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Shooting Locations by Borough (x = murder)")
    return _save(fig, figures_dir, "incident_map.png")


def plot_borough_pie(boroughs: pd.DataFrame, figures_dir: Path) -> Path:
    fig, ax = plt.subplots(figsize=(9, 9))
    if boroughs.empty:
        ax.text(0.5, 0.5, "No incidents", ha="center", va="center")
        ax.set_axis_off()
        return _save(fig, figures_dir, "borough_share_pie.png")

    colors = sns.color_palette("mako", n_colors=len(boroughs))
    ax.pie(
        boroughs["percent"],
        startangle=90,
        counterclock=False,
        colors=colors,
        wedgeprops={"edgecolor": "white", "linewidth": 2},
    )
    # label_position is measured clockwise from 12 o'clock in percent of the circle
    for row in boroughs.itertuples(index=False):
        theta = np.deg2rad(90 - row.label_position * 3.6)
        ax.text(
            0.65 * np.cos(theta),
            0.65 * np.sin(theta),
            f"{row.borough}\n{row.percent:.1f}%",
            ha="center",
            va="center",
            color="white",
            fontsize="small",
            fontweight="bold",
        )
    ax.set_title("Share of Shootings by Borough")
    ax.axis("equal")
    return _save(fig, figures_dir, "borough_share_pie.png")


def _plot_monthly_trend(
    monthly: pd.DataFrame,
    fit: Callable[[pd.Series, pd.Series], np.ndarray],
    title: str,
    figures_dir: Path,
    filename: str,
) -> Path:
    fig, ax = plt.subplots(figsize=(14, 6))
    for outcome, group in monthly.groupby("outcome", sort=True):
        group = group.sort_values("month")
        color = OUTCOME_COLORS.get(outcome, PALETTE["slate"])
        ax.scatter(group["month"], group["incidents"], s=14, alpha=0.5, color=color, label=outcome)
        ax.plot(group["month"], fit(group["month"], group["incidents"]), color=color, linewidth=2.5)
    ax.set_title(title)
    ax.set_xlabel("Month")
    ax.set_ylabel("Incidents")
    if not monthly.empty:
        ax.legend(frameon=False)
    ax.grid(True, alpha=0.3)
    return _save(fig, figures_dir, filename)


def plot_monthly_linear_trend(monthly: pd.DataFrame, figures_dir: Path) -> Path:
    return _plot_monthly_trend(
        monthly,
        fit_linear_trend,
        "Monthly Shootings with Linear Trend",
        figures_dir,
        "monthly_linear_trend.png",
    )


def plot_monthly_smoothed_trend(monthly: pd.DataFrame, figures_dir: Path) -> Path:
    return _plot_monthly_trend(
        monthly,
        fit_smoothed_trend,
        "Monthly Shootings with LOWESS Trend",
        figures_dir,
        "monthly_smoothed_trend.png",
    )


def run_figures(aggregates: Dict[str, pd.DataFrame], figures_dir: Path) -> Dict[str, str]:
    configure_matplotlib()
    outputs = {
        "age_pair_bubbles": str(plot_age_pair_bubbles(aggregates["age_pairs"], figures_dir)),
        "incident_map": str(plot_incident_map(aggregates["map_points"], figures_dir)),
        "borough_share_pie": str(plot_borough_pie(aggregates["boroughs"], figures_dir)),
        "monthly_linear_trend": str(plot_monthly_linear_trend(aggregates["monthly"], figures_dir)),
        "monthly_smoothed_trend": str(plot_monthly_smoothed_trend(aggregates["monthly"], figures_dir)),
    }
    return outputs
