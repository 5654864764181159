"""Curve fits used by the monthly trend figures.

Both functions map ``(x, y)`` samples to fitted ``y`` values in input order.
Datetime ``x`` is converted to days since the epoch before fitting.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from pandas.api import types as ptypes
from sklearn.linear_model import LinearRegression
from statsmodels.nonparametric.smoothers_lowess import lowess


def _as_numeric_x(x) -> np.ndarray:
    series = pd.Series(x)
    if ptypes.is_datetime64_any_dtype(series):
        return ((series - pd.Timestamp("1970-01-01")) / pd.Timedelta(days=1)).to_numpy(dtype=float)
    return series.to_numpy(dtype=float)


def fit_linear_trend(x, y) -> np.ndarray:
    x_num = _as_numeric_x(x)
    y_arr = np.asarray(y, dtype=float)
    if len(y_arr) < 2:
        return y_arr
    model = LinearRegression()
    model.fit(x_num.reshape(-1, 1), y_arr)
    return model.predict(x_num.reshape(-1, 1))


def fit_smoothed_trend(x, y, frac: float = 2 / 3) -> np.ndarray:
    x_num = _as_numeric_x(x)
    y_arr = np.asarray(y, dtype=float)
    # lowess needs at least a local pair around each point
    if len(y_arr) < 3:
        return y_arr
    return lowess(y_arr, x_num, frac=frac, return_sorted=False)
