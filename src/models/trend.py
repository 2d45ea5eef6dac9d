"""
Least-squares trend and short-horizon projection for one growth metric.

The regression runs against sample index (0, 1, 2, ...), not elapsed time,
so change_rate is "units per measurement". It reads as "per month" only when
measurements are roughly monthly.
"""
from typing import Sequence

import numpy as np
from scipy import stats

from config.settings import (
    TREND_THRESHOLD, FULL_CONFIDENCE_POINTS, PREDICTION_HORIZONS,
)
from src.models.data_structures import TrendAnalysis, Predictions


def neutral_trend(metric: str) -> TrendAnalysis:
    return TrendAnalysis(
        metric=metric, trend='stable', change_rate=0.0, confidence=0.0,
        predictions=Predictions(0.0, 0.0, 0.0),
    )


def classify_trend(slope: float) -> str:
    if slope > TREND_THRESHOLD:
        return 'increasing'
    if slope < -TREND_THRESHOLD:
        return 'decreasing'
    return 'stable'


def trend_of(values: Sequence[float], metric: str) -> TrendAnalysis:
    """Fit an OLS line through chronologically ordered values."""
    n = len(values)
    if n < 2:
        return neutral_trend(metric)

    y = np.asarray(values, dtype=float)
    x = np.arange(n, dtype=float)
    slope = float(stats.linregress(x, y).slope)

    last = float(y[-1])
    one, three, six = (round(last + slope * k, 2) for k in PREDICTION_HORIZONS)

    return TrendAnalysis(
        metric=metric,
        trend=classify_trend(slope),
        change_rate=round(slope, 2),
        confidence=min(n / FULL_CONFIDENCE_POINTS, 1.0),
        predictions=Predictions(one_month=one, three_months=three, six_months=six),
    )
