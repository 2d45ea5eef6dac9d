"""
Growth analytics aggregator:
- Percentile standing for the latest record (weight, height)
- Trend and projections over each metric's full history
- Alerts from percentile categories and declining trends
- Recommendations derived from the alerts
"""
import math
from typing import List, Optional, Sequence, Tuple

from config.settings import (
    METRICS, PERCENTILE_METRICS, METRIC_LABELS, DECLINE_ALERT_CONFIDENCE,
    EMPTY_RECOMMENDATION, NORMAL_RECOMMENDATIONS,
)
from src.models.age import age_in_months
from src.models.data_structures import (
    GrowthRecord, Subject, AnalyticsInsights, GrowthPercentile, TrendAnalysis,
    Alert,
)
from src.models.percentile import PercentileInterpolator
from src.models.trend import trend_of


def is_usable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def metric_series(records: Sequence[GrowthRecord], metric: str) -> List[float]:
    """Non-null, finite values of one metric in the given record order."""
    return [r.value(metric) for r in records if is_usable(r.value(metric))]


class GrowthAnalytics:
    """Builds AnalyticsInsights from a subject's growth records. Pure; no I/O."""

    def __init__(self, interpolator: PercentileInterpolator = None):
        self.interpolator = interpolator or PercentileInterpolator()

    def aggregate(self, records: Sequence[GrowthRecord],
                  subject: Subject) -> AnalyticsInsights:
        if not records:
            return AnalyticsInsights(recommendations=[EMPTY_RECOMMENDATION])

        ordered = sorted(records, key=lambda r: r.date)
        latest = ordered[-1]
        age = age_in_months(subject.birth_date, latest.date)

        trends: List[TrendAnalysis] = []
        percentiles: List[GrowthPercentile] = []
        for metric in METRICS:
            value = latest.value(metric)
            if not is_usable(value):
                continue
            if metric in PERCENTILE_METRICS:
                percentiles.append(
                    self.interpolator.percentile_of(age, value, subject.sex, metric)
                )
            trends.append(trend_of(metric_series(ordered, metric), metric))

        alerts, recommendations = self.derive_alerts(percentiles, trends)
        return AnalyticsInsights(
            trends=trends,
            percentiles=percentiles,
            recommendations=recommendations,
            alerts=alerts,
        )

    @staticmethod
    def derive_alerts(percentiles: Sequence[GrowthPercentile],
                      trends: Sequence[TrendAnalysis]) -> Tuple[List[Alert], List[str]]:
        alerts: List[Alert] = []
        recommendations: List[str] = []

        for p in percentiles:
            label = METRIC_LABELS[p.metric]
            if p.category == 'below_3rd':
                alerts.append(Alert(
                    level='critical',
                    message=f"{label} is below the 3rd percentile",
                    metric=p.metric,
                ))
                recommendations.append(
                    f"Consult your pediatrician about {label.lower()} "
                    f"being below the normal range"
                )
            elif p.category == 'above_97th':
                alerts.append(Alert(
                    level='warning',
                    message=f"{label} is above the 97th percentile",
                    metric=p.metric,
                ))

        for t in trends:
            if t.trend == 'decreasing' and t.confidence > DECLINE_ALERT_CONFIDENCE:
                alerts.append(Alert(
                    level='warning',
                    message=f"{METRIC_LABELS[t.metric]} shows a declining trend",
                    metric=t.metric,
                ))

        if not alerts:
            recommendations.extend(NORMAL_RECOMMENDATIONS)
        return alerts, recommendations


_default_analytics = GrowthAnalytics()


def aggregate(records: Sequence[GrowthRecord], subject: Subject) -> AnalyticsInsights:
    """Module-level shortcut using the embedded reference table."""
    return _default_analytics.aggregate(records, subject)
