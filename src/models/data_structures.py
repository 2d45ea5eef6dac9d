"""
Data structures for the Baby Growth Analytics engine.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class GrowthRecord:
    id: str
    subject_id: str
    date: date
    weight: Optional[float] = None              # kg
    height: Optional[float] = None              # cm
    head_circumference: Optional[float] = None  # cm
    note: Optional[str] = None

    def value(self, metric: str) -> Optional[float]:
        return getattr(self, metric)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'subject_id': self.subject_id,
            'date': self.date.isoformat(),
            'weight': self.weight,
            'height': self.height,
            'head_circumference': self.head_circumference,
            'note': self.note,
        }


@dataclass
class Subject:
    birth_date: date
    sex: str  # 'male' or 'female'
    subject_id: Optional[str] = None
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'subject_id': self.subject_id,
            'name': self.name,
            'sex': self.sex,
            'birth_date': self.birth_date.isoformat(),
        }


@dataclass(frozen=True)
class ReferenceAnchor:
    """Percentile band values at one age (an anchor row or an interpolated point)."""
    age_months: float
    p3: float
    p10: float
    p50: float
    p90: float
    p97: float

    def bands(self) -> tuple:
        return (self.p3, self.p10, self.p50, self.p90, self.p97)


@dataclass
class Predictions:
    one_month: float = 0.0
    three_months: float = 0.0
    six_months: float = 0.0


@dataclass
class TrendAnalysis:
    metric: str
    trend: str          # 'increasing', 'decreasing' or 'stable'
    change_rate: float  # units per sample (~per month for monthly data)
    confidence: float   # 0-1
    predictions: Predictions = field(default_factory=Predictions)

    def to_dict(self) -> dict:
        return {
            'metric': self.metric,
            'trend': self.trend,
            'change_rate': self.change_rate,
            'confidence': self.confidence,
            'predictions': {
                'one_month': self.predictions.one_month,
                'three_months': self.predictions.three_months,
                'six_months': self.predictions.six_months,
            },
        }


@dataclass
class GrowthPercentile:
    metric: str
    percentile: float
    zscore: float
    category: str  # 'below_3rd', 'below_10th', 'normal', 'above_90th', 'above_97th'

    def to_dict(self) -> dict:
        return {
            'metric': self.metric,
            'percentile': self.percentile,
            'zscore': self.zscore,
            'category': self.category,
        }


@dataclass
class Alert:
    level: str  # 'info', 'warning' or 'critical'
    message: str
    metric: Optional[str] = None

    def to_dict(self) -> dict:
        return {'level': self.level, 'message': self.message, 'metric': self.metric}


@dataclass
class AnalyticsInsights:
    trends: List[TrendAnalysis] = field(default_factory=list)
    percentiles: List[GrowthPercentile] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'trends': [t.to_dict() for t in self.trends],
            'percentiles': [p.to_dict() for p in self.percentiles],
            'recommendations': list(self.recommendations),
            'alerts': [a.to_dict() for a in self.alerts],
        }
