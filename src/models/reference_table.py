"""
Embedded growth reference table: 3rd/10th/50th/90th/97th percentile anchors.
Simplified approximation of the WHO Child Growth Standards (0-24 months);
not suitable for clinical use.
"""
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from src.models.data_structures import ReferenceAnchor

# =============================================================================
# Reference anchors: age_months -> (p3, p10, p50, p90, p97)
# =============================================================================

PERCENTILE_BANDS = (3, 10, 50, 90, 97)

REFERENCE_PERCENTILES = {
    'weight': {
        'male': {
            0: (2.5, 2.8, 3.3, 3.9, 4.3), 1: (3.4, 3.9, 4.5, 5.1, 5.6),
            2: (4.3, 4.9, 5.6, 6.3, 6.9), 3: (5.0, 5.7, 6.4, 7.2, 7.9),
            6: (6.4, 7.3, 8.0, 8.8, 9.5), 9: (7.5, 8.4, 9.2, 10.0, 10.7),
            12: (8.4, 9.4, 10.2, 11.1, 11.8), 18: (9.4, 10.4, 11.3, 12.4, 13.2),
            24: (10.3, 11.4, 12.2, 13.6, 14.5),
        },
        'female': {
            0: (2.4, 2.7, 3.2, 3.7, 4.1), 1: (3.2, 3.6, 4.2, 4.8, 5.3),
            2: (3.9, 4.5, 5.1, 5.8, 6.4), 3: (4.5, 5.2, 5.8, 6.6, 7.2),
            6: (5.7, 6.5, 7.3, 8.2, 8.9), 9: (6.4, 7.3, 8.2, 9.2, 9.9),
            12: (7.0, 8.1, 9.0, 10.1, 10.9), 18: (8.2, 9.3, 10.2, 11.5, 12.4),
            24: (9.2, 10.4, 11.5, 12.9, 13.9),
        },
    },
    'height': {
        'male': {
            0: (46.1, 47.5, 49.9, 52.3, 53.7), 1: (50.8, 52.3, 54.7, 57.1, 58.6),
            2: (54.4, 56.0, 58.4, 60.8, 62.4), 3: (57.3, 59.0, 61.4, 63.8, 65.5),
            6: (63.3, 65.1, 67.6, 70.1, 71.9), 9: (67.5, 69.4, 72.0, 74.5, 76.5),
            12: (71.0, 73.0, 75.7, 78.4, 80.5), 18: (76.9, 79.2, 82.3, 85.4, 87.7),
            24: (81.0, 83.6, 87.1, 90.6, 93.2),
        },
        'female': {
            0: (45.4, 46.8, 49.1, 51.4, 52.9), 1: (49.8, 51.2, 53.7, 56.1, 57.6),
            2: (53.0, 54.6, 57.1, 59.5, 61.1), 3: (55.6, 57.3, 59.8, 62.2, 63.9),
            6: (61.2, 63.0, 65.7, 68.3, 70.2), 9: (65.3, 67.3, 70.1, 73.0, 74.9),
            12: (68.9, 70.8, 74.0, 77.1, 79.2), 18: (74.9, 77.2, 80.7, 84.2, 86.5),
            24: (79.3, 81.9, 85.7, 89.4, 92.2),
        },
    },
}


class ReferenceTable:
    """Anchor lookup and linear band interpolation over the reference table.

    Shared by percentile scoring and by the chart overlay endpoint so both
    read the same curves.
    """

    def __init__(self, tables: dict = None):
        self.tables = tables or REFERENCE_PERCENTILES
        self._anchors: Dict[Tuple[str, str], List[ReferenceAnchor]] = {}

    def anchors(self, metric: str, sex: str) -> List[ReferenceAnchor]:
        cache_key = (metric, sex)
        if cache_key not in self._anchors:
            table = self.tables[metric][sex]
            self._anchors[cache_key] = [
                ReferenceAnchor(age, *table[age]) for age in sorted(table.keys())
            ]
        return self._anchors[cache_key]

    def bracket(self, metric: str, sex: str,
                age_months: float) -> Tuple[ReferenceAnchor, ReferenceAnchor, float]:
        """Return (lower, upper, ratio) for the anchor pair around age_months.

        Ages outside the table use the first or last pair, with the ratio
        clamped to [0, 1] so the edge anchor's bands are returned.
        """
        anchors = self.anchors(metric, sex)
        if len(anchors) == 1:
            return anchors[0], anchors[0], 0.0

        lower, upper = anchors[0], anchors[1]
        if age_months >= anchors[-1].age_months:
            lower, upper = anchors[-2], anchors[-1]
        else:
            for i in range(len(anchors) - 1):
                if anchors[i].age_months <= age_months <= anchors[i + 1].age_months:
                    lower, upper = anchors[i], anchors[i + 1]
                    break

        span = upper.age_months - lower.age_months
        ratio = (age_months - lower.age_months) / span if span else 0.0
        return lower, upper, float(np.clip(ratio, 0.0, 1.0))

    def bands_at(self, metric: str, sex: str, age_months: float) -> ReferenceAnchor:
        """Interpolate all five percentile bands at a (possibly fractional) age."""
        lower, upper, ratio = self.bracket(metric, sex, age_months)
        lo = np.array(lower.bands(), dtype=float)
        hi = np.array(upper.bands(), dtype=float)
        values = lo + (hi - lo) * ratio
        return ReferenceAnchor(age_months, *(float(v) for v in values))

    def percentile_lines(self, metric: str, sex: str,
                         ages: Optional[Sequence[float]] = None) -> List[dict]:
        """Per-band (age, value) series for drawing reference curves."""
        if ages is None:
            anchors = self.anchors(metric, sex)
            ages = range(int(anchors[0].age_months), int(anchors[-1].age_months) + 1)

        points = [self.bands_at(metric, sex, float(age)) for age in ages]
        lines = []
        for idx, pct in enumerate(PERCENTILE_BANDS):
            lines.append({
                'percentile': pct,
                'points': [
                    {'age_months': p.age_months, 'value': round(p.bands()[idx], 2)}
                    for p in points
                ],
            })
        return lines

    @property
    def available_metrics(self) -> list:
        return list(self.tables.keys())
