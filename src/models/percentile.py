"""
Percentile standing and risk category from the embedded reference table.

Percentiles outside the 10th-90th range are fixed placeholders, not true
ranks, and the z-score is a normal approximation built from the band
spread (not an LMS z-score).
"""
import math

from config.settings import ZSCORE_SPREAD
from src.models.data_structures import GrowthPercentile
from src.models.reference_table import ReferenceTable

# category -> fixed percentile placeholder
FIXED_PERCENTILES = {
    'below_3rd': 1.5,
    'below_10th': 6.5,
    'above_90th': 93.5,
    'above_97th': 98.5,
}


def _round_half_up(x: float) -> float:
    if not math.isfinite(x):
        return x
    return float(math.floor(x + 0.5))


def classify(value: float, p3: float, p10: float, p90: float, p97: float) -> str:
    if value < p3:
        return 'below_3rd'
    if value < p10:
        return 'below_10th'
    if value > p97:
        return 'above_97th'
    if value > p90:
        return 'above_90th'
    return 'normal'


class PercentileInterpolator:
    """Scores a single measurement against interpolated percentile bands."""

    def __init__(self, reference_table: ReferenceTable = None):
        self.reference_table = reference_table or ReferenceTable()

    def percentile_of(self, age_months: float, value: float,
                      sex: str, metric: str) -> GrowthPercentile:
        bands = self.reference_table.bands_at(metric, sex, age_months)
        p3, p10, p50, p90, p97 = bands.bands()

        category = classify(value, p3, p10, p90, p97)
        if category in FIXED_PERCENTILES:
            percentile = FIXED_PERCENTILES[category]
        elif value <= p50:
            percentile = _round_half_up(10 + (value - p10) / (p50 - p10) * 40)
        else:
            percentile = _round_half_up(50 + (value - p50) / (p90 - p50) * 40)

        zscore = (value - p50) / ((p90 - p10) / ZSCORE_SPREAD)

        return GrowthPercentile(
            metric=metric,
            percentile=percentile,
            zscore=round(zscore, 2),
            category=category,
        )
