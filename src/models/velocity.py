"""
Weight velocity check between the two most recent weighings.
"""
from typing import List, Sequence

from config.settings import SLOW_GAIN_KG_PER_WEEK
from src.models.age import days_between
from src.models.data_structures import GrowthRecord, Alert
from src.models.insights import is_usable


def weight_velocity_alerts(records: Sequence[GrowthRecord]) -> List[Alert]:
    weighed = sorted(
        (r for r in records if is_usable(r.weight)), key=lambda r: r.date
    )
    if len(weighed) < 2:
        return []

    previous, latest = weighed[-2], weighed[-1]
    days = abs(days_between(previous.date, latest.date))
    if days == 0:
        return []

    change = latest.weight - previous.weight
    per_week = change / days * 7

    if per_week < 0:
        return [Alert(
            level='critical',
            message=f"Weight loss detected: {abs(change):.2f} kg since last measurement",
            metric='weight',
        )]
    if per_week < SLOW_GAIN_KG_PER_WEEK:
        return [Alert(
            level='warning',
            message=(f"Weight gain is slower than expected "
                     f"({per_week * 1000:.0f} g per week)"),
            metric='weight',
        )]
    return []
