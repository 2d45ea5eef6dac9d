"""
Configuration for the Baby Growth Analytics engine and API.
"""
import os

# ── Server ────────────────────────────────────────────────────
PORT = int(os.environ.get("PORT", 8000))
HOST = os.environ.get("HOST", "0.0.0.0")
DEBUG = os.environ.get("DEBUG", "false").lower() == "true"

# ── Auth (optional) ───────────────────────────────────────────
AUTH_ENABLED = os.environ.get("AUTH_ENABLED", "false").lower() == "true"
AUTH_USERNAME = os.environ.get("AUTH_USERNAME", "admin")
AUTH_PASSWORD = os.environ.get("AUTH_PASSWORD", "changeme")

# ── Metrics ───────────────────────────────────────────────────
# Evaluation order for trends, percentiles and alerts
METRICS = ['weight', 'height', 'head_circumference']

# Metrics with an embedded reference table
PERCENTILE_METRICS = ['weight', 'height']

METRIC_LABELS = {
    'weight': 'Weight',
    'height': 'Height',
    'head_circumference': 'Head circumference',
}

METRIC_UNITS = {
    'weight': 'kg',
    'height': 'cm',
    'head_circumference': 'cm',
}

SEXES = ['male', 'female']

# ── Analytics ─────────────────────────────────────────────────
# Fixed constants: changing any of these changes reported numbers
DAYS_PER_MONTH = 30.44
ZSCORE_SPREAD = 2.56              # (p90 - p10) spans ~2.56 SD
TREND_THRESHOLD = 0.1             # |slope| per sample below this is 'stable'
FULL_CONFIDENCE_POINTS = 5        # samples needed for confidence 1.0
DECLINE_ALERT_CONFIDENCE = 0.6
PREDICTION_HORIZONS = (1, 3, 6)   # months ahead

# Weight velocity (kg per week between the two latest weighings)
SLOW_GAIN_KG_PER_WEEK = 0.15

EMPTY_RECOMMENDATION = "Add growth measurements to see analytics"
NORMAL_RECOMMENDATIONS = [
    "Growth patterns appear normal",
    "Continue regular measurements",
]
