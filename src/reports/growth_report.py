"""
Growth analytics report for a single subject.

Usage:
    python -m src.reports.growth_report records.csv --birth-date 2024-01-15 --sex female
    python -m src.reports.growth_report records.csv --birth-date 2024-01-15 --sex male --json
"""
import sys
import json
import argparse
from datetime import date
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import METRIC_LABELS, METRIC_UNITS
from src.ingestion.records import load_records_csv
from src.models.data_structures import Subject, AnalyticsInsights
from src.models.insights import GrowthAnalytics


def format_report(insights: AnalyticsInsights) -> str:
    lines = ["=" * 70, "  GROWTH ANALYTICS REPORT", "=" * 70]

    if insights.percentiles:
        lines.append("\n  Percentiles (latest measurement)")
        for p in insights.percentiles:
            lines.append(
                f"    {METRIC_LABELS[p.metric]:<20} P{p.percentile:<6g} "
                f"z={p.zscore:+.2f}  [{p.category}]"
            )

    if insights.trends:
        lines.append("\n  Trends")
        for t in insights.trends:
            unit = METRIC_UNITS[t.metric]
            pr = t.predictions
            lines.append(
                f"    {METRIC_LABELS[t.metric]:<20} {t.trend:<10} "
                f"{t.change_rate:+.2f} {unit}/mo  (confidence {t.confidence:.0%})"
            )
            lines.append(
                f"    {'':<20} +1mo {pr.one_month}  +3mo {pr.three_months}  "
                f"+6mo {pr.six_months}"
            )

    if insights.alerts:
        lines.append("\n  Alerts")
        for a in insights.alerts:
            lines.append(f"    [{a.level.upper()}] {a.message}")

    lines.append("\n  Recommendations")
    for rec in insights.recommendations:
        lines.append(f"    - {rec}")
    return '\n'.join(lines)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument('records', help="CSV export of growth records")
    parser.add_argument('--birth-date', required=True, type=date.fromisoformat)
    parser.add_argument('--sex', required=True, choices=['male', 'female'])
    parser.add_argument('--json', action='store_true', help="Print JSON instead of text")
    args = parser.parse_args(argv)

    records = load_records_csv(args.records)
    subject = Subject(birth_date=args.birth_date, sex=args.sex)
    insights = GrowthAnalytics().aggregate(records, subject)

    if args.json:
        print(json.dumps(insights.to_dict(), indent=2))
    else:
        print(f"Loaded {len(records)} growth records from {args.records}")
        print(format_report(insights))
    return 0


if __name__ == "__main__":
    sys.exit(main())
