"""
Growth record ingestion and storage.
Loads record-store rows (CSV exports or DataFrames) into GrowthRecords and
keeps subjects/records in an injectable in-memory repository.
"""
import uuid
from datetime import date
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import pandas as pd

from config.settings import METRICS
from src.models.data_structures import GrowthRecord, Subject, AnalyticsInsights
from src.models.insights import GrowthAnalytics

# Record-store column names -> GrowthRecord fields
COLUMN_ALIASES = {
    'baby_id': 'subject_id',
    'headCircumference': 'head_circumference',
    'head_circ_cm': 'head_circumference',
    'weight_kg': 'weight',
    'height_cm': 'height',
}


class GrowthRecordStore:
    """In-memory subject and growth record repository."""

    def __init__(self):
        self._subjects: Dict[str, Subject] = {}
        self._records: Dict[str, List[GrowthRecord]] = {}

    def add_subject(self, subject: Subject) -> Subject:
        if subject.subject_id in self._subjects:
            raise ValueError(f"Subject '{subject.subject_id}' already exists")
        self._subjects[subject.subject_id] = subject
        self._records[subject.subject_id] = []
        return subject

    def get_subject(self, subject_id: str) -> Subject:
        if subject_id not in self._subjects:
            raise KeyError(subject_id)
        return self._subjects[subject_id]

    def list_subjects(self) -> List[Subject]:
        return list(self._subjects.values())

    def add_record(self, subject_id: str, record_date: date,
                   weight: float = None, height: float = None,
                   head_circumference: float = None,
                   note: str = None) -> GrowthRecord:
        self.get_subject(subject_id)
        record = GrowthRecord(
            id=str(uuid.uuid4()), subject_id=subject_id, date=record_date,
            weight=weight, height=height,
            head_circumference=head_circumference, note=note,
        )
        self._records[subject_id].append(record)
        return record

    def records_for(self, subject_id: str) -> List[GrowthRecord]:
        self.get_subject(subject_id)
        return sorted(self._records[subject_id], key=lambda r: r.date)


def _clean(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def records_from_frame(df: pd.DataFrame) -> List[GrowthRecord]:
    """Convert record-store rows into GrowthRecords sorted by date.

    Missing cells (NaN) become None, so an absent measurement is never read
    as zero.
    """
    df = df.rename(columns=COLUMN_ALIASES).copy()
    if 'date' not in df.columns or 'subject_id' not in df.columns:
        raise ValueError("Growth records need 'date' and 'subject_id' columns")

    df['date'] = pd.to_datetime(df['date']).dt.date
    for col in METRICS + ['note', 'id']:
        if col not in df.columns:
            df[col] = None
    df = df.sort_values('date', kind='stable')

    records = []
    for idx, row in df.iterrows():
        note = row['note']
        records.append(GrowthRecord(
            id=str(idx) if pd.isna(row['id']) else str(row['id']),
            subject_id=str(row['subject_id']),
            date=row['date'],
            weight=_clean(row['weight']),
            height=_clean(row['height']),
            head_circumference=_clean(row['head_circumference']),
            note=None if note is None or pd.isna(note) else str(note),
        ))
    return records


def load_records_csv(path) -> List[GrowthRecord]:
    return records_from_frame(pd.read_csv(Path(path)))


def analyze_frame(df: pd.DataFrame, subjects: Mapping[str, Subject],
                  analytics: GrowthAnalytics = None) -> Dict[str, AnalyticsInsights]:
    """Aggregate every subject in a multi-subject record frame independently."""
    analytics = analytics or GrowthAnalytics()
    by_subject: Dict[str, List[GrowthRecord]] = {}
    for record in records_from_frame(df):
        by_subject.setdefault(record.subject_id, []).append(record)

    results = {}
    for subject_id, records in by_subject.items():
        if subject_id not in subjects:
            raise KeyError(f"No subject metadata for '{subject_id}'")
        results[subject_id] = analytics.aggregate(records, subjects[subject_id])
    return results
