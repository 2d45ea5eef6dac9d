"""
Baby Growth Analytics: FastAPI Backend
======================================

Percentile standing, trends, projections and alerts for infant growth
records, scored against an embedded reference table.

REST API endpoints:
    POST   /subjects                         Create subject (birth date, sex)
    GET    /subjects                         List all subjects
    GET    /subjects/{id}                    Get subject profile
    POST   /subjects/{id}/records            Record a new measurement
    GET    /subjects/{id}/records            List measurements (by date)
    GET    /subjects/{id}/analytics          Percentiles, trends, alerts
    GET    /subjects/{id}/weight-velocity    Weight gain/loss alerts
    GET    /reference/percentile-lines       Reference curves for charts
    GET    /health                           Health check
"""
import sys
import secrets
from pathlib import Path
import datetime as dt
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, Field
from typing import Optional, List

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import HOST, PORT, METRICS
from config.settings import AUTH_ENABLED, AUTH_USERNAME, AUTH_PASSWORD
from src.ingestion.records import GrowthRecordStore
from src.models.data_structures import Subject
from src.models.insights import GrowthAnalytics
from src.models.reference_table import ReferenceTable
from src.models.percentile import PercentileInterpolator
from src.models.velocity import weight_velocity_alerts

VERSION = "1.0.0"

# ── Auth ─────────────────────────────────────────────────────────
security = HTTPBasic()

def verify_credentials(credentials: HTTPBasicCredentials = Depends(security)):
    """HTTP Basic Auth, only enforced when AUTH_ENABLED=true."""
    if not AUTH_ENABLED:
        return True
    correct_user = secrets.compare_digest(credentials.username, AUTH_USERNAME)
    correct_pass = secrets.compare_digest(credentials.password, AUTH_PASSWORD)
    if not (correct_user and correct_pass):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return True


# ── Engine ────────────────────────────────────────────────────

_reference_table = ReferenceTable()
_analytics = GrowthAnalytics(PercentileInterpolator(_reference_table))


def get_store(request: Request) -> GrowthRecordStore:
    return request.app.state.store


@asynccontextmanager
async def lifespan(app: FastAPI):
    print("Starting growth analytics service...")
    print(f"✓ Reference metrics: {', '.join(_reference_table.available_metrics)}")
    yield
    print("Shutting down")


# ── App ──────────────────────────────────────────────────────

_deps = [Depends(verify_credentials)] if AUTH_ENABLED else []

app = FastAPI(
    title="Baby Growth Analytics API",
    description=(
        "Growth percentile standing, least-squares trends with +1/+3/+6 month "
        "projections, and alerts for infants 0–24 months. Percentiles come "
        "from a simplified reference table and are not clinical values."
    ),
    version=VERSION,
    lifespan=lifespan,
    dependencies=_deps,
)
app.state.store = GrowthRecordStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request / Response Models ─────────────────────────────────

class CreateSubjectRequest(BaseModel):
    subject_id: str = Field(..., min_length=1, description="Unique identifier")
    sex: str = Field(..., pattern="^(male|female)$")
    birth_date: dt.date
    name: Optional[str] = None

class GrowthRecordRequest(BaseModel):
    date: dt.date
    weight: Optional[float] = Field(None, gt=0, le=50)
    height: Optional[float] = Field(None, gt=0, le=150)
    head_circumference: Optional[float] = Field(None, gt=0, le=70)
    note: Optional[str] = None

class AlertResponse(BaseModel):
    level: str
    message: str
    metric: Optional[str] = None


# ── Helper ────────────────────────────────────────────────────

def _subject_or_404(store: GrowthRecordStore, subject_id: str) -> Subject:
    try:
        return store.get_subject(subject_id)
    except KeyError:
        raise HTTPException(404, f"Subject '{subject_id}' not found")


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/health")
async def health_check(store: GrowthRecordStore = Depends(get_store)):
    return {
        "status": "healthy",
        "metrics_available": _reference_table.available_metrics,
        "subjects_tracked": len(store.list_subjects()),
        "version": VERSION,
    }


# ── Subjects ──────────────────────────────────────────────────

@app.post("/subjects", status_code=201)
async def create_subject(req: CreateSubjectRequest,
                         store: GrowthRecordStore = Depends(get_store)):
    subject = Subject(
        birth_date=req.birth_date, sex=req.sex,
        subject_id=req.subject_id, name=req.name or req.subject_id,
    )
    try:
        store.add_subject(subject)
    except ValueError as e:
        raise HTTPException(409, str(e))
    return subject.to_dict()


@app.get("/subjects")
async def list_subjects(store: GrowthRecordStore = Depends(get_store)):
    subjects = store.list_subjects()
    return {
        "count": len(subjects),
        "subjects": [
            {"subject_id": s.subject_id, "sex": s.sex,
             "record_count": len(store.records_for(s.subject_id))}
            for s in subjects
        ],
    }


@app.get("/subjects/{subject_id}")
async def get_subject(subject_id: str,
                      store: GrowthRecordStore = Depends(get_store)):
    return _subject_or_404(store, subject_id).to_dict()


# ── Growth records ────────────────────────────────────────────

@app.post("/subjects/{subject_id}/records", status_code=201)
async def add_record(subject_id: str, req: GrowthRecordRequest,
                     store: GrowthRecordStore = Depends(get_store)):
    _subject_or_404(store, subject_id)
    if all(getattr(req, m) is None for m in METRICS):
        raise HTTPException(422, "At least one measurement is required")

    record = store.add_record(
        subject_id, req.date,
        weight=req.weight, height=req.height,
        head_circumference=req.head_circumference, note=req.note,
    )
    return record.to_dict()


@app.get("/subjects/{subject_id}/records")
async def list_records(subject_id: str,
                       store: GrowthRecordStore = Depends(get_store)):
    _subject_or_404(store, subject_id)
    return [r.to_dict() for r in store.records_for(subject_id)]


# ── Analytics ─────────────────────────────────────────────────

@app.get("/subjects/{subject_id}/analytics")
async def get_analytics(subject_id: str,
                        store: GrowthRecordStore = Depends(get_store)):
    subject = _subject_or_404(store, subject_id)
    insights = _analytics.aggregate(store.records_for(subject_id), subject)
    return insights.to_dict()


@app.get("/subjects/{subject_id}/weight-velocity",
         response_model=List[AlertResponse])
async def get_weight_velocity(subject_id: str,
                              store: GrowthRecordStore = Depends(get_store)):
    _subject_or_404(store, subject_id)
    alerts = weight_velocity_alerts(store.records_for(subject_id))
    return [AlertResponse(**a.to_dict()) for a in alerts]


# ── Reference Lines ───────────────────────────────────────────

@app.get("/reference/percentile-lines")
async def get_percentile_lines(
    metric: str = Query("weight", pattern="^(weight|height)$"),
    sex: str = Query("male", pattern="^(male|female)$"),
):
    return {
        "metric": metric,
        "sex": sex,
        "lines": _reference_table.percentile_lines(metric, sex),
    }


# ── Run ───────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("src.api.server:app", host=HOST, port=PORT, reload=True)
