# backend/app/schemas/farmer/advisory.py

from typing import Optional, List
from datetime import date
from pydantic import BaseModel


class ClassificationResult(BaseModel):
    parameter: str
    label: str
    unit: str = ""
    value: Optional[float] = None
    status: str
    advisory: str = ""


class SummaryEntry(BaseModel):
    key: str
    label: str
    value: float
    unit: str = ""


class SampleSummary(BaseModel):
    lacking: List[SummaryEntry] = []
    excess: List[SummaryEntry] = []


# ---------------------------------------------------------------
# Composite responses
# ---------------------------------------------------------------

class FieldAdvisory(BaseModel):
    field_id: str
    family: str
    has_test: bool
    source: Optional[str] = None
    recorded_date: Optional[date] = None
    summary: SampleSummary = SampleSummary()
    classifications: List[ClassificationResult] = []
    deficiency_alerts: List[ClassificationResult] = []
    actions: List[str] = []


class TopSummary(BaseModel):
    family: str
    field_id: Optional[str] = None
    field_name: str = ""
    recorded_date: Optional[date] = None
    summary: SampleSummary = SampleSummary()


class HealthMatrix(BaseModel):
    field_id: str
    soil: str
    soil_detail: str
    water: str
    water_detail: str
    pest: str
    pest_detail: str
