# backend/app/schemas/farmer/measurement.py

from typing import Optional, Dict
from datetime import date
from pydantic import BaseModel, ConfigDict


# ---------------------------------------------------------------
# Typed sample (output of the decode step)
# ---------------------------------------------------------------

class Sample(BaseModel):
    field_id: str
    family: str                 # soil | water
    source: str                 # manual | analytics
    recorded_date: date
    values: Dict[str, Optional[float]] = {}

    model_config = ConfigDict(frozen=True)


class FieldOut(BaseModel):
    id: str
    user_id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class FieldCreate(BaseModel):
    user_id: str
    name: str


# ---------------------------------------------------------------
# Lab submissions
# ---------------------------------------------------------------

class SoilTestCreate(BaseModel):
    user_id: str
    recorded_date: Optional[date] = None
    soil_ph: Optional[float] = None
    nitrogen: Optional[float] = None
    phosphorus: Optional[float] = None
    potassium: Optional[float] = None
    oc: Optional[float] = None
    s: Optional[float] = None
    zn: Optional[float] = None
    fe: Optional[float] = None
    mn: Optional[float] = None
    cu: Optional[float] = None
    b: Optional[float] = None
    ec: Optional[float] = None
    lime_requirement: Optional[float] = None
    gypsum_requirement: Optional[float] = None


class WaterTestCreate(BaseModel):
    user_id: str
    recorded_date: Optional[date] = None
    ph: Optional[float] = None
    ec: Optional[float] = None
    tds: Optional[float] = None
    hardness: Optional[float] = None
    na: Optional[float] = None
    ca: Optional[float] = None
    mg: Optional[float] = None
    sar: Optional[float] = None
    rsc: Optional[float] = None
    hco3: Optional[float] = None
    co3: Optional[float] = None
    cl: Optional[float] = None
    so4: Optional[float] = None
    boron: Optional[float] = None
    no3_n: Optional[float] = None
    fe: Optional[float] = None
    f: Optional[float] = None
    report_url: Optional[str] = None


class AnalyticsCreate(BaseModel):
    metric_type: str
    metric_value: Optional[float] = None
    recorded_date: date
