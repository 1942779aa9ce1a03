# backend/app/models/farmer/measurement.py

from sqlalchemy import (
    Column, String, ForeignKey, DateTime, Date, Float
)
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.models.farmer.consultation import gen_uuid


# ============================================================
# FIELDS (orchard blocks owned by a grower)
# ============================================================
class Field(Base):
    __tablename__ = "fields"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    soil_results = relationship("SoilTestResult", cascade="all, delete-orphan")
    water_results = relationship("WaterTestResult", cascade="all, delete-orphan")
    analytics = relationship("FieldAnalytic", cascade="all, delete-orphan")


# ============================================================
# SOIL LAB RESULTS (manual entry)
# ============================================================
class SoilTestResult(Base):
    __tablename__ = "soil_test_results"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    field_id = Column(String(36), ForeignKey("fields.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    recorded_date = Column(Date, nullable=False, index=True)

    soil_ph = Column(Float, nullable=True)
    nitrogen = Column(Float, nullable=True)
    phosphorus = Column(Float, nullable=True)
    potassium = Column(Float, nullable=True)
    oc = Column(Float, nullable=True)
    s = Column(Float, nullable=True)
    zn = Column(Float, nullable=True)
    fe = Column(Float, nullable=True)
    mn = Column(Float, nullable=True)
    cu = Column(Float, nullable=True)
    b = Column(Float, nullable=True)
    ec = Column(Float, nullable=True)
    lime_requirement = Column(Float, nullable=True)
    gypsum_requirement = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)


# ============================================================
# IRRIGATION WATER RESULTS
# ============================================================
class WaterTestResult(Base):
    __tablename__ = "water_test_results"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    field_id = Column(String(36), ForeignKey("fields.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    test_date = Column(Date, nullable=False, index=True)

    ph = Column(Float, nullable=True)
    ec = Column(Float, nullable=True)
    tds = Column(Float, nullable=True)
    hardness = Column(Float, nullable=True)
    na = Column(Float, nullable=True)
    ca = Column(Float, nullable=True)
    mg = Column(Float, nullable=True)
    sar = Column(Float, nullable=True)
    rsc = Column(Float, nullable=True)
    hco3 = Column(Float, nullable=True)
    co3 = Column(Float, nullable=True)
    cl = Column(Float, nullable=True)
    so4 = Column(Float, nullable=True)
    boron = Column(Float, nullable=True)
    no3_n = Column(Float, nullable=True)
    fe = Column(Float, nullable=True)
    f = Column(Float, nullable=True)
    report_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)


# ============================================================
# DERIVED ANALYTICS (one metric per row)
# ============================================================
class FieldAnalytic(Base):
    __tablename__ = "field_analytics"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    field_id = Column(String(36), ForeignKey("fields.id"), nullable=False, index=True)
    metric_type = Column(String, nullable=False, index=True)
    metric_value = Column(Float, nullable=True)
    recorded_date = Column(Date, nullable=False, index=True)
