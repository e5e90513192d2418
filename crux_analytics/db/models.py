"""
SQLAlchemy ORM models for stored projects and scenario snapshots.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class Project(AuditMixin, Base):
    """A business case and the economics it is evaluated with."""

    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text)

    # Investment
    initial_investment = Column(Float, nullable=False)
    discount_rate = Column(Float, nullable=False)  # Annual percent
    project_duration_months = Column(Integer, nullable=False)

    # Revenue
    yearly_revenue = Column(Float, nullable=False)
    revenue_growth_percent = Column(Float, default=0.0, nullable=False)

    # Costs
    operating_costs_yearly = Column(Float, default=0.0, nullable=False)
    maintenance_costs_yearly = Column(Float, default=0.0, nullable=False)

    # Scenario multipliers
    best_case_multiplier = Column(Float, default=1.3, nullable=False)
    worst_case_multiplier = Column(Float, default=0.7, nullable=False)

    # Calculated results (cached, cleared when inputs change)
    results = Column(JSON, default=dict)
    results_calculated_at = Column(DateTime, nullable=True)

    # Relationships
    snapshots = relationship(
        "Snapshot",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )


class Snapshot(AuditMixin, Base):
    """A named what-if adjustment set with its calculated results."""

    __tablename__ = "snapshots"

    id = Column(String, primary_key=True, default=generate_uuid)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False)
    name = Column(String(255), nullable=False)
    is_base = Column(Boolean, default=False, nullable=False)

    # Adjustments relative to the project inputs
    sales_adjustment_percent = Column(Float, default=0.0, nullable=False)
    costs_adjustment_percent = Column(Float, default=0.0, nullable=False)
    discount_adjustment = Column(Float, default=0.0, nullable=False)

    results = Column(JSON, default=dict)

    # Relationships
    project = relationship("Project", back_populates="snapshots")
