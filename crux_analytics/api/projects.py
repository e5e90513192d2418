"""
Project management API endpoints.

Stores project economics and what-if snapshots, runs the calculation engine
on them and attaches the results back to the stored records.
"""

import logging
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from crux_analytics.api.calculations import (
    AdjustmentsSchema,
    CalculationResultResponse,
    ComparisonDifferences,
    result_to_response,
)
from crux_analytics.calculations import scenarios
from crux_analytics.calculations.errors import CalculationError
from crux_analytics.calculations.models import (
    CalculationInput,
    CalculationResult,
    ScenarioAdjustments,
)
from crux_analytics.config import get_settings
from crux_analytics.db.database import get_db
from crux_analytics.db.models import Project, Snapshot

logger = logging.getLogger(__name__)

router = APIRouter()


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str
    description: Optional[str] = None
    initial_investment: float
    discount_rate: float
    project_duration_months: int
    yearly_revenue: float
    revenue_growth_percent: float = 0.0
    operating_costs_yearly: float = 0.0
    maintenance_costs_yearly: float = 0.0
    best_case_multiplier: Optional[float] = None
    worst_case_multiplier: Optional[float] = None


# Columns a client may clear with an explicit null
NULLABLE_FIELDS = {"description"}


class ProjectUpdate(BaseModel):
    """Schema for updating a project."""

    name: Optional[str] = None
    description: Optional[str] = None
    initial_investment: Optional[float] = None
    discount_rate: Optional[float] = None
    project_duration_months: Optional[int] = None
    yearly_revenue: Optional[float] = None
    revenue_growth_percent: Optional[float] = None
    operating_costs_yearly: Optional[float] = None
    maintenance_costs_yearly: Optional[float] = None
    best_case_multiplier: Optional[float] = None
    worst_case_multiplier: Optional[float] = None


class ProjectResponse(BaseModel):
    """Schema for project response."""

    id: str
    name: str
    description: Optional[str]
    initial_investment: float
    discount_rate: float
    project_duration_months: int
    yearly_revenue: float
    revenue_growth_percent: float
    operating_costs_yearly: float
    maintenance_costs_yearly: float
    best_case_multiplier: float
    worst_case_multiplier: float
    results: dict = {}
    results_calculated_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProjectListResponse(BaseModel):
    """Response for listing projects."""

    projects: List[ProjectResponse]
    total: int


def project_to_response(project: Project) -> ProjectResponse:
    """Convert Project model to response schema."""
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        initial_investment=project.initial_investment,
        discount_rate=project.discount_rate,
        project_duration_months=project.project_duration_months,
        yearly_revenue=project.yearly_revenue,
        revenue_growth_percent=project.revenue_growth_percent,
        operating_costs_yearly=project.operating_costs_yearly,
        maintenance_costs_yearly=project.maintenance_costs_yearly,
        best_case_multiplier=project.best_case_multiplier,
        worst_case_multiplier=project.worst_case_multiplier,
        results=project.results or {},
        results_calculated_at=(
            project.results_calculated_at.isoformat()
            if project.results_calculated_at
            else None
        ),
        created_at=project.created_at.isoformat() if project.created_at else None,
        updated_at=project.updated_at.isoformat() if project.updated_at else None,
    )


def project_to_input(project: Project) -> CalculationInput:
    """Build engine inputs from a stored project (expected case)."""
    return CalculationInput(
        initial_investment=project.initial_investment,
        discount_rate=project.discount_rate,
        project_duration_months=project.project_duration_months,
        yearly_revenue=project.yearly_revenue,
        revenue_growth_percent=project.revenue_growth_percent,
        operating_costs_yearly=project.operating_costs_yearly,
        maintenance_costs_yearly=project.maintenance_costs_yearly,
    )


def result_to_record(result: CalculationResult) -> dict:
    """Serialize a result for a JSON column."""
    record = asdict(result)
    record["monthly_cash_flow"] = list(result.monthly_cash_flow)
    record["cumulative_cash_flow"] = list(result.cumulative_cash_flow)
    return record


def get_project_or_404(db: Session, project_id: str) -> Project:
    project = (
        db.query(Project)
        .filter(Project.id == project_id, Project.is_deleted == False)
        .first()
    )

    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    return project


@router.get("/", response_model=ProjectListResponse)
async def list_projects(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """List stored projects, most recently updated first."""
    query = (
        db.query(Project)
        .filter(Project.is_deleted == False)
        .order_by(Project.updated_at.desc())
    )

    total = query.count()
    projects = query.offset(skip).limit(limit).all()

    return ProjectListResponse(
        projects=[project_to_response(p) for p in projects],
        total=total,
    )


@router.post("/", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    db: Session = Depends(get_db),
):
    """Create a new project."""
    settings = get_settings()

    existing = db.query(Project).filter(Project.is_deleted == False).count()
    if existing >= settings.max_projects:
        logger.warning("Project limit reached (%d)", settings.max_projects)
        raise HTTPException(
            status_code=409,
            detail=f"Project limit of {settings.max_projects} reached",
        )

    data = project_data.model_dump()
    if data["best_case_multiplier"] is None:
        data["best_case_multiplier"] = settings.best_case_multiplier
    if data["worst_case_multiplier"] is None:
        data["worst_case_multiplier"] = settings.worst_case_multiplier

    db_project = Project(**data)

    try:
        project_to_input(db_project)
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.add(db_project)
    db.commit()
    db.refresh(db_project)

    logger.info("Created project %s (%s)", db_project.id, db_project.name)
    return project_to_response(db_project)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    db: Session = Depends(get_db),
):
    """Get a project by ID."""
    return project_to_response(get_project_or_404(db, project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    db: Session = Depends(get_db),
):
    """Update a project. Cached results are dropped when inputs change."""
    db_project = get_project_or_404(db, project_id)

    update_data = project_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in NULLABLE_FIELDS:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")

    for field, value in update_data.items():
        setattr(db_project, field, value)

    try:
        project_to_input(db_project)
    except CalculationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    if set(update_data) - {"name", "description"}:
        db_project.results = {}
        db_project.results_calculated_at = None

    db.commit()
    db.refresh(db_project)

    return project_to_response(db_project)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a project."""
    db_project = get_project_or_404(db, project_id)

    db_project.is_deleted = True
    db.commit()

    return {"deleted": True, "id": project_id}


@router.post("/{project_id}/calculate", response_model=ProjectResponse)
async def calculate_project(
    project_id: str,
    db: Session = Depends(get_db),
):
    """Calculate expected, best and worst cases and store them on the project."""
    db_project = get_project_or_404(db, project_id)

    try:
        scenario_set = scenarios.calculate_all_scenarios(
            project_to_input(db_project),
            best_multiplier=db_project.best_case_multiplier,
            worst_multiplier=db_project.worst_case_multiplier,
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db_project.results = {
        "expected": result_to_record(scenario_set.expected),
        "best": result_to_record(scenario_set.best),
        "worst": result_to_record(scenario_set.worst),
    }
    db_project.results_calculated_at = datetime.utcnow()
    db.commit()
    db.refresh(db_project)

    logger.info("Calculated results for project %s", project_id)
    return project_to_response(db_project)


class SnapshotCreate(AdjustmentsSchema):
    """Schema for creating a snapshot."""

    name: str
    is_base: bool = False


class SnapshotResponse(BaseModel):
    """Schema for snapshot response."""

    id: str
    project_id: str
    name: str
    is_base: bool
    sales_adjustment_percent: float
    costs_adjustment_percent: float
    discount_adjustment: float
    results: dict
    created_at: Optional[str] = None


def snapshot_to_response(snapshot: Snapshot) -> SnapshotResponse:
    """Convert Snapshot model to response schema."""
    return SnapshotResponse(
        id=snapshot.id,
        project_id=snapshot.project_id,
        name=snapshot.name,
        is_base=snapshot.is_base,
        sales_adjustment_percent=snapshot.sales_adjustment_percent,
        costs_adjustment_percent=snapshot.costs_adjustment_percent,
        discount_adjustment=snapshot.discount_adjustment,
        results=snapshot.results or {},
        created_at=snapshot.created_at.isoformat() if snapshot.created_at else None,
    )


def snapshot_adjustments(snapshot: Snapshot) -> ScenarioAdjustments:
    return ScenarioAdjustments(
        sales_adjustment_percent=snapshot.sales_adjustment_percent,
        costs_adjustment_percent=snapshot.costs_adjustment_percent,
        discount_adjustment=snapshot.discount_adjustment,
    )


def get_snapshot_or_404(project: Project, snapshot_id: str) -> Snapshot:
    snapshot = project.snapshots.filter_by(id=snapshot_id, is_deleted=False).first()

    if not snapshot:
        raise HTTPException(status_code=404, detail="Snapshot not found")

    return snapshot


@router.get("/{project_id}/snapshots")
async def list_snapshots(
    project_id: str,
    db: Session = Depends(get_db),
):
    """List all snapshots for a project."""
    db_project = get_project_or_404(db, project_id)

    snapshots = (
        db_project.snapshots.filter_by(is_deleted=False)
        .order_by(Snapshot.created_at.desc())
        .all()
    )

    return {
        "project_id": project_id,
        "snapshots": [snapshot_to_response(s) for s in snapshots],
        "total": len(snapshots),
    }


@router.post(
    "/{project_id}/snapshots", response_model=SnapshotResponse, status_code=201
)
async def create_snapshot(
    project_id: str,
    snapshot_data: SnapshotCreate,
    db: Session = Depends(get_db),
):
    """Save a what-if adjustment set together with its calculated results."""
    settings = get_settings()
    db_project = get_project_or_404(db, project_id)

    existing = db_project.snapshots.filter_by(is_deleted=False).count()
    if existing >= settings.max_snapshots_per_project:
        logger.warning(
            "Snapshot limit reached for project %s (%d)",
            project_id,
            settings.max_snapshots_per_project,
        )
        raise HTTPException(
            status_code=409,
            detail=(
                f"Snapshot limit of {settings.max_snapshots_per_project} "
                "reached for this project"
            ),
        )

    try:
        result = scenarios.calculate_scenario_with_adjustments(
            project_to_input(db_project), snapshot_data.to_adjustments()
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    snapshot = Snapshot(
        project_id=db_project.id,
        name=snapshot_data.name,
        is_base=snapshot_data.is_base,
        sales_adjustment_percent=snapshot_data.sales_adjustment_percent,
        costs_adjustment_percent=snapshot_data.costs_adjustment_percent,
        discount_adjustment=snapshot_data.discount_adjustment,
        results=result_to_record(result),
    )

    db.add(snapshot)
    db.commit()
    db.refresh(snapshot)

    logger.info("Created snapshot %s for project %s", snapshot.id, project_id)
    return snapshot_to_response(snapshot)


class SnapshotComparisonResponse(BaseModel):
    """Unadjusted expected case against a snapshot."""

    project_id: str
    snapshot_id: str
    base: CalculationResultResponse
    snapshot: CalculationResultResponse
    differences: ComparisonDifferences


@router.get(
    "/{project_id}/snapshots/{snapshot_id}/comparison",
    response_model=SnapshotComparisonResponse,
)
async def compare_snapshot(
    project_id: str,
    snapshot_id: str,
    db: Session = Depends(get_db),
):
    """Compare a snapshot with the project's unadjusted expected case."""
    db_project = get_project_or_404(db, project_id)
    snapshot = get_snapshot_or_404(db_project, snapshot_id)

    try:
        inputs = project_to_input(db_project)
        base = scenarios.calculate_financial_metrics(inputs)
        adjusted = scenarios.calculate_scenario_with_adjustments(
            inputs, snapshot_adjustments(snapshot)
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SnapshotComparisonResponse(
        project_id=project_id,
        snapshot_id=snapshot_id,
        base=result_to_response(base),
        snapshot=result_to_response(adjusted),
        differences=ComparisonDifferences(
            **asdict(scenarios.compare_results(base, adjusted))
        ),
    )


@router.delete("/{project_id}/snapshots/{snapshot_id}")
async def delete_snapshot(
    project_id: str,
    snapshot_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a snapshot."""
    db_project = get_project_or_404(db, project_id)
    snapshot = get_snapshot_or_404(db_project, snapshot_id)

    snapshot.is_deleted = True
    db.commit()

    return {"deleted": True, "id": snapshot_id}
