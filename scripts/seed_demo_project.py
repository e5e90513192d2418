"""
Seed the database with a demo business case and two what-if snapshots.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crux_analytics.api.projects import project_to_input, result_to_record
from crux_analytics.calculations.models import ScenarioAdjustments
from crux_analytics.calculations.scenarios import (
    calculate_all_scenarios,
    calculate_scenario_with_adjustments,
)
from crux_analytics.db.database import SessionLocal, init_db
from crux_analytics.db.models import Project, Snapshot

DEMO_NAME = "Coffee Shop Expansion"

SNAPSHOTS = [
    ("Base", ScenarioAdjustments(), True),
    ("Slow sales, higher rates", ScenarioAdjustments(-15, 5, 2), False),
]


def main():
    init_db()
    db = SessionLocal()

    try:
        existing = db.query(Project).filter(Project.name == DEMO_NAME).first()
        if existing:
            print(f"Project '{DEMO_NAME}' already exists (ID: {existing.id})")
            return

        project = Project(
            name=DEMO_NAME,
            description="Second location with a 3 year horizon",
            initial_investment=150000,
            discount_rate=10,
            project_duration_months=36,
            yearly_revenue=180000,
            revenue_growth_percent=8,
            operating_costs_yearly=90000,
            maintenance_costs_yearly=6000,
            best_case_multiplier=1.3,
            worst_case_multiplier=0.7,
        )
        db.add(project)
        db.flush()
        print(f"Created project: {project.name} (ID: {project.id})")

        inputs = project_to_input(project)
        scenario_set = calculate_all_scenarios(
            inputs,
            best_multiplier=project.best_case_multiplier,
            worst_multiplier=project.worst_case_multiplier,
        )
        project.results = {
            "expected": result_to_record(scenario_set.expected),
            "best": result_to_record(scenario_set.best),
            "worst": result_to_record(scenario_set.worst),
        }

        for name, adjustments, is_base in SNAPSHOTS:
            result = calculate_scenario_with_adjustments(inputs, adjustments)
            snapshot = Snapshot(
                project_id=project.id,
                name=name,
                is_base=is_base,
                sales_adjustment_percent=adjustments.sales_adjustment_percent,
                costs_adjustment_percent=adjustments.costs_adjustment_percent,
                discount_adjustment=adjustments.discount_adjustment,
                results=result_to_record(result),
            )
            db.add(snapshot)
            print(f"Created snapshot: {name} (NPV {result.npv:,.0f})")

        db.commit()
        print(f"\nExpected case: ROI {scenario_set.expected.roi:.1f}%, "
              f"IRR {scenario_set.expected.irr:.1f}%, "
              f"payback {scenario_set.expected.payback_period_months:.1f} months")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    main()
