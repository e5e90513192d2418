"""
API routes for the financial case analysis service.
"""

from fastapi import APIRouter

from crux_analytics.api import calculations, projects

router = APIRouter()

# Include sub-routers
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
