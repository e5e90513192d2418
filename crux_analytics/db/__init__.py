"""
Database configuration and models.
"""

from crux_analytics.db.database import engine, SessionLocal, get_db
from crux_analytics.db.models import Base

__all__ = ["engine", "SessionLocal", "get_db", "Base"]
