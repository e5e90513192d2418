"""
Application services module.
"""

from crux_analytics.services.insights import MetricInsight, generate_insights

__all__ = ["MetricInsight", "generate_insights"]
