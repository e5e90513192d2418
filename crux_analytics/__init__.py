"""
Crux Analytics: financial case analysis for investment decisions.
"""

__version__ = "0.1.0"
