"""
Report models.

Immutable output structures of the analytics pipeline.
"""

from .report import AnalyticsReport, EvolutionPoint

__all__ = ["AnalyticsReport", "EvolutionPoint"]
