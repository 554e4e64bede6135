"""
Analyzers package for the coursework analytics system.

Contains the two analytical engines (assignment bucketing and quiz item
analysis) and the analyzer classes that run them against repository data.
"""

from .sorts_assignments import VALID_BUCKETS, SortedAssignments, by_due_date
from .item_analysis import ItemAnalysisItem, ItemAnalysisSummary

__all__ = [
    "VALID_BUCKETS",
    "SortedAssignments",
    "by_due_date",
    "ItemAnalysisItem",
    "ItemAnalysisSummary",
]
