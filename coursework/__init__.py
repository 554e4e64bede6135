"""
Coursework analytics.

Assignment bucketing and quiz item analysis for a learning-management host.
"""

__version__ = "0.1.0"
