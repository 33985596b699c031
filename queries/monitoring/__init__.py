"""
Run monitoring
"""

from .metrics import RunStatistics

__all__ = ["RunStatistics"]
