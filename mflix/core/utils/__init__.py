"""
Core utility functions for the mflix backend.
"""

from .date_utils import utcnow

__all__ = ["utcnow"]
