"""
Timezone-aware datetime helpers.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """
    Return timezone-aware UTC datetime.

    Replaces deprecated datetime.utcnow() which is scheduled for removal in Python 3.14.
    """
    return datetime.now(UTC)
