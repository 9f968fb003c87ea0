"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import List, Tuple

MONTH_LABELS = ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"]


def months_back(anchor: date, count: int) -> List[Tuple[str, int]]:
    """(month label, year) pairs starting at anchor's month, going backwards"""
    month_index = anchor.month - 1
    year = anchor.year
    months = []
    for _ in range(count):
        months.append((MONTH_LABELS[month_index], year))
        month_index -= 1
        if month_index < 0:
            month_index = 11
            year -= 1
    return months


def days_before(anchor: date, days: int) -> str:
    """ISO date string for anchor minus days"""
    return (anchor - timedelta(days=days)).isoformat()
