"""Date manipulation utilities"""

from datetime import date


def month_key(value_date: date) -> date:
    """First calendar day of the month containing value_date"""
    return value_date.replace(day=1)
