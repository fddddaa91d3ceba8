"""
Date axis (rows of the merged table).

The axis is the union of every course date and every task date,
sorted by calendar day. It is recomputed from the current maps and
holds no state of its own.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from coursecal.parse import parse_date_key


def date_sort_key(key: str) -> tuple[int, int, int, int, str]:
    """
    Sort key for a dd/MM/yyyy date key.

    Keys that do not decode (only possible for hand-typed input) sort
    after all real dates, in plain string order.
    """
    try:
        day = parse_date_key(key)
    except ValueError:
        return (1, 0, 0, 0, key)
    return (0, day.year, day.month, day.day, key)


def build_date_axis(
    courses: Mapping[str, Mapping[str, str]],
    tasks: Iterable[str],
) -> list[str]:
    """
    Return all dates from all courses plus all task dates,
    without duplicates, ascending by calendar day.
    """
    dates: set[str] = set()
    for date_map in courses.values():
        dates.update(date_map.keys())
    dates.update(tasks)

    return sorted(dates, key=date_sort_key)
