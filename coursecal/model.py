"""
Central data model definitions used across the project.

Course date maps store session descriptors as plain strings
("<instructor>, <start> - <end>"), because that is what the merged table
shows. The exporter turns them back into Session objects before building
calendar events.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict


class MalformedSessionError(ValueError):
    """
    Raised when a session descriptor does not have the
    "<instructor>, <start> - <end>" shape.
    """


@dataclass(frozen=True)
class Session:
    """
    One course meeting on one date (instructor + time range).
    """

    instructor: str
    start: str
    end: str

    @property
    def hours(self) -> str:
        return f"{self.start} - {self.end}"


@dataclass
class ScheduleRow:
    """
    Represents one line of the merged table: a date, its task (may be empty)
    and the session descriptor of every course that meets on that date.
    """

    date: str
    task: str
    sessions: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SkippedCell:
    """
    A (date, course) cell the exporter could not turn into an event.
    """

    date: str
    course: str
    descriptor: str
    reason: str
