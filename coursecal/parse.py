"""
Parsing (pasted schedule text -> date map).

- Takes one course's pasted block (copied from a spreadsheet / web table)
- Drops the header line
- Turns EACH remaining line into exactly ONE session on one date
- Returns the date map plus the instructors that were seen

Important rules (DO NOT CHANGE):
- Fields are tab separated: <label> <date> <instructor> <hours>
- Lines with a missing date, instructor or hours are skipped silently
- Same date twice -> the later line wins
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from coursecal.model import MalformedSessionError, Session


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------

# dd/MM/yyyy, shared by the pasted text and the task date picker
DATE_KEY_FORMAT = "%d/%m/%Y"

# Separators inside a session descriptor: "<instructor>, <start> - <end>"
INSTRUCTOR_SEPARATOR = ", "
HOURS_SEPARATOR = " - "


# ---------------------------------------------------------------------------
# Date keys
# ---------------------------------------------------------------------------


def format_date_key(day: date) -> str:
    """
    Encode a calendar date the way the parser stores it (dd/MM/yyyy).
    """
    return day.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: str) -> date:
    """
    Decode a dd/MM/yyyy key. Raises ValueError for anything else.
    """
    return datetime.strptime(key.strip(), DATE_KEY_FORMAT).date()


# ---------------------------------------------------------------------------
# Session descriptors
# ---------------------------------------------------------------------------


def format_session(instructor: str, hours: str) -> str:
    return f"{instructor}{INSTRUCTOR_SEPARATOR}{hours}"


def parse_session(descriptor: str) -> Session:
    """
    Split a session descriptor back into instructor, start and end.

    Raises MalformedSessionError if one of the separators is missing
    or one of the parts is empty.
    """
    if INSTRUCTOR_SEPARATOR not in descriptor:
        raise MalformedSessionError(f"Missing {INSTRUCTOR_SEPARATOR!r} in session: {descriptor!r}")

    # The hours range never contains ", ", instructor names ("Cohen, David") may
    instructor, hours = descriptor.rsplit(INSTRUCTOR_SEPARATOR, 1)

    if HOURS_SEPARATOR not in hours:
        raise MalformedSessionError(f"Missing {HOURS_SEPARATOR!r} in session: {descriptor!r}")

    start, end = [t.strip() for t in hours.split(HOURS_SEPARATOR, 1)]

    # The name stays as pasted; it is the key of the teacher link map
    if not (instructor.strip() and start and end):
        raise MalformedSessionError(f"Incomplete session: {descriptor!r}")

    return Session(instructor=instructor, start=start, end=end)


# ---------------------------------------------------------------------------
# Line parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def parse_schedule_line(line: str) -> Optional[Tuple[str, str, str]]:
    """
    Parses exactly one pasted line into (date, instructor, hours).

    Returns None if one of the three fields is missing or empty.
    """
    # Split the line by tabs; the first column is a row label and is ignored
    parts = line.rstrip("\r").split("\t")
    if len(parts) < 4:
        return None

    day, instructor, hours = parts[1], parts[2], parts[3]
    if not (day and instructor and hours):
        return None

    return day, instructor, hours


def parse_course_text(raw_text: str) -> Tuple[Dict[str, str], List[str]]:
    """
    Parses a whole pasted block and returns:
    - date map: date key -> session descriptor
    - instructors: distinct instructor names in first-seen order
    """
    date_map: Dict[str, str] = {}
    instructors: List[str] = []

    lines = raw_text.strip().splitlines()

    # First line is the table header
    for line in lines[1:]:
        parsed = parse_schedule_line(line)
        if parsed is None:
            continue

        day, instructor, hours = parsed
        date_map[day] = format_session(instructor, hours)

        if instructor not in instructors:
            instructors.append(instructor)

    return date_map, instructors
