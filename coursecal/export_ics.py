"""
iCalendar (.ics) export.

We convert the merged schedule into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

One VEVENT is written per (date, course) cell that has a session.
Times are floating local times (no timezone suffix).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence

from coursecal.model import MalformedSessionError, SkippedCell
from coursecal.parse import DATE_KEY_FORMAT, parse_session
from coursecal.store import ScheduleStore

logger = logging.getLogger(__name__)

ICS_MIME_TYPE = "text/calendar"
DEFAULT_FILENAME = "course_schedule.ics"
PRODID = "-//coursecal//Course Schedule//EN"


@dataclass
class CalendarExport:
    content: bytes
    events: int
    skipped: list[SkippedCell] = field(default_factory=list)
    mime_type: str = ICS_MIME_TYPE


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _ics_uri(url: str) -> str:
    # URI values are not escaped, but must stay on one line
    return url.replace("\r", "").replace("\n", "")


def _fold(line: str, limit: int = 75) -> str:
    """
    Fold a content line at 75 octets; continuation lines start with a space.
    """
    if len(line.encode("utf-8")) <= limit:
        return line

    parts: list[str] = []
    current = ""
    size = 0
    for ch in line:
        n = len(ch.encode("utf-8"))
        # never split a multi-byte character
        if size + n > limit:
            parts.append(current)
            current = ch
            size = 1 + n
        else:
            current += ch
            size += n
    parts.append(current)

    return "\r\n ".join(parts)


def _dt_local(date_key: str, time_hh_mm: str) -> str:
    """
    Convert a dd/MM/yyyy date key + HH:MM to ICS local datetime 'YYYYMMDDTHHMMSS'.
    """
    dt = datetime.strptime(f"{date_key.strip()} {time_hh_mm}", f"{DATE_KEY_FORMAT} %H:%M")
    return dt.strftime("%Y%m%dT%H%M%S")


def build_calendar(
    courses: Mapping[str, Mapping[str, str]],
    teacher_links: Mapping[str, Mapping[str, str]],
    date_axis: Sequence[str],
    course_names: Sequence[str],
    dtstamp: Optional[datetime] = None,
) -> CalendarExport:
    """
    Build the .ics content for the given schedule.

    Cells whose session cannot be parsed are skipped and reported in
    CalendarExport.skipped instead of raising.
    """
    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append(f"PRODID:{PRODID}")
    lines.append("CALSCALE:GREGORIAN")

    count = 0
    skipped: list[SkippedCell] = []
    for date_key in date_axis:
        for course in course_names:
            descriptor = courses.get(course, {}).get(date_key)
            if not descriptor:
                continue

            try:
                session = parse_session(descriptor)
                dtstart = _dt_local(date_key, session.start)
                dtend = _dt_local(date_key, session.end)
            except (MalformedSessionError, ValueError) as exc:
                logger.warning("Skipping %s on %s: %s", course, date_key, exc)
                skipped.append(SkippedCell(date=date_key, course=course, descriptor=descriptor, reason=str(exc)))
                continue

            link = teacher_links.get(course, {}).get(session.instructor) or ""

            lines.append("BEGIN:VEVENT")
            lines.append(f"UID:{_ics_escape(f'{course}-{dtstart}')}")
            # Midnight UTC of the event date unless given, so output stays reproducible
            stamp = dtstamp.strftime("%Y%m%dT%H%M%SZ") if dtstamp is not None else f"{dtstart[:8]}T000000Z"
            lines.append(f"DTSTAMP:{stamp}")
            lines.append(f"DTSTART:{dtstart}")
            lines.append(f"DTEND:{dtend}")
            lines.append(f"SUMMARY:{_ics_escape(course)}")
            # "\\n" is the escaped newline between the two description lines
            lines.append(f"DESCRIPTION:Teacher: {_ics_escape(session.instructor)}\\nLink: {_ics_escape(link)}")
            lines.append(f"URL:{_ics_uri(link)}")
            lines.append("END:VEVENT")
            count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    content = ("\r\n".join(_fold(line) for line in lines) + "\r\n").encode("utf-8")
    return CalendarExport(content=content, events=count, skipped=skipped)


def export_calendar(
    courses: Mapping[str, Mapping[str, str]],
    teacher_links: Mapping[str, Mapping[str, str]],
    date_axis: Sequence[str],
    course_names: Sequence[str],
) -> bytes:
    """
    Same as build_calendar(), but returns only the file content.
    """
    return build_calendar(courses, teacher_links, date_axis, course_names).content


def build_store_calendar(store: ScheduleStore) -> CalendarExport:
    return build_calendar(store.courses, store.teacher_links, store.all_dates(), store.course_names())


def export_store_to_ics(store: ScheduleStore, out_path: str | Path) -> CalendarExport:
    """
    Export the whole store to an .ics file. Returns the export result.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    result = build_store_calendar(store)
    out.write_bytes(result.content)
    return result
