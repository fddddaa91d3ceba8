"""
In-memory schedule state for one session.

The store owns three maps:

    courses        course name -> {date key -> session descriptor}
    tasks          date key -> task text
    teacher_links  course name -> {instructor -> url}

Nothing is persisted; a new process starts with an empty store.
Each mutation builds the new maps first and then swaps them in, so a
reader never sees a course half merged.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Union

from coursecal.axis import build_date_axis
from coursecal.model import ScheduleRow
from coursecal.parse import format_date_key, parse_course_text

logger = logging.getLogger(__name__)


class ScheduleStore:
    def __init__(self) -> None:
        self._courses: Dict[str, Dict[str, str]] = {}
        self._tasks: Dict[str, str] = {}
        self._teacher_links: Dict[str, Dict[str, str]] = {}
        self._revision = 0
        self._axis_cache: Optional[tuple[int, List[str]]] = None

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def add_course(self, name: str, raw_text: str) -> bool:
        """
        Parse a pasted block and store it under the course name.

        The course's previous date map is replaced completely. Teacher links
        that were already set survive when the instructor shows up again;
        new instructors start with an empty link.

        Returns False (and changes nothing) if name or text is empty.
        """
        if not name or not raw_text:
            return False

        date_map, instructors = parse_course_text(raw_text)

        courses = dict(self._courses)
        courses[name] = date_map

        links = dict(self._teacher_links.get(name, {}))
        for instructor in instructors:
            links.setdefault(instructor, "")
        teacher_links = dict(self._teacher_links)
        teacher_links[name] = links

        self._courses = courses
        self._teacher_links = teacher_links
        self._bump()

        logger.debug("Stored course %r: %d sessions, %d instructors", name, len(date_map), len(instructors))
        return True

    def set_task(self, day: Union[str, date], text: str) -> None:
        """
        Set the task for a date (last write wins). Accepts a date key or a date.
        """
        key = format_date_key(day) if isinstance(day, date) else day

        tasks = dict(self._tasks)
        tasks[key] = text
        self._tasks = tasks
        self._bump()

    def set_teacher_link(self, course: str, teacher: str, url: str) -> None:
        links = dict(self._teacher_links.get(course, {}))
        links[teacher] = url

        teacher_links = dict(self._teacher_links)
        teacher_links[course] = links
        self._teacher_links = teacher_links
        self._bump()

    def _bump(self) -> None:
        self._revision += 1

    # -----------------------------------------------------------------------
    # Read access
    # -----------------------------------------------------------------------

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def courses(self) -> Dict[str, Dict[str, str]]:
        return {name: dict(date_map) for name, date_map in self._courses.items()}

    @property
    def tasks(self) -> Dict[str, str]:
        return dict(self._tasks)

    @property
    def teacher_links(self) -> Dict[str, Dict[str, str]]:
        return {name: dict(links) for name, links in self._teacher_links.items()}

    def course_names(self) -> List[str]:
        """
        Course names in the order they were first added.
        """
        return list(self._courses.keys())

    def task_for(self, key: str) -> str:
        return self._tasks.get(key, "")

    def link_for(self, course: str, teacher: str) -> str:
        return self._teacher_links.get(course, {}).get(teacher, "") or ""

    def all_dates(self) -> List[str]:
        """
        Sorted union of all course and task dates (cached per revision).
        """
        if self._axis_cache is None or self._axis_cache[0] != self._revision:
            self._axis_cache = (self._revision, build_date_axis(self._courses, self._tasks))
        return list(self._axis_cache[1])

    def rows(self) -> List[ScheduleRow]:
        """
        The merged table: one row per date, with every course meeting that day.
        """
        names = self.course_names()
        out: List[ScheduleRow] = []
        for key in self.all_dates():
            sessions = {name: self._courses[name][key] for name in names if key in self._courses[name]}
            out.append(ScheduleRow(date=key, task=self.task_for(key), sessions=sessions))
        return out
