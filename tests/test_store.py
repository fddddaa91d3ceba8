"""
Unit tests for the in-memory schedule store.

Store contract:
- add_course replaces the course's date map completely
- teacher links survive when the same instructor shows up again
- tasks and links are last-write-wins
- all_dates() includes task-only dates
"""

import unittest
from datetime import date

from coursecal.store import ScheduleStore

ALGORITHMS = "#\tDate\tTeacher\tHours\n1\t01/01/2024\tDr. Cohen\t10:00 - 12:00"


class TestScheduleStore(unittest.TestCase):
    def test_add_course(self) -> None:
        store = ScheduleStore()
        self.assertTrue(store.add_course("Algorithms", ALGORITHMS))

        self.assertEqual(store.courses["Algorithms"]["01/01/2024"], "Dr. Cohen, 10:00 - 12:00")
        self.assertEqual(store.teacher_links["Algorithms"]["Dr. Cohen"], "")

    def test_add_course_requires_name_and_text(self) -> None:
        store = ScheduleStore()
        self.assertFalse(store.add_course("", ALGORITHMS))
        self.assertFalse(store.add_course("Algorithms", ""))
        self.assertEqual(store.courses, {})
        self.assertEqual(store.revision, 0)

    def test_readd_replaces_dates(self) -> None:
        store = ScheduleStore()
        store.add_course("Algorithms", ALGORITHMS)
        store.add_course("Algorithms", "#\tDate\tTeacher\tHours\n1\t08/01/2024\tDr. Levi\t09:00 - 11:00")

        self.assertEqual(store.courses["Algorithms"], {"08/01/2024": "Dr. Levi, 09:00 - 11:00"})
        # links are never removed
        self.assertEqual(store.teacher_links["Algorithms"], {"Dr. Cohen": "", "Dr. Levi": ""})

    def test_readd_keeps_teacher_link(self) -> None:
        store = ScheduleStore()
        store.add_course("Algorithms", ALGORITHMS)
        store.set_teacher_link("Algorithms", "Dr. Cohen", "https://example.org/cohen")
        store.add_course("Algorithms", ALGORITHMS)

        self.assertEqual(store.link_for("Algorithms", "Dr. Cohen"), "https://example.org/cohen")

    def test_course_names_keep_insertion_order(self) -> None:
        store = ScheduleStore()
        store.add_course("Databases", ALGORITHMS)
        store.add_course("Algorithms", ALGORITHMS)
        store.add_course("Databases", ALGORITHMS)
        self.assertEqual(store.course_names(), ["Databases", "Algorithms"])

    def test_task_only_date_in_axis(self) -> None:
        store = ScheduleStore()
        store.add_course("Algorithms", ALGORITHMS)
        store.set_task("15/02/2024", "Homework 1")

        self.assertEqual(store.all_dates(), ["01/01/2024", "15/02/2024"])

    def test_set_task_last_write_wins_and_accepts_date(self) -> None:
        store = ScheduleStore()
        store.set_task("15/02/2024", "Homework 1")
        store.set_task(date(2024, 2, 15), "Homework 2")

        self.assertEqual(store.tasks, {"15/02/2024": "Homework 2"})

    def test_link_for_missing_is_empty(self) -> None:
        store = ScheduleStore()
        self.assertEqual(store.link_for("Nope", "Nobody"), "")

    def test_accessors_return_copies(self) -> None:
        store = ScheduleStore()
        store.add_course("Algorithms", ALGORITHMS)
        store.courses["Algorithms"]["02/02/2024"] = "hacked"
        store.tasks["02/02/2024"] = "hacked"
        self.assertNotIn("02/02/2024", store.all_dates())

    def test_axis_follows_mutations(self) -> None:
        store = ScheduleStore()
        self.assertEqual(store.all_dates(), [])
        store.set_task("03/03/2024", "exam prep")
        self.assertEqual(store.all_dates(), ["03/03/2024"])

    def test_rows(self) -> None:
        store = ScheduleStore()
        store.add_course("Algorithms", ALGORITHMS)
        store.add_course("Databases", "#\tDate\tTeacher\tHours\n1\t01/01/2024\tDr. Levi\t14:00 - 16:00")
        store.set_task("15/02/2024", "Homework 1")

        rows = store.rows()
        self.assertEqual([r.date for r in rows], ["01/01/2024", "15/02/2024"])
        self.assertEqual(
            rows[0].sessions,
            {"Algorithms": "Dr. Cohen, 10:00 - 12:00", "Databases": "Dr. Levi, 14:00 - 16:00"},
        )
        self.assertEqual(rows[0].task, "")
        self.assertEqual(rows[1].sessions, {})
        self.assertEqual(rows[1].task, "Homework 1")


if __name__ == "__main__":
    unittest.main()
