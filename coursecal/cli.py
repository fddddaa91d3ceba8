"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    coursecal show   --course Algorithms algo.tsv --task 15/02/2024 "Homework 1"
    coursecal export course_schedule.ics --course Algorithms algo.tsv
    coursecal interactive

Nothing is saved between runs: every command builds a fresh schedule
from the files and options it is given.

Note:
- The interactive UI lives in coursecal/interactive.py
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from coursecal.export_ics import DEFAULT_FILENAME, export_store_to_ics
from coursecal.interactive import print_schedule, print_skipped, run_interactive
from coursecal.parse import parse_date_key
from coursecal.store import ScheduleStore


def _read_text(path: Path) -> str | None:
    """
    Read a pasted schedule block from a file. Returns None if unreadable.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _build_store(args: argparse.Namespace) -> ScheduleStore | None:
    """
    Create a store from --course / --task / --link options.

    Returns None (after printing the reason) if an input is unusable.
    """
    store = ScheduleStore()

    for name, file_name in args.course or []:
        text = _read_text(Path(file_name))
        if text is None:
            print(f"Cannot read schedule file: {file_name}")
            return None
        if not store.add_course(name.strip(), text):
            print(f"Warning: course '{name}' has no name or no text (skipped).")

    for day, text in args.task or []:
        try:
            parse_date_key(day)
        except ValueError:
            print(f"Invalid task date (expected dd/mm/yyyy): {day}")
            return None
        store.set_task(day.strip(), text)

    for course, teacher, url in args.link or []:
        store.set_teacher_link(course, teacher, url)

    return store


def _cmd_show(args: argparse.Namespace) -> int:
    """
    Print the merged schedule table.
    """
    store = _build_store(args)
    if store is None:
        return 1

    if not store.all_dates():
        print("Nothing to show.")
        return 0

    print_schedule(store)
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Export the merged schedule into an iCalendar (.ics) file.
    """
    store = _build_store(args)
    if store is None:
        return 1

    if not store.course_names():
        print("No courses to export.")
        return 1

    out_path = (args.out or "").strip() or DEFAULT_FILENAME
    result = export_store_to_ics(store, out_path)
    print(f"Exported {result.events} events to: {out_path} ({result.mime_type})")
    print_skipped(result.skipped)
    return 0


def _add_input_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--course",
        "-c",
        nargs=2,
        action="append",
        metavar=("NAME", "FILE"),
        help="Course name and a file with its pasted (tab separated) schedule",
    )
    p.add_argument(
        "--task",
        "-t",
        nargs=2,
        action="append",
        metavar=("DATE", "TEXT"),
        help="Task for a date (dd/mm/yyyy)",
    )
    p.add_argument(
        "--link",
        "-l",
        nargs=3,
        action="append",
        metavar=("COURSE", "TEACHER", "URL"),
        help="Link for one teacher of one course",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursecal", description="Merged course schedule + .ics export")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_show = sub.add_parser("show", help="Show the merged schedule table")
    _add_input_options(p_show)

    p_export = sub.add_parser("export", help="Export the merged schedule to .ics")
    p_export.add_argument("out", type=str, nargs="?", default=DEFAULT_FILENAME, help="Output file path")
    _add_input_options(p_export)

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "show":
        raise SystemExit(_cmd_show(args))
    if args.command == "export":
        raise SystemExit(_cmd_export(args))

    if args.command == "interactive":
        run_interactive(ScheduleStore())
        raise SystemExit(0)

    raise SystemExit(2)
