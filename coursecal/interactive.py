from __future__ import annotations

from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coursecal.export_ics import DEFAULT_FILENAME, export_store_to_ics
from coursecal.model import SkippedCell
from coursecal.parse import parse_date_key
from coursecal.store import ScheduleStore

console = Console()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


def build_schedule_table(store: ScheduleStore) -> Table:
    """
    Merged table: one row per date, one column per course, plus the task column.
    """
    names = store.course_names()

    table = Table(title="Schedule", box=box.SIMPLE)
    table.add_column("Date", style="bold cyan")
    table.add_column("Task")
    for name in names:
        table.add_column(escape(name))

    for row in store.rows():
        cells = [row.date, escape(row.task)]
        cells.extend(escape(row.sessions.get(name, "")) for name in names)
        table.add_row(*cells)

    return table


def build_links_table(store: ScheduleStore) -> Table:
    table = Table(title="Teacher links", box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Teacher")
    table.add_column("Link")

    for course, links in store.teacher_links.items():
        for teacher, url in links.items():
            table.add_row(escape(course), escape(teacher), escape(url) if url else "[dim](not set)[/]")

    return table


def print_schedule(store: ScheduleStore) -> None:
    console.print(build_schedule_table(store))


def print_skipped(skipped: list[SkippedCell]) -> None:
    if not skipped:
        return
    _println(f"[yellow]Skipped {len(skipped)} session(s) that could not be read:[/]")
    for cell in skipped:
        _println(escape(f"- {cell.date} {cell.course}: {cell.descriptor!r} ({cell.reason})"))


def run_interactive(store: ScheduleStore) -> None:
    """
    Interactive menu loop. The schedule only lives as long as the loop.
    """
    while True:
        _println("\n=== coursecal (interactive) ===")
        _println(f"Courses: {len(store.course_names())} | Dates: {len(store.all_dates())}")

        choice = _prompt(
            "\n[1] Add course (paste schedule)\n"
            "[2] Add / edit task\n"
            "[3] Set teacher link\n"
            "[4] Show schedule\n"
            "[5] Show teacher links\n"
            "[6] Export .ics\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            _flow_add_course(store)
        elif choice == "2":
            _flow_task(store)
        elif choice == "3":
            _flow_teacher_link(store)
        elif choice == "4":
            print_schedule(store)
        elif choice == "5":
            console.print(build_links_table(store))
        elif choice == "6":
            _flow_export(store)
        else:
            _println("Invalid choice.")


def _read_block() -> str:
    """
    Read pasted lines until an empty line.
    """
    lines: list[str] = []
    while True:
        line = _prompt("")
        if not line.strip():
            break
        lines.append(line)
    return "\n".join(lines)


def _flow_add_course(store: ScheduleStore) -> None:
    name = _prompt("Course name: ").strip()
    _println("Paste the schedule (header line first), finish with an empty line:")
    text = _read_block()

    if not store.add_course(name, text):
        _println("Course name and schedule are both required.")
        return

    sessions = len(store.courses.get(name, {}))
    _println(f"Added: {escape(name)} ({sessions} sessions)")


def _flow_task(store: ScheduleStore) -> None:
    day = _prompt("Date (dd/mm/yyyy): ").strip()
    try:
        parse_date_key(day)
    except ValueError:
        _println("Invalid date.")
        return

    current = store.task_for(day)
    if current:
        _println(f"Current task: {escape(current)}")

    text = _prompt("Task: ").strip()
    if not text:
        _println("No task entered.")
        return

    store.set_task(day, text)
    _println(f"Task set for {day}.")


def _flow_teacher_link(store: ScheduleStore) -> None:
    links = store.teacher_links
    pairs = [(course, teacher) for course, teachers in links.items() for teacher in teachers]
    if not pairs:
        _println("No teachers yet. Add a course first.")
        return

    table = Table(title="Teachers", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Course")
    table.add_column("Teacher")
    for i, (course, teacher) in enumerate(pairs, start=1):
        table.add_row(str(i), escape(course), escape(teacher))
    console.print(table)

    raw = _prompt("Select # (Enter to cancel): ").strip()
    if not raw:
        return
    if not raw.isdigit() or not (1 <= int(raw) <= len(pairs)):
        _println("Invalid selection.")
        return

    course, teacher = pairs[int(raw) - 1]
    current = store.link_for(course, teacher)
    url = _prompt(escape(f"Link for {teacher} [{current}]: ")).strip()

    # Enter keeps the current link
    store.set_teacher_link(course, teacher, url if url else current)
    _println("Link saved.")


def _flow_export(store: ScheduleStore) -> None:
    if not store.course_names():
        _println("No courses yet.")
        return

    out_in = _prompt(escape(f"File name [{DEFAULT_FILENAME}]: ")).strip()
    out_path = Path(out_in) if out_in else Path(DEFAULT_FILENAME)

    if out_path.suffix.lower() != ".ics":
        out_path = out_path.with_suffix(".ics")

    result = export_store_to_ics(store, out_path)
    _println(f"\nExported {result.events} events.")
    _println(escape(f"Saved to: {out_path.resolve()}"))
    print_skipped(result.skipped)
