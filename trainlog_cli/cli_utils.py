from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from tabulate import tabulate

from trainlog_core.formatting import fmt_date, fmt_distance_km, fmt_hm, fmt_optional
from trainlog_core.models import SessionEntry

ENTRY_HEADERS = ["Id", "Date", "Sport", "Duration", "Distance (km)", "Calories", "RPE", "Avg HR", "Note"]


@dataclass
class MenuItem:
    """ One line of a text menu """
    key: str
    label: str
    action: Optional[Callable[[], None]] = None  # runs before the key is returned


def render_menu(title: str, items: Iterable[MenuItem], footer: str | None = None) -> None:
    """ Print the title and one "[key] label" line per item """
    print(f"\n=== {title} ===")
    for it in items:
        print(f"[{it.key}] {it.label}")
    if footer:
        print(footer)


def prompt_menu(title: str, items: list[MenuItem], allow_back: bool = True, allow_quit: bool = True) -> str:
    """ Loop until one of the item keys is typed (case-insensitive), return that key """
    shown = list(items)
    keys = {i.key.lower() for i in shown}
    if allow_back and "b" not in keys:
        shown.append(MenuItem("b", "Back"))
    if allow_quit and "q" not in keys:
        shown.append(MenuItem("q", "Quit"))
    by_key = {i.key.lower(): i for i in shown}

    while True:
        render_menu(title, shown)
        picked = by_key.get(input("> ").strip().lower())
        if picked is None:
            print("⚠️ Not on the menu, try again.")
            continue
        if picked.action:
            picked.action()
        return picked.key


def entry_rows(entries: Iterable[SessionEntry], short_ids: bool = True) -> list[list]:
    """ Table rows for a list of sessions """
    return [
        [
            e.id[:8] if short_ids else e.id,
            fmt_date(e.date),
            e.sport,
            fmt_hm(e.duration_min),
            fmt_distance_km(e.distance_km),
            fmt_optional(e.calories),
            fmt_optional(e.rpe),
            fmt_optional(e.avg_hr),
            e.note,
        ]
        for e in entries
    ]


def print_list_table(rows, headers):
    """ Takes list of rows and prints the output """
    if not rows:
        print("⚠️ No results found.")
        return
    print(tabulate(rows, headers=headers, tablefmt="psql", showindex=False, disable_numparse=True))


def resolve_entry_id(entries: Iterable[SessionEntry], prefix: str) -> SessionEntry | None:
    """ Match a full id or a unique id prefix (the tables show 8 characters) """
    prefix = prefix.strip().lower()
    if not prefix:
        return None
    matches = [e for e in entries if e.id.lower().startswith(prefix)]
    return matches[0] if len(matches) == 1 else None
