import logging
from datetime import date
from typing import Any

from trainlog_core.aggregation import (
    daily_load, multi_week_rollup, personal_records, weekly_summary,
)
from trainlog_core.config import StoragePaths
from trainlog_core.entry_parser import create_entry, replace_fields
from trainlog_core.errors import EntryNotFoundError
from trainlog_core.models import SessionEntry, Settings, WeeklySummary
from trainlog_core.record_store import append_entry, load_all, rewrite_all

logger = logging.getLogger(__name__)


def add_session(paths: StoragePaths, **fields: Any) -> SessionEntry:
    """ Validate the fields, then append. Nothing is written if validation fails """
    entry = create_entry(**fields)
    append_entry(paths, entry)
    return entry


def _index_of(entries: list[SessionEntry], entry_id: str) -> int:
    for i, e in enumerate(entries):
        if e.id == entry_id:
            return i
    raise EntryNotFoundError(entry_id)


def delete_session(paths: StoragePaths, entry_id: str) -> SessionEntry:
    """ Load all, drop the entry, rewrite (with backup). Returns the removed entry """
    entries = load_all(paths)
    removed = entries.pop(_index_of(entries, entry_id))
    rewrite_all(paths, entries)
    logger.info("🗑️ Deleted %s session from %s (%s)", removed.sport, removed.date, removed.id)
    return removed


def edit_session(paths: StoragePaths, entry_id: str, **fields: Any) -> SessionEntry:
    """ Load all, replace the entry with a validated copy, rewrite (with backup) """
    entries = load_all(paths)
    idx = _index_of(entries, entry_id)
    updated = replace_fields(entries[idx], **fields)
    entries[idx] = updated
    rewrite_all(paths, entries)
    logger.info("✏️ Updated session %s", entry_id)
    return updated


def get_weekly_report(paths: StoragePaths, settings: Settings, day: date) -> WeeklySummary:
    """ Summary of the Monday-Sunday week containing `day` """
    return weekly_summary(load_all(paths), day, settings.default_rpe)


def get_dashboard(paths: StoragePaths, settings: Settings, *,
                  weeks: int = 4,
                  as_of: date | None = None) -> dict:
    """ Everything the main screen shows, built from one read of the log """
    as_of = as_of or date.today()
    entries = load_all(paths)

    return {
        "entries": list(reversed(entries)),
        "daily_load": daily_load(entries, settings.default_rpe),
        "records": personal_records(entries, settings.default_rpe),
        "rollup": multi_week_rollup(entries, weeks, as_of),
        "this_week": weekly_summary(entries, as_of, settings.default_rpe),
    }
