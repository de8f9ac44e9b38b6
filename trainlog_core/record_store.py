import logging
import shutil
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable

import pandas as pd

from trainlog_core.config import BACKUP_TS_FMT, CSV_COLUMNS, DATE_FMT, StoragePaths
from trainlog_core.entry_parser import parse_row
from trainlog_core.errors import StorageError
from trainlog_core.models import SessionEntry

logger = logging.getLogger(__name__)

HEADER_LINE = ",".join(CSV_COLUMNS) + "\n"


# ---------------------- SERIALIZATION ---------------------- #
def quote_field(value: str) -> str:
    """ Wrap in double quotes, doubling any quote inside """
    return '"' + value.replace('"', '""') + '"'


def _plain_field(value: str) -> str:
    """ Unquoted unless the value would break the row apart """
    if any(ch in value for ch in (",", '"', "\n", "\r")):
        return quote_field(value)
    return value


def _opt(value) -> str:
    return "" if value is None else str(value)


def fmt_distance_field(km: float | None) -> str:
    """ Plain decimal text, never scientific notation (1e-05 -> 0.00001) """
    if km is None:
        return ""
    text = repr(float(km))
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def entry_to_row(entry: SessionEntry) -> list[str]:
    """
    Field values in CSV_COLUMNS order, absent numbers as empty strings.
    Entries read from the log go back out with their original text (only the Id is
    taken from the entry, since a blank one was filled in on load).
    """
    if entry.source_fields is not None:
        return [entry.id, *entry.source_fields[1:]]
    return [
        entry.id,
        entry.date.strftime(DATE_FMT),
        entry.sport,
        str(entry.duration_min),
        _opt(entry.calories),
        fmt_distance_field(entry.distance_km),
        _opt(entry.rpe),
        _opt(entry.avg_hr),
        entry.note,
    ]


def serialize_entry(entry: SessionEntry) -> str:
    """ One CSV line (with trailing newline). The Note is always quoted """
    *fields, note = entry_to_row(entry)
    return ",".join([_plain_field(f) for f in fields] + [quote_field(note)]) + "\n"


# ---------------------- STORAGE ---------------------- #
def ensure_storage(paths: StoragePaths) -> None:
    """ Create base/report/backup folders and an empty log with header, whatever is missing """
    try:
        for folder in (paths.base_dir, paths.reports_dir, paths.backups_dir):
            folder.mkdir(parents=True, exist_ok=True)
        if not paths.log_file.exists():
            paths.log_file.write_text(HEADER_LINE, encoding="utf-8", newline="")
            logger.info("📄 Created empty training log at %s", paths.log_file)
    except OSError as e:
        raise StorageError("create storage at", paths.base_dir, str(e)) from e


def _read_log_df(log_file: Path) -> pd.DataFrame:
    """ Raw log as a DataFrame of strings, one column per CSV_COLUMNS entry """
    if not log_file.exists() or log_file.stat().st_size == 0:
        return pd.DataFrame(columns=CSV_COLUMNS)

    def _truncate(bad_line: list[str]) -> list[str]:
        logger.warning("⚠️ Row with %d fields, keeping the first %d.", len(bad_line), len(CSV_COLUMNS))
        return bad_line[:len(CSV_COLUMNS)]

    try:
        df = pd.read_csv(
            log_file,
            dtype=str,
            keep_default_na=False,
            index_col=False,
            engine="python",
            on_bad_lines=_truncate,
            encoding="utf-8",
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=CSV_COLUMNS)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise StorageError("read", log_file, str(e)) from e

    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        logger.debug("Log has no %s column(s), treating them as empty.", ", ".join(missing))
    return df.reindex(columns=CSV_COLUMNS, fill_value="").fillna("")


def load_all(paths: StoragePaths) -> list[SessionEntry]:
    """ Every entry in the log, oldest first (same-day entries keep file order) """
    df = _read_log_df(paths.log_file)
    entries = [parse_row(row) for row in df.to_dict(orient="records")]

    seen: set[str] = set()
    for entry in entries:
        if entry.id in seen:
            logger.warning("⚠️ Duplicate session id %s in %s", entry.id, paths.log_file.name)
        seen.add(entry.id)

    logger.debug("Loaded %d sessions from %s", len(entries), paths.log_file)
    return sorted(entries, key=lambda e: e.date)


def _ends_with_newline(p: Path) -> bool:
    with p.open("rb") as fh:
        fh.seek(0, 2)
        if fh.tell() == 0:
            return True
        fh.seek(-1, 2)
        return fh.read(1) in (b"\n", b"\r")


def append_entry(paths: StoragePaths, entry: SessionEntry) -> None:
    """ Append a single row, existing content is never rewritten """
    if not paths.log_file.exists():
        ensure_storage(paths)
    try:
        prefix = "" if _ends_with_newline(paths.log_file) else "\n"
        with paths.log_file.open("a", encoding="utf-8", newline="") as fh:
            fh.write(prefix + serialize_entry(entry))
    except OSError as e:
        raise StorageError("append to", paths.log_file, str(e)) from e
    logger.info("✅ Logged %s session on %s (%s min)", entry.sport, entry.date, entry.duration_min)


def backup(paths: StoragePaths) -> Path | None:
    """ Copy the log to Backups/<stem>_<timestamp>.csv, returns the copy or None if there is no log yet """
    src = paths.log_file
    if not src.exists():
        return None

    ts = datetime.now().strftime(BACKUP_TS_FMT)
    target = paths.backups_dir / f"{src.stem}_{ts}{src.suffix}"
    n = 1
    while target.exists():
        target = paths.backups_dir / f"{src.stem}_{ts}_{n}{src.suffix}"
        n += 1

    try:
        paths.backups_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, target)
    except OSError as e:
        raise StorageError("back up", src, str(e)) from e
    logger.info("💾 Backup written to %s", target)
    return target


def list_backups(paths: StoragePaths) -> list[Path]:
    """ Backups of the log, oldest first """
    if not paths.backups_dir.exists():
        return []
    stem, suffix = paths.log_file.stem, paths.log_file.suffix
    return sorted(paths.backups_dir.glob(f"{stem}_*{suffix}"), key=lambda p: p.name)


def rewrite_all(paths: StoragePaths, entries: Iterable[SessionEntry]) -> None:
    """ Replace the whole log with `entries` (in the given order), backing up the old file first """
    entries = list(entries)
    backup(paths)

    tmp = paths.log_file.with_suffix(paths.log_file.suffix + ".tmp")
    try:
        paths.log_file.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8", newline="") as fh:
            fh.write(HEADER_LINE)
            for entry in entries:
                fh.write(serialize_entry(entry))
        tmp.replace(paths.log_file)
    except OSError as e:
        raise StorageError("rewrite", paths.log_file, str(e)) from e
    logger.info("📝 Rewrote %s with %d sessions", paths.log_file.name, len(entries))
