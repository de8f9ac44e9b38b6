import os
from dataclasses import dataclass
from pathlib import Path


def resolve_base_dir() -> Path:
    """
    Search order:
    1) TRAINLOG_HOME env var (if set)
    2) Per-user folder (~/TrainLog)
    """
    env = os.getenv("TRAINLOG_HOME")
    if env:
        return Path(env).expanduser().resolve()
    return Path.home() / "TrainLog"


BASE_DIR = resolve_base_dir()

LOG_FILE_NAME = "training_log.csv"
REPORTS_DIR_NAME = "Reports"
BACKUPS_DIR_NAME = "Backups"
SETTINGS_FILE_NAME = "settings.json"

# Column order of the on-disk log, header row included as-is #
CSV_COLUMNS = ["Id", "Date", "Sport", "DurationMin", "Calories", "DistanceKm", "RPE", "AvgHR", "Note"]
DATE_FMT = "%Y-%m-%d"
BACKUP_TS_FMT = "%Y%m%d_%H%M%S_%f"

DEFAULT_DARK_MODE = False
DEFAULT_RPE_FOR_LOAD = 5
RPE_MIN, RPE_MAX = 1, 10


@dataclass(frozen=True)
class StoragePaths:
    """ Every location the app reads or writes, resolved once at startup """
    base_dir: Path
    log_file: Path
    reports_dir: Path
    backups_dir: Path
    settings_file: Path

    @classmethod
    def under(cls, base: Path | str) -> "StoragePaths":
        base = Path(base).expanduser()
        return cls(
            base_dir=base,
            log_file=base / LOG_FILE_NAME,
            reports_dir=base / REPORTS_DIR_NAME,
            backups_dir=base / BACKUPS_DIR_NAME,
            settings_file=base / SETTINGS_FILE_NAME,
        )


def default_paths() -> StoragePaths:
    return StoragePaths.under(BASE_DIR)
