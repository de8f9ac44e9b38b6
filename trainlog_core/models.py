from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from trainlog_core.config import DEFAULT_DARK_MODE, DEFAULT_RPE_FOR_LOAD


class Sport(str, Enum):
    RUNNING = "Running"
    GYM = "Gym"
    BJJ = "BJJ"
    KICKBOXING = "Kickboxing"
    CYCLING = "Cycling"
    SWIMMING = "Swimming"
    OTHER = "Other"

    @classmethod
    def labels(cls) -> list[str]:
        return [s.value for s in cls]


@dataclass(frozen=True)
class SessionEntry:
    """ One logged workout. Optional numbers are None when absent, never 0-as-missing """
    id: str
    date: date
    sport: str
    duration_min: int
    calories: int | None = None
    distance_km: float | None = None
    rpe: int | None = None
    avg_hr: int | None = None
    note: str = ""
    # Field strings as read from the log, written back verbatim while the entry is unchanged
    source_fields: tuple[str, ...] | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class DailyLoad:
    date: date
    load: int
    minutes: int
    sessions: int


@dataclass(frozen=True)
class SportBreakdown:
    sport: str
    sessions: int
    minutes: int
    load: int


@dataclass(frozen=True)
class WeeklySummary:
    week_start: date
    week_end: date          # exclusive
    sessions: int
    minutes: int
    load: int
    distance_km: float
    by_sport: list[SportBreakdown] = field(default_factory=list)
    entries: list[SessionEntry] = field(default_factory=list)


@dataclass(frozen=True)
class PersonalRecords:
    longest_session: SessionEntry | None = None
    highest_load: SessionEntry | None = None
    longest_run: SessionEntry | None = None


@dataclass(frozen=True)
class WeekMinutes:
    week_start: date
    minutes: int


@dataclass(frozen=True)
class Settings:
    dark_mode: bool = DEFAULT_DARK_MODE
    default_rpe: int = DEFAULT_RPE_FOR_LOAD
