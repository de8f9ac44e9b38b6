"""
Two ways of turning raw field strings into a SessionEntry:

- parse_row: lenient, used when reading the log back. Bad values are coerced and
  logged, a row is never rejected.
- create_entry: strict, used for user input. Any bad field raises InvalidInputError
  and nothing is built.
"""
import logging
import math
import re
import uuid
from datetime import date, datetime
from typing import Any, Mapping

from trainlog_core.config import CSV_COLUMNS, DATE_FMT, RPE_MAX, RPE_MIN
from trainlog_core.errors import InvalidInputError
from trainlog_core.models import SessionEntry, Sport

logger = logging.getLogger(__name__)

WHOLE_NUMBER_RE = re.compile(r"^\s*\d+\s*$")
DISTANCE_RE = re.compile(r"^(\d+)?([.,]\d+)?$")


def new_entry_id() -> str:
    return uuid.uuid4().hex


def _text(value: Any) -> str:
    """ None -> "", everything else -> stripped str """
    return "" if value is None else str(value).strip()


# ---------------------- LENIENT (LOAD) ---------------------- #
def parse_date_lenient(raw: str) -> date:
    """ Parse YYYY-MM-DD (or an ISO datetime), fall back to today """
    raw = _text(raw)
    try:
        return datetime.strptime(raw, DATE_FMT).date()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        logger.warning("⚠️ Unparsable date %r, using today instead.", raw)
        return date.today()


def parse_optional_int(raw: str) -> int | None:
    """ Whole numbers only, anything else counts as absent """
    raw = _text(raw)
    if not WHOLE_NUMBER_RE.match(raw):
        return None
    return int(raw)


def parse_optional_distance(raw: str) -> float | None:
    """ Real number, comma accepted as decimal separator """
    raw = _text(raw)
    if not raw:
        return None
    try:
        km = float(raw.replace(",", "."))
    except ValueError:
        logger.warning("⚠️ Unparsable distance %r, treating as absent.", raw)
        return None
    if not math.isfinite(km) or km < 0:
        logger.warning("⚠️ Distance out of range %r, treating as absent.", raw)
        return None
    return km


def parse_row(row: Mapping[str, Any]) -> SessionEntry:
    """ Build a SessionEntry from one CSV row (column name -> raw string). Never raises """
    entry_id = _text(row.get("Id"))
    if not entry_id:
        entry_id = new_entry_id()
        logger.warning("⚠️ Row without Id, assigned %s.", entry_id)

    duration = parse_optional_int(row.get("DurationMin"))
    if duration is None:
        logger.warning("⚠️ Session %s has unparsable duration %r, using 0.", entry_id, row.get("DurationMin"))
        duration = 0

    rpe = parse_optional_int(row.get("RPE"))
    if rpe == 0:
        rpe = None
    elif rpe is not None and rpe > RPE_MAX:
        logger.warning("⚠️ Session %s has RPE %s above %s, clamping.", entry_id, rpe, RPE_MAX)
        rpe = RPE_MAX

    return SessionEntry(
        id=entry_id,
        date=parse_date_lenient(row.get("Date")),
        sport=_text(row.get("Sport")) or Sport.OTHER.value,
        duration_min=duration,
        calories=parse_optional_int(row.get("Calories")),
        distance_km=parse_optional_distance(row.get("DistanceKm")),
        rpe=rpe,
        avg_hr=parse_optional_int(row.get("AvgHR")),
        note="" if row.get("Note") is None else str(row.get("Note")),
        source_fields=tuple("" if row.get(c) is None else str(row.get(c)) for c in CSV_COLUMNS),
    )


# ---------------------- STRICT (CREATE) ---------------------- #
def validate_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = _text(value)
    try:
        return datetime.strptime(raw, DATE_FMT).date()
    except ValueError:
        raise InvalidInputError("date", "a calendar date as YYYY-MM-DD", value) from None


def validate_sport(value: Any) -> str:
    if isinstance(value, Sport):
        return value.value
    raw = _text(value)
    for sport in Sport:
        if sport.value.lower() == raw.lower():
            return sport.value
    raise InvalidInputError("sport", f"one of {', '.join(Sport.labels())}", value)


def validate_duration(value: Any) -> int:
    raw = _text(value)
    if not WHOLE_NUMBER_RE.match(raw) or int(raw) < 1:
        raise InvalidInputError("duration", "a whole number of minutes, at least 1", value)
    return int(raw)


def validate_optional_int(value: Any, field_name: str) -> int | None:
    raw = _text(value)
    if not raw:
        return None
    if not WHOLE_NUMBER_RE.match(raw):
        raise InvalidInputError(field_name, "a whole number, 0 or more", value)
    return int(raw)


def validate_rpe(value: Any) -> int | None:
    raw = _text(value)
    if not raw:
        return None
    if not WHOLE_NUMBER_RE.match(raw) or int(raw) > RPE_MAX:
        raise InvalidInputError("rpe", f"a whole number from {RPE_MIN} to {RPE_MAX}", value)
    rpe = int(raw)
    return rpe or None     # 0 means "no RPE"


def validate_distance(value: Any) -> float | None:
    # floats are taken as-is, the text pattern has no exponent form
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value) or value < 0:
            raise InvalidInputError("distance", "a number of kilometres, 0 or more", value)
        return float(value)
    raw = _text(value)
    if not raw:
        return None
    if not DISTANCE_RE.match(raw) or not any(ch.isdigit() for ch in raw):
        raise InvalidInputError("distance", "a number of kilometres such as 5, 5.2 or 5,2", value)
    return float(raw.replace(",", "."))


def _build_entry(entry_id: str, sport: str, *, date, duration_min, calories, distance_km, rpe, avg_hr,
                 note) -> SessionEntry:
    """ Validate everything but the (already checked) sport """
    return SessionEntry(
        id=entry_id,
        date=validate_date(date),
        sport=sport,
        duration_min=validate_duration(duration_min),
        calories=validate_optional_int(calories, "calories"),
        distance_km=validate_distance(distance_km),
        rpe=validate_rpe(rpe),
        avg_hr=validate_optional_int(avg_hr, "avg_hr"),
        note=note or "",
    )


def create_entry(
    *,
    date: Any,
    sport: Any,
    duration_min: Any,
    calories: Any = "",
    distance_km: Any = "",
    rpe: Any = "",
    avg_hr: Any = "",
    note: str | None = "",
    entry_id: str | None = None,
) -> SessionEntry:
    """ Validate user supplied fields and build a new entry, raises InvalidInputError on the first bad field """
    return _build_entry(
        entry_id or new_entry_id(),
        validate_sport(sport),
        date=date,
        duration_min=duration_min,
        calories=calories,
        distance_km=distance_km,
        rpe=rpe,
        avg_hr=avg_hr,
        note=note,
    )


def replace_fields(entry: SessionEntry, **fields: Any) -> SessionEntry:
    """
    Strict rebuild of an existing entry with some fields changed, id is kept.
    The sport is only checked against Sport when it changes, so rows logged with a
    free-text sport stay editable.
    """
    if "id" in fields or "entry_id" in fields:
        raise InvalidInputError("id", "unchanged, ids are immutable", fields.get("id", fields.get("entry_id")))

    current = {
        "date": entry.date,
        "duration_min": entry.duration_min,
        "calories": entry.calories,
        "distance_km": entry.distance_km,
        "rpe": entry.rpe,
        "avg_hr": entry.avg_hr,
        "note": entry.note,
    }
    new_sport = fields.pop("sport", entry.sport)
    unknown = set(fields) - set(current)
    if unknown:
        raise TypeError(f"Unknown session fields: {', '.join(sorted(unknown))}")

    sport = entry.sport if new_sport == entry.sport else validate_sport(new_sport)
    current.update(fields)
    return _build_entry(entry.id, sport, **current)
