import math
from datetime import date
from typing import Literal

from trainlog_core.config import DATE_FMT


def fmt_str_decimals(fl_num, decimals: int = 2) -> str:
    """ Format decimal numbers, returns formatted string """
    return f"{fl_num:.{decimals}f}"


def fmt_optional(value, fmt=str, placeholder: str = "–") -> str:
    """ Absent values print as a dash instead of 'None' """
    return placeholder if value is None else fmt(value)


def fmt_distance_km(km) -> str:
    """ Takes distance in km (or None) and returns a 2-decimal string """
    return fmt_optional(km, fmt_str_decimals)


def fmt_date(d: date) -> str:
    return d.strftime(DATE_FMT)


def fmt_week_label(start: date, end: date) -> str:
    """ 'Jan 01 – Jan 07 2024' for a [start, end) week """
    last = date.fromordinal(end.toordinal() - 1)
    return f"{start:%b %d} – {last:%b %d %Y}"


""" format_minutes is the core function and fmt_hm the wrapper matplotlib formatters call """
def fmt_hm(minutes, pos=None):
    # ----- DON'T ERASE THE "pos=None" it's used by matplotlib's FuncFormatter ------ #
    return format_minutes(minutes, "hm")


def format_minutes(
    minutes,
    mode: Literal["hms", "hm"] = "hm",
) -> str:
    """ Takes minutes and returns time in hh:mm or hh:mm:ss format """
    # Check for undesirable values normalizing to 0
    try:
        total_min = float(minutes)
    except (TypeError, ValueError):
        total_min = 0
    if math.isnan(total_min) or total_min < 0:
        total_min = 0

    sec = int(round(total_min * 60))
    h, rem = divmod(sec, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02}:{m:02}" if mode == "hm" else f"{h:02}:{m:02}:{s:02}"
