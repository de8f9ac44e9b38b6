from datetime import date, timedelta
from typing import Iterable

import pandas as pd

from trainlog_core.models import (
    DailyLoad, PersonalRecords, SessionEntry, SportBreakdown, WeekMinutes, WeeklySummary, Sport,
)

DF_COLUMNS = ["id", "date", "sport", "duration_min", "distance_km", "rpe", "load"]


def effective_rpe(entry: SessionEntry, default_rpe: int) -> int:
    """ The entry's own RPE when it has one, else the configured fallback """
    return entry.rpe if entry.rpe is not None and entry.rpe > 0 else default_rpe


def load_for_entry(entry: SessionEntry, default_rpe: int) -> int:
    """ Training load = duration (min) x RPE """
    return entry.duration_min * effective_rpe(entry, default_rpe)


def week_start(d: date) -> date:
    """ Monday on or before d (Sunday is day 7, so it maps six days back) """
    return d - timedelta(days=d.weekday())


def entries_to_df(entries: Iterable[SessionEntry], default_rpe: int) -> pd.DataFrame:
    """ One row per entry in input order, with the computed load column """
    rows = [
        {
            "id": e.id,
            "date": e.date,
            "sport": e.sport,
            "duration_min": e.duration_min,
            "distance_km": e.distance_km,
            "rpe": e.rpe,
            "load": load_for_entry(e, default_rpe),
        }
        for e in entries
    ]
    return pd.DataFrame(rows, columns=DF_COLUMNS)


def daily_load(entries: Iterable[SessionEntry], default_rpe: int) -> list[DailyLoad]:
    """ Load, minutes and session count per calendar day, oldest first """
    df = entries_to_df(entries, default_rpe)
    if df.empty:
        return []

    agg = (df.groupby("date", sort=True)
             .agg(load=("load", "sum"),
                  minutes=("duration_min", "sum"),
                  sessions=("id", "count"))
             .reset_index())

    return [
        DailyLoad(date=row.date, load=int(row.load), minutes=int(row.minutes), sessions=int(row.sessions))
        for row in agg.itertuples(index=False)
    ]


def _sport_breakdown(week_df: pd.DataFrame) -> list[SportBreakdown]:
    """ Per-sport totals, most minutes first (ties keep first appearance) """
    if week_df.empty:
        return []

    agg = (week_df.groupby("sport", sort=False)
                  .agg(sessions=("id", "count"),
                       minutes=("duration_min", "sum"),
                       load=("load", "sum"))
                  .reset_index()
                  .sort_values("minutes", ascending=False, kind="stable"))

    return [
        SportBreakdown(sport=row.sport, sessions=int(row.sessions), minutes=int(row.minutes), load=int(row.load))
        for row in agg.itertuples(index=False)
    ]


def weekly_summary(entries: Iterable[SessionEntry], start: date, default_rpe: int) -> WeeklySummary:
    """ Totals and per-sport breakdown for the 7 days starting at the Monday of `start` """
    start = week_start(start)
    end = start + timedelta(days=7)
    week_entries = sorted((e for e in entries if start <= e.date < end), key=lambda e: e.date)

    df = entries_to_df(week_entries, default_rpe)
    distance = df["distance_km"].dropna()

    return WeeklySummary(
        week_start=start,
        week_end=end,
        sessions=len(df),
        minutes=int(df["duration_min"].sum()),
        load=int(df["load"].sum()),
        distance_km=float(distance.astype(float).sum()) if not distance.empty else 0.0,
        by_sport=_sport_breakdown(df),
        entries=week_entries,
    )


def _first_max(entries: list[SessionEntry], key) -> SessionEntry | None:
    """ max() keeps the first of equal candidates """
    return max(entries, key=key) if entries else None


def personal_records(entries: Iterable[SessionEntry], default_rpe: int) -> PersonalRecords:
    """ Longest session, highest load and longest run over all entries """
    ordered = sorted(entries, key=lambda e: e.date)
    runs = [e for e in ordered if e.sport == Sport.RUNNING.value and e.distance_km is not None]

    return PersonalRecords(
        longest_session=_first_max(ordered, key=lambda e: e.duration_min),
        highest_load=_first_max(ordered, key=lambda e: load_for_entry(e, default_rpe)),
        longest_run=_first_max(runs, key=lambda e: e.distance_km),
    )


def multi_week_rollup(entries: Iterable[SessionEntry], week_count: int, as_of: date) -> list[WeekMinutes]:
    """ Minutes per week for the `week_count` weeks ending with the week of `as_of`, oldest first """
    if week_count < 1:
        return []

    last = week_start(as_of)
    starts = [last - timedelta(weeks=i) for i in range(week_count - 1, -1, -1)]

    minutes = dict.fromkeys(starts, 0)
    for e in entries:
        ws = week_start(e.date)
        if ws in minutes:
            minutes[ws] += e.duration_min

    return [WeekMinutes(week_start=ws, minutes=m) for ws, m in minutes.items()]
