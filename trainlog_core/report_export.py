import logging
from pathlib import Path

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter
from tabulate import tabulate

from trainlog_core.errors import StorageError
from trainlog_core.formatting import (
    fmt_date, fmt_distance_km, fmt_hm, fmt_optional, fmt_str_decimals, fmt_week_label,
)
from trainlog_core.models import WeeklySummary

logger = logging.getLogger(__name__)

SPORT_HEADERS = ["Sport", "Sessions", "Duration", "Load"]
ENTRY_HEADERS = ["Date", "Sport", "Duration", "Distance (km)", "RPE", "Avg HR", "Note"]

LIGHT = {"bg": "white", "fg": "black", "bar": "#1f77b4", "cell": "white"}
DARK = {"bg": "#1e1e1e", "fg": "#e6e6e6", "bar": "#4fa3e0", "cell": "#2b2b2b"}


def summary_tables(summary: WeeklySummary) -> tuple[list[list], list[list]]:
    """ Display rows for (per-sport table, session table) """
    sport_rows = [
        [s.sport, s.sessions, fmt_hm(s.minutes), s.load]
        for s in summary.by_sport
    ]
    entry_rows = [
        [
            fmt_date(e.date),
            e.sport,
            fmt_hm(e.duration_min),
            fmt_distance_km(e.distance_km),
            fmt_optional(e.rpe),
            fmt_optional(e.avg_hr),
            e.note,
        ]
        for e in summary.entries
    ]
    return sport_rows, entry_rows


def totals_line(summary: WeeklySummary) -> str:
    return (f"Sessions: {summary.sessions} | Duration: {fmt_hm(summary.minutes)} | "
            f"Load: {summary.load} | Distance: {fmt_str_decimals(summary.distance_km)} km")


def render_weekly_text(summary: WeeklySummary) -> str:
    """ Plain-text report, same content as the PDF """
    sport_rows, entry_rows = summary_tables(summary)
    parts = [
        f"Weekly report: {fmt_week_label(summary.week_start, summary.week_end)}",
        totals_line(summary),
    ]
    if not entry_rows:
        parts.append("⚠️ No sessions logged this week.")
        return "\n".join(parts)

    parts.append(tabulate(sport_rows, headers=SPORT_HEADERS, tablefmt="psql", numalign="decimal"))
    parts.append(tabulate(entry_rows, headers=ENTRY_HEADERS, tablefmt="psql", disable_numparse=True))
    return "\n".join(parts)


def _draw_table(ax, rows, headers, colors):
    ax.axis("off")
    if not rows:
        ax.text(0.5, 0.5, "No sessions", ha="center", va="center", color=colors["fg"])
        return
    table = ax.table(cellText=[[str(c) for c in r] for r in rows], colLabels=headers, loc="upper center")
    table.auto_set_font_size(False)
    table.set_fontsize(8)
    for cell in table.get_celld().values():
        cell.set_facecolor(colors["cell"])
        cell.get_text().set_color(colors["fg"])


def build_weekly_figure(summary: WeeklySummary, dark_mode: bool = False) -> Figure:
    """ A4 portrait page: title, totals, minutes-by-sport bars, sport table, session table """
    colors = DARK if dark_mode else LIGHT
    sport_rows, entry_rows = summary_tables(summary)

    fig = Figure(figsize=(8.27, 11.69), facecolor=colors["bg"])
    fig.suptitle(f"Weekly report – {fmt_week_label(summary.week_start, summary.week_end)}",
                 color=colors["fg"], fontsize=14)
    fig.text(0.5, 0.94, totals_line(summary), ha="center", color=colors["fg"], fontsize=9)

    ax_bar, ax_sport, ax_entries = fig.subplots(3, 1, gridspec_kw={"height_ratios": [3, 2, 5]})

    ax_bar.set_facecolor(colors["bg"])
    labels = [s.sport for s in summary.by_sport]
    ax_bar.bar(labels, [s.minutes for s in summary.by_sport], color=colors["bar"])
    ax_bar.yaxis.set_major_formatter(FuncFormatter(fmt_hm))
    ax_bar.set_ylabel("Duration (h:m)", color=colors["fg"])
    ax_bar.set_title("Duration by sport", color=colors["fg"])
    ax_bar.tick_params(colors=colors["fg"])
    ax_bar.grid(True, axis="y", alpha=0.3)

    _draw_table(ax_sport, sport_rows, SPORT_HEADERS, colors)
    _draw_table(ax_entries, entry_rows, ENTRY_HEADERS, colors)
    return fig


def render_weekly_pdf(summary: WeeklySummary, reports_dir: Path, dark_mode: bool = False) -> Path:
    """ Write Reports/weekly_report_<week start>.pdf, replacing an older one for the same week """
    out = Path(reports_dir) / f"weekly_report_{fmt_date(summary.week_start)}.pdf"
    fig = build_weekly_figure(summary, dark_mode=dark_mode)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        with PdfPages(out) as pdf:
            pdf.savefig(fig, facecolor=fig.get_facecolor())
    except OSError as e:
        raise StorageError("write report", out, str(e)) from e
    logger.info("📄 Weekly report saved: %s", out)
    return out
