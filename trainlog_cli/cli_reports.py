from datetime import date

from trainlog_cli.cli_utils import MenuItem, print_list_table, prompt_menu
from trainlog_cli.prompts import input_date, input_positive_number, prompt_yes_no
from trainlog_core.aggregation import load_for_entry, multi_week_rollup, personal_records
from trainlog_core.config import StoragePaths
from trainlog_core.errors import StorageError
from trainlog_core.formatting import fmt_date, fmt_distance_km, fmt_hm
from trainlog_core.models import Settings
from trainlog_core.record_store import load_all
from trainlog_core.report_export import render_weekly_pdf, render_weekly_text
from trainlog_core.usecases import get_weekly_report


def weekly_report_cli(paths: StoragePaths, settings: Settings) -> None:
    """ Print the weekly report and optionally save it as PDF """
    day = input_date("Any date in the week (YYYY-MM-DD, empty = this week): ", default=date.today())
    summary = get_weekly_report(paths, settings, day)
    print()
    print(render_weekly_text(summary))

    if summary.sessions and prompt_yes_no("📄 Save as PDF?", default=False):
        try:
            out = render_weekly_pdf(summary, paths.reports_dir, dark_mode=settings.dark_mode)
        except StorageError as e:
            print(f"❌ {e}")
            return
        print(f"✅ Saved: {out}")


def records_cli(paths: StoragePaths, settings: Settings) -> None:
    """ Print personal records """
    records = personal_records(load_all(paths), settings.default_rpe)
    rows = []
    if records.longest_session:
        e = records.longest_session
        rows.append(["Longest session", fmt_hm(e.duration_min), e.sport, fmt_date(e.date)])
    if records.highest_load:
        e = records.highest_load
        rows.append(["Highest load", load_for_entry(e, settings.default_rpe), e.sport, fmt_date(e.date)])
    if records.longest_run:
        e = records.longest_run
        rows.append(["Longest run", f"{fmt_distance_km(e.distance_km)} km", e.sport, fmt_date(e.date)])
    print_list_table(rows, ["Record", "Value", "Sport", "Date"])


def rollup_cli(paths: StoragePaths) -> None:
    """ Minutes per week for the last N weeks """
    weeks = input_positive_number("How many weeks? ")
    rollup = multi_week_rollup(load_all(paths), weeks, date.today())
    print_list_table([[fmt_date(w.week_start), fmt_hm(w.minutes)] for w in rollup], ["Week Start", "Duration"])


def reports_menu(paths: StoragePaths, settings: Settings) -> None:
    """ The reports menu """
    items = [
        MenuItem("1", "Weekly report"),
        MenuItem("2", "Personal records"),
        MenuItem("3", "Duration over the last N weeks"),
    ]
    choice = prompt_menu("Reports", items)
    if choice == "1":
        weekly_report_cli(paths, settings)
    elif choice == "2":
        records_cli(paths, settings)
    elif choice == "3":
        rollup_cli(paths)
    elif choice == "q":
        raise SystemExit(0)
