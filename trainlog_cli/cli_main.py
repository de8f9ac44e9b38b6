import logging
import sys
from datetime import date
from dataclasses import replace

from trainlog_cli.cli_reports import reports_menu
from trainlog_cli.cli_utils import ENTRY_HEADERS, MenuItem, entry_rows, print_list_table, prompt_menu, \
    resolve_entry_id
from trainlog_cli.prompts import input_date, input_positive_number, input_rpe, prompt_sport, prompt_yes_no
from trainlog_core.config import StoragePaths, default_paths
from trainlog_core.errors import EntryNotFoundError, InvalidInputError, StorageError
from trainlog_core.models import Settings
from trainlog_core.record_store import ensure_storage, load_all
from trainlog_core.settings import load_settings, save_settings
from trainlog_core.usecases import add_session, delete_session, edit_session

logger = logging.getLogger(__name__)


def configure_logging():
    """ Set logging level based on --debug """
    debug = ("--debug" in sys.argv) or ("-d" in sys.argv)
    if debug:
        print("🔧 Debug mode enabled")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _session_fields(defaults: dict | None = None) -> dict:
    """ Prompt for the free-text fields of a session, empty input keeps the default """
    defaults = defaults or {}

    def ask(label, key):
        current = defaults.get(key)
        hint = f" [{current}]" if current not in (None, "") else ""
        raw = input(f"{label}{hint}: ").strip()
        return raw if raw else ("" if current is None else current)

    return {
        "duration_min": ask("Duration (min)", "duration_min"),
        "calories": ask("Calories (optional)", "calories"),
        "distance_km": ask("Distance km (optional)", "distance_km"),
        "rpe": ask("RPE 1-10 (optional)", "rpe"),
        "avg_hr": ask("Avg HR (optional)", "avg_hr"),
        "note": ask("Note (optional)", "note"),
    }


def add_session_cli(paths: StoragePaths) -> None:
    """ Prompt for a session and log it """
    day = input_date("📅 Date (YYYY-MM-DD, empty = today): ", default=date.today())
    sport = prompt_sport()
    try:
        entry = add_session(paths, date=day, sport=sport, **_session_fields())
    except InvalidInputError as e:
        print(f"❌ {e}. Nothing was saved.")
        return
    print(f"✅ Logged {entry.sport} on {entry.date} ({entry.id[:8]})")


def view_sessions_cli(paths: StoragePaths) -> None:
    """ Table of the last N sessions, newest first """
    n = input_positive_number("How many sessions to show? ")
    entries = list(reversed(load_all(paths)))[:n]
    print_list_table(entry_rows(entries), ENTRY_HEADERS)


def _pick_session(paths: StoragePaths):
    entries = load_all(paths)
    entry = resolve_entry_id(entries, input("Session id (first characters are enough): "))
    if entry is None:
        print("⚠️ No single session matches that id.")
    return entry


def edit_session_cli(paths: StoragePaths) -> None:
    if (entry := _pick_session(paths)) is None:
        return
    print_list_table(entry_rows([entry]), ENTRY_HEADERS)
    day = input_date(f"📅 Date [{entry.date}]: ", default=entry.date)
    changes = {"date": day}
    if prompt_yes_no(f"Change sport ({entry.sport})?", default=False):
        changes["sport"] = prompt_sport()
    fields = _session_fields({
        "duration_min": entry.duration_min,
        "calories": entry.calories,
        "distance_km": entry.distance_km,
        "rpe": entry.rpe,
        "avg_hr": entry.avg_hr,
        "note": entry.note,
    })
    try:
        edit_session(paths, entry.id, **changes, **fields)
    except (InvalidInputError, EntryNotFoundError) as e:
        print(f"❌ {e}. Nothing was changed.")
        return
    print("✅ Session updated (previous log backed up).")


def delete_session_cli(paths: StoragePaths) -> None:
    if (entry := _pick_session(paths)) is None:
        return
    print_list_table(entry_rows([entry]), ENTRY_HEADERS)
    if not prompt_yes_no("🗑️ Delete this session?", default=False):
        return
    try:
        delete_session(paths, entry.id)
    except EntryNotFoundError as e:
        print(f"❌ {e}")
        return
    print("✅ Session deleted (previous log backed up).")


def settings_menu(paths: StoragePaths, settings: Settings) -> Settings:
    """ Toggle dark mode / set default RPE, returns the (possibly) new settings """
    items = [
        MenuItem("1", f"Dark mode: {'on' if settings.dark_mode else 'off'} (toggle)"),
        MenuItem("2", f"Default RPE for load: {settings.default_rpe}"),
    ]
    choice = prompt_menu("Settings", items, allow_quit=False)
    if choice == "1":
        settings = replace(settings, dark_mode=not settings.dark_mode)
    elif choice == "2":
        settings = replace(settings, default_rpe=input_rpe("Default RPE (1-10): "))
    else:
        return settings
    save_settings(paths.settings_file, settings)
    print("✅ Settings saved.")
    return settings


def launcher_menu(paths: StoragePaths, settings: Settings) -> None:
    """ The app's starting menu """
    while True:
        print("\n🏁 What would you like to do?")
        print("[1] Log a session")
        print("[2] View sessions")
        print("[3] Edit a session")
        print("[4] Delete a session")
        print("[5] Reports")
        print("[6] Settings")
        print("[q] Quit")
        choice = input("> ").strip().lower()

        if choice == "1":
            add_session_cli(paths)
        elif choice == "2":
            view_sessions_cli(paths)
        elif choice == "3":
            edit_session_cli(paths)
        elif choice == "4":
            delete_session_cli(paths)
        elif choice == "5":
            reports_menu(paths, settings)
        elif choice == "6":
            settings = settings_menu(paths, settings)
        elif choice in {"q", "x"}:
            break
        else:
            print("❓ Not a choice. Try again.")


def main():
    configure_logging()
    print("\n🏋️ TrainLog CLI")
    print("Your training diary\n")

    paths = default_paths()
    try:
        ensure_storage(paths)
    except StorageError as e:
        logger.error("❌ %s", e)
        sys.exit(1)

    settings = load_settings(paths.settings_file)
    print(f"🧠 Log ➜ 📄 {paths.log_file} | default RPE {settings.default_rpe}")

    try:
        launcher_menu(paths, settings)
    except StorageError as e:
        logger.error("❌ %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
