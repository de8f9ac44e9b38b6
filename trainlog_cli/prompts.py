from datetime import date, datetime

from trainlog_core.config import DATE_FMT, RPE_MAX, RPE_MIN
from trainlog_core.models import Sport


def input_date(prompt: str, default: date | None = None) -> date:
    """ Ask for a YYYY-MM-DD date until a valid one is given, empty input returns the default """
    while True:
        raw = input(prompt).strip()
        if not raw and default is not None:
            return default
        try:
            return datetime.strptime(raw, DATE_FMT).date()
        except ValueError:
            print(f"⚠️ {raw!r} is not a YYYY-MM-DD date.")


def input_positive_number(prompt: str = "Enter a positive number: ") -> int:
    """ Re-ask until a whole number of 1 or more is typed """
    while True:
        raw = input(prompt).strip()
        if raw.isdigit() and int(raw) > 0:
            return int(raw)
        print("⚠️ Needs a whole number of 1 or more (e.g., 4).")


def input_rpe(prompt: str) -> int:
    """ Whole number within the RPE scale """
    while True:
        number = input_positive_number(prompt)
        if RPE_MIN <= number <= RPE_MAX:
            return number
        print(f"Please enter a value from {RPE_MIN} to {RPE_MAX}.")


def prompt_sport() -> str:
    """ Numbered pick from the sport list """
    sports = Sport.labels()
    for i, name in enumerate(sports, start=1):
        print(f"  [{i}] {name}")
    while True:
        raw = input("Sport: ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(sports):
            return sports[int(raw) - 1]
        if raw.lower() in (s.lower() for s in sports):
            return raw
        print("⚠️ Pick a number from the list.")


ANSWERS = {"y": True, "yes": True, "n": False, "no": False}


def prompt_yes_no(prompt_msg: str, default: bool = True) -> bool:
    """ y/yes or n/no, an empty answer picks `default` """
    hint = "Y/n" if default else "y/N"
    while True:
        answer = input(f"{prompt_msg} [{hint}]: ").strip().lower()
        if not answer:
            return default
        if answer in ANSWERS:
            return ANSWERS[answer]
        print("⚠️ Answer y or n.")
