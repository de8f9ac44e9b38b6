from datetime import date

import pytest

from trainlog_cli.cli_utils import ENTRY_HEADERS, MenuItem, entry_rows, print_list_table, prompt_menu, resolve_entry_id
from trainlog_cli.prompts import input_date, input_positive_number, prompt_yes_no


class TestEntryTable:
    """Tests for session table rows."""

    def test_rows_match_headers(self, make_entry):
        e = make_entry(id="abcdef0123456789", date=date(2024, 1, 2), duration_min=75, rpe=6, note="n")
        (row,) = entry_rows([e])
        assert len(row) == len(ENTRY_HEADERS)
        assert row[:4] == ["abcdef01", "2024-01-02", "Running", "01:15"]
        assert row[4:] == ["–", "–", "6", "–", "n"]

    def test_print_empty(self, capsys):
        print_list_table([], ENTRY_HEADERS)
        assert "No results found" in capsys.readouterr().out


class TestResolveEntryId:
    """Tests for id prefix lookup."""

    def test_unique_prefix(self, make_entry):
        a, b = make_entry(id="aaa111"), make_entry(id="bbb222")
        assert resolve_entry_id([a, b], "BBB") is b

    def test_ambiguous_or_missing(self, make_entry):
        entries = [make_entry(id="abc1"), make_entry(id="abc2")]
        assert resolve_entry_id(entries, "abc") is None
        assert resolve_entry_id(entries, "zzz") is None
        assert resolve_entry_id(entries, "  ") is None


class TestPrompts:
    """Tests for input helpers."""

    def test_input_date_retries_then_parses(self, monkeypatch):
        answers = iter(["02/01/2024", "2024-01-02"])
        monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
        assert input_date("Date: ") == date(2024, 1, 2)

    def test_input_date_default(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda _prompt: "")
        assert input_date("Date: ", default=date(2024, 5, 5)) == date(2024, 5, 5)

    def test_yes_no_default(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda _prompt: "")
        assert prompt_yes_no("Sure?", default=False) is False

    @pytest.mark.parametrize("typed,expected", [("y", True), ("YES", True), ("n", False), ("No", False)])
    def test_yes_no_answers(self, monkeypatch, typed, expected):
        monkeypatch.setattr("builtins.input", lambda _prompt: typed)
        assert prompt_yes_no("Sure?") is expected

    def test_yes_no_retries_on_other_text(self, monkeypatch, capsys):
        answers = iter(["maybe", "n"])
        monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
        assert prompt_yes_no("Sure?") is False
        assert "Answer y or n" in capsys.readouterr().out

    def test_positive_number_skips_zero_and_text(self, monkeypatch):
        answers = iter(["0", "-3", "four", "4"])
        monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
        assert input_positive_number() == 4


class TestPromptMenu:
    """Tests for the looping text menu."""

    def test_returns_key_and_runs_action(self, monkeypatch):
        ran = []
        answers = iter(["x", "A"])
        monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
        items = [MenuItem("a", "Add", action=lambda: ran.append("a")), MenuItem("l", "List")]
        assert prompt_menu("Main", items) == "a"
        assert ran == ["a"]

    def test_back_and_quit_are_added(self, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda _prompt: "q")
        assert prompt_menu("Main", [MenuItem("a", "Add")]) == "q"
        out = capsys.readouterr().out
        assert "[b] Back" in out
        assert "[q] Quit" in out

    def test_back_and_quit_can_be_left_out(self, monkeypatch, capsys):
        answers = iter(["b", "a"])
        monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
        assert prompt_menu("Main", [MenuItem("a", "Add")], allow_back=False, allow_quit=False) == "a"
        assert "Not on the menu" in capsys.readouterr().out
