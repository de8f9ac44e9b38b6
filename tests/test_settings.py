import json

import pytest

from trainlog_core.models import Settings
from trainlog_core.settings import load_settings, save_settings


class TestLoadSettings:
    """Tests for reading settings, which must never raise."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "settings.json") == Settings(dark_mode=False, default_rpe=5)

    def test_reads_known_keys(self, tmp_path):
        p = tmp_path / "settings.json"
        p.write_text(json.dumps({"DarkMode": True, "DefaultRPEForLoad": 7}), encoding="utf-8")
        assert load_settings(p) == Settings(dark_mode=True, default_rpe=7)

    def test_unknown_keys_are_ignored(self, tmp_path):
        p = tmp_path / "settings.json"
        p.write_text(json.dumps({"DarkMode": True, "Theme": "blue"}), encoding="utf-8")
        assert load_settings(p) == Settings(dark_mode=True, default_rpe=5)

    @pytest.mark.parametrize("content", ["{not json", "", "[1, 2, 3]", "null", "\xff\xfe"])
    def test_unparsable_file_gives_defaults(self, tmp_path, content):
        p = tmp_path / "settings.json"
        p.write_text(content, encoding="latin-1")
        assert load_settings(p) == Settings()

    @pytest.mark.parametrize("rpe", [0, 11, "7", 6.5, True, None])
    def test_invalid_rpe_falls_back_per_key(self, tmp_path, rpe):
        p = tmp_path / "settings.json"
        p.write_text(json.dumps({"DarkMode": True, "DefaultRPEForLoad": rpe}), encoding="utf-8")
        assert load_settings(p) == Settings(dark_mode=True, default_rpe=5)

    def test_non_bool_dark_mode_falls_back(self, tmp_path):
        p = tmp_path / "settings.json"
        p.write_text(json.dumps({"DarkMode": "yes", "DefaultRPEForLoad": 3}), encoding="utf-8")
        assert load_settings(p) == Settings(dark_mode=False, default_rpe=3)

    def test_directory_instead_of_file_gives_defaults(self, tmp_path):
        p = tmp_path / "settings.json"
        p.mkdir()
        assert load_settings(p) == Settings()


class TestSaveSettings:
    """Tests for whole-object settings writes."""

    def test_round_trip(self, tmp_path):
        p = tmp_path / "nested" / "settings.json"
        save_settings(p, Settings(dark_mode=True, default_rpe=9))
        assert load_settings(p) == Settings(dark_mode=True, default_rpe=9)

    def test_writes_exactly_two_keys_and_drops_others(self, tmp_path):
        p = tmp_path / "settings.json"
        p.write_text(json.dumps({"DarkMode": False, "Legacy": 1}), encoding="utf-8")
        save_settings(p, Settings(dark_mode=True, default_rpe=4))
        assert json.loads(p.read_text(encoding="utf-8")) == {"DarkMode": True, "DefaultRPEForLoad": 4}
        assert not p.with_suffix(".json.tmp").exists()

    def test_rejects_out_of_range_rpe(self, tmp_path):
        with pytest.raises(ValueError):
            save_settings(tmp_path / "settings.json", Settings(default_rpe=0))
