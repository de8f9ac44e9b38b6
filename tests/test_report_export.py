from datetime import date

from trainlog_core.aggregation import weekly_summary
from trainlog_core.report_export import render_weekly_pdf, render_weekly_text, summary_tables


def _summary(make_entry):
    entries = [
        make_entry(date=date(2024, 1, 1), sport="Running", duration_min=30, distance_km=6.0, rpe=7,
                   note='intervals, "8x400"'),
        make_entry(date=date(2024, 1, 3), sport="Gym", duration_min=45),
    ]
    return weekly_summary(entries, date(2024, 1, 1), 5)


class TestSummaryTables:
    """Tests for the display rows handed to the renderers."""

    def test_rows(self, make_entry):
        sport_rows, entry_rows = summary_tables(_summary(make_entry))
        assert sport_rows == [["Gym", 1, "00:45", 225], ["Running", 1, "00:30", 210]]
        assert entry_rows[0] == ["2024-01-01", "Running", "00:30", "6.00", "7", "–", 'intervals, "8x400"']
        assert entry_rows[1][3] == "–"


class TestRenderText:
    """Tests for the plain-text weekly report."""

    def test_contains_totals_and_sessions(self, make_entry):
        text = render_weekly_text(_summary(make_entry))
        assert "Jan 01 – Jan 07 2024" in text
        assert "Sessions: 2" in text
        assert "Load: 435" in text
        assert 'intervals, "8x400"' in text

    def test_empty_week(self):
        text = render_weekly_text(weekly_summary([], date(2024, 1, 1), 5))
        assert "No sessions" in text


class TestRenderPdf:
    """Tests for the PDF weekly report."""

    def test_writes_pdf(self, tmp_path, make_entry):
        out = render_weekly_pdf(_summary(make_entry), tmp_path / "Reports")
        assert out == tmp_path / "Reports" / "weekly_report_2024-01-01.pdf"
        assert out.read_bytes().startswith(b"%PDF")

    def test_dark_mode_and_empty_week(self, tmp_path):
        out = render_weekly_pdf(weekly_summary([], date(2024, 1, 1), 5), tmp_path, dark_mode=True)
        assert out.exists()
        assert out.stat().st_size > 0
