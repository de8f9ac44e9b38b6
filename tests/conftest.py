import matplotlib

matplotlib.use("Agg")

from datetime import date  # noqa: E402

import pytest  # noqa: E402

from trainlog_core.config import StoragePaths  # noqa: E402
from trainlog_core.models import SessionEntry  # noqa: E402


@pytest.fixture
def paths(tmp_path) -> StoragePaths:
    """Storage layout rooted in a throwaway directory."""
    return StoragePaths.under(tmp_path / "TrainLog")


@pytest.fixture
def make_entry():
    """Factory for SessionEntry with sensible defaults; override any field by keyword."""
    counter = {"n": 0}

    def _make(**overrides) -> SessionEntry:
        counter["n"] += 1
        fields = {
            "id": f"entry{counter['n']:04d}",
            "date": date(2024, 1, 1),
            "sport": "Running",
            "duration_min": 30,
            "calories": None,
            "distance_km": None,
            "rpe": None,
            "avg_hr": None,
            "note": "",
        }
        fields.update(overrides)
        return SessionEntry(**fields)

    return _make
