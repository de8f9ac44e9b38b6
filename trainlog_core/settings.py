import json
import logging
from pathlib import Path

from trainlog_core.config import DEFAULT_DARK_MODE, DEFAULT_RPE_FOR_LOAD, RPE_MAX, RPE_MIN
from trainlog_core.errors import StorageError
from trainlog_core.models import Settings

logger = logging.getLogger(__name__)

DARK_MODE_KEY = "DarkMode"
DEFAULT_RPE_KEY = "DefaultRPEForLoad"


def load_json(p: Path) -> dict:
    """ Loads json, if it's missing or not valid returns an empty dict """
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("⚠️ Could not read %s (%s). Using defaults.", p, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("⚠️ %s does not hold a JSON object. Using defaults.", p)
        return {}
    return data


def save_json(p: Path, data: dict) -> None:
    """ Write the settings blob next to its final name, then swap it in """
    p.parent.mkdir(parents=True, exist_ok=True)
    staged = p.with_suffix(p.suffix + ".tmp")
    staged.write_text(json.dumps(data, indent=2), encoding="utf-8")
    staged.replace(p)


def _dark_mode(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is not None:
        logger.warning("⚠️ %s=%r is not a boolean, using %s.", DARK_MODE_KEY, raw, DEFAULT_DARK_MODE)
    return DEFAULT_DARK_MODE


def _default_rpe(raw) -> int:
    # bool is an int subclass, true/false is not an RPE
    if isinstance(raw, int) and not isinstance(raw, bool) and RPE_MIN <= raw <= RPE_MAX:
        return raw
    if raw is not None:
        logger.warning("⚠️ %s=%r is not in %s..%s, using %s.", DEFAULT_RPE_KEY, raw, RPE_MIN, RPE_MAX,
                       DEFAULT_RPE_FOR_LOAD)
    return DEFAULT_RPE_FOR_LOAD


def load_settings(p: Path) -> Settings:
    """ Settings from disk, never raises: anything unreadable falls back to defaults """
    data = load_json(p)
    return Settings(
        dark_mode=_dark_mode(data.get(DARK_MODE_KEY)),
        default_rpe=_default_rpe(data.get(DEFAULT_RPE_KEY)),
    )


def save_settings(p: Path, settings: Settings) -> None:
    """ Whole-object write, replaces anything previously stored """
    if not RPE_MIN <= settings.default_rpe <= RPE_MAX:
        raise ValueError(f"default_rpe must be in {RPE_MIN}..{RPE_MAX}, got {settings.default_rpe}")
    try:
        save_json(p, {
            DARK_MODE_KEY: bool(settings.dark_mode),
            DEFAULT_RPE_KEY: int(settings.default_rpe),
        })
    except OSError as e:
        raise StorageError("save settings to", p, str(e)) from e
    logger.debug("Settings saved to %s", p)
