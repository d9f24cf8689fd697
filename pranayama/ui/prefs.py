#pranayama/ui/prefs.py

from PySide6.QtCore import QSettings

ORG = "Pranayama"
APP = "Pranayama Studio"
KEY_LAST_PATTERN = "session/last_pattern_id"


def _s() -> QSettings:
    return QSettings(ORG, APP)


def get_last_pattern_id() -> str | None:
    v = _s().value(KEY_LAST_PATTERN, None)
    if not v:
        return None
    return str(v)


def save_last_pattern_id(pattern_id: str) -> None:
    _s().setValue(KEY_LAST_PATTERN, pattern_id)
