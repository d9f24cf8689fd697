import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QStandardPaths

logger = logging.getLogger(__name__)


@dataclass
class AppSettings:
    haptics_enabled: bool = True


class SettingsStore:
    def __init__(self, path: Optional[Path] = None):
        if path is None:
            base = Path(QStandardPaths.writableLocation(QStandardPaths.AppDataLocation))
            base.mkdir(parents=True, exist_ok=True)
            path = base / "settings.json"
        self.path = path

    def load(self) -> AppSettings:
        if not self.path.exists():
            return AppSettings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception:
            logger.warning("Unreadable settings file %s, using defaults", self.path, exc_info=True)
            return AppSettings()
        if not isinstance(data, dict):
            return AppSettings()

        s = AppSettings()
        for k, v in data.items():
            if hasattr(s, k):
                setattr(s, k, v)
        return s

    def save(self, settings: AppSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
