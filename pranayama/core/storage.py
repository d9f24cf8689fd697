import json
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from PySide6.QtCore import QStandardPaths

logger = logging.getLogger(__name__)


def _app_data_dir() -> Path:
    base = QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    p = Path(base)
    p.mkdir(parents=True, exist_ok=True)
    return p


def stats_path() -> Path:
    return _app_data_dir() / "stats.json"


@dataclass
class SessionStats:
    total_sessions: int = 0
    total_minutes: int = 0
    today_minutes: int = 0
    last_session_date: str = ""


class StatsStore:
    """
    Practice statistics, one small JSON document:
      total_sessions, total_minutes, today_minutes, last_session_date,
      daily: {"YYYY-MM-DD": minutes}

    today_minutes only counts while last_session_date is today.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or stats_path()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except Exception:
            logger.warning("Unreadable stats file %s, starting empty", self.path, exc_info=True)
            return {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp.replace(self.path)

    def load(self, today: Optional[date] = None) -> SessionStats:
        data = self._read()
        today_iso = (today or date.today()).isoformat()
        last = str(data.get("last_session_date", ""))

        return SessionStats(
            total_sessions=int(data.get("total_sessions", 0)),
            total_minutes=int(data.get("total_minutes", 0)),
            today_minutes=int(data.get("today_minutes", 0)) if last == today_iso else 0,
            last_session_date=last,
        )

    def record_session(self, duration_minutes: int, today: Optional[date] = None) -> None:
        minutes = max(0, int(duration_minutes))
        today_iso = (today or date.today()).isoformat()
        data = self._read()

        data["total_sessions"] = int(data.get("total_sessions", 0)) + 1
        data["total_minutes"] = int(data.get("total_minutes", 0)) + minutes

        if data.get("last_session_date") == today_iso:
            current_today = int(data.get("today_minutes", 0))
        else:
            current_today = 0
        data["today_minutes"] = current_today + minutes
        data["last_session_date"] = today_iso

        daily = data.get("daily")
        if not isinstance(daily, dict):
            daily = {}
        daily[today_iso] = int(daily.get(today_iso, 0)) + minutes
        data["daily"] = daily

        self._write(data)
        logger.info("Recorded session: %d min (today %d min)", minutes, data["today_minutes"])

    def daily_minutes(self, days: int = 7, today: Optional[date] = None) -> List[Tuple[date, int]]:
        today = today or date.today()
        daily = self._read().get("daily")
        if not isinstance(daily, dict):
            daily = {}

        out = []
        for back in range(days - 1, -1, -1):
            d = today - timedelta(days=back)
            out.append((d, int(daily.get(d.isoformat(), 0))))
        return out

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        logger.info("Statistics cleared")
