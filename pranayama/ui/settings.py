# pranayama/ui/settings.py

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QFrame, QHBoxLayout, QPushButton,
    QFormLayout, QCheckBox, QMessageBox
)
from PySide6.QtCore import Qt

from pranayama.core.settings_store import SettingsStore, AppSettings
from pranayama.core.storage import StatsStore
from pranayama.ui.style import card_qss, soft_button_qss


def card() -> QFrame:
    f = QFrame()
    f.setStyleSheet(card_qss())
    return f


class SettingsScreen(QWidget):
    def __init__(self, store: SettingsStore, stats: StatsStore, on_back, on_changed=None):
        super().__init__()
        self.on_back = on_back
        self.on_changed = on_changed
        self.store = store
        self.stats = stats
        self.settings = self.store.load()

        root = QVBoxLayout(self)
        root.setContentsMargins(22, 20, 22, 20)
        root.setSpacing(12)

        header = QHBoxLayout()
        title = QLabel("Settings")
        title.setStyleSheet("font-size: 24px; font-weight: 800;")
        header.addWidget(title, 1)

        back = QPushButton("Back")
        back.setCursor(Qt.PointingHandCursor)
        back.clicked.connect(self.on_back)
        header.addWidget(back, 0, Qt.AlignRight)
        root.addLayout(header)

        c = card()
        root.addWidget(c)

        wrap = QVBoxLayout(c)
        wrap.setContentsMargins(16, 14, 16, 14)

        form = QFormLayout()
        form.setHorizontalSpacing(18)
        form.setVerticalSpacing(12)
        wrap.addLayout(form)

        self.haptics_enabled = QCheckBox("Pulse on every phase change")

        form.addRow("Haptics", self.haptics_enabled)

        btns = QHBoxLayout()
        btns.addStretch(1)

        reset = QPushButton("Reset defaults")
        reset.setCursor(Qt.PointingHandCursor)
        reset.clicked.connect(self._reset)

        save = QPushButton("Save")
        save.setCursor(Qt.PointingHandCursor)
        save.clicked.connect(self._save)

        btns.addWidget(reset)
        btns.addWidget(save)
        wrap.addSpacing(10)
        wrap.addLayout(btns)

        # ---- Statistics
        s = card()
        root.addWidget(s)

        stats_wrap = QVBoxLayout(s)
        stats_wrap.setContentsMargins(16, 14, 16, 14)
        stats_wrap.setSpacing(10)

        stats_title = QLabel("Statistics")
        stats_title.setStyleSheet("font-size: 16px; font-weight: 850;")
        stats_sub = QLabel("Clear all recorded sessions and practice minutes.")
        stats_sub.setObjectName("muted")

        clear = QPushButton("Reset statistics")
        clear.setCursor(Qt.PointingHandCursor)
        clear.clicked.connect(self._clear_stats)
        clear.setStyleSheet(soft_button_qss("239,68,68"))

        stats_wrap.addWidget(stats_title)
        stats_wrap.addWidget(stats_sub)
        stats_wrap.addWidget(clear, 0, Qt.AlignLeft)

        root.addStretch(1)

        self._load_into_ui(self.settings)

    def _load_into_ui(self, s: AppSettings):
        self.haptics_enabled.setChecked(bool(s.haptics_enabled))

    def _read_from_ui(self) -> AppSettings:
        return AppSettings(
            haptics_enabled=bool(self.haptics_enabled.isChecked()),
        )

    def _apply(self, settings: AppSettings):
        self.settings = settings
        self.store.save(self.settings)
        if callable(self.on_changed):
            self.on_changed(self.settings)

    def _save(self):
        self._apply(self._read_from_ui())
        self.on_back()

    def _reset(self):
        self._load_into_ui(AppSettings())
        self._apply(AppSettings())

    def _clear_stats(self):
        answer = QMessageBox.question(
            self,
            "Reset statistics",
            "Delete all practice statistics? This cannot be undone.",
        )
        if answer == QMessageBox.Yes:
            self.stats.clear()
