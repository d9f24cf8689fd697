import logging

import numpy as np
import pyqtgraph as pg

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QPushButton, QScrollArea
)
from PySide6.QtCore import Qt

from pranayama.core.pattern import ALL_PATTERNS, BreathPattern
from pranayama.core.storage import StatsStore, SessionStats
from pranayama.ui.style import card_qss

logger = logging.getLogger(__name__)


def _card() -> QFrame:
    f = QFrame()
    f.setStyleSheet(card_qss(18))
    return f


class StatItem(QWidget):
    def __init__(self, label: str):
        super().__init__()
        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(2)

        self.value = QLabel("0")
        self.value.setAlignment(Qt.AlignCenter)
        self.value.setStyleSheet("font-size: 26px; font-weight: 800; border: none; background: transparent;")

        self.label = QLabel(label)
        self.label.setObjectName("muted")
        self.label.setAlignment(Qt.AlignCenter)
        self.label.setStyleSheet("font-size: 12px; border: none; background: transparent;")

        lay.addWidget(self.value)
        lay.addWidget(self.label)

    def set_value(self, v: int):
        self.value.setText(str(int(v)))


class PatternCard(QPushButton):
    def __init__(self, pattern: BreathPattern, on_click):
        super().__init__()
        self.pattern = pattern
        self._summary = pattern.summary_string()
        self.setCursor(Qt.PointingHandCursor)
        self.setMinimumHeight(84)
        self.clicked.connect(lambda: on_click(pattern.id))
        self.setStyleSheet("""
            QPushButton {
                background: rgba(255,255,255,0.04);
                border: 1px solid rgba(255,255,255,0.08);
                border-radius: 16px;
                text-align: left;
                padding: 0px;
            }
            QPushButton:hover { background: rgba(255,255,255,0.09); }
            QPushButton:pressed { background: rgba(255,255,255,0.14); }
        """)

        lay = QHBoxLayout(self)
        lay.setContentsMargins(18, 12, 18, 12)
        lay.setSpacing(12)

        col = QVBoxLayout()
        col.setSpacing(3)

        name = QLabel(pattern.name)
        name.setStyleSheet("font-size: 16px; font-weight: 750; background: transparent;")
        desc = QLabel(pattern.description)
        desc.setStyleSheet("font-size: 12px; color: rgba(231,238,247,0.70); background: transparent;")
        self.timing = timing = QLabel(self._summary)
        timing.setStyleSheet("font-size: 12px; color: #5eead4; font-weight: 650; background: transparent;")

        for lbl in (name, desc, timing):
            lbl.setAttribute(Qt.WA_TransparentForMouseEvents, True)
            col.addWidget(lbl)

        arrow = QLabel("→")
        arrow.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        arrow.setStyleSheet("font-size: 20px; background: transparent;")

        lay.addLayout(col, 1)
        lay.addWidget(arrow)

    def set_last_used(self, last: bool):
        self.timing.setText(f"{self._summary}  •  last used" if last else self._summary)


class HomeScreen(QWidget):
    def __init__(self, store: StatsStore, on_pattern_selected, last_pattern_id: str | None = None):
        super().__init__()
        self.store = store
        self.on_pattern_selected = on_pattern_selected

        root = QVBoxLayout(self)
        root.setContentsMargins(28, 22, 28, 22)
        root.setSpacing(14)

        title = QLabel("Pranayama Studio")
        title.setStyleSheet("font-size: 26px; font-weight: 850;")

        # ---- Stats card
        stats_card = _card()
        stats_layout = QHBoxLayout(stats_card)
        stats_layout.setContentsMargins(18, 14, 18, 14)

        self.today_item = StatItem("Minutes today")
        self.total_item = StatItem("Total minutes")
        self.sessions_item = StatItem("Sessions")

        for it in (self.today_item, self.total_item, self.sessions_item):
            stats_layout.addWidget(it, 1)

        # ---- 7-day chart
        chart_card = _card()
        chart_layout = QVBoxLayout(chart_card)
        chart_layout.setContentsMargins(12, 10, 12, 10)

        pg.setConfigOptions(antialias=True)
        self.chart = pg.PlotWidget()
        self.chart.setMinimumHeight(140)
        self.chart.setBackground(None)
        self.chart.setTitle("Practice, last 7 days (min)")
        self.chart.setMouseEnabled(x=False, y=False)
        self.chart.hideButtons()
        self.bars = pg.BarGraphItem(x=np.arange(7), height=np.zeros(7), width=0.6, brush="#5eead4")
        self.chart.addItem(self.bars)
        chart_layout.addWidget(self.chart)

        # ---- Patterns
        choose = QLabel("Choose Your Practice")
        choose.setStyleSheet("font-size: 17px; font-weight: 750;")

        list_wrap = QWidget()
        list_layout = QVBoxLayout(list_wrap)
        list_layout.setContentsMargins(0, 0, 0, 0)
        list_layout.setSpacing(10)
        self.cards = [PatternCard(p, self._select) for p in ALL_PATTERNS]
        for c in self.cards:
            list_layout.addWidget(c)
        list_layout.addStretch(1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setWidget(list_wrap)

        root.addWidget(title)
        root.addWidget(stats_card)
        root.addWidget(chart_card)
        root.addWidget(choose)
        root.addWidget(scroll, 1)

        self.set_last_pattern(last_pattern_id)
        self.refresh()

    # --------------------------------------------------
    # Lifecycle
    # --------------------------------------------------
    def showEvent(self, event):
        super().showEvent(event)
        self.refresh()

    def refresh(self):
        try:
            stats: SessionStats = self.store.load()
            days = self.store.daily_minutes(7)
        except Exception:
            logger.exception("Could not load statistics")
            return

        self.today_item.set_value(stats.today_minutes)
        self.total_item.set_value(stats.total_minutes)
        self.sessions_item.set_value(stats.total_sessions)

        heights = np.array([m for _, m in days], dtype=float)
        self.bars.setOpts(height=heights)
        self.chart.getAxis("bottom").setTicks(
            [[(i, d.strftime("%a")) for i, (d, _) in enumerate(days)]]
        )
        self.chart.setYRange(0, max(5.0, float(heights.max()) * 1.2))

    def set_last_pattern(self, pattern_id: str | None):
        for c in self.cards:
            c.set_last_used(c.pattern.id == pattern_id)

    def _select(self, pattern_id: str):
        self.set_last_pattern(pattern_id)
        self.on_pattern_selected(pattern_id)
