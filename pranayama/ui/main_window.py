# pranayama/ui/main_window.py
import logging
import sys

from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QStackedWidget,
    QWidget,
    QVBoxLayout,
    QGraphicsDropShadowEffect,
)
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainterPath, QRegion, QGuiApplication

from pranayama.core.haptics import HapticSink
from pranayama.core.logger import configure_logging
from pranayama.core.pattern import resolve_pattern
from pranayama.core.settings_store import SettingsStore, AppSettings
from pranayama.core.storage import StatsStore
from pranayama.ui.home import HomeScreen
from pranayama.ui.prefs import get_last_pattern_id, save_last_pattern_id
from pranayama.ui.session import SessionScreen
from pranayama.ui.session_runner import SessionRunner, deferred_recorder
from pranayama.ui.settings import SettingsScreen
from pranayama.ui.style import APP_QSS
from pranayama.ui.titlebar import TitleBar

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, stats_store: StatsStore | None = None, settings_store: SettingsStore | None = None):
        super().__init__()

        self.setWindowTitle("Pranayama Studio")
        self.resize(560, 780)

        self.setWindowFlag(Qt.FramelessWindowHint, True)
        self.setAttribute(Qt.WA_TranslucentBackground, True)

        self._radius = 18
        self._shadow_margin = 22

        outer = QWidget()
        outer.setAttribute(Qt.WA_TranslucentBackground, True)

        outer_layout = QVBoxLayout(outer)
        outer_layout.setContentsMargins(
            self._shadow_margin,
            self._shadow_margin,
            self._shadow_margin,
            self._shadow_margin,
        )
        outer_layout.setSpacing(0)

        self.container = QWidget()
        self.container.setObjectName("appContainer")
        self.container.setStyleSheet(f"""
            QWidget#appContainer {{
                background: rgba(11, 15, 20, 0.96);
                border-radius: {self._radius}px;
            }}
        """)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(42)
        shadow.setOffset(0, 10)
        shadow.setColor(Qt.black)
        self.container.setGraphicsEffect(shadow)

        container_layout = QVBoxLayout(self.container)
        container_layout.setContentsMargins(12, 12, 12, 12)
        container_layout.setSpacing(10)

        self.stack = QStackedWidget()
        self.stack.setStyleSheet("""
            QStackedWidget {
                background: rgba(255,255,255,0.02);
                border: 1px solid rgba(255,255,255,0.06);
                border-radius: 14px;
            }
        """)

        # Collaborators
        self.stats_store = stats_store or StatsStore()
        self.settings_store = settings_store or SettingsStore()
        self.haptics = HapticSink(self.settings_store.load())

        self.runner = SessionRunner.create(
            record_session=deferred_recorder(self.stats_store),
            trigger_haptic=self.haptics,
            parent=self,
        )

        self.titlebar = TitleBar(self, "Pranayama Studio", on_settings=self.go_settings)

        container_layout.addWidget(self.titlebar)
        container_layout.addWidget(self.stack)
        outer_layout.addWidget(self.container)
        self.setCentralWidget(outer)

        # Screens
        self.home = HomeScreen(
            store=self.stats_store,
            on_pattern_selected=self.go_session,
            last_pattern_id=get_last_pattern_id(),
        )
        self.session = SessionScreen(runner=self.runner, on_back=self.go_home)
        self.settings = SettingsScreen(
            store=self.settings_store,
            stats=self.stats_store,
            on_back=self.go_home,
            on_changed=self._on_settings_changed,
        )

        for w in (self.home, self.session, self.settings):
            self.stack.addWidget(w)

        self.stack.setCurrentWidget(self.home)
        self._place_safely()

    # Navigation
    def go_home(self, *_):
        self.titlebar.set_settings_enabled(True)
        self.stack.setCurrentWidget(self.home)

    def go_session(self, pattern_id: str):
        pattern = resolve_pattern(pattern_id)
        save_last_pattern_id(pattern.id)
        self.session.start(pattern.id)
        self.titlebar.set_settings_enabled(False)
        self.stack.setCurrentWidget(self.session)

    def go_settings(self):
        if self.stack.currentWidget() is self.session:
            return
        self.stack.setCurrentWidget(self.settings)

    def _on_settings_changed(self, settings: AppSettings):
        self.haptics.settings = settings

    # Window shape & shutdown
    def _place_safely(self):
        screen = QGuiApplication.primaryScreen()
        if screen:
            g = screen.availableGeometry()
            self.move(g.x() + 80, g.y() + 80)

    def _apply_rounded_mask(self):
        w, h = self.width(), self.height()
        m, r = self._shadow_margin, self._radius
        rect = QRectF(m, m, w - 2 * m, h - 2 * m)
        path = QPainterPath()
        path.addRoundedRect(rect, r, r)
        self.setMask(QRegion(path.toFillPolygon().toPolygon()))

    def showEvent(self, event):
        super().showEvent(event)
        self._apply_rounded_mask()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._apply_rounded_mask()

    def closeEvent(self, event):
        try:
            self.runner.shutdown()
        except Exception:
            logger.exception("Runner shutdown failed")
        super().closeEvent(event)


def launch_app():
    configure_logging()
    app = QApplication(sys.argv)
    app.setOrganizationName("Pranayama")
    app.setApplicationName("Pranayama Studio")
    app.setStyleSheet(APP_QSS)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
