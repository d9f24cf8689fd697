import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QHBoxLayout, QProgressBar, QPushButton, QStackedWidget
)
from PySide6.QtCore import Qt

from pranayama.core.engine import SessionState
from pranayama.core.pattern import TerminationMode
from pranayama.ui.pacer import BreathPacer
from pranayama.ui.session_runner import SessionRunner
from pranayama.ui.style import soft_button_qss

logger = logging.getLogger(__name__)


def progress_text(state: SessionState) -> str:
    if state.pattern.termination is TerminationMode.BY_CYCLES:
        return f"Cycle {state.current_cycle} of {state.total_cycles}"
    remaining = state.remaining_seconds
    return f"{remaining // 60}:{remaining % 60:02d} remaining"


class SessionCompleteView(QWidget):
    def __init__(self, on_restart, on_finish):
        super().__init__()

        root = QVBoxLayout(self)
        root.setContentsMargins(40, 40, 40, 40)
        root.setSpacing(14)
        root.setAlignment(Qt.AlignCenter)

        icon = QLabel("🧘")
        icon.setAlignment(Qt.AlignCenter)
        icon.setStyleSheet("font-size: 56px;")

        title = QLabel("Session Complete")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 26px; font-weight: 800;")

        text = QLabel("Great work! Take a moment to\nnotice how you feel.")
        text.setObjectName("muted")
        text.setAlignment(Qt.AlignCenter)

        btns = QHBoxLayout()
        btns.setSpacing(12)

        again = QPushButton("Again")
        again.setCursor(Qt.PointingHandCursor)
        again.clicked.connect(on_restart)
        again.setStyleSheet(soft_button_qss())

        done = QPushButton("Done")
        done.setCursor(Qt.PointingHandCursor)
        done.clicked.connect(on_finish)
        done.setStyleSheet(soft_button_qss("94,234,212"))

        btns.addStretch(1)
        btns.addWidget(again)
        btns.addWidget(done)
        btns.addStretch(1)

        root.addWidget(icon)
        root.addWidget(title)
        root.addWidget(text)
        root.addSpacing(10)
        root.addLayout(btns)


class SessionScreen(QWidget):
    """
    Live breathing session
    - Pacer circle follows the breath
    - Cycle / time remaining + progress bar
    - Play/Pause, End Session
    - Completion view with Again / Done
    """
    def __init__(self, runner: SessionRunner, on_back):
        super().__init__()
        self.runner = runner
        self.on_back = on_back

        # --- Header
        header = QHBoxLayout()
        header.setSpacing(12)

        back = QPushButton("←")
        back.setFixedSize(40, 36)
        back.setCursor(Qt.PointingHandCursor)
        back.clicked.connect(self._go_back)

        titles = QVBoxLayout()
        titles.setSpacing(2)
        self.name_lbl = QLabel("—")
        self.name_lbl.setStyleSheet("font-size: 22px; font-weight: 750;")
        self.desc_lbl = QLabel("")
        self.desc_lbl.setObjectName("muted")
        titles.addWidget(self.name_lbl)
        titles.addWidget(self.desc_lbl)

        header.addWidget(back, 0, Qt.AlignTop)
        header.addLayout(titles, 1)

        # --- Live view: pacer + progress
        live = QWidget()
        live_layout = QVBoxLayout(live)
        live_layout.setContentsMargins(0, 0, 0, 0)
        live_layout.setSpacing(14)

        self.pacer = BreathPacer()

        self.progress_lbl = QLabel("")
        self.progress_lbl.setObjectName("muted")
        self.progress_lbl.setAlignment(Qt.AlignCenter)
        self.progress_lbl.setStyleSheet("font-size: 15px;")

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 1000)
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setFixedWidth(320)

        live_layout.addWidget(self.pacer, 1)
        live_layout.addWidget(self.progress_lbl)
        live_layout.addWidget(self.progress_bar, 0, Qt.AlignCenter)

        self.complete_view = SessionCompleteView(
            on_restart=self.runner.reset_session,
            on_finish=self._go_back,
        )

        self.body = QStackedWidget()
        self.body.addWidget(live)
        self.body.addWidget(self.complete_view)
        self._live = live

        # --- Controls
        self.controls = QWidget()
        controls = QHBoxLayout(self.controls)
        controls.setContentsMargins(0, 0, 0, 0)
        controls.setSpacing(12)

        self.play_btn = QPushButton("Start")
        self.play_btn.setMinimumWidth(160)
        self.play_btn.setCursor(Qt.PointingHandCursor)
        self.play_btn.clicked.connect(self.runner.toggle_play_pause)
        self.play_btn.setStyleSheet(soft_button_qss("94,234,212"))

        self.end_btn = QPushButton("End Session")
        self.end_btn.setCursor(Qt.PointingHandCursor)
        self.end_btn.clicked.connect(self.runner.end_session)
        self.end_btn.setStyleSheet(soft_button_qss("239,68,68"))

        controls.addStretch(1)
        controls.addWidget(self.play_btn)
        controls.addWidget(self.end_btn)
        controls.addStretch(1)

        # --- Page layout
        root = QVBoxLayout(self)
        root.setContentsMargins(22, 20, 22, 24)
        root.setSpacing(16)
        root.addLayout(header)
        root.addWidget(self.body, 1)
        root.addWidget(self.controls)

        self.runner.state_changed.connect(self.render)
        self.render(self.runner.state)

    def start(self, pattern_id: str):
        self.runner.init_session(pattern_id)

    def render(self, state: SessionState):
        try:
            self.name_lbl.setText(state.pattern.name)
            self.desc_lbl.setText(state.pattern.description)

            if state.is_complete:
                self.body.setCurrentWidget(self.complete_view)
                self.controls.hide()
                return

            self.body.setCurrentWidget(self._live)
            self.controls.show()

            self.pacer.set_state(state)
            self.progress_lbl.setText(progress_text(state))
            self.progress_bar.setValue(int(state.session_progress * 1000))

            if state.is_playing:
                self.play_btn.setText("Pause")
            elif self.runner.engine.has_started:
                self.play_btn.setText("Resume")
            else:
                self.play_btn.setText("Start")
        except Exception:
            logger.exception("Session render failed")

    def _go_back(self):
        self.runner.pause()
        self.on_back()

    def closeEvent(self, event):
        try:
            self.runner.pause()
        finally:
            super().closeEvent(event)
