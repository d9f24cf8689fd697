import logging

from PySide6.QtCore import QObject, QTimer, Signal

from pranayama.core.engine import SessionEngine, SessionState, TICK_INTERVAL_MS

logger = logging.getLogger(__name__)


def deferred_recorder(store):
    """
    Wrap store.record_session so the write runs on the next event-loop pass
    instead of inside the tick. Writes queue in call order.
    """
    def _record(minutes: int):
        def _do():
            try:
                store.record_session(minutes)
            except Exception:
                logger.exception("Could not record %d min session", minutes)
        QTimer.singleShot(0, _do)
    return _record


class SessionRunner(QObject):
    """
    Drives one SessionEngine from a single QTimer on the GUI thread.

    Every command goes through here so the timer always matches the state:
    running -> timer active, anything else -> timer stopped.
    """
    state_changed = Signal(object)   # SessionState
    phase_changed = Signal(object)   # BreathPhase
    completed = Signal(object)       # SessionState

    def __init__(self, engine: SessionEngine, interval_ms: int = TICK_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self.engine = engine
        self._was_complete = engine.state.is_complete

        self.timer = QTimer(self)
        self.timer.setInterval(int(interval_ms))
        self.timer.timeout.connect(self._on_timeout)

        self.engine.add_listener(self._on_state)

    @classmethod
    def create(cls, record_session=None, trigger_haptic=None,
               interval_ms: int = TICK_INTERVAL_MS, parent=None) -> "SessionRunner":
        runner = None

        def _phase_hook(phase):
            # extension point for audio cues, the UI only listens
            if runner is not None:
                runner.phase_changed.emit(phase)

        engine = SessionEngine(
            record_session=record_session,
            trigger_haptic=trigger_haptic,
            on_phase_change=_phase_hook,
        )
        runner = cls(engine, interval_ms=interval_ms, parent=parent)
        return runner

    @property
    def state(self) -> SessionState:
        return self.engine.state

    # -----------------------
    # Commands
    # -----------------------

    def init_session(self, pattern_id: str):
        self.timer.stop()
        self.engine.init_session(pattern_id)

    def play(self):
        self.engine.play()
        if self.engine.state.is_running:
            # start() restarts an active timer, never a second loop
            self.timer.start()

    def pause(self):
        self.timer.stop()
        self.engine.pause()

    def toggle_play_pause(self):
        if self.engine.state.is_playing:
            self.pause()
        else:
            self.play()

    def end_session(self):
        self.timer.stop()
        self.engine.end_session()

    def reset_session(self):
        self.timer.stop()
        self.engine.reset_session()

    def shutdown(self):
        self.timer.stop()
        self.engine.remove_listener(self._on_state)

    # -----------------------
    # Loop
    # -----------------------

    def _on_timeout(self):
        if not self.engine.state.is_running:
            self.timer.stop()
            return
        self.engine.tick()
        if not self.engine.state.is_running:
            self.timer.stop()

    def _on_state(self, state: SessionState):
        self.state_changed.emit(state)
        if state.is_complete and not self._was_complete:
            self.completed.emit(state)
        self._was_complete = state.is_complete
