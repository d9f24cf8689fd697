import math

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtCore import Qt, QPointF, QRectF, QTimer
from PySide6.QtGui import QPainter, QColor, QPen, QRadialGradient, QFont

from pranayama.core.engine import SessionState
from pranayama.ui.style import PHASE_COLORS


def phase_color(state: SessionState) -> QColor:
    return QColor(PHASE_COLORS.get(state.current_phase.value, "#5eead4"))


class BreathPacer(QWidget):
    """
    Circle that grows with breath_progress (0 = empty lungs, 1 = full).
    Phase label and countdown are drawn in the middle.
    """
    MIN_RATIO = 0.35
    MAX_RATIO = 0.85
    GLOW_PERIOD_S = 3.0

    def __init__(self):
        super().__init__()
        self.setMinimumSize(260, 260)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

        self._state: SessionState | None = None

        # --- Smooth radius + glow animation state
        self._anim_timer = QTimer(self)
        self._anim_timer.setInterval(16)  # ~60fps
        self._anim_timer.timeout.connect(self._animate)
        self._display_value = 0.0
        self._target_value = 0.0
        self._ease = 0.12
        self._glow_t = 0.0
        self._glow = 0.3

    def set_state(self, state: SessionState):
        self._state = state
        self._target_value = state.breath_progress
        if state.is_running:
            if not self._anim_timer.isActive():
                self._anim_timer.start()
        else:
            # paused / finished: snap and hold still
            self._anim_timer.stop()
            self._display_value = self._target_value
        self.update()

    def _animate(self):
        self._display_value += (self._target_value - self._display_value) * self._ease

        # glow breathes 0.3 -> 0.6 -> 0.3, independent of the session clock
        self._glow_t = (self._glow_t + self._anim_timer.interval() / 1000.0) % self.GLOW_PERIOD_S
        phase = self._glow_t / self.GLOW_PERIOD_S
        self._glow = 0.45 - 0.15 * math.cos(2.0 * math.pi * phase)
        self.update()

    def current_radius(self) -> float:
        side = min(self.width(), self.height()) / 2.0
        lo = side * self.MIN_RATIO
        hi = side * self.MAX_RATIO
        return lo + (hi - lo) * max(0.0, min(1.0, self._display_value))

    def paintEvent(self, event):
        if self._state is None:
            return

        p = QPainter(self)
        p.setRenderHint(QPainter.Antialiasing, True)

        color = phase_color(self._state)
        center = QPointF(self.width() / 2.0, self.height() / 2.0)
        r = self.current_radius()

        # outer glow
        glow = QRadialGradient(center, r * 1.5)
        c0 = QColor(color)
        c0.setAlphaF(self._glow * 0.3)
        c1 = QColor(color)
        c1.setAlphaF(0.0)
        glow.setColorAt(0.0, c0)
        glow.setColorAt(1.0, c1)
        p.setPen(Qt.NoPen)
        p.setBrush(glow)
        p.drawEllipse(center, r * 1.5, r * 1.5)

        # fill
        fill = QRadialGradient(center, r)
        f0 = QColor(color)
        f0.setAlphaF(0.20)
        f1 = QColor(color)
        f1.setAlphaF(0.05)
        fill.setColorAt(0.0, f0)
        fill.setColorAt(1.0, f1)
        p.setBrush(fill)
        p.drawEllipse(center, r, r)

        # outline
        outline = QColor(color)
        outline.setAlphaF(0.8)
        p.setBrush(Qt.NoBrush)
        p.setPen(QPen(outline, 3))
        p.drawEllipse(center, r, r)

        # inner ring
        ring = QColor(color)
        ring.setAlphaF(self._glow)
        p.setPen(QPen(ring, 1))
        p.drawEllipse(center, max(0.0, r - 8), max(0.0, r - 8))

        # label + countdown
        label_font = QFont(self.font())
        label_font.setPointSize(18)
        label_font.setWeight(QFont.Medium)
        p.setFont(label_font)
        p.setPen(color)
        p.drawText(QRectF(0, center.y() - 56, self.width(), 30), Qt.AlignCenter, self._state.current_phase.label)

        count_font = QFont(self.font())
        count_font.setPointSize(44)
        count_font.setWeight(QFont.Light)
        p.setFont(count_font)
        p.setPen(QColor("#e7eef7"))
        p.drawText(
            QRectF(0, center.y() - 20, self.width(), 64),
            Qt.AlignCenter,
            str(self._state.phase_seconds_remaining),
        )
        p.end()
