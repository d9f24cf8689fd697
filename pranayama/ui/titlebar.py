from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QPushButton
from PySide6.QtCore import Qt, QPoint


class TitleBar(QWidget):
    """
    Frameless window title bar:
    - Drag anywhere on the bar to move the window
    - Settings button (hidden while a session is on screen)
    - Minimize and Close buttons
    """
    def __init__(self, window, title: str = "Pranayama Studio", on_settings=None):
        super().__init__()
        self._window = window
        self._drag_pos: QPoint | None = None

        self.setFixedHeight(44)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(14, 8, 12, 8)
        layout.setSpacing(10)

        self.title = QLabel(title)
        self.title.setStyleSheet("font-size: 14px; font-weight: 750;")

        self.settings_btn = self._btn("⚙")
        self.min_btn = self._btn("—")
        self.close_btn = self._btn("✕", danger=True)

        if callable(on_settings):
            self.settings_btn.clicked.connect(on_settings)
        else:
            self.settings_btn.hide()
        self.min_btn.clicked.connect(self._window.showMinimized)
        self.close_btn.clicked.connect(self._window.close)

        layout.addWidget(self.title)
        layout.addStretch(1)
        layout.addWidget(self.settings_btn)
        layout.addWidget(self.min_btn)
        layout.addWidget(self.close_btn)

        self.setStyleSheet("""
            QWidget {
                background: rgba(255,255,255,0.03);
                border-bottom: 1px solid rgba(255,255,255,0.06);
                border-top-left-radius: 16px;
                border-top-right-radius: 16px;
            }
        """)

    def set_settings_enabled(self, enabled: bool):
        self.settings_btn.setEnabled(enabled)

    def _btn(self, text: str, danger: bool = False) -> QPushButton:
        b = QPushButton(text)
        b.setFixedSize(36, 30)
        b.setCursor(Qt.PointingHandCursor)
        hover = "rgba(239,68,68,0.25)" if danger else "rgba(255,255,255,0.10)"
        pressed = "rgba(239,68,68,0.35)" if danger else "rgba(255,255,255,0.14)"
        b.setStyleSheet(f"""
            QPushButton {{
                background: rgba(255,255,255,0.06);
                border: 1px solid rgba(255,255,255,0.10);
                border-radius: 10px;
                font-weight: 900;
            }}
            QPushButton:hover {{ background: {hover}; }}
            QPushButton:pressed {{ background: {pressed}; }}
            QPushButton:disabled {{ color: rgba(231,238,247,0.30); }}
        """)
        return b

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._drag_pos = event.globalPosition().toPoint() - self._window.frameGeometry().topLeft()
            event.accept()

    def mouseMoveEvent(self, event):
        if self._drag_pos is not None and event.buttons() & Qt.LeftButton:
            self._window.move(event.globalPosition().toPoint() - self._drag_pos)
            event.accept()

    def mouseReleaseEvent(self, event):
        self._drag_pos = None
        event.accept()
