import sys

if sys.platform == "darwin":
    FONT_STACK = 'Helvetica Neue","Arial'
elif sys.platform.startswith("win"):
    FONT_STACK = 'Segoe UI","Arial'
else:
    FONT_STACK = 'DejaVu Sans","Arial'

# pacer colours per phase (inhale / hold / exhale)
PHASE_COLORS = {
    "inhale": "#5eead4",
    "hold_after_inhale": "#a78bfa",
    "exhale": "#60a5fa",
    "hold_after_exhale": "#a78bfa",
}

APP_QSS = f"""
QMainWindow, QWidget {{
    background: #0b0f14;
    color: #e7eef7;
    font-family: "{FONT_STACK}";
    font-size: 14px;
}}

QLabel {{
    color: #e7eef7;
}}

QLabel#muted {{
    color: rgba(231,238,247,0.70);
}}

QPushButton {{
    background: #1f2937;
    border: 1px solid rgba(255,255,255,0.10);
    padding: 10px 14px;
    border-radius: 12px;
    font-weight: 600;
}}
QPushButton:hover {{ background: #263244; }}
QPushButton:pressed {{ background: #1b2431; }}

QProgressBar {{
    border: 1px solid rgba(255,255,255,0.10);
    border-radius: 3px;
    background: rgba(255,255,255,0.06);
    text-align: center;
    max-height: 6px;
}}
QProgressBar::chunk {{
    border-radius: 3px;
    background: #5eead4;
}}
"""


def card_qss(radius: int = 16) -> str:
    return f"""
        QFrame {{
            background: rgba(255,255,255,0.05);
            border: 1px solid rgba(255,255,255,0.08);
            border-radius: {radius}px;
        }}
    """


def soft_button_qss(rgb: str = "255,255,255") -> str:
    return f"""
        QPushButton {{
            background: rgba({rgb},0.10);
            border: 1px solid rgba({rgb},0.20);
            border-radius: 14px;
            padding: 12px 18px;
            font-weight: 750;
        }}
        QPushButton:hover {{ background: rgba({rgb},0.16); }}
        QPushButton:pressed {{ background: rgba({rgb},0.24); }}
    """
