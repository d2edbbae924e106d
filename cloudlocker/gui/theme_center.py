from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from PyQt5.QtCore import QObject, pyqtSignal
from PyQt5.QtGui import QPalette, QColor
from PyQt5.QtWidgets import QApplication

from ..core.theme import DARK, LIGHT, ThemeState
from ..core.file_kinds import FileKind, KIND_COLORS


def qc(x) -> QColor:
    """Coerce to QColor."""
    if isinstance(x, QColor):
        return QColor(x)
    return QColor(str(x).strip())


@dataclass
class Theme:
    name: str
    window: QColor
    base: QColor
    alt_base: QColor
    text: QColor
    disabled_text: QColor
    button: QColor
    button_text: QColor
    highlight: QColor
    highlighted_text: QColor
    link: QColor
    colors: Dict[str, QColor] = field(default_factory=dict)


LIGHT_THEME = Theme(
    name=LIGHT,
    window=qc("#f9fafb"),
    base=qc("#ffffff"),
    alt_base=qc("#f3f4f6"),
    text=qc("#111827"),
    disabled_text=qc("#9ca3af"),
    button=qc("#ffffff"),
    button_text=qc("#1f2937"),
    highlight=qc("#2563eb"),
    highlighted_text=qc("#ffffff"),
    link=qc("#2563eb"),
    colors={
        "accent": qc("#2563eb"),
        "border": qc("#d1d5db"),
        "header_bg": qc("#f3f4f6"),
        "muted": qc("#6b7280"),
        "danger": qc("#dc2626"),
        "drop_bg": qc("#eff6ff"),
    },
)

DARK_THEME = Theme(
    name=DARK,
    window=qc("#0f131a"),
    base=qc("#131a24"),
    alt_base=qc("#1a1f29"),
    text=qc("#e6e6e6"),
    disabled_text=qc("#5b6470"),
    button=qc("#1a1f29"),
    button_text=qc("#e6e6e6"),
    highlight=qc("#66b0ff"),
    highlighted_text=qc("#0b0f14"),
    link=qc("#66b0ff"),
    colors={
        "accent": qc("#66b0ff"),
        "border": qc("#2f3642"),
        "header_bg": qc("#1a1f29"),
        "muted": qc("#9aa3ad"),
        "danger": qc("#ff5c5c"),
        "drop_bg": qc("#16202e"),
    },
)

_BUILTINS = {LIGHT: LIGHT_THEME, DARK: DARK_THEME}


def make_palette(t: Theme) -> QPalette:
    pal = QPalette()
    pal.setColor(QPalette.Window, t.window)
    pal.setColor(QPalette.WindowText, t.text)
    pal.setColor(QPalette.Base, t.base)
    pal.setColor(QPalette.AlternateBase, t.alt_base)
    pal.setColor(QPalette.ToolTipBase, t.base)
    pal.setColor(QPalette.ToolTipText, t.text)
    pal.setColor(QPalette.Text, t.text)
    pal.setColor(QPalette.Button, t.button)
    pal.setColor(QPalette.ButtonText, t.button_text)
    pal.setColor(QPalette.Highlight, t.highlight)
    pal.setColor(QPalette.HighlightedText, t.highlighted_text)
    pal.setColor(QPalette.Link, t.link)
    pal.setColor(QPalette.Disabled, QPalette.Text, t.disabled_text)
    pal.setColor(QPalette.Disabled, QPalette.WindowText, t.disabled_text)
    pal.setColor(QPalette.Disabled, QPalette.ButtonText, t.disabled_text)
    return pal


def build_global_qss(t: Theme) -> str:
    c = t.colors
    b = c["border"].name()
    acc = c["accent"].name()
    header_bg = c["header_bg"].name()
    muted = c["muted"].name()
    danger = c["danger"].name()
    drop_bg = c["drop_bg"].name()

    return f"""
    QWidget {{
        background: {t.window.name()};
        color: {t.text.name()};
    }}
    QLabel#title {{ font-size: 20px; font-weight: 700; }}
    QLabel#subtitle, QLabel#muted {{ color: {muted}; }}
    QLabel#error {{ color: {danger}; font-weight: 600; min-height: 18px; }}

    QFrame#Card {{
        background: {t.base.name()};
        border: 1px solid {b};
        border-radius: 12px;
    }}
    QFrame#DropZone {{
        background: {drop_bg};
        border: 2px dashed {b};
        border-radius: 12px;
    }}
    QFrame#DropZone[dragging="true"] {{
        border-color: {acc};
    }}

    QPushButton {{
        background: {t.button.name()};
        color: {t.button_text.name()};
        border: 1px solid {b};
        border-radius: 8px;
        padding: 6px 12px;
        font-weight: 600;
    }}
    QPushButton:hover {{ border-color: {acc}; }}
    QPushButton:disabled {{
        color: {t.disabled_text.name()};
        background: {t.alt_base.name()};
    }}
    QPushButton#primary {{
        background: {acc};
        color: {t.highlighted_text.name()};
        border-color: {acc};
    }}
    QPushButton#danger {{
        color: {danger};
    }}
    QPushButton#link {{
        border: none;
        background: transparent;
        color: {t.link.name()};
        padding: 0;
    }}

    QLineEdit {{
        background: {t.alt_base.name()};
        border: 1px solid {b};
        border-radius: 8px;
        padding: 7px 10px;
        selection-background-color: {acc};
        selection-color: {t.highlighted_text.name()};
    }}
    QLineEdit:focus {{ border-color: {acc}; }}

    QHeaderView::section {{
        background: {header_bg};
        color: {t.text.name()};
        padding: 6px 8px;
        border: none;
        border-bottom: 1px solid {b};
        font-weight: 700;
    }}
    QTableView {{
        gridline-color: {b};
        alternate-background-color: {t.alt_base.name()};
        selection-background-color: {t.alt_base.name()};
        selection-color: {t.text.name()};
        border: 1px solid {b};
        border-radius: 12px;
        background: {t.base.name()};
    }}

    QProgressBar {{
        border: 1px solid {b};
        border-radius: 6px;
        background: {t.alt_base.name()};
        text-align: center;
        max-height: 14px;
    }}
    QProgressBar::chunk {{ background: {acc}; border-radius: 6px; }}

    QToolTip {{
        background: {t.base.name()};
        color: {t.text.name()};
        border: 1px solid {b};
        padding: 6px 8px;
    }}
    """


def badge_qss(kind: FileKind, dark: bool) -> str:
    light_c, dark_c = KIND_COLORS[kind]
    col = dark_c if dark else light_c
    return (f"QLabel {{ color: {col}; border: 1px solid {col}; border-radius: 6px;"
            f" padding: 1px 6px; font-size: 11px; font-weight: 700; background: transparent; }}")


def system_prefers_dark(app: QApplication) -> bool:
    return app.palette().color(QPalette.Window).lightness() < 128


class ThemeManager(QObject):
    """Applies the persisted light/dark choice to the QApplication."""
    themeChanged = pyqtSignal(str)

    def __init__(self, app: QApplication, state: ThemeState):
        super().__init__()
        self.app = app
        self.state = state
        state.subscribe(self._on_state)

    def install(self):
        self.app.setStyle("Fusion")
        self.apply(self.state.theme)

    def apply(self, name: str):
        t = _BUILTINS.get(name, LIGHT_THEME)
        self.app.setPalette(make_palette(t))
        self.app.setStyleSheet(build_global_qss(t))
        self.themeChanged.emit(t.name)

    def _on_state(self, name: str):
        self.apply(name)

    def toggle(self):
        self.state.toggle()

    @property
    def is_dark(self) -> bool:
        return self.state.is_dark
