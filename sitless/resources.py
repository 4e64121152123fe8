from __future__ import annotations
from pathlib import Path
from PySide6.QtGui import QIcon


def resource_path(*parts: str) -> Path:
    # Works in dev and in PyInstaller
    import sys
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        base = Path(sys._MEIPASS)  # type: ignore[attr-defined]
    else:
        base = Path(__file__).resolve().parent
    return base.joinpath(*parts)


def default_icon_path() -> Path:
    return resource_path("assets", "icon.svg")


def tray_icon() -> QIcon:
    return QIcon(str(default_icon_path()))
