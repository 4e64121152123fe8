from __future__ import annotations
import logging
from typing import Dict, Optional

from PySide6.QtCore import QObject, Qt
from PySide6.QtGui import QGuiApplication, QIcon, QPixmap
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from ..errors import IconRejectedError
from ..icons import decode_data_url

logger = logging.getLogger(__name__)

ICON_PX = 64
MARGIN = 16


def load_icon_pixmap(source: str) -> QPixmap:
    """Pixmap for a data URI or an image file. Raises IconRejectedError."""
    if source.startswith("data:"):
        try:
            data = decode_data_url(source)
        except ValueError as exc:
            raise IconRejectedError(str(exc)) from exc
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            raise IconRejectedError("icon data is not a supported image")
    else:
        pixmap = QIcon(source).pixmap(ICON_PX, ICON_PX)
    if pixmap.isNull():
        raise IconRejectedError(f"icon could not be loaded: {source[:64]}")
    return pixmap.scaled(ICON_PX, ICON_PX, Qt.KeepAspectRatio, Qt.SmoothTransformation)


class Toast(QWidget):
    def __init__(self, title: str, message: str, pixmap: QPixmap):
        super().__init__(None, Qt.Tool | Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)
        self.setAttribute(Qt.WA_ShowWithoutActivating)
        self.setFixedWidth(360)
        self.setStyleSheet("""
            QWidget { background: #1f2937; color: #f9fafb; }
            QLabel#title { font-weight: 600; font-size: 14px; }
            QLabel#message { color: #d1d5db; font-size: 12px; }
        """)

        row = QHBoxLayout(self)
        row.setContentsMargins(12, 12, 12, 12)

        icon = QLabel()
        icon.setPixmap(pixmap)
        icon.setFixedSize(ICON_PX, ICON_PX)
        row.addWidget(icon, 0, Qt.AlignTop)

        text = QVBoxLayout()
        self.title = QLabel(title)
        self.title.setObjectName("title")
        text.addWidget(self.title)

        self.message = QLabel(message)
        self.message.setObjectName("message")
        self.message.setWordWrap(True)
        text.addWidget(self.message)
        row.addLayout(text, 1)

    def mousePressEvent(self, event) -> None:
        # Click dismisses early; the scheduled dismissal still runs
        self.hide()


class ToastNotifier(QObject):
    """Notification surface: always-on-top popups stacked above the taskbar corner."""

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._toasts: Dict[str, Toast] = {}

    def create(self, notification_id: str, title: str, message: str, icon: str) -> None:
        pixmap = load_icon_pixmap(icon)
        toast = Toast(title, message, pixmap)
        self._toasts[notification_id] = toast
        toast.adjustSize()
        self._restack()
        toast.show()

    def clear(self, notification_id: str) -> bool:
        toast = self._toasts.pop(notification_id, None)
        if toast is None:
            return False
        toast.close()
        toast.deleteLater()
        self._restack()
        return True

    def active_ids(self) -> list[str]:
        return list(self._toasts)

    def _restack(self) -> None:
        screen = QGuiApplication.primaryScreen()
        if screen is None:
            return
        area = screen.availableGeometry()
        bottom = area.bottom() - MARGIN
        for toast in reversed(list(self._toasts.values())):
            h = toast.sizeHint().height()
            toast.move(area.right() - toast.width() - MARGIN, bottom - h)
            bottom -= h + MARGIN // 2
