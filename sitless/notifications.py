from __future__ import annotations
import logging
import time
from typing import Callable, Optional

from PySide6.QtCore import QTimer

from .errors import NotificationError
from .permissions import PermissionGate
from .resources import default_icon_path
from .settings import load_settings

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Time to move"
DEFAULT_MESSAGE = "Get up and move for 2-5 minutes. Stretch your body."
ID_PREFIX = "sitless-"


def _qt_single_shot(delay_ms: int, func: Callable[[], None]) -> None:
    QTimer.singleShot(delay_ms, func)


class NotificationIssuer:
    """
    Shows one reminder notification per `show()` call.

    Returns whether a notification was actually created; permission problems
    and rejected icons come back as False, never as exceptions.
    """

    def __init__(
        self,
        repo,
        notifier,
        gate: PermissionGate,
        default_icon: Optional[str] = None,
        schedule: Callable[[int, Callable[[], None]], None] = _qt_single_shot,
        clock: Callable[[], float] = time.time,
    ):
        self.repo = repo
        self.notifier = notifier
        self.gate = gate
        self.default_icon = default_icon or str(default_icon_path())
        self.schedule = schedule
        self.clock = clock
        self._last_ms = 0

    def show(self) -> bool:
        if not self.gate.has_permission():
            logger.info("notification permission missing; reminder suppressed")
            return False

        settings = load_settings(self.repo)
        notification_id = self._next_id()
        title = settings.notification_title or DEFAULT_TITLE
        message = settings.notification_message or DEFAULT_MESSAGE

        if not self._create(notification_id, title, message, settings.notification_icon_data_url):
            return False

        self.schedule(
            settings.notification_display_seconds * 1000,
            lambda: self._dismiss(notification_id),
        )
        return True

    def _create(self, notification_id: str, title: str, message: str, custom_icon: str) -> bool:
        if custom_icon:
            try:
                self.notifier.create(notification_id, title, message, custom_icon)
                return True
            except NotificationError as exc:
                logger.warning("custom icon rejected (%s); retrying with the default icon", exc)
            except Exception:
                logger.exception("notification with custom icon failed; retrying with the default icon")

        try:
            self.notifier.create(notification_id, title, message, self.default_icon)
            return True
        except Exception:
            logger.exception("could not create notification %s", notification_id)
            return False

    def _dismiss(self, notification_id: str) -> None:
        try:
            self.notifier.clear(notification_id)
        except Exception:
            logger.exception("could not dismiss notification %s", notification_id)

    def _next_id(self) -> str:
        # Time based, but never equal to the previous id
        ms = max(int(self.clock() * 1000), self._last_ms + 1)
        self._last_ms = ms
        return f"{ID_PREFIX}{ms}"
