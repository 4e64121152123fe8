from __future__ import annotations
import logging
import sqlite3
import time
from typing import Any, Callable, Dict, Mapping, Optional

from PySide6.QtCore import QObject

from .models import Schedule
from .notifications import NotificationIssuer
from .repository import Repository
from .scheduler import ReminderScheduler
from .settings import INSTALL_TIMESTAMP_KEY, SETTINGS_KEY, load_settings

logger = logging.getLogger(__name__)

SYNC_REMINDER = "sync-reminder"
TEST_NOTIFICATION = "test-notification"


class ReminderService(QObject):
    """Reacts to install, startup, settings changes and inbound requests."""

    def __init__(
        self,
        repo: Repository,
        scheduler: ReminderScheduler,
        issuer: NotificationIssuer,
        clock: Callable[[], float] = time.time,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.repo = repo
        self.scheduler = scheduler
        self.issuer = issuer
        self.clock = clock

        self.repo.changed.connect(self._on_storage_changed)
        self.scheduler.reminder_due.connect(self._on_reminder_due)

    def is_installed(self) -> bool:
        return self.repo.get_value(INSTALL_TIMESTAMP_KEY) is not None

    def on_installed(self) -> Schedule:
        if not self.is_installed():
            self.repo.set({INSTALL_TIMESTAMP_KEY: int(self.clock() * 1000)})
            logger.info("first run: install timestamp recorded")
        return self.sync()

    def on_startup(self) -> Schedule:
        return self.sync()

    def sync(self) -> Schedule:
        return self.scheduler.resync(load_settings(self.repo))

    def handle_message(self, message: Any) -> Optional[Dict[str, bool]]:
        kind = message.get("type") if isinstance(message, Mapping) else None
        if kind == SYNC_REMINDER:
            self.sync()
            return {"ok": True}
        if kind == TEST_NOTIFICATION:
            return {"ok": self.issuer.show()}
        logger.debug("ignoring message %r", message)
        return None

    def shutdown(self) -> None:
        self.scheduler.shutdown()

    def _on_storage_changed(self, area: str, changes: dict) -> None:
        if area == self.repo.area and SETTINGS_KEY in changes:
            self.sync()

    def _on_reminder_due(self) -> None:
        try:
            self.issuer.show()
        except (sqlite3.Error, ValueError):
            # next firing retries
            logger.exception("reminder skipped: settings could not be read")
