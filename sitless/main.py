from __future__ import annotations
import logging
import os
import sys
import signal

from PySide6.QtWidgets import QApplication, QSystemTrayIcon, QMenu
from PySide6.QtGui import QAction, QCursor
from PySide6.QtCore import QTimer

from .db import connect, migrate
from .notifications import NotificationIssuer
from .permissions import PermissionGate
from .repository import Repository
from .resources import tray_icon
from .scheduler import ReminderScheduler
from .service import ReminderService, TEST_NOTIFICATION
from .settings import SETTINGS_KEY, load_settings, reset_settings, save_settings, with_changes
from .timers import AlarmClock
from .ui.toast import ToastNotifier

logger = logging.getLogger(__name__)


def log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(os.environ.get("SITLESS_LOG_LEVEL", "INFO")),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    configure_logging()

    app = QApplication(sys.argv)
    app.setWindowIcon(tray_icon())
    app.setQuitOnLastWindowClosed(False)

    # --- Dev convenience: allow Ctrl-C to quit without ugly tracebacks ---
    # Qt's event loop eats SIGINT unless we pump it. This makes Ctrl-C behave.
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    _sig_timer = QTimer()
    _sig_timer.start(250)
    _sig_timer.timeout.connect(lambda: None)

    conn = connect()
    migrate(conn)
    repo = Repository(conn)

    notifier = ToastNotifier()
    issuer = NotificationIssuer(repo, notifier, PermissionGate())
    scheduler = ReminderScheduler(AlarmClock())
    service = ReminderService(repo, scheduler, issuer)

    tray = QSystemTrayIcon()
    tray.setIcon(tray_icon())
    tray.setToolTip("Sitless")

    menu = QMenu()

    act_enabled = QAction("Enable reminders")
    act_enabled.setCheckable(True)
    act_enabled.toggled.connect(
        lambda checked: save_settings(repo, with_changes(load_settings(repo), enabled=checked))
    )
    menu.addAction(act_enabled)

    act_test = QAction("Send test notification")
    act_test.triggered.connect(lambda: _test_notification(service, tray))
    menu.addAction(act_test)

    menu.addSeparator()

    act_reset = QAction("Reset to defaults")
    act_reset.triggered.connect(lambda: reset_settings(repo))
    menu.addAction(act_reset)

    menu.addSeparator()

    def quit_cleanly():
        # Ensure tray icon disappears immediately; avoids some Qt shutdown warnings.
        service.shutdown()
        tray.hide()
        app.quit()

    act_quit = QAction("Quit")
    act_quit.triggered.connect(quit_cleanly)
    menu.addAction(act_quit)

    tray.setContextMenu(menu)

    if sys.platform.startswith("win"):
        def _show_menu_on_left_click(reason: QSystemTrayIcon.ActivationReason):
            if reason == QSystemTrayIcon.ActivationReason.Trigger:
                cm = tray.contextMenu()
                if cm is not None:
                    cm.popup(QCursor.pos())

        tray.activated.connect(_show_menu_on_left_click)

    # keep the checkbox in step with edits made anywhere
    def _mirror_enabled(area: str, changes: dict) -> None:
        if SETTINGS_KEY in changes:
            _set_checked(act_enabled, load_settings(repo).enabled)

    repo.changed.connect(_mirror_enabled)

    if service.is_installed():
        service.on_startup()
    else:
        service.on_installed()
    _set_checked(act_enabled, load_settings(repo).enabled)

    tray.show()
    return app.exec()


def _set_checked(action: QAction, checked: bool) -> None:
    action.blockSignals(True)
    action.setChecked(checked)
    action.blockSignals(False)


def _test_notification(service: ReminderService, tray: QSystemTrayIcon) -> None:
    result = service.handle_message({"type": TEST_NOTIFICATION})
    if not result or not result["ok"]:
        tray.showMessage(
            "Sitless",
            "Could not show a notification. Check that notifications are allowed.",
            QSystemTrayIcon.MessageIcon.Warning,
            10_000,
        )
