import os
import sqlite3

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QApplication

from sitless.db import migrate
from sitless.repository import Repository


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def repo(qapp):
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    migrate(conn)
    yield Repository(conn)
    conn.close()


class FakeAlarms(QObject):
    fired = Signal(str)

    def __init__(self):
        super().__init__()
        self.alarms = {}
        self.calls = []

    def create(self, name, delay_minutes, period_minutes):
        self.calls.append(("create", name, delay_minutes, period_minutes))
        self.alarms[name] = (delay_minutes, period_minutes)

    def clear(self, name):
        self.calls.append(("clear", name))
        return self.alarms.pop(name, None) is not None


class FakeTask:
    def __init__(self, period_ms, callback):
        self.period_ms = period_ms
        self.callback = callback
        self.active = False

    def start(self):
        self.active = True

    def cancel(self):
        self.active = False


class FakeTimerFactory:
    def __init__(self):
        self.created = []

    def __call__(self, period_ms, callback):
        task = FakeTask(period_ms, callback)
        self.created.append(task)
        return task


@pytest.fixture
def alarms(qapp):
    return FakeAlarms()


@pytest.fixture
def timer_factory():
    return FakeTimerFactory()
