from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, QTimer, Signal

logger = logging.getLogger(__name__)

# Platform alarms only tick at minute granularity
MIN_ALARM_PERIOD_MINUTES = 1.0


@dataclass(frozen=True)
class AlarmInfo:
    name: str
    scheduled_time_ms: int
    period_minutes: float


class _Alarm(QObject):
    def __init__(self, name: str, delay_minutes: float, period_minutes: float, clock: "AlarmClock"):
        super().__init__(clock)
        self.name = name
        self.period_minutes = period_minutes
        self.scheduled_time_ms = _now_ms() + int(delay_minutes * 60_000)
        self.clock = clock

        self.timer = QTimer(self)
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self._ring)
        self.timer.start(int(delay_minutes * 60_000))

    def _ring(self) -> None:
        period_ms = int(self.period_minutes * 60_000)
        self.scheduled_time_ms = _now_ms() + period_ms
        self.timer.start(period_ms)
        self.clock.fired.emit(self.name)

    def stop(self) -> None:
        self.timer.stop()
        self.deleteLater()


class AlarmClock(QObject):
    """Named periodic alarms with a one minute floor, like a platform alarm API."""

    fired = Signal(str)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._alarms: Dict[str, _Alarm] = {}

    def create(self, name: str, delay_minutes: float, period_minutes: float) -> None:
        if period_minutes < MIN_ALARM_PERIOD_MINUTES:
            raise ValueError(f"alarm period must be >= {MIN_ALARM_PERIOD_MINUTES} min, got {period_minutes}")
        self.clear(name)
        self._alarms[name] = _Alarm(name, max(delay_minutes, 0.0), period_minutes, self)

    def clear(self, name: str) -> bool:
        alarm = self._alarms.pop(name, None)
        if alarm is None:
            return False
        alarm.stop()
        return True

    def get(self, name: str) -> Optional[AlarmInfo]:
        alarm = self._alarms.get(name)
        if alarm is None:
            return None
        return AlarmInfo(alarm.name, alarm.scheduled_time_ms, alarm.period_minutes)

    def clear_all(self) -> None:
        for name in list(self._alarms):
            self.clear(name)


class RepeatingTask(QObject):
    """Cancellable sub-minute timer; re-arms before each callback."""

    def __init__(self, period_ms: int, callback: Callable[[], None], parent: Optional[QObject] = None):
        super().__init__(parent)
        if period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {period_ms}")
        self.period_ms = int(period_ms)
        self.callback = callback
        self.runs = 0

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._timer.start(self.period_ms)

    def cancel(self) -> None:
        self._timer.stop()
        self.deleteLater()

    def _fire(self) -> None:
        self._timer.start(self.period_ms)
        self.runs += 1
        try:
            self.callback()
        except Exception:
            logger.exception("repeating task callback failed (period=%sms)", self.period_ms)


def _now_ms() -> int:
    return int(time.time() * 1000)
