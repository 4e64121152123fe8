from __future__ import annotations
import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from .models import ReminderSettings, Schedule, SchedulerState
from .timers import AlarmClock, RepeatingTask

logger = logging.getLogger(__name__)

ALARM_NAME = "sitless-reminder"

# Intervals below this run on the fine timer; alarms cannot go that low
FINE_TIMER_THRESHOLD_MINUTES = 1


class ReminderScheduler(QObject):
    """Reminder timing state; `resync` is the only place timers are armed or cleared."""

    reminder_due = Signal()

    def __init__(
        self,
        alarms: AlarmClock,
        timer_factory: Callable[[int, Callable[[], None]], RepeatingTask] = RepeatingTask,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.alarms = alarms
        self.timer_factory = timer_factory
        self.fine_timer: Optional[RepeatingTask] = None
        self.schedule = Schedule(SchedulerState.DISABLED)

        self.alarms.fired.connect(self._on_alarm)

    @property
    def state(self) -> SchedulerState:
        return self.schedule.state

    def resync(self, settings: ReminderSettings) -> Schedule:
        self._disarm()

        if not settings.enabled:
            self.schedule = Schedule(SchedulerState.DISABLED)
        elif settings.interval_minutes < FINE_TIMER_THRESHOLD_MINUTES:
            period_ms = int(round(settings.interval_minutes * 60_000))
            self.fine_timer = self.timer_factory(period_ms, self._fire)
            self.fine_timer.start()
            self.schedule = Schedule(SchedulerState.FINE_ARMED, period_ms=period_ms)
        else:
            # delay == period: the first reminder comes one interval after arming
            self.alarms.create(
                ALARM_NAME,
                delay_minutes=settings.interval_minutes,
                period_minutes=settings.interval_minutes,
            )
            self.schedule = Schedule(SchedulerState.COARSE_ARMED, period_minutes=settings.interval_minutes)

        logger.info(
            "reminder schedule: %s (period_minutes=%s period_ms=%s)",
            self.schedule.state.value, self.schedule.period_minutes, self.schedule.period_ms,
        )
        return self.schedule

    def shutdown(self) -> None:
        self._disarm()
        self.schedule = Schedule(SchedulerState.DISABLED)

    def _disarm(self) -> None:
        self.alarms.clear(ALARM_NAME)
        if self.fine_timer is not None:
            self.fine_timer.cancel()
            self.fine_timer = None

    def _on_alarm(self, name: str) -> None:
        if name == ALARM_NAME:
            self._fire()

    def _fire(self) -> None:
        logger.debug("reminder due")
        self.reminder_due.emit()
