from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ReminderSettings:
    enabled: bool
    interval_minutes: float  # 0.1 .. 180, one decimal
    notification_title: str
    notification_message: str
    notification_display_seconds: int  # 1 .. 300
    notification_icon_data_url: str  # '' or data:image/...


class SchedulerState(str, Enum):
    DISABLED = "disabled"
    COARSE_ARMED = "coarse_armed"
    FINE_ARMED = "fine_armed"


@dataclass(frozen=True)
class Schedule:
    state: SchedulerState
    # coarse: alarm period in minutes; fine: timer period in ms
    period_minutes: Optional[float] = None
    period_ms: Optional[int] = None


class Permission(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    UNKNOWN = "unknown"
