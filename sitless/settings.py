from __future__ import annotations
import math
from dataclasses import asdict, replace
from typing import Any, Dict, Mapping

from .models import ReminderSettings

SETTINGS_KEY = "sitless-settings"
INSTALL_TIMESTAMP_KEY = "sitless-install-timestamp"
UI_STATE_KEY = "sitless-popup-ui-state"  # owned by the UI, stored verbatim

MIN_INTERVAL_MINUTES = 0.1
MAX_INTERVAL_MINUTES = 180
MIN_DISPLAY_SECONDS = 1
MAX_DISPLAY_SECONDS = 300
MAX_TITLE_LENGTH = 80
MAX_MESSAGE_LENGTH = 200
MAX_ICON_DATA_URL_LENGTH = 2_000_000
ICON_DATA_URL_PREFIX = "data:image/"

DEFAULT_SETTINGS = ReminderSettings(
    enabled=True,
    interval_minutes=45.0,
    notification_title="",
    notification_message="",
    notification_display_seconds=30,
    notification_icon_data_url="",
)

# storage key -> attribute
_FIELDS = {
    "enabled": "enabled",
    "intervalMinutes": "interval_minutes",
    "notificationTitle": "notification_title",
    "notificationMessage": "notification_message",
    "notificationDisplaySeconds": "notification_display_seconds",
    "notificationIconDataUrl": "notification_icon_data_url",
}


def normalize(raw: Any) -> ReminderSettings:
    """
    Map anything to a valid ReminderSettings. Never raises.

    Missing or wrong-typed fields fall back to the defaults, numbers are
    rounded then clamped, strings trimmed then capped, icons that are not
    image data URIs (or are too long) are dropped.
    """
    if isinstance(raw, ReminderSettings):
        raw = to_storage(raw)
    if not isinstance(raw, Mapping):
        raw = {}

    d = DEFAULT_SETTINGS

    interval = _as_number(raw.get("intervalMinutes"))
    if interval is None:
        safe_interval = float(d.interval_minutes)
    else:
        interval = min(max(interval, 0.0), MAX_INTERVAL_MINUTES)
        safe_interval = max(MIN_INTERVAL_MINUTES, _round_half_up(interval * 10) / 10)

    seconds = _as_number(raw.get("notificationDisplaySeconds"))
    if seconds is None:
        safe_seconds = d.notification_display_seconds
    else:
        seconds = min(max(seconds, MIN_DISPLAY_SECONDS), MAX_DISPLAY_SECONDS)
        safe_seconds = int(_round_half_up(seconds))

    icon = raw.get("notificationIconDataUrl")
    icon = icon.strip() if isinstance(icon, str) else d.notification_icon_data_url
    if not (icon.startswith(ICON_DATA_URL_PREFIX) and len(icon) <= MAX_ICON_DATA_URL_LENGTH):
        icon = ""

    enabled = raw.get("enabled")

    return ReminderSettings(
        enabled=enabled if isinstance(enabled, bool) else d.enabled,
        interval_minutes=safe_interval,
        notification_title=_clean_text(raw.get("notificationTitle"), MAX_TITLE_LENGTH, d.notification_title),
        notification_message=_clean_text(raw.get("notificationMessage"), MAX_MESSAGE_LENGTH, d.notification_message),
        notification_display_seconds=safe_seconds,
        notification_icon_data_url=icon,
    )


def to_storage(settings: ReminderSettings) -> Dict[str, Any]:
    values = asdict(settings)
    return {key: values[attr] for key, attr in _FIELDS.items()}


def with_changes(settings: ReminderSettings, **changes: Any) -> ReminderSettings:
    return normalize(replace(settings, **changes))


def _as_number(value: Any):
    # bool is an int subclass; a checkbox value is not an interval
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _round_half_up(x: float) -> float:
    return float(math.floor(x + 0.5))


def _clean_text(value: Any, limit: int, default: str) -> str:
    if not isinstance(value, str):
        return default
    # rstrip again so a cut landing on whitespace stays stable on re-normalize
    return value.strip()[:limit].rstrip()


# ---------- Persistence ----------

def load_settings(repo) -> ReminderSettings:
    """Read, normalize and write back, so drift from other writers heals."""
    settings = normalize(repo.get_value(SETTINGS_KEY))
    repo.set({SETTINGS_KEY: to_storage(settings)})
    return settings


def save_settings(repo, raw: Any) -> ReminderSettings:
    settings = normalize(raw)
    repo.set({SETTINGS_KEY: to_storage(settings)})
    return settings


def reset_settings(repo) -> ReminderSettings:
    return save_settings(repo, DEFAULT_SETTINGS)
