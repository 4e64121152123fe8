from __future__ import annotations
import logging
from typing import Callable, Optional, Sequence

from PySide6.QtWidgets import QSystemTrayIcon

from .models import Permission

logger = logging.getLogger(__name__)

Probe = Callable[[], Permission]


def capability_probe() -> Permission:
    # A "no" here is not final: some platforms under-report message support
    if QSystemTrayIcon.supportsMessages():
        return Permission.GRANTED
    return Permission.UNKNOWN


def permission_level() -> Optional[str]:
    return "granted" if QSystemTrayIcon.isSystemTrayAvailable() else "denied"


def level_probe(get_level: Optional[Callable[[], Optional[str]]] = permission_level) -> Probe:
    def probe() -> Permission:
        if get_level is None:
            return Permission.UNKNOWN
        return Permission.GRANTED if get_level() == "granted" else Permission.DENIED
    return probe


class PermissionGate:
    """Asks each probe in turn; the first definite answer wins."""

    def __init__(self, probes: Optional[Sequence[Probe]] = None):
        self.probes = list(probes) if probes is not None else [capability_probe, level_probe()]

    def check(self) -> Permission:
        for probe in self.probes:
            try:
                answer = probe()
            except Exception as exc:
                logger.debug("permission probe %r failed: %s", probe, exc)
                continue
            if answer is not Permission.UNKNOWN:
                return answer
        return Permission.UNKNOWN

    def has_permission(self) -> bool:
        return self.check() is Permission.GRANTED
