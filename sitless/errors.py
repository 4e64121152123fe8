from __future__ import annotations


class SitlessError(Exception):
    pass


class NotificationError(SitlessError):
    """The platform refused to create a notification."""


class IconRejectedError(NotificationError):
    """The icon payload could not be turned into an image."""
