"""Notification hand-off adapters."""

from school_auth.infrastructure.notifications.logging_notifier import LoggingNotifier

__all__ = ["LoggingNotifier"]
