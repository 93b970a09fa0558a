"""Notification surface used to report import progress to the user."""

import logging
from typing import Optional, Protocol

SUCCESS = "success"
ERROR = "error"
WARNING = "warning"
INFO = "info"

NOTIFICATION_KINDS = (SUCCESS, ERROR, WARNING, INFO)


class Notifier(Protocol):
    """Fire-and-forget user notifications."""

    def notify(self, kind: str, message: str, description: Optional[str] = None) -> None:
        ...


class LoggingNotifier:
    """Notifier that writes notifications to a logger."""

    _levels = {
        SUCCESS: logging.INFO,
        INFO: logging.INFO,
        WARNING: logging.WARNING,
        ERROR: logging.ERROR,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("tradejournal.notifications")

    def notify(self, kind: str, message: str, description: Optional[str] = None) -> None:
        level = self._levels.get(kind, logging.INFO)
        if description:
            self.logger.log(level, "%s: %s", message, description)
        else:
            self.logger.log(level, "%s", message)
