# src/marketmatch/components/notifications.py

"""Non-blocking user notifications ("toasts")."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ToastLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Toast:
    level: ToastLevel
    message: str


class Notifier:
    """Collects toasts raised by a component.

    The HTTP layer serializes the collected toasts into its responses; tests
    inspect them directly.
    """

    def __init__(self) -> None:
        self.toasts: list[Toast] = []

    def success(self, message: str) -> None:
        self._push(Toast(ToastLevel.SUCCESS, message))

    def error(self, message: str) -> None:
        self._push(Toast(ToastLevel.ERROR, message))

    @property
    def last(self) -> Toast | None:
        return self.toasts[-1] if self.toasts else None

    def clear(self) -> None:
        self.toasts.clear()

    def _push(self, toast: Toast) -> None:
        logger.debug("Toast (%s): %s", toast.level.value, toast.message)
        self.toasts.append(toast)
