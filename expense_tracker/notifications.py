"""
Toast notifications.

One slot, no queue: showing a new toast replaces the current one. The UI
takes the toast out of the slot with pop() and hands it to st.toast, which
dismisses itself after a few seconds or when the user closes it. A toast
that is never rendered expires after `duration_seconds`.
"""

import time
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel


class ToastKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Toast(BaseModel):
    message: str
    kind: ToastKind
    shown_at: float


class ToastCenter:
    """Holds at most one visible toast."""

    def __init__(
        self,
        duration_seconds: float = 5.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._duration = duration_seconds
        self._clock = clock or time.monotonic
        self._toast: Optional[Toast] = None

    def show(self, message: str, kind: ToastKind) -> Toast:
        self._toast = Toast(message=message, kind=kind, shown_at=self._clock())
        return self._toast

    def success(self, message: str) -> Toast:
        return self.show(message, ToastKind.SUCCESS)

    def error(self, message: str) -> Toast:
        return self.show(message, ToastKind.ERROR)

    def dismiss(self) -> None:
        self._toast = None

    @property
    def current(self) -> Optional[Toast]:
        """The visible toast, or None once it has expired or been dismissed."""
        if self._toast is not None and self._clock() - self._toast.shown_at >= self._duration:
            self._toast = None
        return self._toast

    def pop(self) -> Optional[Toast]:
        """Take the visible toast out of the slot so it is rendered exactly once."""
        toast = self.current
        self._toast = None
        return toast
