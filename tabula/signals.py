"""Minimal synchronous observer used for state change notifications.

Stores and controllers expose ``Signal`` attributes the same way Qt objects
expose signals::

    filters.changed.connect(refetch)
    filters.set_filter("status", "draft")   # -> refetch({"status": "draft"})

Receivers are invoked synchronously, in connection order, on the caller's
thread. Exceptions raised by a receiver propagate to the code that mutated
the state.
"""

from __future__ import annotations
from typing import Any, Callable, List
import logging

logger = logging.getLogger(__name__)


class Signal:
    """Ordered list of callbacks invoked on ``emit``."""

    def __init__(self, name: str = "signal"):
        self.name = name
        self._receivers: List[Callable[..., Any]] = []

    def connect(self, receiver: Callable[..., Any]) -> Callable[..., Any]:
        """Register a receiver. Connecting the same callable twice is a no-op.

        Returns the receiver so the method can be used as a decorator.
        """
        if receiver not in self._receivers:
            self._receivers.append(receiver)
        return receiver

    def disconnect(self, receiver: Callable[..., Any]) -> bool:
        """Remove a receiver.

        Returns:
            True if the receiver was connected
        """
        try:
            self._receivers.remove(receiver)
        except ValueError:
            return False
        return True

    def emit(self, *args: Any) -> None:
        # Copy so receivers may disconnect themselves while being notified
        for receiver in list(self._receivers):
            receiver(*args)

    @property
    def receivers(self) -> int:
        return len(self._receivers)

    def __repr__(self) -> str:
        return f"<Signal {self.name} receivers={len(self._receivers)}>"


__all__ = ["Signal"]
