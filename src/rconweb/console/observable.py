"""Push-based state containers for the console's published state.

A subscriber receives the current value immediately on subscribe and
then every later value. Callbacks run synchronously on the thread that
sets the value.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class ObservableValue(Generic[T]):
    """Holds a value and notifies subscribers when it changes."""

    def __init__(self, initial: T, *, distinct: bool = False) -> None:
        self._value = initial
        self._distinct = distinct
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Publish a new value.

        With ``distinct=True`` a value equal to the current one is not
        re-published.
        """
        if self._distinct and value == self._value:
            return
        self._value = value
        # Copy so callbacks may unsubscribe while being notified
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception:
                logger.exception("Subscriber %r failed", callback)

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Register ``callback`` and call it with the current value.

        Returns a callable that removes the subscription. Calling it more
        than once is harmless.
        """
        self._subscribers.append(callback)
        callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
