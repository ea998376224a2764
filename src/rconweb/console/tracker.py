"""Pending-command tracking with a debounced loader signal."""

from __future__ import annotations

import asyncio
import logging

from rconweb.console.observable import ObservableValue

logger = logging.getLogger(__name__)

DEFAULT_LOADER_DELAY = 0.5


class PendingTracker:
    """Counts in-flight commands and derives a "show loader" flag.

    The loader only becomes visible once the count has stayed above zero
    for ``delay`` seconds, measured from the zero -> nonzero transition.
    Further increments while commands are already pending never restart
    that window. The loader hides as soon as the count returns to zero.

    Must be used from within a running event loop.
    """

    def __init__(self, delay: float = DEFAULT_LOADER_DELAY) -> None:
        self._delay = delay
        self.count: ObservableValue[int] = ObservableValue(0)
        self.loader_visible: ObservableValue[bool] = ObservableValue(False, distinct=True)
        self._timer: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> int:
        return self.count.value

    def increment(self) -> None:
        count = self.count.value + 1
        if count == 1:
            self._arm()
        self.count.set(count)

    def decrement(self) -> None:
        if self.count.value <= 0:
            raise ValueError("No pending command to settle")
        count = self.count.value - 1
        if count == 0:
            self._disarm()
            self.loader_visible.set(False)
        self.count.set(count)

    def close(self) -> None:
        """Cancel the armed timer, if any."""
        self._disarm()

    def _arm(self) -> None:
        self._disarm()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._delay, self._on_timer)

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        if self.count.value > 0:
            logger.debug("%d command(s) pending past %.2fs, showing loader", self.count.value, self._delay)
            self.loader_visible.set(True)
