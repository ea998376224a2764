"""History ledger of finalized command exchanges, newest first."""

from __future__ import annotations

import logging
from collections import deque

from rconweb.domain.models import CommandResult

logger = logging.getLogger(__name__)


class HistoryLedger:
    """Ordered collection of :class:`CommandResult` records.

    New records are inserted at the head. Removal by id keeps the
    relative order of the remaining records. With ``max_entries`` set,
    the oldest records are dropped once the limit is exceeded.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._records: deque[CommandResult] = deque(maxlen=max_entries)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return any(record.id == record_id for record in self._records)

    def prepend(self, record: CommandResult) -> None:
        if self._records.maxlen is not None and len(self._records) == self._records.maxlen:
            logger.debug("History full, dropping %s", self._records[-1].id)
        self._records.appendleft(record)

    def remove_by_id(self, record_id: str) -> bool:
        """Remove the record with ``record_id``. Returns False if absent."""
        for record in self._records:
            if record.id == record_id:
                self._records.remove(record)
                return True
        return False

    def get(self, record_id: str) -> CommandResult | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def snapshot(self) -> tuple[CommandResult, ...]:
        """The current ordering. Not updated by later mutations."""
        return tuple(self._records)

    def clear(self) -> None:
        self._records.clear()


def is_resendable(record: CommandResult) -> bool:
    """Only ``unknown`` and ``com`` results may be re-dispatched."""
    return record.matched_status.is_resendable
