"""Reply status classification against an ordered table of glob rules."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from fnmatch import fnmatchcase

from rconweb.domain.models import CommandStatus

logger = logging.getLogger(__name__)


class StatusClassifier:
    """Assigns a status tag to a raw reply.

    The rule table maps status tags to glob patterns. Tags are tried in
    table order and patterns in list order; the first pattern matching
    the whole reply wins. ``*`` spans newlines. A reply no pattern
    matches is ``unknown``.
    """

    def __init__(self, rules: Mapping[str | CommandStatus, Sequence[str]]) -> None:
        self._rules: tuple[tuple[CommandStatus, tuple[str, ...]], ...] = tuple(
            (CommandStatus(tag), tuple(patterns)) for tag, patterns in rules.items()
        )

    @property
    def rules(self) -> tuple[tuple[CommandStatus, tuple[str, ...]], ...]:
        return self._rules

    def classify(self, raw: str) -> CommandStatus:
        for status, patterns in self._rules:
            for pattern in patterns:
                if fnmatchcase(raw, pattern):
                    logger.debug("Reply matched %r -> %s", pattern, status.value)
                    return status
        return CommandStatus.UNKNOWN

    __call__ = classify
