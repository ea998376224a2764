"""The console controller that orchestrates command dispatch.

Ties together the command transport, the formatting decoder, the status
classifier, the pending-command tracker and the history ledger.
"""

from __future__ import annotations

import asyncio
import html
import itertools
import logging
from collections.abc import Iterable

from rconweb.config.settings import ConsoleConfig
from rconweb.console.classifier import StatusClassifier
from rconweb.console.decoder import FormattingDecoder
from rconweb.console.history import HistoryLedger, is_resendable
from rconweb.console.observable import ObservableValue
from rconweb.console.tracker import PendingTracker
from rconweb.domain.models import CommandResult, CommandStatus, Shortcut
from rconweb.localization.localizer import Localizer
from rconweb.transport.base import CommandTransport

logger = logging.getLogger(__name__)

COMMUNICATION_ERROR_KEY = "console.error.communication"


class ConsoleController:
    """Accepts operator input, dispatches commands and records the results.

    Each submitted command goes Idle -> Dispatched -> Settled. Settlement
    always produces exactly one :class:`CommandResult` at the head of the
    history and exactly one decrement of the pending count. Several
    commands may be in flight at once; the history reflects the order in
    which they complete.

    Published state, for renderers to subscribe to:
        input_value -- the current content of the input control
        history -- snapshot of the history ledger, newest first
        tracker.count / tracker.loader_visible -- pending commands

    All methods must be called from the event loop that runs the
    dispatches.
    """

    def __init__(
        self,
        transport: CommandTransport,
        decoder: FormattingDecoder,
        classifier: StatusClassifier,
        localizer: Localizer,
        placeholder_command: str = "help",
        tracker: PendingTracker | None = None,
        ledger: HistoryLedger | None = None,
        shortcuts: Iterable[Shortcut] = (),
    ) -> None:
        if not placeholder_command.strip():
            raise ValueError("placeholder_command must not be blank")
        self._transport = transport
        self._decoder = decoder
        self._classifier = classifier
        self._localizer = localizer
        self._placeholder_command = placeholder_command.strip()
        self.tracker = tracker if tracker is not None else PendingTracker()
        self._ledger = ledger if ledger is not None else HistoryLedger()
        self._shortcuts = tuple(shortcuts)

        self._ids = itertools.count(1)
        self._tasks: set[asyncio.Task[CommandResult]] = set()

        self.input_value: ObservableValue[str] = ObservableValue("")
        self.history: ObservableValue[tuple[CommandResult, ...]] = ObservableValue(
            self._ledger.snapshot()
        )

    @classmethod
    def from_config(
        cls,
        config: ConsoleConfig,
        transport: CommandTransport,
        localizer: Localizer | None = None,
    ) -> ConsoleController:
        """Build a controller and its collaborators from console settings."""
        if localizer is None:
            localizer = Localizer.from_file(config.locale_file) if config.locale_file else Localizer()
        return cls(
            transport=transport,
            decoder=FormattingDecoder(
                config.color_codes, config.style_codes, escape_html=config.escape_html
            ),
            classifier=StatusClassifier(config.status_rules),
            localizer=localizer,
            placeholder_command=config.placeholder_command,
            tracker=PendingTracker(delay=config.loader_delay),
            ledger=HistoryLedger(max_entries=config.history_limit),
            shortcuts=config.shortcuts,
        )

    @property
    def placeholder_command(self) -> str:
        return self._placeholder_command

    @property
    def shortcuts(self) -> tuple[Shortcut, ...]:
        return self._shortcuts

    @property
    def in_flight(self) -> int:
        """Number of dispatches that have not settled yet."""
        return len(self._tasks)

    # ------------------------------------------------------------------
    # Operator intents
    # ------------------------------------------------------------------

    def submit(self, raw_input: str | None = None) -> asyncio.Task[CommandResult]:
        """Dispatch a command.

        Sends ``raw_input``, or the current input value when omitted.
        Blank input sends the placeholder command. The pending count is
        incremented and the input cleared before this returns; the
        returned task resolves to the settled result.
        """
        if raw_input is None:
            raw_input = self.input_value.value
        command = self._normalize(raw_input)

        loop = asyncio.get_running_loop()
        self.tracker.increment()
        task = loop.create_task(self._dispatch(command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        self.input_value.set("")
        logger.debug("Dispatched %r (%d pending)", command, self.tracker.pending)
        return task

    def prefill_command(self, text: str) -> None:
        """Replace the input value without sending it."""
        self.input_value.set(text)

    def reset(self) -> None:
        """Clear the input control."""
        self.input_value.set("")

    def autofill(self, record_id: str) -> bool:
        """Copy a record's command into the input, whatever its status."""
        record = self._ledger.get(record_id)
        if record is None:
            return False
        self.prefill_command(record.source_command)
        return True

    def resend(self, record_id: str) -> asyncio.Task[CommandResult] | None:
        """Send a record's command again if its status allows it.

        Returns the new dispatch, or None when the record is unknown or
        has an ``error``/``invalid`` status.
        """
        record = self._ledger.get(record_id)
        if record is None or not is_resendable(record):
            logger.debug("Resend of %s ignored", record_id)
            return None
        self.prefill_command(record.source_command)
        return self.submit()

    def remove(self, record_id: str) -> bool:
        removed = self._ledger.remove_by_id(record_id)
        if removed:
            self._publish_history()
        return removed

    def clear_history(self) -> None:
        self._ledger.clear()
        self._publish_history()

    def apply_shortcut(self, shortcut: Shortcut) -> None:
        """Prefill the input with a shortcut's command."""
        self.prefill_command(shortcut.command)

    def get(self, record_id: str) -> CommandResult | None:
        return self._ledger.get(record_id)

    async def aclose(self) -> None:
        """Wait for every outstanding dispatch to settle, then stop timers."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self.tracker.close()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _dispatch(self, command: str) -> CommandResult:
        try:
            try:
                raw_reply = await self._transport.send(command)
            except Exception as e:
                logger.warning("Command %r failed: %s", command, e)
                record = self._failure_result(command, e)
            else:
                record = self._reply_result(command, raw_reply)
            self._ledger.prepend(record)
            self._publish_history()
            return record
        finally:
            self.tracker.decrement()

    def _reply_result(self, command: str, raw_reply: str) -> CommandResult:
        return CommandResult(
            id=self._next_id(),
            source_command=command,
            matched_status=self._classifier.classify(raw_reply),
            decoded_reply=self._decoder.decode(raw_reply),
            raw_reply=raw_reply,
        )

    def _failure_result(self, command: str, error: BaseException | None) -> CommandResult:
        return CommandResult(
            id=self._next_id(),
            source_command=command,
            matched_status=CommandStatus.COM,
            decoded_reply=self._failure_message(error),
        )

    def _failure_message(self, error: BaseException | None) -> str:
        message = str(error) if error is not None else ""
        if not message.strip():
            message = self._localizer.translate(COMMUNICATION_ERROR_KEY)
        # Failure text lands in the same markup field as decoded replies
        if self._decoder.escape_html:
            message = html.escape(message, quote=False)
        return message

    def _normalize(self, raw_input: str | None) -> str:
        command = (raw_input or "").strip()
        return command or self._placeholder_command

    def _next_id(self) -> str:
        return str(next(self._ids))

    def _publish_history(self) -> None:
        self.history.set(self._ledger.snapshot())
