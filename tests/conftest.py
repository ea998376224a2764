"""Shared test fixtures for the rconweb test suite.

Provides common fixtures used across unit tests: formatting tables, a
decoder and classifier built from them, a localizer, and scriptable
command transports.
"""

from __future__ import annotations

import asyncio

import pytest

from rconweb.config.settings import DEFAULT_COLOR_CODES, DEFAULT_STATUS_RULES, DEFAULT_STYLE_CODES
from rconweb.console.classifier import StatusClassifier
from rconweb.console.controller import ConsoleController
from rconweb.console.decoder import FormattingDecoder
from rconweb.console.tracker import PendingTracker
from rconweb.localization.localizer import Localizer
from rconweb.transport.base import CommandTransport, CommandTransportError


# ---------------------------------------------------------------------------
# Transport doubles
# ---------------------------------------------------------------------------


class ScriptedTransport(CommandTransport):
    """Answers immediately from a table of replies or failures."""

    def __init__(self, replies: dict[str, str | BaseException] | None = None, default: str = "") -> None:
        self.replies = dict(replies or {})
        self.default = default
        self.sent: list[str] = []

    async def send(self, command: str) -> str:
        self.sent.append(command)
        reply = self.replies.get(command, self.default)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class GatedTransport(CommandTransport):
    """Holds every command until the test settles it explicitly.

    Lets tests choose the order in which in-flight commands complete.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self._gates: dict[str, asyncio.Future[str]] = {}

    def gate(self, command: str) -> asyncio.Future[str]:
        if command not in self._gates:
            self._gates[command] = asyncio.get_running_loop().create_future()
        return self._gates[command]

    def reply(self, command: str, text: str) -> None:
        self.gate(command).set_result(text)

    def fail(self, command: str, error: BaseException) -> None:
        self.gate(command).set_exception(error)

    async def send(self, command: str) -> str:
        self.sent.append(command)
        return await self.gate(command)


# ---------------------------------------------------------------------------
# Console Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def decoder() -> FormattingDecoder:
    """A decoder using the default Minecraft color and style tables."""
    return FormattingDecoder(DEFAULT_COLOR_CODES, DEFAULT_STYLE_CODES)


@pytest.fixture
def classifier() -> StatusClassifier:
    """A classifier using the default rule table."""
    return StatusClassifier(DEFAULT_STATUS_RULES)


@pytest.fixture
def localizer() -> Localizer:
    return Localizer()


@pytest.fixture
def scripted_transport() -> ScriptedTransport:
    return ScriptedTransport(
        replies={
            "help": "§e--------- §fHelp: Index§e ---------",
            "list": "There are 0 of a max of 20 players online: ",
            "foo": "Unknown or incomplete command, see below for error\nfoo<--[HERE]",
            "give": "Incorrect argument for command\n...give<--[HERE]",
            "down": CommandTransportError("HTTP request to /api/rcon failed: 502 Bad Gateway"),
            "silent": CommandTransportError(),
        },
        default="Done",
    )


@pytest.fixture
def gated_transport() -> GatedTransport:
    return GatedTransport()


@pytest.fixture
def make_controller(decoder: FormattingDecoder, classifier: StatusClassifier, localizer: Localizer):
    """Factory building a controller with a short loader delay."""

    def factory(transport: CommandTransport, **kwargs) -> ConsoleController:
        kwargs.setdefault("tracker", PendingTracker(delay=0.05))
        return ConsoleController(
            transport=transport,
            decoder=decoder,
            classifier=classifier,
            localizer=localizer,
            **kwargs,
        )

    return factory
