"""Tests for the command-line front end."""

from __future__ import annotations

import io

import pytest

from rconweb.cli import (
    TerminalRenderer,
    _find_shortcut,
    _handle_console_command,
    format_result,
    parse_args,
)
from rconweb.domain.models import CommandResult, CommandStatus, Shortcut


def _result(record_id: str, status: CommandStatus, raw: str = "", decoded: str = "") -> CommandResult:
    return CommandResult(
        id=record_id,
        source_command="list",
        matched_status=status,
        decoded_reply=decoded,
        raw_reply=raw,
    )


class TestParseArgs:
    def test_send_joins_words(self) -> None:
        args = parse_args(["send", "time", "set", "day"])
        assert args.command == "send"
        assert args.text == ["time", "set", "day"]

    def test_console_url_and_verbose(self) -> None:
        args = parse_args(["-v", "console", "--url", "http://mc:8080"])
        assert args.verbose is True
        assert args.url == "http://mc:8080"

    def test_no_command(self) -> None:
        assert parse_args([]).command is None


class TestFormatResult:
    def test_reply_codes_are_stripped(self, localizer) -> None:
        text = format_result(_result("1", CommandStatus.UNKNOWN, raw="§aDone§r"), localizer)
        assert text == "[1] [ok] list\nDone"

    def test_com_shows_failure_message(self, localizer) -> None:
        text = format_result(_result("2", CommandStatus.COM, decoded="Unable to communicate"), localizer)
        assert text == "[2] [communication failure] list\nUnable to communicate"

    def test_empty_reply_prints_header_only(self, localizer) -> None:
        assert format_result(_result("3", CommandStatus.ERROR), localizer) == "[3] [error] list"

    def test_com_message_is_unescaped(self, localizer) -> None:
        text = format_result(_result("4", CommandStatus.COM, decoded="bad &lt;b&gt;"), localizer)
        assert text == "[4] [communication failure] list\nbad <b>"


class TestTerminalRenderer:
    @pytest.mark.asyncio
    async def test_prints_each_settled_result_once(self, make_controller, scripted_transport, localizer) -> None:
        controller = make_controller(scripted_transport)
        out = io.StringIO()
        renderer = TerminalRenderer(controller, localizer, out=out)
        renderer.attach()

        first = await controller.submit("list")
        await controller.submit("foo")
        controller.remove(first.id)
        renderer.detach()
        await controller.aclose()

        lines = out.getvalue().splitlines()
        assert lines[0] == "[1] [ok] list"
        assert lines.count("[1] [ok] list") == 1
        assert any(line.startswith("[2] [error] foo") for line in lines)


class TestConsoleCommands:
    @pytest.mark.asyncio
    async def test_quit(self, make_controller, scripted_transport, localizer) -> None:
        controller = make_controller(scripted_transport)
        renderer = TerminalRenderer(controller, localizer, out=io.StringIO())
        assert _handle_console_command(":quit", controller, renderer, localizer) is False

    @pytest.mark.asyncio
    async def test_resend_refused_for_error(
        self, make_controller, scripted_transport, localizer, capsys: pytest.CaptureFixture[str]
    ) -> None:
        controller = make_controller(scripted_transport)
        renderer = TerminalRenderer(controller, localizer, out=io.StringIO())
        result = await controller.submit("foo")

        assert _handle_console_command(f":resend {result.id}", controller, renderer, localizer) is True
        assert "cannot be resent" in capsys.readouterr().out
        assert scripted_transport.sent == ["foo"]
        await controller.aclose()

    @pytest.mark.asyncio
    async def test_shortcut_prefills_input(self, make_controller, scripted_transport, localizer) -> None:
        controller = make_controller(scripted_transport, shortcuts=[Shortcut(name="Day", command="time set day")])
        renderer = TerminalRenderer(controller, localizer, out=io.StringIO())
        _handle_console_command(":shortcut 1", controller, renderer, localizer)
        assert controller.input_value.value == "time set day"

    @pytest.mark.asyncio
    async def test_argument_with_hash_is_echoed_whole(
        self, make_controller, scripted_transport, localizer, capsys: pytest.CaptureFixture[str]
    ) -> None:
        controller = make_controller(scripted_transport)
        renderer = TerminalRenderer(controller, localizer, out=io.StringIO())
        await controller.submit("list")

        _handle_console_command(":remove 1#2", controller, renderer, localizer)
        assert "1#2" in capsys.readouterr().out
        assert len(controller.history.value) == 1
        await controller.aclose()


class TestFindShortcut:
    shortcuts = (
        Shortcut(name="Help", command="help"),
        Shortcut(name="Clear weather", command="weather clear"),
    )

    def test_by_position(self) -> None:
        assert _find_shortcut(self.shortcuts, "2").command == "weather clear"

    def test_by_name_ignores_case(self) -> None:
        assert _find_shortcut(self.shortcuts, "HELP").command == "help"

    def test_out_of_range(self) -> None:
        assert _find_shortcut(self.shortcuts, "3") is None
        assert _find_shortcut(self.shortcuts, "0") is None
        assert _find_shortcut(self.shortcuts, "nope") is None
