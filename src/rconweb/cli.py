"""Command-line interface for rconweb.

Provides the main entry point for serving the HTTP endpoint, running an
interactive terminal console against it, or sending a single command.
"""

from __future__ import annotations

import argparse
import asyncio
import html
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

PROMPT = "> "


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="rconweb",
        description="Console for Minecraft RCON servers",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/rconweb.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("serve", help="Start the HTTP endpoint relaying commands to RCON")

    console_parser = subparsers.add_parser("console", help="Run an interactive console")
    console_parser.add_argument(
        "--url", type=str, default=None,
        help="Endpoint URL (default: console.endpoint_url from the config)",
    )

    send_parser = subparsers.add_parser("send", help="Send one command and print the reply")
    send_parser.add_argument(
        "text", nargs="*",
        help="The command to send (empty sends the placeholder command)",
    )
    send_parser.add_argument(
        "--url", type=str, default=None,
        help="Endpoint URL (default: console.endpoint_url from the config)",
    )

    return parser.parse_args(argv)


def format_result(result, localizer) -> str:
    """Render a settled result for a terminal."""
    from rconweb.console.decoder import strip_codes
    from rconweb.domain.models import CommandStatus

    status = localizer.translate(f"status.{result.matched_status.value}")
    header = f"[{result.id}] [{status}] {result.source_command}"
    if result.matched_status == CommandStatus.COM:
        body = html.unescape(result.decoded_reply)
    else:
        body = strip_codes(result.raw_reply)
    return f"{header}\n{body}" if body else header


class TerminalRenderer:
    """Prints history and loader changes published by a controller."""

    def __init__(self, controller, localizer, out=None) -> None:
        self._controller = controller
        self._localizer = localizer
        self._out = out or sys.stdout
        self._seen: set[str] = set()
        self._unsubscribers = []

    def attach(self) -> None:
        self._unsubscribers.append(self._controller.history.subscribe(self._on_history))
        self._unsubscribers.append(
            self._controller.tracker.loader_visible.subscribe(self._on_loader)
        )

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def print_history(self, history) -> None:
        if not history:
            self._print(self._localizer.translate("console.history.empty"))
        for result in history:
            self._print(format_result(result, self._localizer))

    def _on_history(self, history) -> None:
        # Newly settled records are at the head; print oldest first
        fresh = [r for r in history if r.id not in self._seen]
        for result in reversed(fresh):
            self._seen.add(result.id)
            self._print(format_result(result, self._localizer))

    def _on_loader(self, visible: bool) -> None:
        if visible:
            self._print(self._localizer.translate("console.loader"))

    def _print(self, text: str) -> None:
        print(text, file=self._out, flush=True)


def _build_localizer(settings):
    from rconweb.localization.localizer import Localizer

    if settings.console.locale_file:
        return Localizer.from_file(settings.console.locale_file)
    return Localizer()


def _handle_console_command(line: str, controller, renderer, localizer) -> bool:
    """Run an inline ``:command``. Returns False when the console should exit."""
    name, _, arg = line[1:].partition(" ")
    arg = arg.strip()

    if name in ("quit", "exit", "q"):
        return False
    if name == "history":
        renderer.print_history(controller.history.value)
    elif name == "clear":
        controller.clear_history()
        print(localizer.translate("console.history.cleared"))
    elif name == "remove":
        if controller.remove(arg):
            print(localizer.format("console.history.removed", arg))
        else:
            print(localizer.format("console.history.not_found", arg))
    elif name == "autofill":
        if controller.autofill(arg):
            print(f"{PROMPT}{controller.input_value.value}")
        else:
            print(localizer.format("console.history.not_found", arg))
    elif name == "resend":
        record = controller.get(arg)
        if record is None:
            print(localizer.format("console.history.not_found", arg))
        elif controller.resend(arg) is None:
            status = record.matched_status.value
            print(localizer.format("console.resend.refused", arg, status))
    elif name == "shortcuts":
        print(localizer.translate("console.shortcuts.title"))
        for index, shortcut in enumerate(controller.shortcuts, start=1):
            print(f"  {index}. {shortcut.name}: {shortcut.command}")
    elif name == "shortcut":
        shortcut = _find_shortcut(controller.shortcuts, arg)
        if shortcut is None:
            print(localizer.format("console.shortcuts.not_found", arg))
        else:
            controller.apply_shortcut(shortcut)
            print(f"{PROMPT}{controller.input_value.value}")
    else:
        # Not an inline command, send it as typed
        controller.submit(line)
    return True


def _find_shortcut(shortcuts, key: str):
    """Look a shortcut up by 1-based position or by name."""
    from rconweb.localization.localizer import Localizer

    if key.isdigit():
        index = int(key) - 1
        return shortcuts[index] if 0 <= index < len(shortcuts) else None
    wanted = Localizer.sanitize(key)
    for shortcut in shortcuts:
        if Localizer.sanitize(shortcut.name) == wanted:
            return shortcut
    return None


async def _run_console(settings, url: str | None) -> None:
    """Interactive console loop reading commands from stdin."""
    from rconweb.console.controller import ConsoleController
    from rconweb.transport.http_backend import HttpCommandTransport

    localizer = _build_localizer(settings)
    transport = HttpCommandTransport(
        base_url=url or settings.console.endpoint_url,
        timeout=settings.console.http_timeout,
    )

    async with transport:
        controller = ConsoleController.from_config(settings.console, transport, localizer)
        renderer = TerminalRenderer(controller, localizer)
        renderer.attach()
        print(localizer.translate("console.placeholder"))
        try:
            while True:
                try:
                    line = await asyncio.to_thread(input, PROMPT)
                except EOFError:
                    break
                # Text typed after an autofill replaces the prefilled command
                pending_input = controller.input_value.value
                if line.startswith(":"):
                    if not _handle_console_command(line, controller, renderer, localizer):
                        break
                    continue
                controller.submit(line if line.strip() or not pending_input else pending_input)
        finally:
            await controller.aclose()
            renderer.detach()


async def _send_once(settings, text: str, url: str | None) -> int:
    """Send one command and print the settled result."""
    from rconweb.console.controller import ConsoleController
    from rconweb.domain.models import CommandStatus
    from rconweb.transport.http_backend import HttpCommandTransport

    localizer = _build_localizer(settings)
    transport = HttpCommandTransport(
        base_url=url or settings.console.endpoint_url,
        timeout=settings.console.http_timeout,
    )
    async with transport:
        controller = ConsoleController.from_config(settings.console, transport, localizer)
        result = await controller.submit(text)
        await controller.aclose()

    print(format_result(result, localizer))
    return 0 if result.matched_status == CommandStatus.UNKNOWN else 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the rconweb CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from rconweb.config.settings import load_settings
    from rconweb.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        logger.info("Starting endpoint server")
        from rconweb.endpoint.server import create_app
        import uvicorn
        if not settings.rcon.is_configured:
            logger.warning("RCON host is not configured, commands will fail with 500")
        app = create_app(settings=settings)
        uvicorn.run(
            app,
            host=settings.endpoint.host,
            port=settings.endpoint.port,
        )

    elif args.command == "console":
        logger.info("Starting interactive console")
        asyncio.run(_run_console(settings, args.url))

    elif args.command == "send":
        sys.exit(asyncio.run(_send_once(settings, " ".join(args.text), args.url)))


if __name__ == "__main__":
    main()
