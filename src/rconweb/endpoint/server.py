"""FastAPI HTTP server relaying console commands to the RCON server.

Each ``POST /api/rcon`` opens a fresh RCON connection, executes the
command carried in the request body and returns the reply payload.
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from rconweb.config.settings import Settings, load_settings
from rconweb.domain.models import RconReply, Shortcut
from rconweb.rcon.client import RconClient
from rconweb.rcon.errors import (
    RconAuthenticationError,
    RconConfigurationError,
    RconConnectionError,
    RconError,
    RconShutdownError,
)
from rconweb.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# 511 Network Authentication Required
HTTP_AUTHENTICATION_REQUIRED = 511


class EndpointStatus(BaseModel):
    status: str = "ok"
    rcon_configured: bool = False


class ConsoleSetup(BaseModel):
    """Static console configuration shared with front ends."""

    placeholder_command: str
    loader_delay: float
    status_rules: dict[str, list[str]]
    color_codes: dict[str, str]
    style_codes: dict[str, str]
    shortcuts: list[Shortcut] = Field(default_factory=list)


def status_for_error(error: RconError) -> int:
    """Map an RCON failure to the HTTP status returned to the console."""
    if isinstance(error, RconConnectionError):
        return 502
    if isinstance(error, RconAuthenticationError):
        return HTTP_AUTHENTICATION_REQUIRED
    if isinstance(error, (RconConfigurationError, RconShutdownError)):
        return 500
    # Send, receive, timeout and decode failures
    return 503


def create_app(
    client: RconClient | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="rconweb Endpoint",
        description="Relays console commands to a Minecraft RCON server",
        version="0.1.0",
    )

    app.state.client = client if client is not None else RconClient(settings.rcon)
    app.state.settings = settings

    @app.get("/health")
    async def health_check() -> EndpointStatus:
        c: RconClient = app.state.client
        return EndpointStatus(status="ok", rcon_configured=c.is_configured)

    @app.get("/api/config")
    async def console_setup() -> ConsoleSetup:
        console = app.state.settings.console
        return ConsoleSetup(
            placeholder_command=console.placeholder_command,
            loader_delay=console.loader_delay,
            status_rules=console.status_rules,
            color_codes=console.color_codes,
            style_codes=console.style_codes,
            shortcuts=console.shortcuts,
        )

    @app.post("/api/rcon")
    async def handle_rcon(request: Request) -> RconReply:
        c: RconClient = app.state.client
        body = await request.body()
        command = body.decode("utf-8", errors="replace")
        try:
            response = await c.execute(command)
        except RconError as e:
            status_code = status_for_error(e)
            logger.warning("RCON command %r failed (%d): %s", command, status_code, e)
            raise HTTPException(status_code=status_code, detail=str(e)) from e
        return RconReply(id=response.response_id, payload=response.payload)

    return app


def main(config_path: str | None = None) -> None:
    """Entry point for running the endpoint server standalone."""
    settings = load_settings(config_path)
    setup_logging(settings.logging)
    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.endpoint.host, port=settings.endpoint.port)


if __name__ == "__main__":
    main()
