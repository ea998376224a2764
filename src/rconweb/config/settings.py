"""Configuration management for rconweb.

Loads settings from a YAML configuration file with environment variable
overrides for deployment values (RCON host, port, password). Supports
.env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from rconweb.domain.models import CommandStatus, Shortcut

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/rconweb.yaml")

# Minecraft chat colors, keyed by the character following the escape marker
DEFAULT_COLOR_CODES: dict[str, str] = {
    "0": "#000000",
    "1": "#0000AA",
    "2": "#00AA00",
    "3": "#00AAAA",
    "4": "#AA0000",
    "5": "#AA00AA",
    "6": "#FFAA00",
    "7": "#AAAAAA",
    "8": "#555555",
    "9": "#5555FF",
    "a": "#55FF55",
    "b": "#55FFFF",
    "c": "#FF5555",
    "d": "#FF55FF",
    "e": "#FFFF55",
    "f": "#FFFFFF",
}

DEFAULT_STYLE_CODES: dict[str, str] = {
    "k": "filter: blur(0.2em)",  # obfuscated
    "l": "font-weight: bold",
    "m": "text-decoration: line-through",
    "n": "text-decoration: underline",
    "o": "font-style: italic",
}

DEFAULT_STATUS_RULES: dict[str, list[str]] = {
    "error": [
        "Unknown or incomplete command*",
        "Unknown command*",
        "An unexpected error occurred*",
    ],
    "invalid": [
        "*<--[[]HERE]*",
        "Incorrect argument for command*",
        "Invalid *",
        "Expected *",
        "No player was found*",
    ],
}

DEFAULT_SHORTCUTS: list[dict[str, str]] = [
    {"name": "Help", "icon": "circle-question", "color": "info", "command": "help"},
    {"name": "Players", "icon": "users", "color": "primary", "command": "list"},
    {"name": "Day", "icon": "sun", "color": "warning", "command": "time set day"},
    {"name": "Clear weather", "icon": "cloud-sun", "color": "success", "command": "weather clear"},
    {"name": "Save", "icon": "floppy-disk", "color": "secondary", "command": "save-all"},
]

COLOR_CODE_KEYS = frozenset("0123456789abcdef")
STYLE_CODE_KEYS = frozenset("klmno")


class RconConfig(BaseModel):
    host: str | None = Field(default=None, description="RCON server host; unset means not configured")
    port: int = Field(default=25575, ge=1, le=65535)
    password: SecretStr = Field(default=SecretStr(""))
    timeout_ms: int = Field(default=5000, gt=0)

    @property
    def is_configured(self) -> bool:
        return bool(self.host)


class EndpointConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)


class ConsoleConfig(BaseModel):
    endpoint_url: str = Field(default="http://localhost:8080")
    http_timeout: float = Field(default=10.0, gt=0)
    placeholder_command: str = Field(default="help", min_length=1)
    loader_delay: float = Field(default=0.5, ge=0)
    history_limit: int | None = Field(default=None, gt=0)
    escape_html: bool = Field(default=True)
    locale_file: str | None = Field(default=None)
    status_rules: dict[str, list[str]] = Field(
        default_factory=lambda: {tag: list(patterns) for tag, patterns in DEFAULT_STATUS_RULES.items()}
    )
    color_codes: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COLOR_CODES))
    style_codes: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_STYLE_CODES))
    shortcuts: list[Shortcut] = Field(
        default_factory=lambda: [Shortcut(**s) for s in DEFAULT_SHORTCUTS]
    )

    @field_validator("status_rules")
    @classmethod
    def _check_status_tags(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        valid = {status.value for status in CommandStatus}
        unknown = [tag for tag in value if tag not in valid]
        if unknown:
            raise ValueError(f"Unknown status tags in status_rules: {', '.join(unknown)}")
        return value

    @field_validator("color_codes")
    @classmethod
    def _check_color_codes(cls, value: dict[str, str]) -> dict[str, str]:
        if set(value) != COLOR_CODE_KEYS:
            raise ValueError("color_codes must define exactly the codes 0-9 and a-f")
        return value

    @field_validator("style_codes")
    @classmethod
    def _check_style_codes(cls, value: dict[str, str]) -> dict[str, str]:
        if set(value) != STYLE_CODE_KEYS:
            raise ValueError("style_codes must define exactly the codes k-o")
        return value


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for rconweb.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "RCONWEB_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    rcon: RconConfig = Field(default_factory=RconConfig)
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Init values carry the YAML file and rank below the environment
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    # Load .env file manually for non-prefixed vars
    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply the un-prefixed RCON_* deployment variables."""
    rcon = yaml_data.setdefault("rcon", {})

    host = os.environ.get("RCON_HOST", "")
    port = os.environ.get("RCON_PORT", "")
    password = os.environ.get("RCON_PASSWORD")
    timeout = os.environ.get("RCON_TIMEOUT", "")

    if host:
        rcon["host"] = host
    if port:
        rcon["port"] = port
    if password is not None:
        rcon["password"] = password
    # An empty RCON_TIMEOUT keeps the default
    if timeout:
        rcon["timeout_ms"] = timeout
