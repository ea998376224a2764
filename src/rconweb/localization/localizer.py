"""String lookup for operator-facing messages.

Keys map to translated strings. A key may carry positional arguments
separated by ``#``: ``"console.history.removed#42"`` looks up
``console.history.removed`` and replaces ``{0}`` with ``42``. Unknown keys
translate to themselves.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Mapping
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_STRINGS: dict[str, str] = {
    "console.error.communication": "Unable to communicate with the server",
    "console.placeholder": "Type a command, or press enter for help",
    "console.loader": "Waiting for the server...",
    "console.history.empty": "No commands sent yet",
    "console.history.removed": "Removed entry {0}",
    "console.history.cleared": "History cleared",
    "console.history.not_found": "No history entry {0}",
    "console.resend.refused": "Entry {0} has status {1} and cannot be resent",
    "console.shortcuts.title": "Shortcuts",
    "console.shortcuts.not_found": "No shortcut {0}",
    "status.unknown": "ok",
    "status.error": "error",
    "status.invalid": "invalid",
    "status.com": "communication failure",
}


class Localizer:
    """Translates message keys using a loaded string table."""

    def __init__(self, strings: Mapping[str, str] | None = None) -> None:
        self._strings: dict[str, str] = dict(DEFAULT_STRINGS if strings is None else strings)

    @classmethod
    def from_file(cls, path: Path | str) -> Localizer:
        """Load a locale file (YAML or JSON mapping of key to string).

        Keys missing from the file fall back to the built-in strings.
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Locale file {path} must contain a mapping")
        logger.info("Loaded %d strings from %s", len(data), path)
        return cls({**DEFAULT_STRINGS, **{str(k): str(v) for k, v in data.items()}})

    def load_locale(self, strings: Mapping[str, str]) -> None:
        """Replace the string table."""
        self._strings = dict(strings)

    def translate(self, key: str | None) -> str:
        if key is None:
            return "?"
        if "#" in key:
            name, *args = key.split("#")
            return self.format(name, *args)
        return self._get(key)

    def format(self, key: str, *args: object) -> str:
        """Translate ``key`` and fill its ``{i}`` slots with ``args`` as given."""
        translation = self._get(key)
        for index, arg in enumerate(args):
            translation = translation.replace(f"{{{index}}}", str(arg))
        return translation

    __call__ = translate

    def _get(self, key: str) -> str:
        return self._strings.get(key, key)

    @staticmethod
    def sanitize(term: str | None) -> str | None:
        """Strip diacritics and lowercase ``term`` for matching."""
        if term is None:
            return None
        decomposed = unicodedata.normalize("NFD", term)
        return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()
