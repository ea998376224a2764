"""Localized operator-facing strings."""

from rconweb.localization.localizer import DEFAULT_STRINGS, Localizer

__all__ = ["DEFAULT_STRINGS", "Localizer"]
