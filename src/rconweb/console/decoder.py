"""Formatting decoder for RCON replies.

Minecraft replies carry inline formatting codes: a section sign (U+00A7)
followed by a single character. Colors are ``0``-``9`` and ``a``-``f``,
styles are ``k``-``o`` and ``r`` resets. The decoder turns them into HTML
spans. Codes do not nest, so each kind is handled by an independent
find/replace pass and a reset simply closes the most recent span.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping

ESCAPE_MARKER = "§"
LINE_BREAK = "<br>"
SPAN_CLOSE = "</span>"

_COLOR_PATTERN = re.compile(ESCAPE_MARKER + r"([0-9a-f])")
_STYLE_PATTERN = re.compile(ESCAPE_MARKER + r"([k-o])")
_RESET_PATTERN = re.compile(ESCAPE_MARKER + "r")
_ANY_CODE_PATTERN = re.compile(ESCAPE_MARKER + r"[0-9a-fk-or]")


class FormattingDecoder:
    """Turns raw reply text into HTML markup.

    Unclosed spans are left open and unrecognized codes (``§z``, ``§A``)
    pass through unchanged.

    Args:
        color_codes: Color value for each of the 16 color codes.
        style_codes: CSS declaration for each of the 5 style codes.
        escape_html: Escape ``&``, ``<`` and ``>`` in the raw text before
            decoding so server text cannot inject markup.
    """

    def __init__(
        self,
        color_codes: Mapping[str, str],
        style_codes: Mapping[str, str],
        escape_html: bool = True,
    ) -> None:
        self._color_codes = dict(color_codes)
        self._style_codes = dict(style_codes)
        self._escape_html = escape_html

    @property
    def escape_html(self) -> bool:
        return self._escape_html

    def decode(self, raw: str) -> str:
        text = html.escape(raw, quote=False) if self._escape_html else raw

        text = text.replace("\n", LINE_BREAK)
        text = _COLOR_PATTERN.sub(self._color_span, text)
        text = _STYLE_PATTERN.sub(self._style_span, text)
        text = _RESET_PATTERN.sub(SPAN_CLOSE, text)
        return text

    __call__ = decode

    def _color_span(self, match: re.Match[str]) -> str:
        color = self._color_codes.get(match.group(1))
        if color is None:
            return match.group(0)
        return f'<span style="color: {color};">'

    def _style_span(self, match: re.Match[str]) -> str:
        style = self._style_codes.get(match.group(1))
        if style is None:
            return match.group(0)
        return f'<span style="{style};">'


def strip_codes(raw: str) -> str:
    """Remove every recognized formatting code, keeping the plain text."""
    return _ANY_CODE_PATTERN.sub("", raw)
