"""Tests for the FormattingDecoder."""

from __future__ import annotations

import re

import pytest

from rconweb.config.settings import DEFAULT_COLOR_CODES, DEFAULT_STYLE_CODES
from rconweb.console.decoder import FormattingDecoder, strip_codes


class TestFormattingDecoder:
    def test_newline_becomes_line_break(self, decoder: FormattingDecoder) -> None:
        assert decoder.decode("a\nb") == "a<br>b"

    def test_color_code_opens_span(self, decoder: FormattingDecoder) -> None:
        assert decoder.decode("§1x§r") == '<span style="color: #0000AA;">x</span>'

    @pytest.mark.parametrize("code", sorted(DEFAULT_COLOR_CODES))
    def test_every_color_code(self, decoder: FormattingDecoder, code: str) -> None:
        expected = f'<span style="color: {DEFAULT_COLOR_CODES[code]};">'
        assert decoder.decode(f"§{code}") == expected

    @pytest.mark.parametrize("code", sorted(DEFAULT_STYLE_CODES))
    def test_every_style_code(self, decoder: FormattingDecoder, code: str) -> None:
        expected = f'<span style="{DEFAULT_STYLE_CODES[code]};">'
        assert decoder.decode(f"§{code}") == expected

    def test_bold_text(self, decoder: FormattingDecoder) -> None:
        assert decoder.decode("§lbig§r") == '<span style="font-weight: bold;">big</span>'

    def test_unclosed_span_is_left_open(self, decoder: FormattingDecoder) -> None:
        assert decoder.decode("§ared") == '<span style="color: #55FF55;">red'

    def test_consecutive_opens_are_not_auto_closed(self, decoder: FormattingDecoder) -> None:
        result = decoder.decode("§ca§eb")
        assert result == '<span style="color: #FF5555;">a<span style="color: #FFFF55;">b'
        assert result.count("</span>") == 0

    @pytest.mark.parametrize("raw", ["§z", "§A", "§F", "§ ", "§"])
    def test_unrecognized_codes_pass_through(self, decoder: FormattingDecoder, raw: str) -> None:
        assert decoder.decode(raw) == raw

    def test_plain_text_unchanged(self, decoder: FormattingDecoder) -> None:
        assert decoder.decode("There are 0 players online") == "There are 0 players online"

    def test_html_is_escaped_by_default(self, decoder: FormattingDecoder) -> None:
        assert decoder.decode("foo<--[HERE]") == "foo&lt;--[HERE]"
        assert decoder.decode("a & b") == "a &amp; b"

    def test_html_escaping_can_be_disabled(self) -> None:
        decoder = FormattingDecoder(DEFAULT_COLOR_CODES, DEFAULT_STYLE_CODES, escape_html=False)
        assert decoder.decode("<b>x</b>\n") == "<b>x</b><br>"

    def test_custom_tables(self) -> None:
        colors = {code: f"c{code}" for code in DEFAULT_COLOR_CODES}
        styles = {code: f"s{code}" for code in DEFAULT_STYLE_CODES}
        decoder = FormattingDecoder(colors, styles)
        assert decoder.decode("§0§k") == '<span style="color: c0;"><span style="sk;">'

    def test_decoding_is_deterministic(self, decoder: FormattingDecoder) -> None:
        raw = "§6Gold §lbold§r§r\nnext"
        assert decoder.decode(raw) == decoder.decode(raw)
        assert decoder(raw) == decoder.decode(raw)

    def test_structure_is_recoverable(self, decoder: FormattingDecoder) -> None:
        """Each recognized code maps to exactly one tag, in order."""
        raw = "§1a§lb§rc§r§ed§o"
        decoded = decoder.decode(raw)
        tags = re.findall(r"<span style=\"([^\"]*)\">|</span>", decoded)
        opened = [t for t in tags if t]
        assert opened == [
            f"color: {DEFAULT_COLOR_CODES['1']};",
            f"{DEFAULT_STYLE_CODES['l']};",
            f"color: {DEFAULT_COLOR_CODES['e']};",
            f"{DEFAULT_STYLE_CODES['o']};",
        ]
        assert decoded.count("</span>") == 2
        assert re.sub(r"<[^>]+>", "", decoded) == "abcd"


class TestStripCodes:
    def test_removes_recognized_codes(self) -> None:
        assert strip_codes("§e--- §fHelp§r ---") == "--- Help ---"

    def test_keeps_unrecognized_codes(self) -> None:
        assert strip_codes("§zkeep") == "§zkeep"
