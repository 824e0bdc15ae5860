#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/inline.py
"""Inline parser for Org text content.

The block parser hands over already assembled text (paragraph lines joined
with newlines, a headline title, a table cell) together with the source
position of its first character. :class:`InlineParser` scans it left to
right, dispatching on the current character:

=====================  =====================================================
``^`` ``_``            sub/superscript ``x^{2}``, ``src_lang{...}``, underline
``* / + = ~``          emphasis (``=`` and ``~`` keep their content raw)
``@``                  export snippet ``@@html:<b>@@``
``[``                  link, footnote reference, statistic cookie, inactive timestamp
``{``                  macro ``{{{name(args)}}}``
``<``                  active timestamp
``\\``                 explicit line break, ``\\(..\\)``, ``\\[..\\]``, environments
``$``                  ``$..$`` and ``$$..$$`` fragments
``:``                  bare ``https://...`` auto-link
newline                :class:`~orgast.ast.nodes.LineBreak`
=====================  =====================================================

Everything else accumulates into :class:`~orgast.ast.nodes.Text` nodes.
Nested constructs (emphasis content, link descriptions, inline footnote
definitions) are parsed over a sub-range of the same source, so every node
carries its exact source position.

"""

from __future__ import annotations

import bisect
import logging
import re
from typing import Callable, Optional, Sequence

from orgast.ast.nodes import (
    Emphasis,
    ExplicitLineBreak,
    FootnoteDefinition,
    FootnoteLink,
    InlineBlock,
    LatexFragment,
    LineBreak,
    Macro,
    Node,
    Paragraph,
    RegularLink,
    StatisticToken,
    Text,
    Timestamp,
)
from orgast.ast.position import Pos
from orgast.constants import (
    AUTO_LINK_PROTOCOLS,
    EMPHASIS_POST_BORDER,
    EMPHASIS_PRE_BORDER,
    LATEX_FRAGMENT_PAIRS,
    VERBATIM_EMPHASIS_MARKERS,
)
from orgast.dates import timestamp_recognizer
from orgast.options.org import OrgParserOptions

logger = logging.getLogger(__name__)

_VALID_URL_CHARACTERS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~:/?#[]@!$&'()*+,;="
)

# (start, end, node): the node covers text[start:end]
_Match = tuple[int, int, Optional[Node]]


class _Source:
    """Joined text plus the mapping from string indices to source positions."""

    def __init__(self, text: str, origin: Pos, line_cols: Optional[Sequence[int]]):
        self.text = text
        self.origin = origin
        self.line_starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == "\n"]
        cols = list(line_cols) if line_cols else [origin.col]
        if len(cols) < len(self.line_starts):
            cols.extend([0] * (len(self.line_starts) - len(cols)))
        self.line_cols = cols

    def pos_at(self, index: int) -> Pos:
        line = bisect.bisect_right(self.line_starts, index) - 1
        return Pos(self.origin.row + line, self.line_cols[line] + index - self.line_starts[line])


class InlineParser:
    """Parse Org inline markup into nodes with exact positions.

    Parameters
    ----------
    options : OrgParserOptions, optional
        Supplies the emphasis newline budget and the auto-link switch

    Examples
    --------
        >>> nodes = InlineParser().parse("some *bold* text", Pos(0, 0))
        >>> [type(n).__name__ for n in nodes]
        ['Text', 'Emphasis', 'Text']

    """

    def __init__(self, options: Optional[OrgParserOptions] = None):
        """Compile the inline patterns."""
        self.options = options or OrgParserOptions()
        self.sub_super_script = re.compile(r"([_^])\{([^{}]+?)\}")
        self.footnote = re.compile(r"\[fn:([\w-]*?)(?::(.*?))?\]")
        self.statistic = re.compile(r"\[(\d+/\d+|\d+%)\]")
        self.latex_environment = re.compile(r"\\begin\{(\w+)\}")
        self.inline_block = re.compile(r"src_(\w+)(\[(.*?)\])?\{(.*?)\}")
        self.export_snippet = re.compile(r"@@(\w+):(.*?)@@")
        self.macro = re.compile(r"\{\{\{([^}()\s]+?)(?:\((.*?)\))?\}\}\}")
        self.active_timestamp = timestamp_recognizer(active=True)
        self.inactive_timestamp = timestamp_recognizer(active=False)
        self._dispatch: dict[str, Callable[[_Source, int, int, int], Optional[_Match]]] = {
            "^": self._try_sub_super_script,
            "_": self._try_underscore,
            "@": self._try_export_snippet,
            "*": self._try_emphasis,
            "/": self._try_emphasis,
            "+": self._try_emphasis,
            "=": self._try_emphasis,
            "~": self._try_emphasis,
            "[": self._try_opening_bracket,
            "{": self._try_macro,
            "<": self._try_active_timestamp,
            "\\": self._try_backslash,
            "$": self._try_dollar,
            "\n": self._try_line_break,
            ":": self._try_auto_link,
        }

    def parse(self, text: str, origin: Pos, line_cols: Optional[Sequence[int]] = None) -> list[Node]:
        """Parse inline markup.

        Parameters
        ----------
        text : str
            Content to parse; lines are separated by ``\\n``
        origin : Pos
            Source position of ``text[0]``
        line_cols : sequence of int, optional
            Source column where each line of ``text`` begins; defaults to
            ``origin.col`` for the first line and 0 for the others

        Returns
        -------
        list of Node
            Inline nodes in source order

        """
        src = _Source(text, origin, line_cols)
        return self._parse(src, 0, len(text))

    def parse_raw(self, text: str, origin: Pos, line_cols: Optional[Sequence[int]] = None) -> list[Node]:
        """Split verbatim text into raw text nodes and line breaks only."""
        src = _Source(text, origin, line_cols)
        return self._parse_raw(src, 0, len(text))

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _parse(self, src: _Source, lo: int, hi: int) -> list[Node]:
        text = src.text
        nodes: list[Node] = []
        previous = current = lo
        while current < hi:
            handler = self._dispatch.get(text[current])
            match = handler(src, current, lo, hi) if handler is not None else None
            if match is None or match[0] < previous:
                current += 1
                continue
            start, end, node = match
            if start > previous:
                nodes.append(self._text(src, previous, start))
            if node is not None:
                nodes.append(node)
            previous = current = end
        if previous < hi:
            nodes.append(self._text(src, previous, hi))
        return nodes

    def _parse_raw(self, src: _Source, lo: int, hi: int) -> list[Node]:
        text = src.text
        nodes: list[Node] = []
        previous = current = lo
        while current < hi:
            if text[current] != "\n":
                current += 1
                continue
            _, end, node = self._line_break(src, current, lo, hi)
            if current > previous:
                nodes.append(self._text(src, previous, current, is_raw=True))
            nodes.append(node)
            previous = current = end
        if previous < hi:
            nodes.append(self._text(src, previous, hi, is_raw=True))
        return nodes

    @staticmethod
    def _text(src: _Source, start: int, end: int, is_raw: bool = False) -> Text:
        return Text(src.pos_at(start), src.text[start:end], is_raw=is_raw, end_pos=src.pos_at(end))

    # ------------------------------------------------------------------
    # Constructs
    # ------------------------------------------------------------------

    def _try_line_break(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        return self._line_break(src, start, lo, hi)

    def _line_break(self, src: _Source, start: int, lo: int, hi: int) -> tuple[int, int, LineBreak]:
        text = src.text
        end = start
        while end < hi and text[end] == "\n":
            end += 1
        before = text[start - 1] if start > lo else ""
        after = text[end] if end < hi else ""
        multibyte = _is_multibyte(before) and _is_multibyte(after)
        node = LineBreak(src.pos_at(start), end - start, multibyte, end_pos=src.pos_at(end))
        return start, end, node

    def _try_sub_super_script(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        m = self.sub_super_script.match(src.text, start, hi)
        if m is None:
            return None
        content = Text(src.pos_at(m.start(2)), m.group(2), end_pos=src.pos_at(m.end(2)))
        node = Emphasis(src.pos_at(start), m.group(1) + "{}", [content], end_pos=src.pos_at(m.end()))
        return start, m.end(), node

    def _try_underscore(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        return (
            self._try_inline_block(src, start, lo, hi)
            or self._try_sub_super_script(src, start, lo, hi)
            or self._try_emphasis(src, start, lo, hi)
        )

    def _try_inline_block(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        text = src.text
        begin = start - 3
        if begin < lo or text[begin:start] != "src":
            return None
        if begin > lo and not text[begin - 1].isspace():
            return None
        m = self.inline_block.match(text, begin, hi)
        if m is None:
            return None
        parameters = (m.group(1) + " " + (m.group(3) or "")).split()
        children = self._parse_raw(src, m.start(4), m.end(4))
        node = InlineBlock(src.pos_at(begin), "src", parameters, children, end_pos=src.pos_at(m.end()))
        return begin, m.end(), node

    def _try_export_snippet(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        m = self.export_snippet.match(src.text, start, hi)
        if m is None:
            return None
        children = self._parse_raw(src, m.start(2), m.end(2))
        node = InlineBlock(src.pos_at(start), "export", [m.group(1)], children, end_pos=src.pos_at(m.end()))
        return start, m.end(), node

    def _try_emphasis(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        text = src.text
        marker = text[start]
        if not self._opens_emphasis(text, start, lo, hi):
            return None
        budget = self.options.max_emphasis_new_lines
        consumed_new_lines = 0
        i = start + 1
        while i < hi and consumed_new_lines <= budget:
            if text[i] == "\n":
                consumed_new_lines += 1
            if text[i] == marker and i != start + 1 and self._closes_emphasis(text, i, lo, hi):
                if marker in VERBATIM_EMPHASIS_MARKERS:
                    content = self._parse_raw(src, start + 1, i)
                else:
                    content = self._parse(src, start + 1, i)
                return start, i + 1, Emphasis(src.pos_at(start), marker, content, end_pos=src.pos_at(i + 1))
            i += 1
        return None

    @staticmethod
    def _opens_emphasis(text: str, i: int, lo: int, hi: int) -> bool:
        border_ok = i + 1 >= hi or not text[i + 1].isspace()
        pre_ok = i == lo or text[i - 1].isspace() or text[i - 1] in EMPHASIS_PRE_BORDER
        return border_ok and pre_ok

    @staticmethod
    def _closes_emphasis(text: str, i: int, lo: int, hi: int) -> bool:
        border_ok = i == lo or not text[i - 1].isspace()
        post_ok = i + 1 >= hi or text[i + 1].isspace() or text[i + 1] in EMPHASIS_POST_BORDER
        return border_ok and post_ok

    def _try_opening_bracket(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        text = src.text
        if text.startswith("[[", start):
            return self._try_regular_link(src, start, lo, hi)
        if self.footnote.match(text, start, hi):
            return self._try_footnote_reference(src, start, lo, hi)
        if self.statistic.match(text, start, hi):
            return self._try_statistic_token(src, start, lo, hi)
        return self._try_timestamp(src, start, hi, active=False)

    def _try_regular_link(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        text = src.text
        if hi - start < 3 or text[start + 2] == "[":
            return None
        close = text.find("]]", start + 2, hi)
        if close == -1:
            return None
        url_end = text.find("][", start + 2, close)
        description: Optional[list[Node]] = None
        if url_end == -1:
            url_end = close
        else:
            description = self._parse(src, url_end + 2, close)
        url = text[start + 2 : url_end]
        if "\n" in url:
            return None
        protocol, sep, _ = url.partition(":")
        node = RegularLink(
            src.pos_at(start),
            protocol if sep else "",
            description,
            url,
            end_pos=src.pos_at(close + 2),
        )
        return start, close + 2, node

    def _try_footnote_reference(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        m = self.footnote.match(src.text, start, hi)
        if m is None:
            return None
        name, definition = m.group(1), m.group(2) or ""
        if not name and not definition:
            return None
        pos = src.pos_at(start)
        link = FootnoteLink(pos, name, end_pos=src.pos_at(m.end()))
        if definition:
            content = self._parse(src, m.start(2), m.end(2))
            paragraph = Paragraph(src.pos_at(m.start(2)), content, end_pos=src.pos_at(m.end(2)))
            link.definition = FootnoteDefinition(pos, name, [paragraph], inline=True, end_pos=src.pos_at(m.end()))
        return start, m.end(), link

    def _try_statistic_token(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        m = self.statistic.match(src.text, start, hi)
        if m is None:
            return None
        return start, m.end(), StatisticToken(src.pos_at(start), m.group(1), end_pos=src.pos_at(m.end()))

    def _try_macro(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        m = self.macro.match(src.text, start, hi)
        if m is None:
            return None
        parameters = m.group(2).split(",") if m.group(2) is not None else []
        return start, m.end(), Macro(src.pos_at(start), m.group(1), parameters, end_pos=src.pos_at(m.end()))

    def _try_active_timestamp(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        return self._try_timestamp(src, start, hi, active=True)

    def _try_timestamp(self, src: _Source, start: int, hi: int, active: bool) -> Optional[_Match]:
        recognizer = self.active_timestamp if active else self.inactive_timestamp
        parsed = recognizer.parse_with_range(src.text[start:hi])
        if parsed is None:
            return None
        date, consumed = parsed
        end = start + consumed
        return start, end, Timestamp(src.pos_at(start), date, end_pos=src.pos_at(end))

    def _try_backslash(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        text = src.text
        if start + 2 >= hi:
            return None
        following = text[start + 1]
        if following == "\\" and start != lo and text[start - 1] != "\n":
            i = start + 2
            while i < hi and text[i].isspace():
                if text[i] == "\n":
                    return start, i + 1, ExplicitLineBreak(src.pos_at(start), end_pos=src.pos_at(i))
                i += 1
            return None
        if following in "([":
            return self._try_latex_fragment(src, start, hi, 2)
        m = self.latex_environment.match(text, start, hi)
        if m is None:
            return None
        opening, closing = m.group(0), f"\\end{{{m.group(1)}}}"
        close = text.find(closing, m.end(), hi)
        if close == -1:
            return None
        end = close + len(closing)
        content = self._parse_raw(src, m.end(), close)
        return start, end, LatexFragment(src.pos_at(start), opening, closing, content, end_pos=src.pos_at(end))

    def _try_dollar(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        return self._try_latex_fragment(src, start, hi, 1)

    def _try_latex_fragment(self, src: _Source, start: int, hi: int, pair_length: int) -> Optional[_Match]:
        text = src.text
        if start + 2 >= hi:
            return None
        if pair_length == 1 and text.startswith("$$", start):
            pair_length = 2
        opening = text[start : start + pair_length]
        closing = LATEX_FRAGMENT_PAIRS[opening]
        close = text.find(closing, start + pair_length, hi)
        if close == -1:
            return None
        end = close + len(closing)
        content = self._parse_raw(src, start + pair_length, close)
        return start, end, LatexFragment(src.pos_at(start), opening, closing, content, end_pos=src.pos_at(end))

    def _try_auto_link(self, src: _Source, start: int, lo: int, hi: int) -> Optional[_Match]:
        text = src.text
        if not self.options.auto_link or start == lo or not text.startswith("://", start) or start + 3 > hi:
            return None
        protocol_start = start
        while protocol_start > lo and text[protocol_start - 1].isalpha():
            protocol_start -= 1
        protocol = text[protocol_start:start]
        if protocol not in AUTO_LINK_PROTOCOLS:
            return None
        end = start
        while end < hi and text[end] in _VALID_URL_CHARACTERS:
            end += 1
        if end - start == 3:
            return None
        url = text[protocol_start:end]
        node = RegularLink(src.pos_at(protocol_start), protocol, None, url, auto_link=True, end_pos=src.pos_at(end))
        return protocol_start, end, node


def _is_multibyte(ch: str) -> bool:
    return bool(ch) and len(ch.encode("utf-8")) > 1
