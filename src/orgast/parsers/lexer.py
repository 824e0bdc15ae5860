#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/lexer.py
"""Line lexer for Org-mode text.

Every input line is classified into exactly one :class:`Token` by trying a
list of :class:`Recognizer` objects in priority order. The list always ends
with the plain-text recognizer, which matches any line, so lexing is total.

Recognizers own their compiled patterns. :func:`default_recognizers` builds a
fresh list each time it is called and :class:`LineLexer` holds one such list
for the lifetime of a parse.

"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional, Sequence

from orgast.ast.position import Pos
from orgast.dates import DateRecognizer, closed_recognizer, deadline_recognizer, scheduled_recognizer
from orgast.exceptions import LexerInvariantError
from orgast.parsers.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class Recognizer:
    """A single line pattern producing tokens of one kind.

    Parameters
    ----------
    kind : TokenKind
        Kind assigned to matching lines
    pattern : str
        Regular expression matched against the full line
    indent_group : int or None, default 1
        Group holding the leading whitespace; None when the token has no indentation
    content_group : int or None
        Group used as the token content; None means empty content
    flags : int, default 0
        Regex flags

    """

    def __init__(
        self,
        kind: TokenKind,
        pattern: str,
        indent_group: Optional[int] = 1,
        content_group: Optional[int] = None,
        flags: int = 0,
    ):
        """Compile the pattern."""
        self.kind = kind
        self.pattern = re.compile(pattern, flags)
        self.indent_group = indent_group
        self.content_group = content_group

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"{type(self).__name__}({self.kind.value!r})"

    def content(self, match: re.Match) -> str:
        """Extract the token content from a match."""
        if self.content_group is None:
            return ""
        return match.group(self.content_group) or ""

    def indent(self, match: re.Match) -> int:
        """Extract the indentation level from a match."""
        if self.indent_group is None:
            return 0
        return len(match.group(self.indent_group) or "")

    def match(self, line: str, row: int, col: int = 0) -> Optional[Token]:
        """Return a token when the line matches, otherwise None."""
        m = self.pattern.match(line)
        if m is None:
            return None
        lvl = self.indent(m)
        groups = tuple(g if g is not None else "" for g in (m.group(0),) + m.groups())
        return Token(
            kind=self.kind,
            lvl=lvl,
            content=self.content(m),
            matches=groups,
            pos=Pos(row, col + lvl),
            end_pos=Pos(row, col + len(m.group(0))),
        )


class UpperCaseRecognizer(Recognizer):
    """Recognizer whose content is normalized to upper case (block and drawer names)."""

    def content(self, match: re.Match) -> str:
        """Return the upper-cased content group."""
        return super().content(match).upper()


class PlanningRecognizer(Recognizer):
    """Recognizer for SCHEDULED/DEADLINE/CLOSED lines backed by a date recognizer.

    The token content is the stripped line; the indentation is the leading
    whitespace of the line rather than the text before the keyword.
    """

    def __init__(self, kind: TokenKind, dates: DateRecognizer):
        """Reuse the date recognizer's compiled pattern."""
        self.kind = kind
        self.dates = dates
        self.pattern = dates.pattern
        self.indent_group = None
        self.content_group = None

    def indent(self, match: re.Match) -> int:
        """Return the length of the leading whitespace."""
        prefix = match.group(1)
        return len(prefix) - len(prefix.lstrip())

    def content(self, match: re.Match) -> str:
        """Return the whole line without surrounding whitespace."""
        return match.string.strip()


def default_recognizers() -> list[Recognizer]:
    """Build the standard recognizer list in priority order.

    Returns
    -------
    list of Recognizer
        Freshly compiled recognizers; the last one matches every line

    """
    return [
        Recognizer(TokenKind.HEADLINE, r"^([*]+)\s+(.*)", indent_group=None, content_group=2),
        Recognizer(TokenKind.END_DRAWER, r"^(\s*):END:\s*$", flags=re.IGNORECASE),
        UpperCaseRecognizer(TokenKind.BEGIN_DRAWER, r"^(\s*):(\S+):\s*$", content_group=2),
        UpperCaseRecognizer(TokenKind.BEGIN_BLOCK, r"^(\s*)#\+BEGIN_(\w+)(.*)", content_group=2, flags=re.IGNORECASE),
        UpperCaseRecognizer(TokenKind.END_BLOCK, r"^(\s*)#\+END_(\w+)", content_group=2, flags=re.IGNORECASE),
        Recognizer(TokenKind.RESULT, r"^(\s*)#\+RESULTS:", flags=re.IGNORECASE),
        Recognizer(TokenKind.UNORDERED_LIST, r"^(\s*)([+*-])(\s+(.*)|$)", content_group=4),
        Recognizer(TokenKind.ORDERED_LIST, r"^(\s*)(([0-9]+|[a-zA-Z])[.)])(\s+(.*)|$)", content_group=5),
        Recognizer(TokenKind.TABLE_SEPARATOR, r"^(\s*)(\|[+|-]+)\s*$", content_group=2),
        Recognizer(TokenKind.TABLE_ROW, r"^(\s*)(\|.*)", content_group=2),
        Recognizer(TokenKind.HORIZONTAL_RULE, r"^(\s*)-{5,}\s*$"),
        Recognizer(TokenKind.KEYWORD, r"^(\s*)#\+([a-zA-Z][^:]*):(\s*(.*)|$)", content_group=2),
        Recognizer(TokenKind.COMMENT, r"^(\s*)#\s(.*)", content_group=2),
        Recognizer(
            TokenKind.FOOTNOTE_DEFINITION, r"^\[fn:([\w-]+)\](\s+(.+)|\s*$)", indent_group=None, content_group=1
        ),
        Recognizer(TokenKind.EXAMPLE, r"^(\s*):(\s(.*)|\s*$)", content_group=3),
        PlanningRecognizer(TokenKind.SCHEDULED, scheduled_recognizer()),
        PlanningRecognizer(TokenKind.DEADLINE, deadline_recognizer()),
        PlanningRecognizer(TokenKind.CLOSED, closed_recognizer()),
        Recognizer(TokenKind.TEXT, r"^(\s*)(.*)", content_group=2),
    ]


def plain_text_recognizer() -> Recognizer:
    """Build the catch-all recognizer used to demote unparseable tokens."""
    return Recognizer(TokenKind.TEXT, r"^(\s*)(.*)", content_group=2)


class LineLexer:
    """Classify lines into tokens using an ordered recognizer list.

    Parameters
    ----------
    recognizers : sequence of Recognizer, optional
        Recognizers in priority order; defaults to :func:`default_recognizers`

    """

    def __init__(self, recognizers: Optional[Sequence[Recognizer]] = None):
        """Store the recognizers and build the plain-text fallback."""
        self.recognizers = list(recognizers) if recognizers is not None else default_recognizers()
        self.plain_text = plain_text_recognizer()

    def tokenize(self, line: str, row: int, col: int = 0) -> Token:
        """Lex one line into exactly one token.

        Parameters
        ----------
        line : str
            The line without its line terminator
        row : int
            Zero-based row of the line in the source
        col : int, default 0
            Source column of the first character of ``line``

        Returns
        -------
        Token
            The token produced by the first matching recognizer

        Raises
        ------
        LexerInvariantError
            If no recognizer matched, which means the recognizer list lacks a
            catch-all

        """
        for recognizer in self.recognizers:
            token = recognizer.match(line, row, col)
            if token is not None:
                return token
        raise LexerInvariantError(line, row)

    def as_text(self, token: Token) -> Token:
        """Re-lex a token's full line with the plain-text recognizer."""
        demoted = self.plain_text.match(token.line, token.pos.row, token.pos.col - token.lvl)
        if demoted is None:  # pragma: no cover - the plain-text pattern matches everything
            raise LexerInvariantError(token.line, token.pos.row)
        return demoted

    def tokenize_lines(self, lines: Iterable[str], first_row: int = 0) -> list[Token]:
        """Lex an iterable of lines (terminators already removed)."""
        return [self.tokenize(line, row) for row, line in enumerate(lines, start=first_row)]
