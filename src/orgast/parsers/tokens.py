#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/tokens.py
"""Token model produced by the line lexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from orgast.ast.position import Pos


class TokenKind(str, Enum):
    """Classification of a single input line."""

    HEADLINE = "headline"
    BEGIN_BLOCK = "beginBlock"
    END_BLOCK = "endBlock"
    RESULT = "result"
    BEGIN_DRAWER = "beginDrawer"
    END_DRAWER = "endDrawer"
    UNORDERED_LIST = "unorderedList"
    ORDERED_LIST = "orderedList"
    TABLE_ROW = "tableRow"
    TABLE_SEPARATOR = "tableSeparator"
    HORIZONTAL_RULE = "horizontalRule"
    KEYWORD = "keyword"
    COMMENT = "comment"
    FOOTNOTE_DEFINITION = "footnoteDefinition"
    EXAMPLE = "example"
    SCHEDULED = "scheduled"
    DEADLINE = "deadline"
    CLOSED = "closed"
    TEXT = "text"

    @property
    def is_list(self) -> bool:
        """Whether the kind starts a list item."""
        return self in (TokenKind.UNORDERED_LIST, TokenKind.ORDERED_LIST)

    @property
    def is_table(self) -> bool:
        """Whether the kind is part of a table."""
        return self in (TokenKind.TABLE_ROW, TokenKind.TABLE_SEPARATOR)

    @property
    def is_planning(self) -> bool:
        """Whether the kind is a SCHEDULED/DEADLINE/CLOSED line."""
        return self in (TokenKind.SCHEDULED, TokenKind.DEADLINE, TokenKind.CLOSED)


@dataclass(frozen=True)
class Token:
    """One classified input line.

    Parameters
    ----------
    kind : TokenKind
        The recognizer that matched the line
    lvl : int
        Indentation level (length of the leading whitespace run, or the number
        of stars for headlines)
    content : str
        The payload of the line with markers stripped
    matches : tuple of str
        Regex captures; ``matches[0]`` is always the full line
    pos : Pos
        Start of the token (after indentation)
    end_pos : Pos
        End of the line

    """

    kind: TokenKind
    lvl: int
    content: str
    matches: tuple[str, ...] = field(default_factory=tuple)
    pos: Pos = field(default_factory=Pos)
    end_pos: Pos = field(default_factory=Pos)

    @property
    def line(self) -> str:
        """The full source line the token was lexed from."""
        return self.matches[0] if self.matches else self.content

    @property
    def content_col(self) -> int:
        """Source column where ``content`` begins.

        Only meaningful for tokens whose content runs to the end of the line
        (text, headline, list item), which is where it is used.
        """
        return self.end_pos.col - len(self.content)

    @property
    def is_blank_text(self) -> bool:
        """Whether this is a plain-text token with no content."""
        return self.kind is TokenKind.TEXT and self.content == ""
