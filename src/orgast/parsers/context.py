#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/context.py
"""State shared by the block-level sub-parsers during one parse.

Two values travel through the recursive descent:

- :class:`ParseContext` is created once per parse call. It holds the token
  list, the lexer used to demote or re-lex tokens, the inline parser and the
  document being assembled.
- :class:`Scope` is immutable and passed down the call chain. It carries the
  indentation baseline for paragraph text and the running content hash of the
  enclosing headline, so nested parses never mutate a shared stack.

"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Sequence

from orgast.ast.nodes import FootnoteLink, Node, Timestamp
from orgast.ast.position import Pos
from orgast.parsers.tokens import Token, TokenKind

if TYPE_CHECKING:
    import logging

    from orgast.document import Document
    from orgast.options.org import OrgParserOptions
    from orgast.parsers.inline import InlineParser
    from orgast.parsers.lexer import LineLexer
    from orgast.parsers.org import OrgParser


def _new_hash() -> Any:
    return hashlib.sha1()


@dataclass(frozen=True)
class Scope:
    """Immutable per-branch parse state.

    Parameters
    ----------
    base_lvl : int
        Indentation stripped from paragraph lines (list item content column)
    hash : hashlib hash object
        Running content hash of the enclosing headline chain; never updated
        in place

    """

    base_lvl: int = 0
    hash: Any = field(default_factory=_new_hash, compare=False)

    @classmethod
    def for_path(cls, path: str) -> Scope:
        """Build the root scope whose hash is seeded with the document path."""
        digest = hashlib.sha1()
        digest.update(path.encode("utf-8"))
        return cls(0, digest)

    def with_base_lvl(self, base_lvl: int) -> Scope:
        """Return a copy with a different indentation baseline."""
        return replace(self, base_lvl=base_lvl)

    def child_hash(self, title: str) -> tuple[Scope, str]:
        """Mix a headline title into a copy of the running hash.

        Returns
        -------
        tuple of (Scope, str)
            The scope for the headline's children and the headline's hex digest

        """
        digest = self.hash.copy()
        digest.update(title.encode("utf-8"))
        return replace(self, hash=digest), digest.hexdigest()


@dataclass(eq=False)
class ParseContext:
    """Everything one parse call shares between its sub-parsers."""

    doc: Document
    tokens: list[Token]
    lexer: LineLexer
    inline: InlineParser
    parser: OrgParser

    @property
    def options(self) -> OrgParserOptions:
        """Parse configuration."""
        return self.doc.options

    @property
    def log(self) -> logging.Logger:
        """Warning sink for recoverable issues."""
        return self.doc.options.logger

    def token(self, i: int) -> Token:
        """Return token ``i``."""
        return self.tokens[i]

    def kind(self, i: int) -> TokenKind:
        """Return the kind of token ``i``."""
        return self.tokens[i].kind

    def at_end(self, i: int) -> bool:
        """Whether ``i`` is past the last token."""
        return i >= len(self.tokens)

    def parse_inline(self, text: str, origin: Pos, line_cols: Optional[Sequence[int]] = None) -> list[Node]:
        """Inline-parse ``text`` and record what the document tracks.

        The first timestamp of a section becomes the headline's
        ``timestamp`` and inline footnote definitions are registered in
        :attr:`Document.footnotes`.
        """
        nodes = self.inline.parse(text, origin, line_cols)
        headline = self.doc.outline.current.headline
        for node in _walk(nodes):
            if isinstance(node, Timestamp) and headline is not None and headline.timestamp is None:
                headline.timestamp = node.time
            elif isinstance(node, FootnoteLink) and node.definition is not None and node.name:
                self.doc.footnotes.setdefault(node.name, node.definition)
        return nodes


def _walk(nodes: Sequence[Node]) -> Iterator[Node]:
    for node in nodes:
        yield node
        yield from _walk(node.get_children())


StopFn = Callable[[ParseContext, int], bool]


def stop_at_end(ctx: ParseContext, i: int) -> bool:
    """Stop predicate of the top-level parse."""
    return i >= len(ctx.tokens)


def is_second_blank_line(ctx: ParseContext, i: int) -> bool:
    """Whether tokens ``i - 1`` and ``i`` are both blank text lines."""
    if i < 1 or i >= len(ctx.tokens):
        return False
    first, second = ctx.tokens[i - 1], ctx.tokens[i]
    return (
        first.kind is TokenKind.TEXT
        and second.kind is TokenKind.TEXT
        and not first.content.strip()
        and not second.content.strip()
    )
