#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/org.py
"""Org-mode parser: source text to :class:`~orgast.document.Document`.

Parsing runs in two passes. The :class:`~orgast.parsers.lexer.LineLexer`
turns every line into one token, then the recursive descent in
:mod:`orgast.parsers.block` builds the node tree, inline-parsing text as it
goes and filling in the outline and the document's registries.

Parsing never raises for bad input. Malformed constructs degrade to text
(with a warning on the configured logger); an unreadable input or an
internal defect is stored in :attr:`Document.error`.

Examples
--------
    >>> doc = OrgParser().parse("* TODO Buy milk :errand:\\nDEADLINE: <2024-03-01 Fri>\\n")
    >>> headline = doc.nodes[0]
    >>> headline.status, headline.tags, str(headline.deadline)
    ('TODO', ['errand'], '<2024-03-01 Fri>')

"""

from __future__ import annotations

import io
import logging
import re
from typing import IO, Optional, Union

from orgast.constants import DEFAULT_DOCUMENT_PATH
from orgast.document import Document
from orgast.exceptions import InvalidOptionsError, ParsingError
from orgast.options.org import OrgParserOptions
from orgast.parsers.block import parse_many
from orgast.parsers.context import ParseContext, Scope, stop_at_end
from orgast.parsers.inline import InlineParser
from orgast.parsers.lexer import LineLexer
from orgast.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

_LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

Source = Union[str, bytes, IO[str], IO[bytes]]


def split_lines(text: str) -> list[str]:
    """Split text on any line terminator; a trailing terminator adds no empty line."""
    if not text:
        return []
    lines = _LINE_BREAK_PATTERN.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def read_source(source: Source) -> str:
    """Return the text of a string, UTF-8 bytes, or a text or binary stream."""
    if isinstance(source, str):
        return source
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8")
    data = source.read()
    if isinstance(data, bytes):
        return data.decode("utf-8")
    return data


class OrgParser:
    """Parse Org-mode text into a document tree.

    Parameters
    ----------
    options : OrgParserOptions, optional
        Parse configuration; :func:`~orgast.options.org.default_options` when omitted
    lexer : LineLexer, optional
        Lexer with a custom recognizer list

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not an :class:`OrgParserOptions`

    """

    def __init__(self, options: Optional[OrgParserOptions] = None, lexer: Optional[LineLexer] = None):
        """Initialize the parser with options."""
        if options is not None and not isinstance(options, OrgParserOptions):
            raise InvalidOptionsError(
                component_name="OrgParser",
                expected_type=OrgParserOptions,
                received_type=type(options),
            )
        self.options = options or OrgParserOptions()
        self.lexer = lexer or LineLexer()
        self.inline = InlineParser(self.options)

    def parse(self, source: Source, path: str = DEFAULT_DOCUMENT_PATH) -> Document:
        """Parse Org source.

        Parameters
        ----------
        source : str, bytes or stream
            The Org text; bytes and binary streams are decoded as UTF-8
        path : str, default "./"
            Path of the input, used for relative ``#+INCLUDE``/``#+SETUPFILE``
            paths and as the seed of headline hashes

        Returns
        -------
        Document
            The parsed document; check :attr:`Document.error` before use

        """
        doc = Document(options=self.options, path=path)
        try:
            text = read_source(source)
        except (OSError, UnicodeDecodeError, io.UnsupportedOperation) as e:
            doc.error = ParsingError(f"Could not read input: {e}", parsing_stage="read", original_error=e)
            return doc

        try:
            with debug_timer(logger, "Tokenizing"):
                doc.tokens = self.lexer.tokenize_lines(split_lines(text))
            ctx = ParseContext(doc, doc.tokens, self.lexer, self.inline, self)
            with debug_timer(logger, "Parsing (org)"):
                _, nodes = parse_many(ctx, 0, stop_at_end, Scope.for_path(path))
            doc.nodes = nodes
        except Exception as e:
            logger.debug("Parse of %s failed", path, exc_info=True)
            doc.error = ParsingError(f"Could not parse document: {e}", parsing_stage="parse", original_error=e)
            doc.nodes = None
        return doc

    def parse_file(self, path: str) -> Document:
        """Read ``path`` with the configured ``read_file`` and parse it."""
        try:
            text = self.options.read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            doc = Document(options=self.options, path=path)
            doc.error = ParsingError(f"Could not read {path}: {e}", parsing_stage="read", original_error=e)
            return doc
        return self.parse(text, path)

    def parse_sub(self, text: str, path: str) -> Document:
        """Parse a nested input (setup file, macro expansion, title) as an independent document."""
        return OrgParser(self.options, self.lexer).parse(text, path)
