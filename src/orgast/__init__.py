"""orgast - an Org-mode parser producing a typed syntax tree.

orgast reads Org-mode text into a tree of nodes (headlines, lists, tables,
blocks, drawers, footnotes and inline markup) with exact source positions,
and writes that tree back out as normalized Org or as an HTML fragment.

Parsing happens in two passes: a line lexer classifies every line into a
token, then a recursive descent over the tokens builds the block structure,
running the inline parser over text as it goes. Parsing never raises for bad
input; malformed constructs degrade to plain text and a warning.

Requirements
------------
- Python 3.10+
- Optional: Pygments (``orgast[highlight]``), rich (``orgast[cli]``)

Examples
--------
Parse and inspect:

    >>> from orgast import parse
    >>> doc = parse("* TODO Write report :work:\\nSCHEDULED: <2024-05-01 Wed>\\n")
    >>> headline = doc.nodes[0]
    >>> headline.status, headline.tags
    ('TODO', ['work'])

Render:

    >>> from orgast import render_html, render_org
    >>> html = render_html(doc)
    >>> org = render_org(doc)

See Also
--------
orgast.ast : node definitions and the visitor base
orgast.parsers : lexer, block parser and inline parser

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "orgast requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from orgast.api import format_org, org_to_html, parse, parse_file, render_html, render_org
from orgast.document import Document
from orgast.exceptions import (
    DependencyError,
    InvalidOptionsError,
    LexerInvariantError,
    OrgAstError,
    ParsingError,
    RenderingError,
    ValidationError,
)
from orgast.options import HtmlRendererOptions, OrgParserOptions, OrgRendererOptions
from orgast.parsers.org import OrgParser
from orgast.renderers import HtmlRenderer, OrgRenderer

__all__ = [
    "__version__",
    "parse",
    "parse_file",
    "render_org",
    "render_html",
    "org_to_html",
    "format_org",
    "Document",
    "OrgParser",
    "OrgRenderer",
    "HtmlRenderer",
    "OrgParserOptions",
    "OrgRendererOptions",
    "HtmlRendererOptions",
    "OrgAstError",
    "ParsingError",
    "LexerInvariantError",
    "RenderingError",
    "ValidationError",
    "InvalidOptionsError",
    "DependencyError",
]
