#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/api.py
"""The major exported API functions for parsing and rendering Org documents."""

from __future__ import annotations

import logging
from typing import Optional

from orgast.constants import DEFAULT_DOCUMENT_PATH
from orgast.document import Document
from orgast.options.html import HtmlRendererOptions
from orgast.options.org import OrgParserOptions, OrgRendererOptions
from orgast.parsers.org import OrgParser, Source
from orgast.renderers.html import HtmlRenderer
from orgast.renderers.org import OrgRenderer
from orgast.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


def parse(source: Source, path: str = DEFAULT_DOCUMENT_PATH, options: Optional[OrgParserOptions] = None) -> Document:
    """Parse Org text into a :class:`~orgast.document.Document`.

    Parameters
    ----------
    source : str, bytes or stream
        The Org input
    path : str, default "./"
        Path of the input, used to resolve relative include paths
    options : OrgParserOptions, optional
        Parse configuration

    Returns
    -------
    Document
        The parsed document. Parsing never raises; check ``doc.error``.

    Examples
    --------
        >>> doc = parse("* DONE Ship it")
        >>> doc.nodes[0].status
        'DONE'

    """
    return OrgParser(options).parse(source, path)


def parse_file(path: str, options: Optional[OrgParserOptions] = None) -> Document:
    """Read and parse the Org file at ``path``."""
    return OrgParser(options).parse_file(path)


def render_org(doc: Document, options: Optional[OrgRendererOptions] = None) -> str:
    """Render a parsed document back to normalized Org text.

    Raises
    ------
    RenderingError
        If the document carries a parse error or rendering fails

    """
    with debug_timer(logger, "Rendering (org)"):
        return doc.write(OrgRenderer(options))


def render_html(doc: Document, options: Optional[HtmlRendererOptions] = None) -> str:
    """Render a parsed document as an HTML fragment.

    Raises
    ------
    RenderingError
        If the document carries a parse error or rendering fails

    """
    with debug_timer(logger, "Rendering (html)"):
        return doc.write(HtmlRenderer(options))


def org_to_html(
    source: Source,
    path: str = DEFAULT_DOCUMENT_PATH,
    parser_options: Optional[OrgParserOptions] = None,
    renderer_options: Optional[HtmlRendererOptions] = None,
) -> str:
    """Parse Org text and render it as HTML in one step."""
    return render_html(parse(source, path, parser_options), renderer_options)


def format_org(
    source: Source,
    path: str = DEFAULT_DOCUMENT_PATH,
    parser_options: Optional[OrgParserOptions] = None,
    renderer_options: Optional[OrgRendererOptions] = None,
) -> str:
    """Parse Org text and pretty-print it as normalized Org."""
    return render_org(parse(source, path, parser_options), renderer_options)
