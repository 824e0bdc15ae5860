#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/utils/highlight.py
"""Source block highlighters for :class:`~orgast.renderers.html.HtmlRenderer`.

A highlighter has the signature ``highlight(source, lang, inline, params) -> str``
where ``params`` holds the block's ``:key value`` header arguments. Pass one
as ``HtmlRendererOptions(highlight_code_block=...)``.
"""

from __future__ import annotations

from typing import Mapping

from orgast.constants import DEPS_HIGHLIGHT
from orgast.utils.decorators import requires_dependencies
from orgast.utils.html_utils import escape_html


def escape_highlighter(source: str, lang: str, inline: bool, params: Mapping[str, str]) -> str:
    """Escape the source inside ``<pre>``; the default highlighter."""
    css_class = "highlight-inline" if inline else "highlight"
    return f'<div class="{css_class}">\n<pre>\n{escape_html(source)}\n</pre>\n</div>'


@requires_dependencies("highlight", DEPS_HIGHLIGHT)
def pygments_highlighter(source: str, lang: str, inline: bool, params: Mapping[str, str]) -> str:
    """Highlight the source with Pygments.

    Unknown languages fall back to plain text. The output carries CSS
    classes only; include a Pygments style sheet to color it.

    Raises
    ------
    DependencyError
        If Pygments is not installed

    """
    from pygments import highlight
    from pygments.formatters import HtmlFormatter
    from pygments.lexers import TextLexer, get_lexer_by_name
    from pygments.util import ClassNotFound

    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        lexer = TextLexer()
    formatter = HtmlFormatter(cssclass="highlight-inline" if inline else "highlight")
    return highlight(source, lexer, formatter).rstrip("\n")
