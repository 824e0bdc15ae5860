#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/renderers/__init__.py
"""AST renderers for writing parsed Org documents.

Available renderers:
- OrgRenderer: normalized, pretty-printed Org text
- HtmlRenderer: an HTML fragment (optionally highlighted with Pygments)

Examples
--------
    >>> from orgast.parsers import OrgParser
    >>> from orgast.renderers import HtmlRenderer, OrgRenderer
    >>> doc = OrgParser().parse("* Title\\nSome /text/.")
    >>> org = doc.write(OrgRenderer())
    >>> html = doc.write(HtmlRenderer())

"""

from orgast.renderers.base import BaseRenderer
from orgast.renderers.html import HtmlRenderer
from orgast.renderers.org import OrgRenderer

__all__ = [
    "BaseRenderer",
    "HtmlRenderer",
    "OrgRenderer",
]
