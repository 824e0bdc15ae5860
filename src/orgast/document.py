#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/document.py
"""The parsed Org document.

A :class:`Document` is the result of one :meth:`orgast.parsers.org.OrgParser.parse`
call. It owns the token list, the node tree, the outline and everything the
keyword lines of the input registered (buffer settings, link templates,
macros, named nodes, footnote definitions).

Parsing never raises. A document whose input could not be read, or whose
parse hit an internal defect, carries a :class:`~orgast.exceptions.ParsingError`
in :attr:`Document.error`; :meth:`Document.write` refuses to render it.

Examples
--------
    >>> doc = OrgParser().parse("#+TITLE: Notes\\n* TODO Write docs\\n")
    >>> doc.get("TITLE")
    'Notes'
    >>> doc.write(OrgRenderer())
    '#+TITLE: Notes\\n* TODO Write docs\\n'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from orgast.ast.nodes import FootnoteDefinition, Node
from orgast.ast.outline import Outline
from orgast.constants import DEFAULT_DOCUMENT_PATH, TODO_SETTING_KEYS
from orgast.exceptions import OrgAstError, RenderingError
from orgast.options.org import OrgParserOptions

if TYPE_CHECKING:
    from orgast.parsers.tokens import Token
    from orgast.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Document:
    """Parsing result of one Org input.

    Parameters
    ----------
    options : OrgParserOptions
        The configuration the document was parsed with
    path : str
        Path of the input, used to resolve relative ``#+INCLUDE`` and
        ``#+SETUPFILE`` paths and to seed the content hashes
    tokens : list of Token
        One token per input line
    nodes : list of Node or None
        Top-level nodes; None until parsing finished
    outline : Outline
        Section tree of the headlines
    buffer_settings : dict[str, str]
        Values of ``#+KEY: value`` lines (repeated keys joined with newlines)
    named_nodes : dict[str, Node]
        Nodes registered by ``#+NAME:``
    links : dict[str, str]
        Link abbreviations registered by ``#+LINK:``
    macros : dict[str, str]
        Macro templates registered by ``#+MACRO:``
    footnotes : dict[str, FootnoteDefinition]
        Footnote definitions by name, in definition order
    error : OrgAstError or None
        Document-level failure; set instead of raising

    """

    options: OrgParserOptions = field(default_factory=OrgParserOptions)
    path: str = DEFAULT_DOCUMENT_PATH
    tokens: list[Token] = field(default_factory=list)
    nodes: Optional[list[Node]] = None
    outline: Outline = field(default_factory=Outline)
    buffer_settings: dict[str, str] = field(default_factory=dict)
    named_nodes: dict[str, Node] = field(default_factory=dict)
    links: dict[str, str] = field(default_factory=dict)
    macros: dict[str, str] = field(default_factory=dict)
    footnotes: dict[str, FootnoteDefinition] = field(default_factory=dict)
    error: Optional[OrgAstError] = None

    @property
    def log(self) -> logging.Logger:
        """Warning sink configured on the options."""
        return self.options.logger

    @property
    def parsed(self) -> bool:
        """Whether parsing ran to completion."""
        return self.nodes is not None

    def get(self, key: str) -> str:
        """Return a buffer setting, falling back to the default settings.

        Parameters
        ----------
        key : str
            Setting name, e.g. ``"TITLE"`` or ``"EXCLUDE_TAGS"``

        Returns
        -------
        str
            The value, or an empty string when neither source defines ``key``

        """
        if key in self.buffer_settings:
            return self.buffer_settings[key]
        return self.options.default_settings.get(key, "")

    def get_option(self, key: str) -> str:
        """Return the value of an export option from ``#+OPTIONS:``.

        Supported keys are ``toc``, ``<``, ``e``, ``f``, ``pri``, ``todo``,
        ``tags``, ``title`` and ``ealb``. A value set by the document wins over
        the default settings. A key found in neither yields ``"nil"`` and a
        warning.
        """
        value = _find_option(self.buffer_settings.get("OPTIONS", ""), key)
        if not value:
            value = _find_option(self.options.default_settings.get("OPTIONS", ""), key)
        if not value:
            self.log.warning("Missing value for export option %s", key)
            value = "nil"
        return value

    @property
    def todo_keywords(self) -> list[str]:
        """TODO keywords from ``TODO``, ``SEQ_TODO`` and ``TYP_TODO``.

        The ``|`` separator between active and done states and fast-access
        suffixes such as ``(t)`` are dropped.
        """
        keywords: list[str] = []
        for key in TODO_SETTING_KEYS:
            for word in self.get(key).replace("|", " ").split():
                word = word.split("(", 1)[0]
                if word and word not in keywords:
                    keywords.append(word)
        return keywords

    def write(self, renderer: BaseRenderer) -> str:
        """Render the document with ``renderer``.

        Parameters
        ----------
        renderer : BaseRenderer
            An :class:`~orgast.renderers.org.OrgRenderer`,
            :class:`~orgast.renderers.html.HtmlRenderer` or subclass

        Returns
        -------
        str
            The rendered output

        Raises
        ------
        RenderingError
            If the document carries a parse error, was never parsed, or the
            renderer failed

        """
        if self.error is not None:
            raise RenderingError(
                f"Cannot write a document with a parse error: {self.error}",
                rendering_stage="document",
                original_error=self.error,
            )
        if self.nodes is None:
            raise RenderingError("Cannot write output: parse was not called", rendering_stage="document")
        try:
            return renderer.render_to_string(self)
        except RenderingError:
            raise
        except Exception as e:
            raise RenderingError(f"Could not write output: {e}", rendering_stage="render", original_error=e) from e

    def parse_sub(self, text: str, path: Optional[str] = None) -> Document:
        """Parse ``text`` as an independent document with the same options."""
        from orgast.parsers.org import OrgParser

        return OrgParser(self.options).parse(text, path if path is not None else self.path)


def _find_option(options: str, key: str) -> str:
    prefix = key + ":"
    for item in options.split():
        if item.startswith(prefix):
            return item[len(prefix) :]
    return ""
