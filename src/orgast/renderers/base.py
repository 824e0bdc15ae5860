#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/renderers/base.py
"""Base classes for AST renderers.

This module defines the abstract base class that all renderers inherit
from. A renderer is a :class:`~orgast.ast.visitors.NodeVisitor`: it must
implement one ``visit_*`` method per node variant and writes its output into
an internal buffer. :meth:`BaseRenderer.render_to_string` drives a whole
document through the ``before`` hook, the nodes and the ``after`` hook.

"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, ClassVar, Optional

from orgast.ast.nodes import Node
from orgast.ast.visitors import NodeVisitor
from orgast.exceptions import InvalidOptionsError
from orgast.options.base import BaseRendererOptions

if TYPE_CHECKING:
    from orgast.document import Document


class BaseRenderer(NodeVisitor, ABC):
    """Abstract base class for all AST renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options; ``options_class()`` when omitted

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not an instance of ``options_class``

    Examples
    --------
    Rendering a parsed document:

        >>> doc = OrgParser().parse("* Hello")
        >>> OrgRenderer().render_to_string(doc)
        '* Hello\\n'

    Rendering a few nodes outside of a document:

        >>> OrgRenderer().write_nodes_as_string(*doc.nodes[0].title)
        'Hello'

    """

    options_class: ClassVar[type[BaseRendererOptions]] = BaseRendererOptions

    def __init__(self, options: Optional[BaseRendererOptions] = None):
        """Initialize the renderer with optional configuration."""
        self._validate_options_type(options, self.options_class, type(self).__name__)
        self.options = options or self.options_class()
        self.doc: Optional[Document] = None
        self._output: list[str] = []

    @staticmethod
    def _validate_options_type(options: Optional[BaseRendererOptions], expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Parameters
        ----------
        options : BaseRendererOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        renderer_name : str
            Name of the renderer (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    def before(self, doc: Document) -> None:
        """Write whatever precedes the document body (no-op by default)."""

    def after(self, doc: Document) -> None:
        """Write whatever follows the document body (no-op by default)."""

    def write(self, text: str) -> None:
        """Append ``text`` to the output buffer."""
        self._output.append(text)

    def write_nodes(self, *nodes: Node) -> None:
        """Visit ``nodes`` in order, writing into the current buffer."""
        for node in nodes:
            node.accept(self)

    def write_nodes_as_string(self, *nodes: Node) -> str:
        """Render ``nodes`` into a fresh buffer and return the result.

        The current buffer is left untouched, which makes this the building
        block for inline content that must be post-processed before it is
        written (titles, cell contents, link descriptions).
        """
        saved_output = self._output
        self._output = []
        try:
            self.write_nodes(*nodes)
            return "".join(self._output)
        finally:
            self._output = saved_output

    def render_to_string(self, doc: Document) -> str:
        """Render a parsed document.

        Parameters
        ----------
        doc : Document
            A document whose ``nodes`` are set

        Returns
        -------
        str
            Rendered output

        """
        self.doc = doc
        self._output = []
        self.before(doc)
        self.write_nodes(*(doc.nodes or []))
        self.after(doc)
        return "".join(self._output)
