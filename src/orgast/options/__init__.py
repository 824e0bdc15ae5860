#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/options/__init__.py
"""Options dataclasses for orgast parsers and renderers."""

from orgast.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from orgast.options.html import HtmlRendererOptions
from orgast.options.org import OrgParserOptions, OrgRendererOptions, default_options, read_text_file

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "HtmlRendererOptions",
    "OrgParserOptions",
    "OrgRendererOptions",
    "default_options",
    "read_text_file",
]
