#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/options/html.py
"""Configuration options for HTML rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from orgast.constants import (
    DEFAULT_FOOTNOTE_SEPARATOR,
    DEFAULT_HTML_FOOTNOTES_TITLE,
    DEFAULT_TOP_LEVEL_HEADING_OFFSET,
)
from orgast.options.base import BaseRendererOptions

HighlightFunction = Callable[[str, str, bool, dict[str, str]], str]


@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Configuration options for AST-to-HTML rendering.

    Parameters
    ----------
    top_level_heading_offset : int, default 0
        Added to headline levels (level 1 becomes ``<h{1 + offset}>``)
    highlight_code_block : callable, optional
        ``highlight(source, lang, inline, params) -> html`` for source blocks;
        the default escapes the source inside ``<pre>``
    footnote_separator : str, default ", "
        Text placed between adjacent footnote references
    footnotes_title : str, default "Footnotes"
        Title of the footnotes section

    """

    top_level_heading_offset: int = field(
        default=DEFAULT_TOP_LEVEL_HEADING_OFFSET,
        metadata={"help": "Offset added to headline levels", "type": int, "importance": "core"},
    )
    highlight_code_block: Optional[HighlightFunction] = field(
        default=None,
        metadata={"help": "Function highlighting source blocks", "exclude_from_cli": True, "importance": "advanced"},
    )
    footnote_separator: str = field(
        default=DEFAULT_FOOTNOTE_SEPARATOR,
        metadata={"help": "Separator between adjacent footnote references", "importance": "advanced"},
    )
    footnotes_title: str = field(
        default=DEFAULT_HTML_FOOTNOTES_TITLE,
        metadata={"help": "Title of the footnotes section", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values."""
        super().__post_init__()
        if not 0 <= self.top_level_heading_offset <= 5:
            raise ValueError(f"top_level_heading_offset must be in 0..5, got {self.top_level_heading_offset}")
