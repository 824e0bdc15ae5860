#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/options/org.py
"""Configuration options for Org parsing and Org rendering.

:class:`OrgParserOptions` is the parse configuration: emphasis newline
budget, auto-link detection, default buffer settings, the warning sink and
the file reader used by ``#+INCLUDE`` and ``#+SETUPFILE``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from orgast.constants import (
    DEFAULT_AUTO_LINK,
    DEFAULT_BLOCK_INDENT,
    DEFAULT_MAX_EMPHASIS_NEW_LINES,
    DEFAULT_SETTINGS,
    DEFAULT_TAGS_COLUMN,
)
from orgast.logging_utils import PACKAGE_LOGGER_NAME, get_silent_logger
from orgast.options.base import BaseParserOptions, BaseRendererOptions


def read_text_file(path: str) -> str:
    """Read a UTF-8 file; the default ``read_file`` of :class:`OrgParserOptions`."""
    return Path(path).read_text(encoding="utf-8")


@dataclass(frozen=True)
class OrgParserOptions(BaseParserOptions):
    """Configuration options for Org-to-AST parsing.

    Parameters
    ----------
    max_emphasis_new_lines : int, default 1
        Maximum number of newlines an emphasis span may contain
    auto_link : bool, default True
        Recognize bare ``http://``-style URLs as links
    default_settings : dict[str, str]
        Buffer settings used when the document does not set a key itself
        (``TODO``, ``EXCLUDE_TAGS``, ``OPTIONS``)
    logger : logging.Logger
        Sink for recoverable warnings (demoted tokens, missing macros, ...)
    read_file : callable
        ``read_file(path) -> str`` used for ``#+INCLUDE`` and ``#+SETUPFILE``

    Examples
    --------
    Basic usage:
        >>> options = OrgParserOptions()
        >>> doc = OrgParser(options).parse("* Hello")

    Custom TODO keywords and no auto-links:
        >>> options = OrgParserOptions(
        ...     auto_link=False,
        ...     default_settings={"TODO": "TODO NEXT | DONE CANCELLED"},
        ... )

    """

    max_emphasis_new_lines: int = field(
        default=DEFAULT_MAX_EMPHASIS_NEW_LINES,
        metadata={"help": "Maximum newlines allowed inside an emphasis span", "type": int, "importance": "advanced"},
    )
    auto_link: bool = field(
        default=DEFAULT_AUTO_LINK,
        metadata={"help": "Detect bare protocol://path links", "cli_name": "no-auto-link", "importance": "core"},
    )
    default_settings: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_SETTINGS),
        metadata={"help": "Buffer settings used when the document does not define them", "importance": "core"},
    )
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(PACKAGE_LOGGER_NAME),
        metadata={"help": "Logger receiving recoverable parse warnings", "importance": "advanced"},
    )
    read_file: Callable[[str], str] = field(
        default=read_text_file,
        metadata={"help": "Function reading files for #+INCLUDE and #+SETUPFILE", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If ``max_emphasis_new_lines`` is negative.

        """
        super().__post_init__()
        if self.max_emphasis_new_lines < 0:
            raise ValueError(f"max_emphasis_new_lines must be non-negative, got {self.max_emphasis_new_lines}")

    def silent(self) -> OrgParserOptions:
        """Return a copy whose warnings are discarded."""
        return self.create_updated(logger=get_silent_logger())


def default_options() -> OrgParserOptions:
    """Build the default parse configuration."""
    return OrgParserOptions()


@dataclass(frozen=True)
class OrgRendererOptions(BaseRendererOptions):
    """Configuration options for AST-to-Org rendering.

    Parameters
    ----------
    tags_column : int, default 77
        Column at which headline tags are right-aligned
    block_indent : str, default "  "
        Indentation applied to the content of raw blocks

    """

    tags_column: int = field(
        default=DEFAULT_TAGS_COLUMN,
        metadata={"help": "Column headline tags are aligned to", "type": int, "importance": "advanced"},
    )
    block_indent: str = field(
        default=DEFAULT_BLOCK_INDENT,
        metadata={"help": "Indentation of raw block content", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values."""
        super().__post_init__()
        if self.tags_column < 0:
            raise ValueError(f"tags_column must be non-negative, got {self.tags_column}")
