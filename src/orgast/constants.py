#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/constants.py
"""Default values and shared constants for orgast.

Parser and renderer option classes take their defaults from here so that
the CLI, the options dataclasses and the documentation stay in sync.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Parser defaults
DEFAULT_MAX_EMPHASIS_NEW_LINES = 1
DEFAULT_AUTO_LINK = True
DEFAULT_SETTINGS: Mapping[str, str] = MappingProxyType(
    {
        "TODO": "TODO | DONE",
        "EXCLUDE_TAGS": "noexport",
        "OPTIONS": "toc:t <:t e:t f:t pri:t todo:t tags:t title:t ealb:nil",
    }
)
DEFAULT_DOCUMENT_PATH = "./"

# Buffer settings that list TODO keywords
TODO_SETTING_KEYS = ("TODO", "SEQ_TODO", "TYP_TODO")

# Block names whose content is kept verbatim
RAW_BLOCK_NAMES = frozenset({"SRC", "EXAMPLE", "EXPORT", "VERSE", "QUOTE", "CUSTOM"})

# Block names whose lines use comma escaping
COMMA_ESCAPED_BLOCK_NAMES = frozenset({"SRC", "EXAMPLE"})

# Affiliated keywords collected onto the following node
AFFILIATED_KEYWORDS = frozenset({"CAPTION", "ATTR_HTML", "ATTR_LATEX", "ENV"})

# Inline parsing
AUTO_LINK_PROTOCOLS = ("http", "https", "ftp", "file")
EMPHASIS_MARKERS = "*/+=~_"
EMPHASIS_PRE_BORDER = "-({'\""
EMPHASIS_POST_BORDER = "-.,:!?;'\")}["
VERBATIM_EMPHASIS_MARKERS = "=~"
LATEX_FRAGMENT_PAIRS = {r"\(": r"\)", r"\[": r"\]", "$$": "$$", "$": "$"}

# Renderer defaults
DEFAULT_TAGS_COLUMN = 77
DEFAULT_BLOCK_INDENT = "  "
DEFAULT_TOP_LEVEL_HEADING_OFFSET = 0
DEFAULT_FOOTNOTE_SEPARATOR = ", "
DEFAULT_HTML_FOOTNOTES_TITLE = "Footnotes"

# Optional dependency specs: (install_name, import_name, version_spec)
DEPS_HIGHLIGHT = [("pygments", "pygments", ">=2.15.0")]
DEPS_CLI_RICH = [("rich", "rich", ">=13.0.0")]

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2
