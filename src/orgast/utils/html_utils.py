#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/utils/html_utils.py
"""HTML-related utility helpers for the HTML renderer."""

from __future__ import annotations

import logging
import re
from html import escape as _html_escape
from html.entities import name2codepoint
from typing import Sequence

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger(__name__)

_ENTITY_PATTERN = re.compile(r"\\([a-zA-Z]+)(\{\})?|\\-|---|--|\.\.\.")
_ANCHOR_TAG_PATTERN = re.compile(r"</?a[^>]*>")

_SPECIAL_STRINGS = {
    "\\-": "\u00ad",
    "---": "\u2014",
    "--": "\u2013",
    "...": "\u2026",
}

# Multi-valued attributes get the new value appended instead of replaced
_APPENDED_ATTRIBUTES = ("class", "style")


def escape_html(text: str, *, enabled: bool = True) -> str:
    """Escape HTML special characters when enabled."""
    if not enabled:
        return text
    return _html_escape(text)


def replace_entities(text: str) -> str:
    r"""Replace Org entities and special strings with the characters they stand for.

    ``\alpha`` and ``\alpha{}`` become ``α`` (names follow the HTML entity
    names), ``--`` and ``---`` become en and em dashes, ``...`` an ellipsis
    and ``\-`` a soft hyphen. Unknown ``\names`` are left alone.

    Examples
    --------
        >>> replace_entities(r"\alpha -- \nope")
        'α – \\nope'

    """

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name is None:
            return _SPECIAL_STRINGS[match.group(0)]
        codepoint = name2codepoint.get(name)
        return chr(codepoint) if codepoint is not None else match.group(0)

    return _ENTITY_PATTERN.sub(substitute, text)


def strip_anchor_tags(html_text: str) -> str:
    """Remove ``<a>`` tags (nested links are invalid inside TOC anchors)."""
    return _ANCHOR_TAG_PATTERN.sub("", html_text)


def with_html_attributes(html_text: str, attributes: Sequence[str], log: logging.Logger = logger) -> str:
    """Merge ``#+ATTR_HTML`` attributes into the single top-level element of ``html_text``.

    Parameters
    ----------
    html_text : str
        Rendered HTML holding exactly one top-level element
    attributes : sequence of str
        Flat ``[":key", "value", ...]`` list; leading colons are dropped
    log : logging.Logger
        Receives a warning when the attributes cannot be applied

    Returns
    -------
    str
        The rewritten element, or ``html_text`` unchanged when the attribute
        list is odd or the input is not a single element

    Notes
    -----
    ``class`` and ``style`` values are appended to existing ones; other
    attributes are replaced.

    """
    if len(attributes) % 2 != 0:
        log.warning("ATTR_HTML needs key/value pairs, got %r", list(attributes))
        return html_text
    soup = BeautifulSoup(html_text.strip(), "html.parser", multi_valued_attributes=None)
    top_level = [child for child in soup.contents if not (isinstance(child, NavigableString) and not child.strip())]
    if len(top_level) != 1 or not isinstance(top_level[0], Tag):
        log.warning("Could not apply ATTR_HTML %r: expected a single element", list(attributes))
        return html_text

    element = top_level[0]
    for key, value in zip(attributes[::2], attributes[1::2]):
        key = key.removeprefix(":")
        existing = next((name for name in element.attrs if name.lower() == key.lower()), None)
        if existing is None:
            element[key] = value
        elif key.lower() in _APPENDED_ATTRIBUTES:
            element[existing] = f"{element[existing]} {value}"
        else:
            element[existing] = value
    return str(element)
