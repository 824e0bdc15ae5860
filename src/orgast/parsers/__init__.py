#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/parsers/__init__.py
"""Org-mode parsing: line lexer, block-level recursive descent and inline parser."""

from orgast.parsers.block import parse_many, parse_one
from orgast.parsers.context import ParseContext, Scope, StopFn
from orgast.parsers.inline import InlineParser
from orgast.parsers.lexer import LineLexer, Recognizer, default_recognizers
from orgast.parsers.org import OrgParser, read_source, split_lines
from orgast.parsers.tokens import Token, TokenKind

__all__ = [
    "InlineParser",
    "LineLexer",
    "OrgParser",
    "ParseContext",
    "Recognizer",
    "Scope",
    "StopFn",
    "Token",
    "TokenKind",
    "default_recognizers",
    "parse_many",
    "parse_one",
    "read_source",
    "split_lines",
]
