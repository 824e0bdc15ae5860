#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/cli.py
"""Command-line interface for the orgast Org-mode parser.

Examples
--------
Pretty-print an Org file:
    $ orgast render notes.org org

Export to HTML with Pygments highlighting:
    $ orgast render notes.org html-pygments -o notes.html

Dump the line tokens of a file:
    $ orgast tokens notes.org --rich
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from orgast.constants import DEPS_CLI_RICH, EXIT_ERROR, EXIT_SUCCESS
from orgast.document import Document
from orgast.exceptions import DependencyError, OrgAstError
from orgast.logging_utils import configure_logging
from orgast.options.html import HtmlRendererOptions
from orgast.options.org import OrgParserOptions
from orgast.parsers.lexer import LineLexer
from orgast.parsers.org import OrgParser, split_lines
from orgast.parsers.tokens import Token
from orgast.renderers.base import BaseRenderer
from orgast.renderers.html import HtmlRenderer
from orgast.renderers.org import OrgRenderer
from orgast.utils.decorators import requires_dependencies
from orgast.utils.highlight import pygments_highlighter

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("org", "html", "html-pygments")


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the ``render`` and ``tokens`` commands."""
    parser = argparse.ArgumentParser(
        prog="orgast",
        description="Parse Org-mode files and render them as Org or HTML.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and timings")

    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Parse a file and render it")
    render.add_argument("input", help="Org file to read")
    render.add_argument("format", choices=OUTPUT_FORMATS, help="Output format")
    render.add_argument("-o", "--out", help="Write output to this file instead of stdout")

    tokens = commands.add_parser("tokens", help="Print the line tokens of a file")
    tokens.add_argument("input", help="Org file to read")
    tokens.add_argument("--rich", action="store_true", help="Print a rich table (requires rich)")

    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _create_renderer(output_format: str) -> BaseRenderer:
    if output_format == "org":
        return OrgRenderer()
    if output_format == "html-pygments":
        return HtmlRenderer(HtmlRendererOptions(highlight_code_block=pygments_highlighter))
    return HtmlRenderer()


def _parse_input(path: str) -> Optional[Document]:
    doc = OrgParser().parse_file(path)
    if doc.error is not None:
        print(f"Error: {doc.error}", file=sys.stderr)
        return None
    return doc


def process_render(parsed_args: argparse.Namespace) -> int:
    """Run the ``render`` command."""
    doc = _parse_input(parsed_args.input)
    if doc is None:
        return EXIT_ERROR
    try:
        output = doc.write(_create_renderer(parsed_args.format))
    except OrgAstError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if parsed_args.out:
        try:
            Path(parsed_args.out).write_text(output, encoding="utf-8")
        except OSError as e:
            print(f"Error: could not write {parsed_args.out}: {e}", file=sys.stderr)
            return EXIT_ERROR
        logger.info("Wrote %s", parsed_args.out)
    else:
        sys.stdout.write(output)
    return EXIT_SUCCESS


def format_token(token: Token) -> str:
    """One-line plain text form of a token."""
    return f"{token.pos.row + 1}:{token.pos.col}\t{token.kind.value}\t{token.lvl}\t{token.content!r}"


@requires_dependencies("cli", DEPS_CLI_RICH)
def _render_tokens_rich(tokens: list[Token], title: str) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title=title)
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Kind", style="yellow")
    table.add_column("Lvl", justify="right")
    table.add_column("Content", style="white", no_wrap=False)
    for token in tokens:
        table.add_row(str(token.pos.row + 1), str(token.pos.col), token.kind.value, str(token.lvl), repr(token.content))
    Console().print(table)


def _lex_input(path: str) -> Optional[list[Token]]:
    try:
        text = OrgParserOptions().read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: could not read {path}: {e}", file=sys.stderr)
        return None
    return LineLexer().tokenize_lines(split_lines(text))


def process_tokens(parsed_args: argparse.Namespace) -> int:
    """Run the ``tokens`` command.

    The dump shows the lexer's classification of every line, before any
    sub-parser demotes or re-lexes tokens.
    """
    tokens = _lex_input(parsed_args.input)
    if tokens is None:
        return EXIT_ERROR
    if parsed_args.rich:
        try:
            _render_tokens_rich(tokens, parsed_args.input)
            return EXIT_SUCCESS
        except DependencyError as e:
            logger.warning("%s; falling back to plain output", e)
    for token in tokens:
        print(format_token(token))
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute the CLI; argument errors exit with status 2."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    if parsed_args.command == "render":
        return process_render(parsed_args)
    return process_tokens(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
