"""Pytest configuration and shared fixtures for the orgast test suite.

This module provides shared fixtures and test configuration that are used
across the entire test suite.
"""

import logging
from pathlib import Path
from typing import Callable

import pytest

from orgast.document import Document
from orgast.logging_utils import PACKAGE_LOGGER_NAME
from orgast.options.org import OrgParserOptions
from orgast.parsers.org import OrgParser


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test files.

    Returns
    -------
    Path
        Temporary directory path, removed by pytest after the session.

    """
    return tmp_path


@pytest.fixture
def parser_options() -> OrgParserOptions:
    """Provide parser options whose warnings go to the package logger."""
    return OrgParserOptions(logger=logging.getLogger(PACKAGE_LOGGER_NAME))


@pytest.fixture
def parse_org(parser_options: OrgParserOptions) -> Callable[..., Document]:
    """Provide a helper parsing Org text with the default options.

    Returns
    -------
    callable
        ``parse_org(text, path="./") -> Document``; fails the test when the
        document carries an error

    """

    def _parse(text: str, path: str = "./") -> Document:
        doc = OrgParser(parser_options).parse(text, path)
        assert doc.error is None, f"unexpected parse error: {doc.error}"
        return doc

    return _parse


@pytest.fixture
def sample_org() -> str:
    """Provide a document exercising most block-level constructs.

    Returns
    -------
    str
        Org text used across multiple tests.

    """
    return """#+TITLE: Sample Document
#+TODO: TODO NEXT | DONE

Intro paragraph with *bold* and /italic/ text.

* TODO [#A] First section :work:
SCHEDULED: <2024-01-15 Mon>
:PROPERTIES:
:CUSTOM_ID: first
:END:
Some text in the section,
spanning two lines.

- item one
- item two
  - nested item
- [X] checked item

** NEXT Subsection
1. first
2. second

| Name  | Qty |
|-------+-----|
| apple |   3 |
| pear  |  10 |

* DONE Second section
- term :: definition
"""
