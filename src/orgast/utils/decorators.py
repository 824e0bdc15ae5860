#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/utils/decorators.py
"""Utility decorators for orgast parsers, renderers and the CLI.

This module centralizes optional dependency checking (Pygments for code
highlighting, Rich for terminal output) and DEBUG-level timing.

"""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from orgast.exceptions import DependencyError
from orgast.utils.packages import check_version_requirement


def requires_dependencies(component_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Check required dependencies and versions before function execution.

    Parameters
    ----------
    component_name : str
        Name of the component (e.g., "highlight", "cli"). This appears
        in error messages to help users identify which feature needs dependencies.
    packages : list of tuple
        Required packages as (install_name, import_name, version_spec) tuples where:
        - install_name: Package name for pip install (e.g., "pygments")
        - import_name: Module name for import statement (e.g., "pygments")
        - version_spec: Version requirement (e.g., ">=2.15.0" or "" for any version)

    Returns
    -------
    Callable
        Decorated function that checks dependencies before execution

    Raises
    ------
    DependencyError
        If any required package is missing or has an incompatible version.

    Examples
    --------
        >>> @requires_dependencies("highlight", [("pygments", "pygments", ">=2.15.0")])
        ... def highlight(source, lang):
        ...     import pygments
        ...     # highlighting logic here

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing = []
            version_mismatches = []
            original_error = None

            for install_name, import_name, version_spec in packages:
                try:
                    # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
                    importlib.import_module(import_name)

                    if version_spec:
                        meets_requirement, installed_version = check_version_requirement(install_name, version_spec)
                        if not meets_requirement:
                            version_str = installed_version or "unknown"
                            version_mismatches.append((install_name, version_spec, version_str))

                except ImportError as e:
                    missing.append((install_name, version_spec))
                    if original_error is None:
                        original_error = e

            if missing or version_mismatches:
                raise DependencyError(
                    component_name=component_name,
                    missing_packages=missing,
                    version_mismatches=version_mismatches,
                    original_import_error=original_error,
                ) from original_error

            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Time a block of code, logging the elapsed time at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the operation being timed (e.g., "Tokenizing")

    Yields
    ------
    None
        Control flow to the code block being timed

    Examples
    --------
        >>> with debug_timer(logger, "Parsing (org)"):
        ...     doc = parser.parse(text)
        ... # Logs: "Parsing (org) completed in 0.01s" at DEBUG level

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
    else:
        yield
