#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/utils/__init__.py
"""Utility modules for orgast.

This package contains the dependency-checking decorators, package version
helpers, HTML helpers and the source block highlighters.
"""

from orgast.utils.decorators import debug_timer, requires_dependencies
from orgast.utils.packages import check_version_requirement, get_package_version

__all__ = [
    "check_version_requirement",
    "debug_timer",
    "get_package_version",
    "requires_dependencies",
]
