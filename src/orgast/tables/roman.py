#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/tables/roman.py
"""Roman numeral conversion for ``@I``/``@II`` separator references."""

from __future__ import annotations

from typing import Optional

_NUMERALS = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)


def roman_to_int(text: str) -> Optional[int]:
    """Convert a roman numeral to an integer.

    Returns None when ``text`` is empty or not a valid numeral.
    """
    rest, total = text, 0
    for value, symbol in _NUMERALS:
        while rest.startswith(symbol):
            total += value
            rest = rest[len(symbol) :]
    if rest or total == 0:
        return None
    return total


def int_to_roman(value: int) -> str:
    """Convert an integer in ``1..3999`` to a roman numeral."""
    if not 1 <= value <= 3999:
        raise ValueError(f"integer must be between 1 and 3999, got {value}")
    parts = []
    for numeral_value, symbol in _NUMERALS:
        count, value = divmod(value, numeral_value)
        parts.append(symbol * count)
    return "".join(parts)
