#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/dates.py
"""Org timestamp recognition and rendering.

This module is a leaf utility used by the line lexer (planning lines such as
``SCHEDULED: <2004-12-25 Sat>``) and by the inline parser (``<...>`` and
``[...]`` timestamps). Patterns are compiled per :class:`DateRecognizer`
instance; the factory functions at the bottom build the recognizers the
parser needs.

Examples
--------
    >>> date = scheduled_recognizer().parse("SCHEDULED: <2004-12-25 Sat>")
    >>> str(date)
    '<2004-12-25 Sat>'
    >>> str(timestamp_recognizer().parse("<2004-1-25 Sun 10:00 +1d>"))
    '<2004-01-25 Sun 10:00 +1d>'

"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_BRACKETS = {
    "active": ("<", ">"),
    "inactive": ("[", "]"),
    "none": ("", ""),
}

# Leading whitespace and any planning entries that precede the keyword
_PLANNING_PREFIX = r"^(\s*(?:(?:SCHEDULED|DEADLINE|CLOSED):\s*[<\[][^>\]]*[>\]]\s+)*)"


class TimestampType(str, Enum):
    """Bracket style of a timestamp."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    NO_BRACKET = "none"


class DateType(str, Enum):
    """Planning keyword a date was attached with."""

    SCHEDULED = "SCHEDULED"
    DEADLINE = "DEADLINE"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class Cookie:
    """A repeater (``+1w``, ``++2d``, ``.+1m``) or warning (``-3d``) cookie.

    Parameters
    ----------
    mark : str
        The cookie prefix (``+``, ``++``, ``.+``, ``-`` or ``--``)
    value : int
        Interval count, at least 1
    unit : str
        One of ``h d w m y``

    """

    mark: str
    value: int
    unit: str

    def __str__(self) -> str:
        """Render the cookie as it appears inside a timestamp."""
        return f"{self.mark}{self.value}{self.unit}"

    def shift(self, moment: datetime, count: int = 1) -> datetime:
        """Advance ``moment`` by ``count`` intervals of this cookie.

        Month and year steps clamp the day of month to the length of the
        target month, so ``Jan 31 +1m`` lands on the last day of February.

        Parameters
        ----------
        moment : datetime
            Starting point
        count : int, default 1
            Number of intervals (negative values move backwards)

        Returns
        -------
        datetime
            The shifted moment

        """
        steps = self.value * count
        if self.unit == "h":
            return moment + timedelta(hours=steps)
        if self.unit == "d":
            return moment + timedelta(days=steps)
        if self.unit == "w":
            return moment + timedelta(weeks=steps)
        months = steps if self.unit == "m" else steps * 12
        month_index = moment.month - 1 + months
        year = moment.year + month_index // 12
        month = month_index % 12 + 1
        day = min(moment.day, calendar.monthrange(year, month)[1])
        return moment.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class OrgDate:
    """A parsed Org timestamp.

    Parameters
    ----------
    start : datetime
        Start of the timestamp (midnight when no time was given)
    end : datetime, optional
        End of a time range (same day) or of a ``<a>--<b>`` date range
    timestamp_type : TimestampType
        Bracket style used in the source
    has_time : bool
        Whether a time of day was given
    repeater : Cookie, optional
        Recurrence rule
    warning : Cookie, optional
        Warning period

    """

    start: datetime
    end: Optional[datetime] = None
    timestamp_type: TimestampType = TimestampType.ACTIVE
    has_time: bool = False
    repeater: Optional[Cookie] = None
    warning: Optional[Cookie] = None

    @property
    def active(self) -> bool:
        """Whether the timestamp uses angle brackets."""
        return self.timestamp_type is TimestampType.ACTIVE

    @property
    def has_end(self) -> bool:
        """Whether the timestamp carries an end (time or date range)."""
        return self.end is not None

    @property
    def is_time_range(self) -> bool:
        """Whether the end is a time of day on the start date."""
        return self.end is not None and self.has_time and self.end.date() == self.start.date()

    def _stamp(self, moment: datetime, with_time: bool, cookies: bool) -> str:
        parts = [f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}", WEEKDAY_NAMES[moment.weekday()]]
        if with_time:
            clock = f"{moment.hour:02d}:{moment.minute:02d}"
            if cookies and self.is_time_range and self.end is not None:
                clock += f"-{self.end.hour:02d}:{self.end.minute:02d}"
            parts.append(clock)
        if cookies:
            parts.extend(str(cookie) for cookie in (self.repeater, self.warning) if cookie is not None)
        opening, closing = _BRACKETS[self.timestamp_type.value]
        return opening + " ".join(parts) + closing

    def to_date(self) -> str:
        """Render the date part only, e.g. ``<2004-12-25 Sat>``."""
        text = self._stamp(self.start, with_time=False, cookies=False)
        if self.end is not None and not self.is_time_range:
            text += "--" + self._stamp(self.end, with_time=False, cookies=False)
        return text

    def __str__(self) -> str:
        """Render the timestamp in canonical Org form (zero-padded)."""
        text = self._stamp(self.start, with_time=self.has_time, cookies=True)
        if self.end is not None and not self.is_time_range:
            text += "--" + self._stamp(self.end, with_time=self.has_time, cookies=False)
        return text

    def contains(self, moment: datetime) -> bool:
        """Whether ``moment`` falls within ``[start, end]``."""
        end = self.end if self.end is not None else self.start
        return self.start <= moment <= end

    def has_overlap(self, other: OrgDate) -> bool:
        """Whether two timestamps overlap.

        Point timestamps overlap when they fall on the same day.
        """
        if self.has_end:
            return self.contains(other.start) or (other.end is not None and self.contains(other.end))
        if other.has_end:
            return other.contains(self.start)
        return self.start.date() == other.start.date()

    def next_occurrence(self, after: datetime) -> Optional[datetime]:
        """Return the first repetition strictly later than ``after``.

        Returns None when the timestamp has no repeater.
        """
        if self.repeater is None:
            return None
        moment = self.start
        while moment <= after:
            moment = self.repeater.shift(moment)
        return moment


def _timestamp_pattern(brackets: str, cookies: bool = True) -> str:
    opening, closing = _BRACKETS[brackets]
    opening, closing = re.escape(opening), re.escape(closing)
    if brackets == "none":
        ignore = r"[\s\w]"
        cookies = False
    else:
        ignore = rf"[^{closing}+.:0-9-]"

    date_time = (
        r"(?P<year>\d{4})\s*-\s*(?P<month>\d{1,2})\s*-\s*(?P<day>\d{1,2})"
        rf"(?:{ignore}+?(?P<hour>\d{{1,2}})\s*:\s*(?P<min>\d{{2}})"
        r"(?:\s*--?\s*(?P<end_hour>\d{1,2})\s*:\s*(?P<end_min>\d{2}))?)?"
    )
    cookie = ""
    if cookies:
        cookie = (
            r"(?:\s*(?P<repeatpre>\.\+|\+\+|\+)(?P<repeatnum>\d+)(?P<repeatdwmy>[hdwmy]))?"
            r"(?:\s*(?P<warnpre>--?)(?P<warnnum>\d+)(?P<warndwmy>[hdwmy]))?"
        )
    return f"{opening}{date_time}{cookie}{ignore}*?{closing}"


def _cookie(match: re.Match, prefix: str) -> Optional[Cookie]:
    mark = match.groupdict().get(f"{prefix}pre")
    if not mark:
        return None
    value = int(match.group(f"{prefix}num"))
    return Cookie(mark, value if value > 0 else 1, match.group(f"{prefix}dwmy"))


class DateRecognizer:
    """Compiled timestamp pattern, optionally behind a planning keyword.

    Parameters
    ----------
    brackets : {"active", "inactive", "none"}
        Bracket style the pattern accepts
    keyword : str, optional
        A planning keyword (``SCHEDULED``, ``DEADLINE`` or ``CLOSED``). When
        given the pattern matches whole lines of the form
        ``KEYWORD: <timestamp>``, optionally after indentation and other
        planning entries; group 1 holds that prefix.

    """

    def __init__(self, brackets: str = "active", keyword: Optional[str] = None):
        """Compile the recognizer pattern."""
        if brackets not in _BRACKETS:
            raise ValueError(f"Unknown bracket style: {brackets!r}")
        self.brackets = brackets
        self.keyword = keyword
        self.timestamp_type = TimestampType(brackets)
        body = _timestamp_pattern(brackets)
        if keyword is not None:
            body = _PLANNING_PREFIX + rf"{re.escape(keyword)}:\s+" + body
        self.pattern = re.compile(body)

    def match(self, text: str, pos: int = 0) -> Optional[re.Match]:
        """Match the pattern at ``pos`` and return the raw regex match."""
        return self.pattern.match(text, pos)

    def from_match(self, match: re.Match) -> Optional[OrgDate]:
        """Build an :class:`OrgDate` from a match of this recognizer.

        Returns None when the digits do not form a real calendar date.
        """
        groups = match.groupdict()
        try:
            start = datetime(int(groups["year"]), int(groups["month"]), int(groups["day"]))
            has_time = groups.get("hour") is not None
            end = None
            if has_time:
                start = start.replace(hour=int(groups["hour"]), minute=int(groups["min"]))
                if groups.get("end_hour") is not None:
                    end = start.replace(hour=int(groups["end_hour"]), minute=int(groups["end_min"]))
        except ValueError:
            return None
        return OrgDate(
            start=start,
            end=end,
            timestamp_type=self.timestamp_type,
            has_time=has_time,
            repeater=_cookie(match, "repeat"),
            warning=_cookie(match, "warn"),
        )

    def parse(self, text: str, pos: int = 0) -> Optional[OrgDate]:
        """Parse the timestamp at ``pos``; None when there is no match."""
        match = self.match(text, pos)
        return self.from_match(match) if match is not None else None

    def parse_with_range(self, text: str, pos: int = 0) -> Optional[tuple[OrgDate, int]]:
        """Parse a timestamp or a ``<a>--<b>`` range at ``pos``.

        Returns
        -------
        tuple of (OrgDate, int) or None
            The date and the number of characters consumed from ``pos``

        """
        match = self.match(text, pos)
        if match is None:
            return None
        date = self.from_match(match)
        if date is None:
            return None
        consumed = match.end() - pos
        if not date.has_end and text.startswith("--", match.end()):
            second = self.match(text, match.end() + 2)
            end_date = self.from_match(second) if second is not None else None
            if end_date is not None:
                date = replace(date, end=end_date.start)
                consumed = second.end() - pos
        return date, consumed


def scheduled_recognizer() -> DateRecognizer:
    """Build the ``SCHEDULED: <...>`` line recognizer."""
    return DateRecognizer("active", keyword=DateType.SCHEDULED.value)


def deadline_recognizer() -> DateRecognizer:
    """Build the ``DEADLINE: <...>`` line recognizer."""
    return DateRecognizer("active", keyword=DateType.DEADLINE.value)


def closed_recognizer() -> DateRecognizer:
    """Build the ``CLOSED: [...]`` line recognizer (inactive brackets)."""
    return DateRecognizer("inactive", keyword=DateType.CLOSED.value)


def timestamp_recognizer(active: bool = True) -> DateRecognizer:
    """Build a bare timestamp recognizer."""
    return DateRecognizer("active" if active else "inactive")


_PLANNING_KEYWORD = re.compile(r"\b(SCHEDULED|DEADLINE|CLOSED):\s*")


def parse_planning_line(
    line: str,
    recognizers: Optional[tuple[DateRecognizer, DateRecognizer]] = None,
    strict: bool = False,
) -> list[tuple[DateType, OrgDate]]:
    """Extract every planning entry from a line, in source order.

    Parameters
    ----------
    line : str
        A line such as ``CLOSED: [2004-01-02 Fri] SCHEDULED: <2004-01-01 Thu>``
    recognizers : tuple of DateRecognizer, optional
        Active and inactive timestamp recognizers to reuse
    strict : bool, default False
        Return nothing when the line holds any text besides its planning entries

    Returns
    -------
    list of (DateType, OrgDate)
        The keyword/date pairs found; keywords without a valid timestamp are skipped

    """
    active, inactive = recognizers or (timestamp_recognizer(True), timestamp_recognizer(False))
    entries: list[tuple[DateType, OrgDate]] = []
    residue, last = [], 0
    for keyword in _PLANNING_KEYWORD.finditer(line):
        if keyword.start() < last:
            continue
        match = active.match(line, keyword.end()) or inactive.match(line, keyword.end())
        date = None
        if match is not None:
            date = (active if match.re is active.pattern else inactive).from_match(match)
        if date is None:
            continue
        entries.append((DateType(keyword.group(1)), date))
        residue.append(line[last : keyword.start()])
        last = match.end()
    residue.append(line[last:])
    if strict and "".join(residue).strip():
        return []
    return entries
