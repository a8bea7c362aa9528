"""Duration helpers and Subversion keyword extraction for class pages.

Class pages show when the documented source was last committed. The commit
details come from the first constant in a class whose value is an expanded
Subversion ``$Id$`` keyword, and the age of that commit is rendered in words
by :func:`humanize_duration`.

Examples
--------
>>> humanize_duration(Duration.minutes(3).seconds)
'3 minutes'
>>> humanize_duration(Duration.days(9).seconds)
'about one week'
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import os
import re
import typing as typ

if typ.TYPE_CHECKING:
    from .entities import DocClass

SVN_ID_PATTERN = re.compile(
    r"""
    \$Id:\s
        (\S+)\s                     # filename
        (\d+)\s                     # revision
        (\d{4}-\d{2}-\d{2})\s       # date (YYYY-MM-DD)
        (\d{2}:\d{2}:\d{2})Z?\s     # time (HH:MM:SS, optional Z)
        (\S+)\s                     # committer
    \$$
    """,
    re.VERBOSE,
)


@dc.dataclass(frozen=True, slots=True, order=True)
class Duration:
    """A span of time measured in whole seconds."""

    seconds: int

    @classmethod
    def minutes(cls, count: float) -> Duration:
        return cls(int(count * 60))

    @classmethod
    def hours(cls, count: float) -> Duration:
        return cls(int(count * 3600))

    @classmethod
    def days(cls, count: float) -> Duration:
        return cls(int(count * 86400))

    @classmethod
    def weeks(cls, count: float) -> Duration:
        return cls(int(count * 7 * 86400))

    @classmethod
    def months(cls, count: float) -> Duration:
        """Return an approximate span of ``count`` 30-day months."""
        return cls(int(count * 30 * 86400))

    @classmethod
    def years(cls, count: float) -> Duration:
        """Return an approximate span of ``count`` 365.25-day years."""
        return cls(int(count * 365.25 * 86400))

    def before(self, moment: dt.datetime) -> dt.datetime:
        """Return the moment this duration before ``moment``."""
        return moment - dt.timedelta(seconds=self.seconds)

    def after(self, moment: dt.datetime) -> dt.datetime:
        """Return the moment this duration after ``moment``."""
        return moment + dt.timedelta(seconds=self.seconds)


MINUTE = Duration.minutes(1).seconds
HOUR = Duration.hours(1).seconds
DAY = Duration.days(1).seconds
WEEK = Duration.weeks(1).seconds
MONTH = Duration.months(1).seconds
YEAR = Duration.years(1).seconds


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def humanize_duration(seconds: int) -> str:  # noqa: PLR0911
    """Describe ``seconds`` in terms a reader understands at a glance.

    Parameters
    ----------
    seconds : int
        Elapsed time in seconds. Negative values are treated as zero.

    Returns
    -------
    str
        A phrase such as ``"less than a minute"``, ``"about one hour"``, or
        ``"3 weeks"``.
    """
    seconds = max(int(seconds), 0)
    if seconds < MINUTE:
        return "less than a minute"
    if seconds < 50 * MINUTE:
        return _plural(seconds // MINUTE, "minute")
    if seconds < 90 * MINUTE:
        return "about one hour"
    if seconds < 18 * HOUR:
        return f"{seconds // HOUR} hours"
    if seconds < DAY:
        return "one day"
    if seconds < 2 * DAY:
        return "about one day"
    if seconds < WEEK:
        return f"{seconds // DAY} days"
    if seconds < 2 * WEEK:
        return "about one week"
    if seconds < 3 * MONTH:
        return f"{seconds // WEEK} weeks"
    if seconds < YEAR:
        return _plural(seconds // MONTH, "month")
    return _plural(seconds // YEAR, "year")


@dc.dataclass(frozen=True, slots=True)
class VcsInfo:
    """Commit details parsed from a Subversion ``$Id$`` keyword."""

    filename: str
    rev: int
    commit_date: dt.datetime
    commit_delta: str | None
    committer: str


def resolve_reference_time(configured: dt.datetime | None = None) -> dt.datetime | None:
    """Return the moment commit ages are measured against.

    The configured value wins; otherwise ``SOURCE_DATE_EPOCH`` is honoured so
    repeated builds stay byte-identical. ``None`` means no age is shown.
    """
    if configured is not None:
        return configured
    epoch = os.getenv("SOURCE_DATE_EPOCH")
    if epoch and epoch.strip().isdigit():
        return dt.datetime.fromtimestamp(int(epoch), dt.UTC)
    return None


def extract_vcs_info(
    doc_class: DocClass, reference_time: dt.datetime | None = None
) -> VcsInfo | None:
    """Return commit details from the first ``$Id$`` constant of ``doc_class``.

    Only the constants of the first section are considered. ``None`` is
    returned when the class has no sections or no constant value looks like an
    expanded Subversion keyword. Without a ``reference_time`` the commit age
    is left as ``None`` and pages show only the commit date.
    """
    if not doc_class.sections:
        return None
    for constant in doc_class.sections[0].constants:
        match = SVN_ID_PATTERN.search(constant.value.strip())
        if match is None:
            continue
        filename, rev, date, time, committer = match.groups()
        commit_date = dt.datetime.fromisoformat(f"{date}T{time}+00:00")
        delta = None
        if reference_time is not None:
            delta = humanize_duration(int((reference_time - commit_date).total_seconds()))
        return VcsInfo(
            filename=filename,
            rev=int(rev),
            commit_date=commit_date,
            commit_delta=delta,
            committer=committer,
        )
    return None


__all__ = [
    "Duration",
    "VcsInfo",
    "extract_vcs_info",
    "humanize_duration",
    "resolve_reference_time",
]
