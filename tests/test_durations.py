"""Tests for commit-age wording and Subversion keyword extraction."""

from __future__ import annotations

import datetime as dt

import pytest

from darkdocs.durations import (
    Duration,
    extract_vcs_info,
    humanize_duration,
    resolve_reference_time,
)
from darkdocs.entities import DocClass, DocConstant, DocSection

SVN_ID = "$Id: handler.rb 12 2008-08-27 21:58:00Z ged $"
COMMITTED = dt.datetime(2008, 8, 27, 21, 58, tzinfo=dt.UTC)


@pytest.mark.parametrize(
    ("span", "expected"),
    [
        (Duration(0), "less than a minute"),
        (Duration(59), "less than a minute"),
        (Duration.minutes(1), "1 minute"),
        (Duration.minutes(49), "49 minutes"),
        (Duration.minutes(50), "about one hour"),
        (Duration.hours(3), "3 hours"),
        (Duration.hours(20), "one day"),
        (Duration.hours(30), "about one day"),
        (Duration.days(4), "4 days"),
        (Duration.days(9), "about one week"),
        (Duration.weeks(5), "5 weeks"),
        (Duration.months(4), "4 months"),
        (Duration.years(1), "1 year"),
        (Duration.years(3), "3 years"),
    ],
)
def test_humanize_duration_thresholds(span: Duration, expected: str) -> None:
    assert humanize_duration(span.seconds) == expected


def test_negative_durations_read_as_now() -> None:
    assert humanize_duration(-30) == "less than a minute"


def test_duration_shifts_datetimes() -> None:
    assert Duration.days(1).before(COMMITTED) == COMMITTED - dt.timedelta(days=1)
    assert Duration.hours(2).after(COMMITTED) == COMMITTED + dt.timedelta(hours=2)
    assert Duration.minutes(1) < Duration.hours(1)


def _with_constants(*values: str) -> DocClass:
    constants = tuple(DocConstant(name=f"C{idx}", value=value) for idx, value in enumerate(values))
    return DocClass(name="ThingFish::Handler", sections=(DocSection(constants=constants),))


def test_vcs_info_from_first_matching_constant() -> None:
    doc_class = _with_constants("42", SVN_ID)
    info = extract_vcs_info(doc_class, COMMITTED + dt.timedelta(days=3))
    assert info is not None
    assert info.filename == "handler.rb"
    assert info.rev == 12
    assert info.committer == "ged"
    assert info.commit_date == COMMITTED
    assert info.commit_delta == "3 days"


def test_vcs_info_without_reference_time_has_no_age() -> None:
    info = extract_vcs_info(_with_constants(SVN_ID))
    assert info is not None
    assert info.commit_date == COMMITTED
    assert info.commit_delta is None


def test_vcs_info_only_reads_first_section() -> None:
    doc_class = DocClass(
        name="A",
        sections=(
            DocSection(),
            DocSection(constants=(DocConstant(name="SVNId", value=SVN_ID),)),
        ),
    )
    assert extract_vcs_info(doc_class) is None
    assert extract_vcs_info(DocClass(name="B")) is None


def test_reference_time_prefers_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOURCE_DATE_EPOCH", "1219874280")
    assert resolve_reference_time(COMMITTED) == COMMITTED
    assert resolve_reference_time() == COMMITTED


def test_reference_time_absent() -> None:
    assert resolve_reference_time() is None
