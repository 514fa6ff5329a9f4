from datetime import date, time

import pytest

from presence_tracker.common.datetime_utils import (
    covers,
    date_range,
    day_count,
    last_n_days,
    overlap,
    overlap_days,
    parse_hhmm,
    parse_iso_date,
)
from presence_tracker.common.validators import optional_text, require_non_empty
from presence_tracker.core.exceptions import InvalidRangeError, ValidationError


def test_date_range_is_inclusive_and_ordered():
    days = list(date_range(date(2024, 2, 27), date(2024, 3, 1)))
    assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_day_count_single_day_is_one():
    assert day_count(date(2024, 1, 10), date(2024, 1, 10)) == 1


def test_reversed_range_is_rejected():
    with pytest.raises(InvalidRangeError):
        day_count(date(2024, 1, 11), date(2024, 1, 10))
    with pytest.raises(InvalidRangeError):
        list(date_range(date(2024, 1, 11), date(2024, 1, 10)))


def test_overlap_clamps_to_window():
    leave = (date(2024, 1, 8), date(2024, 1, 12))
    window = (date(2024, 1, 10), date(2024, 1, 31))
    assert overlap(leave, window) == (date(2024, 1, 10), date(2024, 1, 12))
    assert overlap_days(leave, window) == 3


def test_overlap_touching_boundary_counts_one_day():
    assert overlap_days((date(2024, 1, 1), date(2024, 1, 10)), (date(2024, 1, 10), date(2024, 1, 20))) == 1


def test_disjoint_intervals_do_not_overlap():
    assert overlap((date(2024, 1, 1), date(2024, 1, 5)), (date(2024, 1, 6), date(2024, 1, 9))) is None
    assert overlap_days((date(2024, 1, 1), date(2024, 1, 5)), (date(2024, 1, 6), date(2024, 1, 9))) == 0


def test_covers_is_inclusive():
    interval = (date(2024, 1, 10), date(2024, 1, 12))
    assert covers(interval, date(2024, 1, 10))
    assert covers(interval, date(2024, 1, 12))
    assert not covers(interval, date(2024, 1, 13))


def test_last_n_days_ends_today():
    assert last_n_days(date(2024, 1, 10), 7) == (date(2024, 1, 4), date(2024, 1, 10))


def test_parsers():
    assert parse_iso_date("2024-01-10") == date(2024, 1, 10)
    assert parse_hhmm("09:30") == time(9, 30)
    assert parse_hhmm("") is None
    with pytest.raises(ValidationError):
        parse_hhmm("9h30")
    with pytest.raises(ValidationError):
        parse_iso_date("10/01/2024")


@pytest.mark.parametrize("value", [5, None, ["2024-01-10"]])
def test_non_text_date_is_a_validation_error(value):
    with pytest.raises(ValidationError):
        parse_iso_date(value)


def test_non_text_time_is_a_validation_error():
    with pytest.raises(ValidationError):
        parse_hhmm(930)


def test_parse_error_keeps_its_cause():
    with pytest.raises(ValidationError) as exc_info:
        parse_iso_date("2024-13-01")
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.parametrize("value", [5, 1.5, {"x": 1}])
def test_required_text_rejects_other_types(value):
    with pytest.raises(ValidationError):
        require_non_empty(value, "Reason")


def test_optional_text():
    assert optional_text(None) is None
    assert optional_text("  ") is None
    assert optional_text(" Sales ") == "Sales"
    with pytest.raises(ValidationError):
        optional_text(42, "Department")
