# tests/test_scheduling.py
from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from fireaudit.domain.scheduling import (
    bucket_action_lists,
    calculate_next_inspection_date,
    days_until,
    get_scheduling_status,
    overdue_days,
)
from fireaudit.domain.statuses import SchedulingStatus

TODAY = date(2026, 3, 11)  # a Wednesday


def test_three_months_on_a_weekday_is_unchanged():
    # 2026-01-14 + 3 months = 2026-04-14, a Tuesday
    assert calculate_next_inspection_date(date(2026, 1, 14)) == date(2026, 4, 14)


def test_saturday_rolls_to_monday():
    # 2026-03-06 + 3 months = 2026-06-06
    assert date(2026, 6, 6).weekday() == 5
    assert calculate_next_inspection_date(date(2026, 3, 6)) == date(2026, 6, 8)


def test_sunday_rolls_to_monday():
    assert date(2026, 6, 7).weekday() == 6
    assert calculate_next_inspection_date(date(2026, 3, 7)) == date(2026, 6, 8)


def test_end_of_month_is_clamped():
    # Nov 30 + 3 months -> Feb 28 (2027 is not a leap year), a Sunday -> Mar 1
    assert calculate_next_inspection_date(date(2026, 11, 30)) == date(2027, 3, 1)


def test_datetime_in_datetime_out():
    out = calculate_next_inspection_date(datetime(2026, 1, 14, 15, 30))
    assert isinstance(out, datetime)
    assert out == datetime(2026, 4, 14, 15, 30)


def test_custom_interval():
    assert calculate_next_inspection_date(date(2026, 1, 14), months=6) == date(2026, 7, 14)


def test_result_is_never_a_weekend_and_at_most_two_days_late():
    d = date(2026, 1, 1)
    for _ in range(400):
        out = calculate_next_inspection_date(d)
        plain = d + relativedelta(months=3)
        assert out.weekday() < 5
        assert 0 <= (out - plain).days <= 2
        d += timedelta(days=1)


def test_friday_submission():
    # Fri 2026-01-09 -> Thu 2026-04-09; Fri 2026-03-06 -> Sat 2026-06-06 -> Mon 2026-06-08
    assert calculate_next_inspection_date(date(2026, 1, 9)) == date(2026, 4, 9)
    assert calculate_next_inspection_date(date(2026, 3, 6)) == date(2026, 6, 8)


@pytest.mark.parametrize(
    "offset,expected",
    [
        (None, SchedulingStatus.NONE),
        (0, SchedulingStatus.DUE_TODAY),
        (1, SchedulingStatus.UPCOMING),
        (7, SchedulingStatus.UPCOMING),
        (8, SchedulingStatus.NONE),
        (-1, SchedulingStatus.PENDING),
        (-7, SchedulingStatus.PENDING),
        (-8, SchedulingStatus.URGENT),
        (-90, SchedulingStatus.URGENT),
    ],
)
def test_scheduling_status_boundaries(offset, expected):
    due = None if offset is None else TODAY + timedelta(days=offset)
    assert get_scheduling_status(due, today=TODAY) == expected


def test_status_truncates_time_of_day():
    due = datetime(2026, 3, 11, 23, 59)
    assert get_scheduling_status(due, today=datetime(2026, 3, 11, 0, 1)) == SchedulingStatus.DUE_TODAY


def test_status_accepts_iso_strings():
    assert get_scheduling_status("2026-03-18", today=TODAY) == SchedulingStatus.UPCOMING
    assert get_scheduling_status("2026-03-11T08:00:00Z", today=TODAY) == SchedulingStatus.DUE_TODAY
    assert get_scheduling_status("", today=TODAY) == SchedulingStatus.NONE


def test_status_values_are_the_wire_strings():
    assert SchedulingStatus.DUE_TODAY.value == "Due Today"
    assert SchedulingStatus("due today") is SchedulingStatus.DUE_TODAY


def test_days_until_and_overdue():
    assert days_until(TODAY + timedelta(days=3), today=TODAY) == 3
    assert overdue_days(TODAY - timedelta(days=12), today=TODAY) == 12
    assert overdue_days(TODAY + timedelta(days=2), today=TODAY) == 0


def test_bucket_action_lists():
    rows = [
        {"id": 1, "name": "Far", "address": "a", "next_inspection_date": TODAY + timedelta(days=40)},
        {"id": 2, "name": "Soon", "address": "b", "next_inspection_date": TODAY + timedelta(days=2)},
        {"id": 3, "name": "Late", "address": "c", "next_inspection_date": TODAY - timedelta(days=3)},
        {"id": 4, "name": "Very late", "address": "d", "next_inspection_date": TODAY - timedelta(days=20)},
        {"id": 5, "name": "Today", "address": "e", "next_inspection_date": TODAY},
        {"id": 6, "name": "Unscheduled", "address": "f", "next_inspection_date": None},
    ]
    out = bucket_action_lists(rows, today=TODAY)

    assert [x["client_id"] for x in out.urgent] == [4]
    assert out.urgent[0]["overdue_days"] == 20
    assert [x["client_id"] for x in out.pending] == [3]
    # everything else with a date, ordered by due date
    assert [x["client_id"] for x in out.upcoming] == [5, 2, 1]
    assert out.upcoming[0]["status"] == "Due Today"
    assert out.upcoming[2]["status"] == "None"


def test_upcoming_list_is_capped():
    rows = [
        {"id": i, "name": f"c{i}", "address": "", "next_inspection_date": TODAY + timedelta(days=i)}
        for i in range(1, 16)
    ]
    out = bucket_action_lists(rows, today=TODAY, upcoming_limit=10)
    assert len(out.upcoming) == 10
    assert out.upcoming[0]["client_id"] == 1
