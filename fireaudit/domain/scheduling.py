# fireaudit/domain/scheduling.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, TypeVar, Union

from dateutil.relativedelta import relativedelta

from .statuses import SchedulingStatus

INSPECTION_INTERVAL_MONTHS = 3
WINDOW_DAYS = 7

SATURDAY = 5
SUNDAY = 6

D = TypeVar("D", date, datetime)
DateLike = Union[date, datetime, str]


def calculate_next_inspection_date(submitted: D, *, months: int = INSPECTION_INTERVAL_MONTHS) -> D:
    """
    Next due date: `months` calendar months after submission (clamped to the
    end of shorter months), rolled forward to Monday if it lands on a weekend.

    No holiday calendar is applied. Returns the same type it was given.
    """
    due = submitted + relativedelta(months=months)
    wd = due.weekday()
    if wd == SATURDAY:
        due = due + timedelta(days=2)
    elif wd == SUNDAY:
        due = due + timedelta(days=1)
    return due


def as_day(value: Optional[DateLike]) -> Optional[date]:
    """Truncate to a calendar day. Accepts date, datetime or an ISO string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        return date.fromisoformat(s[:10])


def days_until(due: DateLike, *, today: Optional[DateLike] = None) -> int:
    target = as_day(due)
    if target is None:
        raise ValueError("due date is required")
    now = as_day(today) or date.today()
    return (target - now).days


def get_scheduling_status(
    due: Optional[DateLike],
    *,
    today: Optional[DateLike] = None,
    window_days: int = WINDOW_DAYS,
) -> SchedulingStatus:
    """
    Urgency of a due date relative to `today` (day-truncated both sides).

      no date             -> None
      due today           -> Due Today
      1..7 days ahead     -> Upcoming
      0..7 days overdue   -> Pending (grace window, day -7 included)
      more than 7 overdue -> Urgent
      further than 7 days ahead -> None
    """
    if as_day(due) is None:
        return SchedulingStatus.NONE

    diff = days_until(due, today=today)
    if diff == 0:
        return SchedulingStatus.DUE_TODAY
    if 0 < diff <= window_days:
        return SchedulingStatus.UPCOMING
    if diff < 0:
        if diff >= -window_days:
            return SchedulingStatus.PENDING
        return SchedulingStatus.URGENT
    return SchedulingStatus.NONE


def overdue_days(due: DateLike, *, today: Optional[DateLike] = None) -> int:
    return max(0, -days_until(due, today=today))


# -------------------- Dashboard action lists --------------------

@dataclass
class ActionLists:
    upcoming: list[dict[str, Any]] = field(default_factory=list)
    pending: list[dict[str, Any]] = field(default_factory=list)
    urgent: list[dict[str, Any]] = field(default_factory=list)


def _get(row: Any, key: str, default=None):
    if isinstance(row, dict):
        return row.get(key, default)
    return getattr(row, key, default)


def bucket_action_lists(
    rows: Iterable[Any],
    *,
    today: Optional[DateLike] = None,
    upcoming_limit: int = 10,
    window_days: int = WINDOW_DAYS,
) -> ActionLists:
    """
    Bucket scheduled clients for the dashboard.

    Urgent and Pending get their own lists; everything else that has a due
    date (Upcoming, Due Today, far-future) lands in the upcoming list, which
    is capped at `upcoming_limit`. Rows without a due date are skipped.
    Works with dicts or ORM rows exposing id / name / address / next_inspection_date.
    """
    today_d = as_day(today) or date.today()

    dated = [r for r in rows or [] if as_day(_get(r, "next_inspection_date")) is not None]
    dated.sort(key=lambda r: as_day(_get(r, "next_inspection_date")))

    out = ActionLists()
    for r in dated:
        due = as_day(_get(r, "next_inspection_date"))
        status = get_scheduling_status(due, today=today_d, window_days=window_days)
        item = {
            "client_id": _get(r, "id"),
            "name": _get(r, "name"),
            "address": _get(r, "address"),
            "next_inspection_date": due,
            "status": status.value,
        }
        if status == SchedulingStatus.URGENT:
            item["overdue_days"] = overdue_days(due, today=today_d)
            out.urgent.append(item)
        elif status == SchedulingStatus.PENDING:
            out.pending.append(item)
        else:
            out.upcoming.append(item)

    out.upcoming = out.upcoming[: max(0, int(upcoming_limit))]
    return out
