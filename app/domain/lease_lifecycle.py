"""Lease lifecycle rules: status classification, progress metrics, date-range
validation and monthly payment scheduling.

Everything here is a pure function of the lease data and an explicit ``now``.
Nothing reads the wall clock; the outermost layer (the ``get_today`` API
dependency) supplies the current date.

Display-path functions (``classify_status``, ``compute_progress``,
``next_payment_date``) never raise on incomplete or malformed records. They
degrade to ``LeaseStatus.NO_LEASE`` / zero metrics / ``None`` so a dashboard
listing many leases always renders. ``validate_date_range`` is the write-path
check and *returns* a typed error instead of raising, so callers can decide
whether to surface it inline or block a write.
"""

from __future__ import annotations

import calendar
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

ENDING_SOON_DAYS = 30


class LeaseStatus(str, Enum):
    NO_LEASE = "no_lease"
    UPCOMING = "upcoming"
    ACTIVE = "active"
    ENDING_SOON = "ending_soon"
    EXPIRED = "expired"


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class DateRangeError(str, Enum):
    """Why a proposed lease date range cannot be persisted."""

    INVALID_RANGE = "INVALID_RANGE"
    END_BEFORE_START = "END_BEFORE_START"

    @property
    def message(self) -> str:
        if self is DateRangeError.INVALID_RANGE:
            return "Lease start and end must be valid dates"
        return "Lease end date must be after start date"


@dataclass(frozen=True, slots=True)
class LeaseProgress:
    total_days: int
    elapsed_days: int
    percent: float
    days_remaining: int


NO_PROGRESS = LeaseProgress(total_days=0, elapsed_days=0, percent=0.0, days_remaining=0)


def parse_date(value: Any) -> date | None:
    """Coerce a date-like value to a ``date``; ``None`` when it can't be read.

    Accepts ``date``, ``datetime`` (time-of-day dropped) and ISO-8601 strings,
    with or without a time component.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def days_between(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (end - start).days


def leases_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Closed-interval overlap: sharing a single day counts."""
    return a_start <= b_end and b_start <= a_end


def _field(lease: Any, name: str) -> Any:
    if lease is None:
        return None
    if isinstance(lease, Mapping):
        return lease.get(name)
    return getattr(lease, name, None)


def _payment_frequency(value: Any) -> PaymentFrequency | None:
    if value is None:
        return None
    try:
        return PaymentFrequency(value)
    except ValueError:
        return None


def validate_date_range(start: Any, end: Any) -> DateRangeError | None:
    """Check a proposed ``[start, end]`` lease window.

    Returns ``None`` when the range may be persisted. A lease must span at
    least one day, so ``end == start`` is rejected.
    """
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None or end_date is None:
        return DateRangeError.INVALID_RANGE
    if end_date <= start_date:
        return DateRangeError.END_BEFORE_START
    return None


@dataclass(frozen=True, slots=True)
class LeaseLifecycle:
    """Lease lifecycle rules evaluated "as of" a given date.

    A lease's effective end is its ``terminated_on`` date when one is stored,
    otherwise ``lease_end``. Termination only moves the end earlier; status
    and remaining time follow the effective end, while ``total_days`` and the
    progress percentage stay relative to the contractual term.
    """

    as_of: date

    def effective_end(self, lease: Any) -> date | None:
        end = parse_date(_field(lease, "lease_end"))
        terminated_on = parse_date(_field(lease, "terminated_on"))
        if end is None:
            return None
        if terminated_on is not None and terminated_on < end:
            return terminated_on
        return end

    def classify(self, lease: Any) -> LeaseStatus:
        start = parse_date(_field(lease, "lease_start"))
        end = self.effective_end(lease)
        if start is None or end is None:
            return LeaseStatus.NO_LEASE
        if self.as_of < start:
            return LeaseStatus.UPCOMING
        if self.as_of > end:
            return LeaseStatus.EXPIRED
        if days_between(self.as_of, end) <= ENDING_SOON_DAYS:
            return LeaseStatus.ENDING_SOON
        return LeaseStatus.ACTIVE

    def progress(self, lease: Any) -> LeaseProgress:
        start = parse_date(_field(lease, "lease_start"))
        end = parse_date(_field(lease, "lease_end"))
        effective_end = self.effective_end(lease)

        total_days = days_between(start, end) if start and end else 0
        elapsed_days = max(0, days_between(start, self.as_of)) if start else 0
        if total_days > 0:
            percent = min(100.0, max(0.0, elapsed_days / total_days * 100))
        else:
            percent = 0.0
        days_remaining = days_between(self.as_of, effective_end) if effective_end else 0

        return LeaseProgress(
            total_days=total_days,
            elapsed_days=elapsed_days,
            percent=percent,
            days_remaining=days_remaining,
        )

    def next_payment_date(self, lease: Any) -> date | None:
        # Weekly/biweekly/quarterly/annual schedules would need to be anchored
        # on lease_start; only the monthly due day is modelled.
        if _payment_frequency(_field(lease, "payment_frequency")) is not PaymentFrequency.MONTHLY:
            return None
        due_day = _field(lease, "payment_due_day")
        if not isinstance(due_day, int) or isinstance(due_day, bool) or not 1 <= due_day <= 31:
            return None

        this_month = _clamped_day(self.as_of.year, self.as_of.month, due_day)
        if this_month >= self.as_of:
            return this_month
        if self.as_of.month == 12:
            return _clamped_day(self.as_of.year + 1, 1, due_day)
        return _clamped_day(self.as_of.year, self.as_of.month + 1, due_day)

    def is_active(self, lease: Any) -> bool:
        """True while the lease governs occupancy (active or ending soon)."""
        return self.classify(lease) in (LeaseStatus.ACTIVE, LeaseStatus.ENDING_SOON)


def _clamped_day(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def classify_status(lease: Any, now: date | datetime) -> LeaseStatus:
    as_of = parse_date(now)
    if as_of is None:
        return LeaseStatus.NO_LEASE
    return LeaseLifecycle(as_of=as_of).classify(lease)


def compute_progress(lease: Any, now: date | datetime) -> LeaseProgress:
    as_of = parse_date(now)
    if as_of is None:
        return NO_PROGRESS
    return LeaseLifecycle(as_of=as_of).progress(lease)


def next_payment_date(lease: Any, now: date | datetime) -> date | None:
    as_of = parse_date(now)
    if as_of is None:
        return None
    return LeaseLifecycle(as_of=as_of).next_payment_date(lease)
