from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from app.domain.lease_lifecycle import ENDING_SOON_DAYS, LeaseStatus


@dataclass(frozen=True, slots=True)
class LeaseActivityPolicy:
    """Defines what it means for a lease to be active "as of" a given date.

    Semantics (intentionally centralized):
    - A lease's effective end is terminated_on when set, else lease_end
    - A lease is active if lease_start <= as_of <= effective end

    Note: the effective end is inclusive. A lease ending "today" is still
    active today. The status buckets mirror LeaseLifecycle.classify so list
    filters and per-lease badges always agree.
    """

    as_of: date

    def is_active(
        self, *, start_date: date, end_date: date, terminated_on: date | None = None
    ) -> bool:
        effective_end = end_date if terminated_on is None else min(end_date, terminated_on)
        return start_date <= self.as_of <= effective_end

    @staticmethod
    def sqlalchemy_effective_end(*, end_col, terminated_col):
        """COALESCE(terminated_on, lease_end).

        Relies on terminated_on never being later than lease_end, which the
        leases table enforces with a CHECK constraint.
        """
        from sqlalchemy import func

        return func.coalesce(terminated_col, end_col)

    def sqlalchemy_active_predicate(self, *, start_col, end_col, terminated_col):
        """Build a SQLAlchemy predicate implementing the active rule."""
        from sqlalchemy import and_

        effective_end = self.sqlalchemy_effective_end(end_col=end_col, terminated_col=terminated_col)
        return and_(start_col <= self.as_of, effective_end >= self.as_of)

    def sqlalchemy_status_predicate(self, status: LeaseStatus, *, start_col, end_col, terminated_col):
        """Build a SQLAlchemy predicate selecting leases in the given status bucket.

        Persisted leases always carry both dates, so NO_LEASE matches nothing.
        """
        from sqlalchemy import and_, false

        effective_end = self.sqlalchemy_effective_end(end_col=end_col, terminated_col=terminated_col)
        ending_soon_cutoff = self.as_of + timedelta(days=ENDING_SOON_DAYS)

        if status is LeaseStatus.UPCOMING:
            return start_col > self.as_of
        if status is LeaseStatus.EXPIRED:
            return effective_end < self.as_of
        if status is LeaseStatus.ENDING_SOON:
            return and_(
                start_col <= self.as_of,
                effective_end >= self.as_of,
                effective_end <= ending_soon_cutoff,
            )
        if status is LeaseStatus.ACTIVE:
            return and_(start_col <= self.as_of, effective_end > ending_soon_cutoff)
        return false()

    @staticmethod
    def sqlalchemy_overlap_predicate(*, start: date, end: date, start_col, end_col, terminated_col):
        """Build a predicate for leases whose effective window overlaps [start, end].

        Independent of as_of; the window is given explicitly.
        """
        from sqlalchemy import and_

        effective_end = LeaseActivityPolicy.sqlalchemy_effective_end(
            end_col=end_col, terminated_col=terminated_col
        )
        return and_(start_col <= end, effective_end >= start)
