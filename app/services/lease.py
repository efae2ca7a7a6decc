"""Lease service: create/update/terminate/delete with date and overlap rules,
plus the status overviews consumed by property detail views."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

import app.repositories.lease as lease_repo
import app.repositories.property as property_repo
import app.repositories.tenant as tenant_repo
import app.repositories.transaction as transaction_repo
from app.db.models.lease import Lease as LeaseModel
from app.domain.lease_lifecycle import LeaseLifecycle, PaymentFrequency, validate_date_range
from app.errors import (
    DomainError,
    DomainValidationError,
    LeaseDateRangeError,
    LeaseOverlapError,
    NotFoundError,
)
from app.schemas.lease import (
    Lease,
    LeaseOverview,
    LeaseProgress,
    PropertyLeaseSummary,
)

logger = logging.getLogger(__name__)


def _require_valid_range(start: date, end: date) -> None:
    error = validate_date_range(start, end)
    if error is not None:
        raise LeaseDateRangeError(error)


def _require_tenant(db: Session, tenant_id: int) -> None:
    if not tenant_repo.get_tenant_by_id(db, tenant_id):
        raise NotFoundError(f"Tenant with id {tenant_id} not found")


def _ensure_no_overlap(
    db: Session,
    property_id: int,
    start: date,
    end: date,
    exclude_id: int | None = None,
) -> None:
    """
    Reject a write that would give the property two leases covering the same day.

    Callers hold the property row lock, so the check and the following write
    act as one conditional write.
    """
    overlapping = lease_repo.get_overlapping_leases(
        db, property_id, start, end, exclude_id=exclude_id
    )
    if overlapping:
        other = overlapping[0]
        other_end = LeaseLifecycle(as_of=start).effective_end(other)
        logger.warning(
            "Rejected lease %s..%s for property %s: overlaps lease %s",
            start,
            end,
            property_id,
            other.id,
        )
        raise LeaseOverlapError(
            f"Lease overlaps with lease {other.id} on property {property_id} "
            f"from {other.lease_start.isoformat()} to {other_end.isoformat()}"
        )


def create_lease(
    db: Session,
    property_id: int,
    lease_start: date,
    lease_end: date,
    rent_amount: Decimal,
    currency: str = "USD",
    security_deposit: Decimal = Decimal("0"),
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    payment_due_day: int | None = None,
    tenant_id: int | None = None,
    tenant: dict | None = None,
) -> LeaseModel:
    """
    Create a new lease with business logic validation.

    - Validates the date range (end strictly after start)
    - Validates property exists, and tenant exists if tenant_id is given
    - Optionally creates the tenant in the same transaction (tenant payload)
    - Validates no other lease of the property overlaps the new window

    Raises:
        LeaseDateRangeError: If the date range is invalid
        NotFoundError: If property or tenant doesn't exist
        DomainValidationError: If both tenant_id and tenant are given
        LeaseOverlapError: If another lease of the property overlaps
    """
    _require_valid_range(lease_start, lease_end)

    if tenant_id is not None and tenant is not None:
        raise DomainValidationError("Provide either tenant_id or tenant, not both")

    try:
        if not property_repo.lock_property(db, property_id):
            raise NotFoundError(f"Property with id {property_id} not found")

        if tenant_id is not None:
            _require_tenant(db, tenant_id)

        _ensure_no_overlap(db, property_id, lease_start, lease_end)

        if tenant is not None:
            new_tenant = tenant_repo.create_tenant(db, commit=False, **tenant)
            tenant_id = new_tenant.id

        lease = lease_repo.create_lease(
            db,
            property_id=property_id,
            tenant_id=tenant_id,
            lease_start=lease_start,
            lease_end=lease_end,
            rent_amount=rent_amount,
            currency=currency,
            security_deposit=security_deposit,
            payment_frequency=PaymentFrequency(payment_frequency).value,
            payment_due_day=payment_due_day,
        )
    except DomainError:
        db.rollback()
        raise

    logger.info(
        "Created lease %s for property %s (%s..%s)",
        lease.id,
        property_id,
        lease_start,
        lease_end,
    )
    return lease


def update_lease(
    db: Session,
    lease_id: int,
    **update_fields,
) -> LeaseModel:
    """
    Update a lease with business logic validation.

    - Revalidates the merged date range when a date is provided
    - Keeps a stored termination date inside the new range
    - Validates property/tenant exist when changed
    - Revalidates overlap (excluding this lease) when dates or property change

    Only fields explicitly provided in update_fields will be updated.
    To clear tenant_id or payment_due_day, explicitly include it with None value.
    """
    existing = lease_repo.get_lease_by_id(db, lease_id)
    if not existing:
        raise NotFoundError("Lease not found")

    final_start = update_fields.get("lease_start") or existing.lease_start
    final_end = update_fields.get("lease_end") or existing.lease_end
    final_property_id = update_fields.get("property_id") or existing.property_id

    dates_changed = "lease_start" in update_fields or "lease_end" in update_fields
    property_changed = final_property_id != existing.property_id

    if dates_changed:
        _require_valid_range(final_start, final_end)
        if existing.terminated_on is not None and not (
            final_start <= existing.terminated_on <= final_end
        ):
            raise DomainValidationError(
                f"Lease was terminated on {existing.terminated_on.isoformat()}, "
                "which must stay within the lease dates"
            )

    try:
        if dates_changed or property_changed:
            if not property_repo.lock_property(db, final_property_id):
                raise NotFoundError(f"Property with id {final_property_id} not found")
            # A terminated lease only occupies the property up to its termination
            effective_end = final_end
            if existing.terminated_on is not None:
                effective_end = min(final_end, existing.terminated_on)
            _ensure_no_overlap(
                db, final_property_id, final_start, effective_end, exclude_id=lease_id
            )

        tenant_id = update_fields.get("tenant_id")
        if tenant_id is not None:
            _require_tenant(db, tenant_id)

        update_dict = dict(update_fields)
        if update_dict.get("payment_frequency") is not None:
            update_dict["payment_frequency"] = PaymentFrequency(
                update_dict["payment_frequency"]
            ).value

        lease = lease_repo.update_lease(db, lease_id=lease_id, **update_dict)
    except DomainError:
        db.rollback()
        raise

    logger.info("Updated lease %s (%s)", lease_id, ", ".join(sorted(update_fields)))
    return lease


def terminate_lease(db: Session, lease_id: int, terminated_on: date) -> LeaseModel:
    """
    Mark a lease as terminated early.

    The lease's effective end becomes terminated_on. It must fall within the
    lease's own dates; a lease that should never start is deleted instead.
    Moving an earlier termination later re-opens days, which are
    overlap-checked against the other leases under the property lock.

    Raises:
        NotFoundError: If lease doesn't exist
        DomainValidationError: If terminated_on is outside the lease dates
        LeaseOverlapError: If the re-opened days overlap another lease
    """
    lease = lease_repo.get_lease_by_id(db, lease_id)
    if not lease:
        raise NotFoundError("Lease not found")

    if not (lease.lease_start <= terminated_on <= lease.lease_end):
        raise DomainValidationError(
            f"Termination date ({terminated_on}) must be between lease start "
            f"({lease.lease_start}) and lease end ({lease.lease_end})"
        )

    try:
        if lease.terminated_on is not None and terminated_on > lease.terminated_on:
            property_repo.lock_property(db, lease.property_id)
            _ensure_no_overlap(
                db, lease.property_id, lease.lease_start, terminated_on, exclude_id=lease_id
            )

        lease = lease_repo.update_lease(db, lease_id=lease_id, terminated_on=terminated_on)
    except DomainError:
        db.rollback()
        raise

    logger.info("Terminated lease %s on %s", lease_id, terminated_on)
    return lease


def delete_lease(db: Session, lease_id: int) -> None:
    """
    Delete a lease.

    Raises:
        NotFoundError: If lease doesn't exist
        DomainValidationError: If transactions are recorded against the lease
    """
    if not lease_repo.get_lease_by_id(db, lease_id):
        raise NotFoundError("Lease not found")

    if transaction_repo.get_transactions_by_lease_id(db, lease_id):
        raise DomainValidationError(
            "Cannot delete lease: lease has associated transactions"
        )

    lease_repo.delete_lease(db, lease_id)
    logger.info("Deleted lease %s", lease_id)


def build_lease_overview(lease: LeaseModel, today: date) -> LeaseOverview:
    """Status, progress and next payment date of a lease as of today."""
    lifecycle = LeaseLifecycle(as_of=today)
    progress = lifecycle.progress(lease)
    return LeaseOverview(
        lease=Lease.model_validate(lease),
        status=lifecycle.classify(lease),
        progress=LeaseProgress.model_validate(progress),
        next_payment_date=lifecycle.next_payment_date(lease),
        as_of=today,
    )


def get_lease_overview(db: Session, lease_id: int, today: date) -> LeaseOverview:
    lease = lease_repo.get_lease_by_id(db, lease_id)
    if not lease:
        raise NotFoundError("Lease not found")
    return build_lease_overview(lease, today)


def get_property_lease_summary(
    db: Session, property_id: int, today: date
) -> PropertyLeaseSummary:
    """
    Current lease (with overview), past leases and occupancy of a property.

    A property is occupied while a lease covers today; upcoming leases do not
    count and are listed by the lease list endpoint instead.
    """
    if not property_repo.get_property_by_id(db, property_id):
        raise NotFoundError("Property not found")

    current = lease_repo.get_current_lease_for_property(db, property_id, today)
    past = lease_repo.get_past_leases_for_property(db, property_id, today)

    return PropertyLeaseSummary(
        property_id=property_id,
        occupancy="occupied" if current is not None else "vacant",
        current=build_lease_overview(current, today) if current is not None else None,
        past_leases=[Lease.model_validate(lease) for lease in past],
        as_of=today,
    )
