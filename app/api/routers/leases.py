from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_today
from app.services.lease import (
    create_lease,
    delete_lease,
    get_lease_overview,
    terminate_lease,
    update_lease,
)
import app.repositories.lease as lease_repo
from app.schemas.lease import (
    DateRangeCheck,
    DateRangeCheckResult,
    Lease,
    LeaseCreate,
    LeaseOverview,
    LeaseTerminate,
    LeaseUpdate,
)
from app.schemas.pagination import PaginatedResponse
from app.domain.lease_lifecycle import LeaseStatus, validate_date_range
from app.errors import NotFoundError

router = APIRouter(prefix="/leases", tags=["leases"])


@router.post("", response_model=Lease, status_code=status.HTTP_201_CREATED)
def create_new_lease(
    lease_data: LeaseCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new lease.

    Either reference an existing tenant with tenant_id, pass a tenant object to
    create one alongside the lease, or omit both for an unassigned lease.
    The lease may not overlap any other lease of the same property.
    """
    lease = create_lease(
        db,
        property_id=lease_data.property_id,
        tenant_id=lease_data.tenant_id,
        tenant=lease_data.tenant.model_dump() if lease_data.tenant else None,
        lease_start=lease_data.lease_start,
        lease_end=lease_data.lease_end,
        rent_amount=lease_data.rent_amount,
        currency=lease_data.currency,
        security_deposit=lease_data.security_deposit,
        payment_frequency=lease_data.payment_frequency,
        payment_due_day=lease_data.payment_due_day,
    )
    return Lease.model_validate(lease)


@router.post("/validate-dates", response_model=DateRangeCheckResult)
def validate_lease_dates(date_range: DateRangeCheck):
    """
    Check a lease date range before submitting a form.

    Always answers 200; an invalid range is reported in the body so forms can
    show it next to the date fields.
    """
    error = validate_date_range(date_range.lease_start, date_range.lease_end)
    if error is None:
        return DateRangeCheckResult(valid=True)
    return DateRangeCheckResult(valid=False, error=error, detail=error.message)


@router.get("", response_model=PaginatedResponse[Lease])
def get_all_leases(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    property: int | None = Query(None, description="Filter leases by property ID"),
    tenant: int | None = Query(None, description="Filter leases by tenant ID"),
    lease_status: LeaseStatus | None = Query(
        None, alias="status", description="Filter by derived status as of today"
    ),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Get all leases with pagination and optional filters, most recent start first.
    """
    leases, total = lease_repo.get_all_leases_paginated(
        db,
        as_of=today,
        page=page,
        page_size=page_size,
        property_id=property,
        tenant_id=tenant,
        status=lease_status,
    )

    return PaginatedResponse(
        items=[Lease.model_validate(lease) for lease in leases],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{lease_id}", response_model=Lease)
def get_lease_by_id(
    lease_id: int,
    db: Session = Depends(get_db),
):
    """
    Get a lease by ID.
    """
    lease = lease_repo.get_lease_by_id(db, lease_id)
    if not lease:
        raise NotFoundError("Lease not found")
    return Lease.model_validate(lease)


@router.get("/{lease_id}/overview", response_model=LeaseOverview)
def get_lease_overview_by_id(
    lease_id: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Get a lease's status, progress (elapsed/remaining days, percent) and next
    payment date as of today.
    """
    return get_lease_overview(db, lease_id, today)


@router.put("/{lease_id}", response_model=Lease)
def update_lease_by_id(
    lease_id: int,
    lease_data: LeaseUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a lease.

    Fields not included in the request are not updated.
    To clear tenant_id or payment_due_day, explicitly include it with null value.
    """
    update_data = lease_data.model_dump(exclude_unset=True)
    lease = update_lease(db, lease_id=lease_id, **update_data)
    return Lease.model_validate(lease)


@router.post("/{lease_id}/terminate", response_model=Lease)
def terminate_lease_by_id(
    lease_id: int,
    termination: LeaseTerminate,
    db: Session = Depends(get_db),
):
    """
    Terminate a lease early. The lease stops being active after terminated_on.
    """
    lease = terminate_lease(db, lease_id, termination.terminated_on)
    return Lease.model_validate(lease)


@router.delete("/{lease_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lease_by_id(
    lease_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete a lease by ID.
    """
    delete_lease(db, lease_id)
