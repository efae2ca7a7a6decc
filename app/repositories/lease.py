from datetime import date
from sqlalchemy.orm import Session

from app.db.models.lease import Lease as LeaseModel
from app.domain.lease_activity import LeaseActivityPolicy
from app.domain.lease_lifecycle import LeaseStatus
from app.errors import NotFoundError


def _columns() -> dict:
    return {
        "start_col": LeaseModel.lease_start,
        "end_col": LeaseModel.lease_end,
        "terminated_col": LeaseModel.terminated_on,
    }


def get_lease_by_id(db: Session, lease_id: int) -> LeaseModel | None:
    """Get a lease by ID."""
    return db.query(LeaseModel).filter(LeaseModel.id == lease_id).first()


def get_leases_by_property_id(db: Session, property_id: int) -> list[LeaseModel]:
    """Get all leases for a specific property, most recent start first."""
    return (
        db.query(LeaseModel)
        .filter(LeaseModel.property_id == property_id)
        .order_by(LeaseModel.lease_start.desc())
        .all()
    )


def get_leases_by_tenant_id(db: Session, tenant_id: int) -> list[LeaseModel]:
    """Get all leases for a specific tenant."""
    return db.query(LeaseModel).filter(LeaseModel.tenant_id == tenant_id).all()


def get_overlapping_leases(
    db: Session,
    property_id: int,
    start: date,
    end: date,
    exclude_id: int | None = None,
) -> list[LeaseModel]:
    """Get leases of a property whose effective window overlaps [start, end]."""
    query = db.query(LeaseModel).filter(
        LeaseModel.property_id == property_id,
        LeaseActivityPolicy.sqlalchemy_overlap_predicate(start=start, end=end, **_columns()),
    )
    if exclude_id is not None:
        query = query.filter(LeaseModel.id != exclude_id)
    return query.order_by(LeaseModel.lease_start).all()


def get_current_lease_for_property(
    db: Session, property_id: int, as_of: date
) -> LeaseModel | None:
    """Get the lease governing a property on as_of, if any."""
    policy = LeaseActivityPolicy(as_of=as_of)
    return (
        db.query(LeaseModel)
        .filter(
            LeaseModel.property_id == property_id,
            policy.sqlalchemy_active_predicate(**_columns()),
        )
        .order_by(LeaseModel.lease_start.desc())
        .first()
    )


def get_past_leases_for_property(
    db: Session, property_id: int, as_of: date
) -> list[LeaseModel]:
    """Get leases of a property that ended before as_of, most recent first."""
    policy = LeaseActivityPolicy(as_of=as_of)
    return (
        db.query(LeaseModel)
        .filter(
            LeaseModel.property_id == property_id,
            policy.sqlalchemy_status_predicate(LeaseStatus.EXPIRED, **_columns()),
        )
        .order_by(LeaseModel.lease_start.desc())
        .all()
    )


def get_all_leases_paginated(
    db: Session,
    as_of: date,
    page: int = 1,
    page_size: int = 100,
    property_id: int | None = None,
    tenant_id: int | None = None,
    status: LeaseStatus | None = None,
) -> tuple[list[LeaseModel], int]:
    """
    Get all leases with pagination and optional filters.

    Args:
        as_of: Date the status filter is evaluated against
        page: Page number (1-indexed)
        page_size: Number of items per page
        property_id: Optional filter by property ID
        tenant_id: Optional filter by tenant ID
        status: Optional derived-status filter. The bucket boundaries are
                centralized in LeaseActivityPolicy.

    Returns:
        Tuple of (list of leases, total count)
    """
    query = db.query(LeaseModel)

    if property_id is not None:
        query = query.filter(LeaseModel.property_id == property_id)

    if tenant_id is not None:
        query = query.filter(LeaseModel.tenant_id == tenant_id)

    if status is not None:
        policy = LeaseActivityPolicy(as_of=as_of)
        query = query.filter(policy.sqlalchemy_status_predicate(status, **_columns()))

    total = query.count()
    skip = (page - 1) * page_size
    leases = (
        query.order_by(LeaseModel.lease_start.desc(), LeaseModel.id.desc())
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return leases, total


def create_lease(db: Session, **fields) -> LeaseModel:
    """Create a new lease in the database. Pure data access - no business logic."""
    db_lease = LeaseModel(**fields)
    db.add(db_lease)
    db.commit()
    db.refresh(db_lease)
    return db_lease


def update_lease(db: Session, lease_id: int, **kwargs) -> LeaseModel:
    """
    Update a lease. Only updates fields that are explicitly provided.

    To clear a nullable field (set to None), explicitly pass it with None value.
    Fields not provided are not updated.
    """
    lease = get_lease_by_id(db, lease_id)
    if not lease:
        raise NotFoundError("Lease not found")

    for name, value in kwargs.items():
        setattr(lease, name, value)

    db.commit()
    db.refresh(lease)
    return lease


def delete_lease(db: Session, lease_id: int) -> None:
    """Delete a lease from the database. Pure data access - no business logic."""
    lease = get_lease_by_id(db, lease_id)
    if not lease:
        raise NotFoundError("Lease not found")

    db.delete(lease)
    db.commit()
