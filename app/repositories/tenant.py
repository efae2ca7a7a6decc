from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.models.tenant import Tenant as TenantModel
from app.errors import NotFoundError


def get_tenant_by_id(db: Session, tenant_id: int) -> TenantModel | None:
    """Get a tenant by ID."""
    return db.query(TenantModel).filter(TenantModel.id == tenant_id).first()


def get_all_tenants_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    name: str | None = None,
) -> tuple[list[TenantModel], int]:
    """
    Get tenants with pagination.

    Optional name filter matches first or last name (case-insensitive, partial).
    """
    query = db.query(TenantModel)
    if name:
        pattern = f"%{name}%"
        query = query.filter(
            or_(TenantModel.first_name.ilike(pattern), TenantModel.last_name.ilike(pattern))
        )

    total = query.count()
    skip = (page - 1) * page_size
    tenants = (
        query.order_by(TenantModel.last_name, TenantModel.first_name)
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return tenants, total


def create_tenant(db: Session, commit: bool = True, **fields) -> TenantModel:
    """
    Create a new tenant in the database. Pure data access - no business logic.

    With commit=False the row is only flushed, so the caller can commit it in
    the same transaction as a lease.
    """
    db_tenant = TenantModel(**fields)
    db.add(db_tenant)
    if commit:
        db.commit()
        db.refresh(db_tenant)
    else:
        db.flush()
    return db_tenant


def update_tenant(db: Session, tenant_id: int, **kwargs) -> TenantModel:
    """Update a tenant. Only updates fields that are explicitly provided."""
    tenant = get_tenant_by_id(db, tenant_id)
    if not tenant:
        raise NotFoundError("Tenant not found")

    for name, value in kwargs.items():
        setattr(tenant, name, value)

    db.commit()
    db.refresh(tenant)
    return tenant


def delete_tenant(db: Session, tenant_id: int) -> None:
    """Delete a tenant from the database. Pure data access - no business logic."""
    tenant = get_tenant_by_id(db, tenant_id)
    if not tenant:
        raise NotFoundError("Tenant not found")

    db.delete(tenant)
    db.commit()
