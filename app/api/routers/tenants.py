from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.services.tenant import delete_tenant
import app.repositories.tenant as tenant_repo
from app.schemas.pagination import PaginatedResponse
from app.schemas.tenant import Tenant, TenantCreate, TenantUpdate
from app.errors import NotFoundError

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("", response_model=Tenant, status_code=status.HTTP_201_CREATED)
def create_new_tenant(
    tenant_data: TenantCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new tenant.
    """
    tenant = tenant_repo.create_tenant(db, **tenant_data.model_dump())
    return Tenant.model_validate(tenant)


@router.get("", response_model=PaginatedResponse[Tenant])
def get_all_tenants(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    name: str | None = Query(None, description="Filter tenants by first or last name (partial match)"),
    db: Session = Depends(get_db),
):
    """
    Get all tenants with pagination, ordered by last name.
    """
    tenants, total = tenant_repo.get_all_tenants_paginated(
        db, page=page, page_size=page_size, name=name
    )
    return PaginatedResponse(
        items=[Tenant.model_validate(tenant) for tenant in tenants],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{tenant_id}", response_model=Tenant)
def get_tenant_by_id(
    tenant_id: int,
    db: Session = Depends(get_db),
):
    """
    Get a tenant by ID.
    """
    tenant = tenant_repo.get_tenant_by_id(db, tenant_id)
    if not tenant:
        raise NotFoundError("Tenant not found")
    return Tenant.model_validate(tenant)


@router.put("/{tenant_id}", response_model=Tenant)
def update_tenant_by_id(
    tenant_id: int,
    tenant_data: TenantUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a tenant. Fields not included in the request are not updated.
    """
    update_data = tenant_data.model_dump(exclude_unset=True)
    tenant = tenant_repo.update_tenant(db, tenant_id=tenant_id, **update_data)
    return Tenant.model_validate(tenant)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tenant_by_id(
    tenant_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete a tenant by ID.

    A tenant can only be deleted if they are not on any lease.
    """
    delete_tenant(db, tenant_id)
