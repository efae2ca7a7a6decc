from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_today
from app.services.lease import get_property_lease_summary
from app.services.property import delete_property
from app.services.transaction import get_financial_summary
import app.repositories.property as property_repo
from app.schemas.lease import PropertyLeaseSummary
from app.schemas.transaction import FinancialSummary
from app.schemas.pagination import PaginatedResponse
from app.schemas.property import Property, PropertyCreate, PropertyUpdate
from app.errors import NotFoundError

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=Property, status_code=status.HTTP_201_CREATED)
def create_new_property(
    property_data: PropertyCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new property.
    """
    db_property = property_repo.create_property(db, **property_data.model_dump())
    return Property.model_validate(db_property)


@router.get("", response_model=PaginatedResponse[Property])
def get_all_properties(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    title: str | None = Query(None, description="Filter properties by title (partial match)"),
    db: Session = Depends(get_db),
):
    """
    Get all properties with pagination and an optional title filter.
    """
    properties, total = property_repo.get_all_properties_paginated(
        db, page=page, page_size=page_size, title=title
    )
    return PaginatedResponse(
        items=[Property.model_validate(p) for p in properties],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{property_id}", response_model=Property)
def get_property_by_id(
    property_id: int,
    db: Session = Depends(get_db),
):
    """
    Get a property by ID.
    """
    db_property = property_repo.get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError("Property not found")
    return Property.model_validate(db_property)


@router.get("/{property_id}/lease-summary", response_model=PropertyLeaseSummary)
def get_property_lease_summary_by_id(
    property_id: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Get the current lease (status, progress, next payment), past leases and
    occupancy of a property.
    """
    return get_property_lease_summary(db, property_id, today)


@router.get("/{property_id}/financial-summary", response_model=FinancialSummary)
def get_property_financial_summary(
    property_id: int,
    date_from: date | None = Query(None, description="Earliest transaction date (inclusive)"),
    date_to: date | None = Query(None, description="Latest transaction date (inclusive)"),
    db: Session = Depends(get_db),
):
    """
    Get total income, total expenses and cash flow of a property, with
    per-category totals, optionally limited to a date range.
    """
    return get_financial_summary(db, property_id, date_from=date_from, date_to=date_to)


@router.put("/{property_id}", response_model=Property)
def update_property_by_id(
    property_id: int,
    property_data: PropertyUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a property.

    Fields not included in the request are not updated.
    """
    update_data = property_data.model_dump(exclude_unset=True)
    db_property = property_repo.update_property(db, property_id=property_id, **update_data)
    return Property.model_validate(db_property)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_property_by_id(
    property_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete a property by ID.

    A property can only be deleted if it doesn't have any leases.
    """
    delete_property(db, property_id)
