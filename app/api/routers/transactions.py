from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.services.transaction import (
    create_transaction,
    delete_transaction,
    update_transaction,
)
import app.repositories.transaction as transaction_repo
from app.schemas.transaction import (
    Transaction,
    TransactionCategory,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
)
from app.schemas.pagination import PaginatedResponse
from app.errors import NotFoundError

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
def create_new_transaction(
    transaction_data: TransactionCreate,
    db: Session = Depends(get_db),
):
    """
    Record an income or expense for a property.

    When lease_id is given the lease must belong to the same property.
    The currency defaults to the property's currency.
    """
    transaction = create_transaction(db, **transaction_data.model_dump())
    return Transaction.model_validate(transaction)


@router.get("", response_model=PaginatedResponse[Transaction])
def get_all_transactions(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    property: int | None = Query(None, description="Filter transactions by property ID"),
    lease: int | None = Query(None, description="Filter transactions by lease ID"),
    transaction_type: TransactionType | None = Query(None, description="income or expense"),
    category: TransactionCategory | None = Query(None, description="Filter by category"),
    date_from: date | None = Query(None, description="Earliest transaction date (inclusive)"),
    date_to: date | None = Query(None, description="Latest transaction date (inclusive)"),
    db: Session = Depends(get_db),
):
    """
    Get all transactions with pagination and optional filters, newest first.
    """
    transactions, total = transaction_repo.get_all_transactions_paginated(
        db,
        page=page,
        page_size=page_size,
        property_id=property,
        lease_id=lease,
        transaction_type=transaction_type.value if transaction_type else None,
        category=category.value if category else None,
        date_from=date_from,
        date_to=date_to,
    )
    return PaginatedResponse(
        items=[Transaction.model_validate(t) for t in transactions],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction_by_id(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """
    Get a transaction by ID.
    """
    transaction = transaction_repo.get_transaction_by_id(db, transaction_id)
    if not transaction:
        raise NotFoundError("Transaction not found")
    return Transaction.model_validate(transaction)


@router.put("/{transaction_id}", response_model=Transaction)
def update_transaction_by_id(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a transaction.

    Fields not included in the request are not updated.
    To clear lease_id, description or notes, explicitly include it with null value.
    """
    update_data = transaction_data.model_dump(exclude_unset=True)
    transaction = update_transaction(db, transaction_id=transaction_id, **update_data)
    return Transaction.model_validate(transaction)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction_by_id(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete a transaction by ID.
    """
    delete_transaction(db, transaction_id)
