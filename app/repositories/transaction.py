from datetime import date
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.transaction import Transaction as TransactionModel
from app.errors import NotFoundError


def get_transaction_by_id(db: Session, transaction_id: int) -> TransactionModel | None:
    """Get a transaction by ID."""
    return db.query(TransactionModel).filter(TransactionModel.id == transaction_id).first()


def get_transactions_by_property_id(db: Session, property_id: int) -> list[TransactionModel]:
    """Get all transactions for a specific property."""
    return db.query(TransactionModel).filter(TransactionModel.property_id == property_id).all()


def get_transactions_by_lease_id(db: Session, lease_id: int) -> list[TransactionModel]:
    """Get all transactions for a specific lease."""
    return db.query(TransactionModel).filter(TransactionModel.lease_id == lease_id).all()


def _filtered(
    db: Session,
    property_id: int | None = None,
    lease_id: int | None = None,
    transaction_type: str | None = None,
    category: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
):
    query = db.query(TransactionModel)
    if property_id is not None:
        query = query.filter(TransactionModel.property_id == property_id)
    if lease_id is not None:
        query = query.filter(TransactionModel.lease_id == lease_id)
    if transaction_type is not None:
        query = query.filter(TransactionModel.transaction_type == transaction_type)
    if category is not None:
        query = query.filter(TransactionModel.category == category)
    if date_from is not None:
        query = query.filter(TransactionModel.transaction_date >= date_from)
    if date_to is not None:
        query = query.filter(TransactionModel.transaction_date <= date_to)
    return query


def get_all_transactions_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    property_id: int | None = None,
    lease_id: int | None = None,
    transaction_type: str | None = None,
    category: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> tuple[list[TransactionModel], int]:
    """
    Get transactions with pagination and optional filters, newest first.

    date_from and date_to are inclusive.

    Returns:
        Tuple of (list of transactions, total count)
    """
    query = _filtered(
        db,
        property_id=property_id,
        lease_id=lease_id,
        transaction_type=transaction_type,
        category=category,
        date_from=date_from,
        date_to=date_to,
    )

    total = query.count()
    skip = (page - 1) * page_size
    transactions = (
        query.order_by(TransactionModel.transaction_date.desc(), TransactionModel.id.desc())
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return transactions, total


def get_totals_by_type_and_category(
    db: Session,
    property_id: int,
    currency: str,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[tuple[str, str, Decimal, int]]:
    """Sum a property's transactions in one currency per (transaction_type, category)."""
    query = (
        _filtered(db, property_id=property_id, date_from=date_from, date_to=date_to)
        .filter(TransactionModel.currency == currency)
        .with_entities(
            TransactionModel.transaction_type,
            TransactionModel.category,
            func.sum(TransactionModel.amount),
            func.count(TransactionModel.id),
        )
        .group_by(TransactionModel.transaction_type, TransactionModel.category)
    )
    return [(row[0], row[1], Decimal(str(row[2])), row[3]) for row in query.all()]


def count_other_currency_transactions(
    db: Session,
    property_id: int,
    currency: str,
    date_from: date | None = None,
    date_to: date | None = None,
) -> int:
    """Count a property's transactions recorded in a currency other than the given one."""
    return (
        _filtered(db, property_id=property_id, date_from=date_from, date_to=date_to)
        .filter(TransactionModel.currency != currency)
        .count()
    )


def create_transaction(db: Session, **fields) -> TransactionModel:
    """Create a new transaction in the database. Pure data access - no business logic."""
    db_transaction = TransactionModel(**fields)
    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def update_transaction(db: Session, transaction_id: int, **kwargs) -> TransactionModel:
    """
    Update a transaction. Only updates fields that are explicitly provided.

    To clear lease_id, description or notes, explicitly pass it with None value.
    """
    db_transaction = get_transaction_by_id(db, transaction_id)
    if not db_transaction:
        raise NotFoundError("Transaction not found")

    for name, value in kwargs.items():
        setattr(db_transaction, name, value)

    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def delete_transaction(db: Session, transaction_id: int) -> None:
    """Delete a transaction from the database. Pure data access - no business logic."""
    db_transaction = get_transaction_by_id(db, transaction_id)
    if not db_transaction:
        raise NotFoundError("Transaction not found")

    db.delete(db_transaction)
    db.commit()
