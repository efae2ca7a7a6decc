"""Property transactions: lease/property consistency and the income/expense summary."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

import app.repositories.lease as lease_repo
import app.repositories.property as property_repo
import app.repositories.transaction as transaction_repo
from app.db.models.transaction import Transaction as TransactionModel
from app.errors import DomainValidationError, NotFoundError
from app.schemas.transaction import FinancialSummary, TransactionCategory, TransactionType

logger = logging.getLogger(__name__)


def _require_lease_on_property(db: Session, lease_id: int, property_id: int) -> None:
    lease = lease_repo.get_lease_by_id(db, lease_id)
    if not lease:
        raise NotFoundError(f"Lease with id {lease_id} not found")
    if lease.property_id != property_id:
        raise DomainValidationError(
            f"Lease {lease_id} belongs to property {lease.property_id}, not {property_id}"
        )


def _require_valid_period(date_from: date | None, date_to: date | None) -> None:
    if date_from is not None and date_to is not None and date_from > date_to:
        raise DomainValidationError(
            f"date_from ({date_from}) must not be after date_to ({date_to})"
        )


def create_transaction(
    db: Session,
    property_id: int,
    transaction_date: date,
    amount: Decimal,
    transaction_type: str,
    category: str = TransactionCategory.OTHER.value,
    currency: str | None = None,
    lease_id: int | None = None,
    description: str | None = None,
    notes: str | None = None,
) -> TransactionModel:
    """
    Record an income or expense for a property.

    - Validates property exists
    - Validates the lease exists and belongs to the same property, if given
    - Uses the property's currency when none is given

    Raises:
        NotFoundError: If property or lease doesn't exist
        DomainValidationError: If the lease belongs to another property
    """
    db_property = property_repo.get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError(f"Property with id {property_id} not found")

    if lease_id is not None:
        _require_lease_on_property(db, lease_id, property_id)

    transaction = transaction_repo.create_transaction(
        db,
        property_id=property_id,
        lease_id=lease_id,
        transaction_date=transaction_date,
        amount=amount,
        currency=currency or db_property.currency,
        transaction_type=TransactionType(transaction_type).value,
        category=TransactionCategory(category).value,
        description=description,
        notes=notes,
    )
    logger.info(
        "Recorded %s %s %s for property %s",
        transaction.transaction_type,
        transaction.amount,
        transaction.currency,
        property_id,
    )
    return transaction


def update_transaction(db: Session, transaction_id: int, **update_fields) -> TransactionModel:
    """
    Update a transaction with business logic validation.

    The lease/property pairing is revalidated when either side changes.
    To clear lease_id, description or notes, explicitly include it with None value.
    """
    existing = transaction_repo.get_transaction_by_id(db, transaction_id)
    if not existing:
        raise NotFoundError("Transaction not found")

    final_property_id = update_fields.get("property_id") or existing.property_id
    if "lease_id" in update_fields:
        final_lease_id = update_fields["lease_id"]
    else:
        final_lease_id = existing.lease_id

    if final_property_id != existing.property_id:
        if not property_repo.get_property_by_id(db, final_property_id):
            raise NotFoundError(f"Property with id {final_property_id} not found")

    if final_lease_id is not None and (
        final_property_id != existing.property_id or final_lease_id != existing.lease_id
    ):
        _require_lease_on_property(db, final_lease_id, final_property_id)

    transaction = transaction_repo.update_transaction(
        db, transaction_id=transaction_id, **update_fields
    )
    logger.info("Updated transaction %s (%s)", transaction_id, ", ".join(sorted(update_fields)))
    return transaction


def delete_transaction(db: Session, transaction_id: int) -> None:
    """Delete a transaction. Raises NotFoundError if it doesn't exist."""
    transaction_repo.delete_transaction(db, transaction_id)
    logger.info("Deleted transaction %s", transaction_id)


def get_financial_summary(
    db: Session,
    property_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
) -> FinancialSummary:
    """
    Total income, total expenses and cash flow of a property, per category.

    Amounts are summed in the property's currency. Transactions recorded in
    another currency are counted in other_currency_count and left out of
    the totals.

    Raises:
        NotFoundError: If property doesn't exist
        DomainValidationError: If date_from is after date_to
    """
    _require_valid_period(date_from, date_to)

    db_property = property_repo.get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError("Property not found")

    income_by_category: dict[TransactionCategory, Decimal] = {}
    expenses_by_category: dict[TransactionCategory, Decimal] = {}
    transaction_count = 0

    rows = transaction_repo.get_totals_by_type_and_category(
        db, property_id, db_property.currency, date_from=date_from, date_to=date_to
    )
    for transaction_type, category, total, count in rows:
        bucket = (
            income_by_category
            if transaction_type == TransactionType.INCOME.value
            else expenses_by_category
        )
        bucket[TransactionCategory(category)] = total
        transaction_count += count

    total_income = sum(income_by_category.values(), Decimal("0"))
    total_expenses = sum(expenses_by_category.values(), Decimal("0"))

    return FinancialSummary(
        property_id=property_id,
        currency=db_property.currency,
        date_from=date_from,
        date_to=date_to,
        total_income=total_income,
        total_expenses=total_expenses,
        cash_flow=total_income - total_expenses,
        income_by_category=income_by_category,
        expenses_by_category=expenses_by_category,
        transaction_count=transaction_count,
        other_currency_count=transaction_repo.count_other_currency_transactions(
            db, property_id, db_property.currency, date_from=date_from, date_to=date_to
        ),
    )
