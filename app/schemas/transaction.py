from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCategory(str, Enum):
    RENT = "rent"
    UTILITIES = "utilities"
    MAINTENANCE = "maintenance"
    PROPERTY_TAX = "property_tax"
    INSURANCE = "insurance"
    MANAGEMENT_FEE = "management_fee"
    DEPOSIT = "deposit"
    LEGAL = "legal"
    OTHER = "other"


class Transaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    lease_id: int | None = None
    transaction_date: date
    amount: Decimal
    currency: str
    transaction_type: TransactionType
    category: TransactionCategory
    description: str | None = None
    notes: str | None = None
    created_at: datetime | None = None


class TransactionCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    property_id: int
    lease_id: int | None = Field(None, description="Lease the transaction belongs to (same property)")
    transaction_date: date
    amount: Decimal = Field(..., gt=0, description="Always positive; transaction_type gives the direction")
    currency: str | None = Field(
        None, pattern=r"^[A-Z]{3}$", description="Defaults to the property's currency"
    )
    transaction_type: TransactionType
    category: TransactionCategory = TransactionCategory.OTHER
    description: str | None = Field(None, max_length=255)
    notes: str | None = None


class TransactionUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    property_id: int | None = None
    lease_id: int | None = None
    transaction_date: date | None = None
    amount: Decimal | None = Field(None, gt=0)
    currency: str | None = Field(None, pattern=r"^[A-Z]{3}$")
    transaction_type: TransactionType | None = None
    category: TransactionCategory | None = None
    description: str | None = Field(None, max_length=255)
    notes: str | None = None

    @model_validator(mode="after")
    def validate_required_fields_not_cleared(self):
        """Only lease_id, description and notes may be cleared with an explicit null."""
        for name in (
            "property_id",
            "transaction_date",
            "amount",
            "currency",
            "transaction_type",
            "category",
        ):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class FinancialSummary(BaseModel):
    """Income and expense totals of a property, in the property's currency."""

    property_id: int
    currency: str
    date_from: date | None = None
    date_to: date | None = None
    total_income: Decimal
    total_expenses: Decimal
    cash_flow: Decimal
    income_by_category: dict[TransactionCategory, Decimal]
    expenses_by_category: dict[TransactionCategory, Decimal]
    transaction_count: int
    other_currency_count: int = Field(
        0, description="Transactions in another currency, left out of the totals"
    )
