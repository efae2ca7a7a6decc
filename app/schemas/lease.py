from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.lease_lifecycle import DateRangeError, LeaseStatus, PaymentFrequency
from app.schemas.tenant import Tenant, TenantCreate


class Lease(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    tenant_id: int | None = None
    lease_start: date
    lease_end: date
    rent_amount: Decimal
    currency: str
    security_deposit: Decimal
    payment_frequency: PaymentFrequency
    payment_due_day: int | None = None
    terminated_on: date | None = None
    tenant: Tenant | None = None


class LeaseCreate(BaseModel):
    property_id: int
    tenant_id: int | None = None
    tenant: TenantCreate | None = Field(
        None, description="Create the tenant together with the lease (instead of tenant_id)"
    )
    lease_start: date
    lease_end: date
    rent_amount: Decimal = Field(..., ge=0)
    currency: str = Field("USD", pattern=r"^[A-Z]{3}$")
    security_deposit: Decimal = Field(Decimal("0"), ge=0)
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    payment_due_day: int | None = Field(None, ge=1, le=31, description="Day of month rent is due (monthly leases)")

    @model_validator(mode="after")
    def validate_single_tenant_source(self):
        """Ensure tenant_id and an inline tenant are not both given."""
        if self.tenant_id is not None and self.tenant is not None:
            raise ValueError("Provide either tenant_id or tenant, not both")
        return self


class LeaseUpdate(BaseModel):
    property_id: int | None = None
    tenant_id: int | None = None
    lease_start: date | None = None
    lease_end: date | None = None
    rent_amount: Decimal | None = Field(None, ge=0)
    currency: str | None = Field(None, pattern=r"^[A-Z]{3}$")
    security_deposit: Decimal | None = Field(None, ge=0)
    payment_frequency: PaymentFrequency | None = None
    payment_due_day: int | None = Field(None, ge=1, le=31)

    @model_validator(mode="after")
    def validate_required_fields_not_cleared(self):
        """Only tenant_id and payment_due_day may be cleared with an explicit null."""
        for name in (
            "property_id",
            "lease_start",
            "lease_end",
            "rent_amount",
            "currency",
            "security_deposit",
            "payment_frequency",
        ):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class LeaseTerminate(BaseModel):
    terminated_on: date


class LeaseProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_days: int
    elapsed_days: int
    percent: float
    days_remaining: int


class LeaseOverview(BaseModel):
    lease: Lease
    status: LeaseStatus
    progress: LeaseProgress
    next_payment_date: date | None = None
    as_of: date


class PropertyLeaseSummary(BaseModel):
    property_id: int
    occupancy: Literal["occupied", "vacant"]
    current: LeaseOverview | None = None
    past_leases: list[Lease]
    as_of: date


class DateRangeCheck(BaseModel):
    """Raw form input; dates are strings so unparseable values reach the check."""

    lease_start: str | None = None
    lease_end: str | None = None


class DateRangeCheckResult(BaseModel):
    valid: bool
    error: DateRangeError | None = None
    detail: str | None = None
