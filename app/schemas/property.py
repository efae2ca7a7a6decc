from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    DUPLEX = "duplex"
    CONDO = "condo"
    COMMERCIAL = "commercial"


class Property(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    property_type: PropertyType | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    size: Decimal | None = None
    currency: str
    purchase_price: Decimal | None = None
    notes: str | None = None
    created_at: datetime | None = None


class PropertyCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=255)
    property_type: PropertyType | None = None
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    size: Decimal | None = Field(None, ge=0)
    currency: str = Field("USD", pattern=r"^[A-Z]{3}$")
    purchase_price: Decimal | None = Field(None, ge=0)
    notes: str | None = None


class PropertyUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str | None = Field(None, min_length=1, max_length=255)
    property_type: PropertyType | None = None
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    size: Decimal | None = Field(None, ge=0)
    currency: str | None = Field(None, pattern=r"^[A-Z]{3}$")
    purchase_price: Decimal | None = Field(None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def validate_required_fields_not_cleared(self):
        """Ensure title and currency are never set to null."""
        for name in ("title", "currency"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
