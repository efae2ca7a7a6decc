from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class Tenant(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    created_at: datetime | None = None


class TenantCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    notes: str | None = None


class TenantUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=255)
    last_name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    notes: str | None = None

    @model_validator(mode="after")
    def validate_names_not_cleared(self):
        """Ensure first_name and last_name are never set to null."""
        for name in ("first_name", "last_name"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
