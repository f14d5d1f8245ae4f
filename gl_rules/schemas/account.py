"""
Pydantic schemas for GL account operations.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class AccountCreate(BaseModel):
    """Request to create a GL account."""
    name: str = Field(min_length=1, max_length=255)
    external_id: str = Field(min_length=1, max_length=100)

    @field_validator("name", "external_id")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class AccountUpdate(BaseModel):
    """Partial update. Omitted fields are left alone."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    external_id: str | None = Field(default=None, min_length=1, max_length=100)

    @field_validator("name", "external_id")
    @classmethod
    def must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class AccountResponse(BaseModel):
    id: int
    name: str
    external_id: str
    deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ExternalIdCheckResponse(BaseModel):
    external_id: str
    exists: bool
