"""
Pydantic schemas for reference option endpoints.

Input models enforce presence and length limits before anything reaches the
service layer; violations surface as 422 responses.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from ..models.options import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH

OptionId = int | str


def _not_blank(v: str | None) -> str | None:
    if v is not None and not v.strip():
        raise ValueError("name cannot be blank")
    return v


class OptionCreate(BaseModel):
    """Request schema for creating an option."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Display name, unique among active options of the same kind",
        examples=["Open tender", "Female"],
    )
    description: str = Field(..., max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v)


class OptionUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v)


class OptionBulkUpdateItem(OptionUpdate):
    id: OptionId


class OptionIdList(BaseModel):
    ids: list[OptionId] = Field(..., min_length=1)


class OptionOut(BaseModel):
    id: OptionId
    kind: str
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime | None
    deleted_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "OptionOut":
        return cls(
            id=record.id,
            kind=record.option_kind.slug,
            name=record.name,
            description=record.description,
            created_at=record.created_at,
            updated_at=record.updated_at,
            deleted_at=record.deleted_at,
        )


class OptionKindOut(BaseModel):
    kind: str
    label: str
    table: str
    id_type: str
    id_prefix: str | None
