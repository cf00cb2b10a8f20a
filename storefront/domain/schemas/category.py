"""Pydantic schemas for Category lookup."""

from pydantic import Field, field_validator

from storefront.domain.schemas.common import ReadModel, RequestModel


class CategoryCreate(RequestModel):
    description: str = Field(min_length=1, max_length=100)

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, value):
        return value.strip() if isinstance(value, str) else value


class CategoryRead(ReadModel):
    id: str
    description: str
