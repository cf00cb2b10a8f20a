"""Shared schema bases and the pagination block."""

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReadModel(BaseModel):
    """Outbound projection: read from ORM attributes, serialized in camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class RequestModel(BaseModel):
    """Inbound payload: accepts camelCase keys (and snake_case field names)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Pagination(ReadModel):
    current: int
    total: int
    count: int
    total_records: int

    @classmethod
    def build(cls, page: int, limit: int, count: int, total_records: int) -> "Pagination":
        return cls(
            current=page,
            total=(total_records + limit - 1) // limit,
            count=count,
            total_records=total_records,
        )
