"""Shared schema base for records persisted in client storage."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model stored and served with the dashboard's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> dict:  # type: ignore[type-arg]
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
