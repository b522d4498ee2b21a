"""Shared pydantic base for records persisted in the JSON document."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """snake_case attributes in Python, camelCase keys on disk and on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def resolve_field(cls, name: str) -> str | None:
        """Map an attribute name or its camelCase alias to the attribute name."""
        if name in cls.model_fields:
            return name
        for field_name, info in cls.model_fields.items():
            if info.alias == name:
                return field_name
        return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO 8601 timestamp; unparsable values sort as the epoch."""
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    # Naive values are read as UTC so they compare with aware ones.
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
