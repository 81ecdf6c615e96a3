"""Base schema for camelCase wire models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx raised from the domain error taxonomy."""

    error: str
    message: str
    missingFields: list[str] | None = Field(  # noqa: N815
        default=None,
        description=(
            "Request keys of the blank required fields, e.g. dotNumber. "
            "The human-readable labels appear only in message."
        ),
    )
    details: str | None = None
