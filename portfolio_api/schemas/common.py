"""Common schema utilities and base classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are declared in snake_case and serialized in camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class RecordSchema(BaseSchema):
    """Immutable record decoded from a sheet."""

    model_config = ConfigDict(frozen=True)


class MessageResponse(BaseSchema):
    """Simple message response."""

    message: str
