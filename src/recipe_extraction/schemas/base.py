"""Base schema configuration for all Pydantic models.

Usage:
    - APIRequest: incoming API request bodies
    - APIResponse: outgoing API response bodies (and the canonical recipe)
    - DownstreamRequest: payloads sent to external services
    - DownstreamResponse: payloads received from oEmbed and AI providers
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        validate_assignment=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas.

    Unknown properties are ignored so clients can send extra fields.
    """

    model_config = ConfigDict(extra="ignore")


class APIResponse(_BaseSchema):
    """Base class for outgoing API response schemas.

    Extra fields are forbidden; only declared properties are returned.
    """

    model_config = ConfigDict(extra="forbid")


class DownstreamResponse(_BaseSchema):
    """Base class for responses received from external services.

    Upstream services may add properties at any time, so extras are ignored.
    """

    model_config = ConfigDict(extra="ignore")


class DownstreamRequest(_BaseSchema):
    """Base class for requests sent to external services.

    Extra fields are forbidden; we only send what we intend to send.
    """

    model_config = ConfigDict(extra="forbid")
