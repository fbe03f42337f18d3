"""Base schemas and common types used across the API."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ===========================================
# ENUMS
# ===========================================


class ChallengeStatus(str, Enum):
    """Lifecycle status of a challenge record."""

    NEW = "New"
    DRAFT = "Draft"
    APPROVED = "Approved"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    DELETED = "Deleted"
    CANCELLED = "Cancelled"


# ===========================================
# BASE SCHEMA
# ===========================================


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Attributes are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
        alias_generator=to_camel,
    )


# ===========================================
# ERROR RESPONSES
# ===========================================


class ErrorDetail(BaseSchema):
    """RFC 7807 Problem Details format."""

    type: str = Field(description="URI reference identifying the problem type")
    title: str = Field(description="Short, human-readable summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(description="Human-readable explanation")
    instance: str | None = Field(default=None, description="URI reference for this occurrence")
    errors: list[dict[str, Any]] | None = Field(
        default=None, description="Additional error details"
    )
