"""Shared schemas module.

Contains the base schema configuration and the RFC 7807 error body.
"""

from challenge_api.shared.schemas.base import (
    BaseSchema,
    ChallengeStatus,
    ErrorDetail,
)

__all__ = [
    "BaseSchema",
    "ChallengeStatus",
    "ErrorDetail",
]
