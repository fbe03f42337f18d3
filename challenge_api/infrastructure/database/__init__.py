"""Database infrastructure package."""

from challenge_api.infrastructure.database.models import (
    Base,
    PhaseDefinitionRecord,
    TimelineTemplateRecord,
)
from challenge_api.infrastructure.database.session import (
    close_db,
    get_db_session,
)

__all__ = [
    "Base",
    "PhaseDefinitionRecord",
    "TimelineTemplateRecord",
    "close_db",
    "get_db_session",
]
