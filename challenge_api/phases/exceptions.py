"""Custom exceptions for the phase timeline engine.

Two kinds of failure exist: lookups that miss in the catalog stores
(``*_not_found``) and caller input the engine refuses (everything else).
Neither kind is retried.
"""

from fastapi import HTTPException, status

from challenge_api.shared.schemas.base import ErrorDetail


class PhaseEngineError(Exception):
    """Base exception for phase timeline engine errors."""

    def __init__(self, message: str, error_type: str = "phase_engine_error"):
        self.message = message
        self.error_type = error_type
        super().__init__(message)


class PhaseDefinitionNotFoundError(PhaseEngineError):
    """Raised when a phase definition id is absent from the catalog."""

    def __init__(self, phase_id: str):
        super().__init__(
            f"Phase definition '{phase_id}' not found",
            "phase_definition_not_found",
        )
        self.phase_id = phase_id


class TimelineTemplateNotFoundError(PhaseEngineError):
    """Raised when a timeline template id is absent from the store."""

    def __init__(self, template_id: str):
        super().__init__(
            f"Timeline template '{template_id}' not found",
            "timeline_template_not_found",
        )
        self.template_id = template_id


class MissingTimelineTemplateError(PhaseEngineError):
    """Raised when no timeline template id was supplied."""

    def __init__(self, template_id: str | None = None):
        super().__init__(
            f"Invalid timeline template ID: {template_id}",
            "missing_timeline_template",
        )


class InactiveTimelineTemplateError(PhaseEngineError):
    """Raised when the requested timeline template is not active."""

    def __init__(self, template_id: str):
        super().__init__(
            f"Timeline template '{template_id}' is inactive",
            "inactive_timeline_template",
        )
        self.template_id = template_id


class InvalidTimelineTemplateError(PhaseEngineError):
    """Raised when a template's predecessor graph cannot be ordered."""

    def __init__(self, template_id: str, reason: str):
        super().__init__(
            f"Timeline template '{template_id}' is invalid: {reason}",
            "invalid_timeline_template",
        )
        self.template_id = template_id
        self.reason = reason


class InvalidPhaseGraphError(PhaseEngineError):
    """Raised when a phase list's predecessor edges cannot be ordered."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid phase graph: {reason}", "invalid_phase_graph")
        self.reason = reason


class InvalidPhaseReferenceError(PhaseEngineError):
    """Raised when caller-supplied phases reference unknown phase ids."""

    def __init__(self, phase_ids: list[str]):
        super().__init__(
            f"The following phases are invalid: {', '.join(phase_ids)}",
            "invalid_phase_reference",
        )
        self.phase_ids = phase_ids


def raise_http_exception(error: PhaseEngineError) -> None:
    """Convert PhaseEngineError to HTTPException."""
    status_map = {
        "phase_definition_not_found": status.HTTP_404_NOT_FOUND,
        "timeline_template_not_found": status.HTTP_404_NOT_FOUND,
        "missing_timeline_template": status.HTTP_400_BAD_REQUEST,
        "inactive_timeline_template": status.HTTP_400_BAD_REQUEST,
        "invalid_timeline_template": status.HTTP_400_BAD_REQUEST,
        "invalid_phase_graph": status.HTTP_400_BAD_REQUEST,
        "invalid_phase_reference": status.HTTP_400_BAD_REQUEST,
        "phase_engine_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }
    status_code = status_map.get(error.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)

    raise HTTPException(
        status_code=status_code,
        detail=ErrorDetail(
            type=f"https://api.challenges.example/errors/{error.error_type}",
            title=error.error_type.replace("_", " ").title(),
            status=status_code,
            detail=error.message,
        ).model_dump(exclude_none=True),
    )
