"""Pydantic v2 schemas for phase definitions, timeline templates and phase instances."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from challenge_api.shared.schemas.base import BaseSchema, ChallengeStatus
from challenge_api.shared.utils.datetime_utils import ensure_utc


def _to_utc(value: datetime | None) -> datetime | None:
    return ensure_utc(value) if value is not None else None


# ===========================================
# CATALOG REFERENCE DATA
# ===========================================


class PhaseDefinition(BaseSchema):
    """Canonical catalog entry for a kind of competition phase."""

    id: str
    name: str
    description: str | None = None


class TimelineTemplateEntry(BaseSchema):
    """One node of a timeline template's phase graph."""

    phase_id: str
    predecessor: str | None = None
    default_duration: int = Field(ge=0, description="Default duration in seconds")


class TimelineTemplate(BaseSchema):
    """Named, reusable schedule blueprint."""

    id: str
    name: str
    description: str | None = None
    is_active: bool = True
    phases: list[TimelineTemplateEntry] = Field(default_factory=list)


# ===========================================
# PHASE INSTANCES
# ===========================================


class PhaseConstraint(BaseSchema):
    """Caller-supplied constraint attached to a phase, passed through untouched."""

    name: str
    value: Any


class PhaseOverride(BaseSchema):
    """Partial phase data supplied by a caller when creating or editing a challenge."""

    phase_id: str
    duration: int | None = Field(default=None, ge=0)
    constraints: list[PhaseConstraint] | None = None
    scheduled_start_date: datetime | None = None

    @field_validator("scheduled_start_date")
    @classmethod
    def normalise_start(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)


class PhaseInstance(BaseSchema):
    """A concrete, dated phase belonging to one challenge."""

    id: str
    phase_id: str
    name: str
    description: str | None = None
    duration: int = Field(ge=0)
    is_open: bool = False
    predecessor: str | None = None
    constraints: list[PhaseConstraint] = Field(default_factory=list)
    scheduled_start_date: datetime | None = None
    scheduled_end_date: datetime | None = None
    actual_start_date: datetime | None = None
    actual_end_date: datetime | None = None

    @field_validator(
        "scheduled_start_date",
        "scheduled_end_date",
        "actual_start_date",
        "actual_end_date",
    )
    @classmethod
    def normalise_dates(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)

    @property
    def has_started(self) -> bool:
        return self.actual_start_date is not None

    @property
    def has_ended(self) -> bool:
        return self.actual_end_date is not None


# ===========================================
# API PAYLOADS
# ===========================================


class PopulatePhasesRequest(BaseSchema):
    """Request to compute the phase list of a new challenge."""

    timeline_template_id: str | None = None
    start_date: datetime | None = None
    phases: list[PhaseOverride] = Field(default_factory=list)


class ReconcilePhasesRequest(BaseSchema):
    """Request to recompute the phase list of an existing challenge.

    ``is_being_activated`` may be given directly, or derived from a
    ``previous_status`` -> ``status`` transition into Active.
    """

    timeline_template_id: str | None = None
    previous_timeline_template_id: str | None = None
    start_date: datetime | None = None
    existing_phases: list[PhaseInstance] = Field(default_factory=list)
    phases: list[PhaseOverride] = Field(default_factory=list)
    is_being_activated: bool | None = None
    status: ChallengeStatus | None = None
    previous_status: ChallengeStatus | None = None

    def activation_requested(self) -> bool:
        if self.is_being_activated is not None:
            return self.is_being_activated
        return (
            self.status == ChallengeStatus.ACTIVE.value
            and self.previous_status != ChallengeStatus.ACTIVE.value
        )


class CancelPhasesRequest(BaseSchema):
    """Request to close out the phases of a cancelled challenge."""

    phases: list[PhaseInstance] = Field(default_factory=list)


class ValidatePhasesRequest(BaseSchema):
    """Request to check phase references against the catalog."""

    phases: list[PhaseOverride] = Field(default_factory=list)


class PhaseListResponse(BaseSchema):
    """A computed phase list."""

    phases: list[PhaseInstance]
