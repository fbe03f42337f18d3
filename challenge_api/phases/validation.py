"""Check caller-supplied phase references against the phase catalog."""

from typing import Mapping, Sequence

from .exceptions import InvalidPhaseReferenceError
from .schemas import PhaseDefinition, PhaseOverride


def validate_phase_references(
    phases: Sequence[PhaseOverride] | None,
    phase_definitions: Mapping[str, PhaseDefinition],
) -> None:
    """Raise InvalidPhaseReferenceError naming every unknown phase id."""
    if not phases:
        return
    invalid: list[str] = []
    for phase in phases:
        if phase.phase_id not in phase_definitions and phase.phase_id not in invalid:
            invalid.append(phase.phase_id)
    if invalid:
        raise InvalidPhaseReferenceError(invalid)
