"""Reschedule the phases of an existing challenge.

Re-runs root anchoring and chain propagation over a previously computed
phase list while respecting what has already happened:

* a phase with an actual end date is frozen entirely;
* a phase with an actual start date keeps its start, but its end follows
  duration changes;
* on activation, root phases whose start is already due open immediately.

Only the first Iterative Review phase is re-anchored to its predecessor.
Later occurrences belong to the real-time phase advancer.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Mapping, Sequence

from challenge_api.shared.utils.datetime_utils import add_seconds, ensure_utc
from challenge_api.shared.utils.logging import get_logger

from .catalog import ResolvedTemplate
from .ordering import first_index_by_phase_id, topological_order
from .scheduler import DEFAULT_ROOT_STAGGER, ITERATIVE_REVIEW, stagger_root_start
from .schemas import PhaseDefinition, PhaseInstance, PhaseOverride

logger = get_logger(__name__)


def _reanchor_roots(
    phases: list[PhaseInstance],
    template: ResolvedTemplate,
    phase_definitions: Mapping[str, PhaseDefinition],
    overrides: Mapping[str, PhaseOverride],
    is_being_activated: bool,
    now: datetime,
    start_date: datetime | None,
    stagger: timedelta,
) -> None:
    fixed_start: datetime | None = None

    for phase in phases:
        entry = template.by_phase_id.get(phase.phase_id)
        if entry is not None:
            phase.predecessor = entry.predecessor
        definition = phase_definitions.get(phase.phase_id)
        if definition is not None:
            phase.description = definition.description

        override = overrides.get(phase.phase_id)
        if override is not None and override.duration is not None and not phase.has_ended:
            phase.duration = override.duration

        if phase.predecessor is None:
            candidate = (
                (override.scheduled_start_date if override is not None else None)
                or phase.scheduled_start_date
                or start_date
                or (now if is_being_activated else None)
            )
            if candidate is not None:
                candidate = stagger_root_start(ensure_utc(candidate), fixed_start, stagger)
                if (
                    is_being_activated
                    and candidate <= now
                    and not phase.has_started
                    and not phase.has_ended
                ):
                    phase.is_open = True
                    phase.scheduled_start_date = now
                    phase.actual_start_date = now
                    logger.info("phase_opened_on_activation", phase_id=phase.phase_id, name=phase.name)
                elif not phase.has_started and not phase.has_ended:
                    phase.scheduled_start_date = candidate
                if not phase.has_ended:
                    phase.scheduled_end_date = add_seconds(phase.scheduled_start_date, phase.duration)
            if fixed_start is None:
                fixed_start = phase.scheduled_start_date
        elif override is not None and override.scheduled_start_date is not None:
            logger.debug(
                "non_root_start_override_ignored",
                phase_id=phase.phase_id,
                predecessor=phase.predecessor,
            )

        if override is not None and override.constraints is not None and not phase.has_ended:
            phase.constraints = [c.model_copy() for c in override.constraints]


def _propagate_unfrozen(phases: list[PhaseInstance], iterative_review_name: str) -> None:
    first_index = first_index_by_phase_id([p.phase_id for p in phases])
    iterative_review_anchored = False

    for position in topological_order([(p.phase_id, p.predecessor) for p in phases]):
        phase = phases[position]
        if phase.predecessor is None:
            continue
        is_iterative_review = phase.name == iterative_review_name
        if is_iterative_review:
            if iterative_review_anchored:
                continue
            iterative_review_anchored = True

        predecessor = phases[first_index[phase.predecessor]]
        if not phase.has_started and not phase.has_ended:
            if is_iterative_review:
                start = predecessor.scheduled_start_date
            else:
                start = predecessor.scheduled_end_date
            if start is not None:
                phase.scheduled_start_date = start
        if not phase.has_ended and phase.scheduled_start_date is not None:
            phase.scheduled_end_date = add_seconds(phase.scheduled_start_date, phase.duration)


def reconcile_phases(
    existing_phases: Sequence[PhaseInstance],
    template: ResolvedTemplate,
    phase_definitions: Mapping[str, PhaseDefinition],
    now: datetime,
    overrides: Mapping[str, PhaseOverride] | None = None,
    is_being_activated: bool = False,
    start_date: datetime | None = None,
    stagger: timedelta = DEFAULT_ROOT_STAGGER,
    iterative_review_name: str = ITERATIVE_REVIEW,
) -> list[PhaseInstance]:
    """Return a rescheduled copy of ``existing_phases``.

    The input list and its instances are left untouched. ``start_date``
    only anchors root phases that were never dated.
    """
    phases = [phase.model_copy(deep=True) for phase in existing_phases]
    _reanchor_roots(
        phases,
        template,
        phase_definitions,
        overrides or {},
        is_being_activated,
        ensure_utc(now),
        ensure_utc(start_date) if start_date is not None else None,
        stagger,
    )
    _propagate_unfrozen(phases, iterative_review_name)
    return phases
