"""Phase scheduling for new challenges.

Two passes over the template entries:

1. **Root anchoring**: every phase instance is built, and phases without
   a predecessor are anchored to the challenge start date (or their own
   start override). A root whose start falls at or before the first
   anchored root's start is pushed to ``anchor + stagger``.
2. **Chain propagation**: every other phase starts where its predecessor
   ends, except Iterative Review, which starts together with its
   predecessor. Ends are always ``start + duration``.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Mapping, Sequence
from uuid import uuid4

from challenge_api.shared.utils.datetime_utils import add_seconds, ensure_utc
from challenge_api.shared.utils.logging import get_logger

from .exceptions import PhaseDefinitionNotFoundError
from .ordering import first_index_by_phase_id, topological_order
from .schemas import PhaseDefinition, PhaseInstance, PhaseOverride, TimelineTemplateEntry

logger = get_logger(__name__)

IdFactory = Callable[[], str]

DEFAULT_ROOT_STAGGER = timedelta(minutes=5)
ITERATIVE_REVIEW = "Iterative Review"


def new_phase_id() -> str:
    return str(uuid4())


def stagger_root_start(
    candidate: datetime,
    anchor: datetime | None,
    stagger: timedelta = DEFAULT_ROOT_STAGGER,
) -> datetime:
    """Push ``candidate`` past the anchor when it would start at or before it."""
    if anchor is not None and candidate <= anchor:
        return anchor + stagger
    return candidate


def build_phase_instance(
    entry: TimelineTemplateEntry,
    definition: PhaseDefinition,
    override: PhaseOverride | None = None,
    id_factory: IdFactory = new_phase_id,
) -> PhaseInstance:
    """Create an undated, closed instance of one template entry."""
    duration = entry.default_duration
    constraints = []
    if override is not None:
        if override.duration is not None:
            duration = override.duration
        if override.constraints is not None:
            constraints = [c.model_copy() for c in override.constraints]

    return PhaseInstance(
        id=id_factory(),
        phase_id=entry.phase_id,
        name=definition.name,
        description=definition.description,
        duration=duration,
        is_open=False,
        predecessor=entry.predecessor,
        constraints=constraints,
    )


def anchor_root_phases(
    entries: Sequence[TimelineTemplateEntry],
    phase_definitions: Mapping[str, PhaseDefinition],
    start_date: datetime | None,
    overrides: Mapping[str, PhaseOverride] | None = None,
    stagger: timedelta = DEFAULT_ROOT_STAGGER,
    id_factory: IdFactory = new_phase_id,
) -> list[PhaseInstance]:
    """Build one instance per entry and date the root phases.

    Non-root phases come back undated. When neither ``start_date`` nor a
    start override is available a root phase stays undated too.

    Raises:
        PhaseDefinitionNotFoundError: an entry references an unknown phase.
    """
    overrides = overrides or {}
    phases: list[PhaseInstance] = []
    fixed_start: datetime | None = None

    for entry in entries:
        definition = phase_definitions.get(entry.phase_id)
        if definition is None:
            raise PhaseDefinitionNotFoundError(entry.phase_id)
        override = overrides.get(entry.phase_id)
        phase = build_phase_instance(entry, definition, override, id_factory)

        override_start = override.scheduled_start_date if override is not None else None
        if phase.predecessor is None:
            candidate = override_start or start_date
            if candidate is not None:
                start = stagger_root_start(ensure_utc(candidate), fixed_start, stagger)
                phase.scheduled_start_date = start
                phase.scheduled_end_date = add_seconds(start, phase.duration)
                if fixed_start is None:
                    fixed_start = start
        elif override_start is not None:
            logger.debug(
                "non_root_start_override_ignored",
                phase_id=phase.phase_id,
                predecessor=phase.predecessor,
            )

        phases.append(phase)

    return phases


def propagate_chain(
    phases: list[PhaseInstance],
    iterative_review_name: str = ITERATIVE_REVIEW,
) -> list[PhaseInstance]:
    """Date every non-root phase from its predecessor, in dependency order.

    Mutates and returns ``phases``. A phase whose predecessor is undated
    stays undated.
    """
    first_index = first_index_by_phase_id([p.phase_id for p in phases])
    for position in topological_order([(p.phase_id, p.predecessor) for p in phases]):
        phase = phases[position]
        if phase.predecessor is None:
            continue
        predecessor = phases[first_index[phase.predecessor]]
        if phase.name == iterative_review_name:
            start = predecessor.scheduled_start_date
        else:
            start = predecessor.scheduled_end_date
        if start is None:
            continue
        phase.scheduled_start_date = start
        phase.scheduled_end_date = add_seconds(start, phase.duration)
    return phases
